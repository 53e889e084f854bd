"""Resource types and their permission scopes.

The scope table is the single source of truth for what a resource of each
type must expose in the authorization service. Self-healing syncs push
exactly these lists, so adding a scope here is picked up by existing
resources the next time a check on them is denied.
"""

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union


class ResourceType(str, Enum):
    """Closed set of protected resource types."""
    BOT = "bot"
    STRATEGY = "strategy"
    EXCHANGE = "exchange"
    RUNNER = "runner"
    GROUP = "group"

    @classmethod
    def parse(cls, value: Union[str, "ResourceType", None]) -> Optional["ResourceType"]:
        """Return the matching member, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_ALERT_SCOPES: Tuple[str, ...] = (
    "view-alert-rules",
    "create-alert-rule",
    "update-alert-rule",
    "delete-alert-rule",
)

STRATEGY_SCOPES: Tuple[str, ...] = (
    "view",
    "edit",
    "delete",
    "run-backtest",
    "stop-backtest",
    "delete-backtest",
    "make-public",
    "view-users",
) + _ALERT_SCOPES

BOT_SCOPES: Tuple[str, ...] = (
    "view",
    "view-secrets",
    "run",
    "stop",
    "delete",
    "edit",
    "freqtrade-api",
    "make-public",
    "view-users",
) + _ALERT_SCOPES

EXCHANGE_SCOPES: Tuple[str, ...] = (
    "view",
    "view-secrets",
    "edit",
    "delete",
    "view-users",
)

RUNNER_SCOPES: Tuple[str, ...] = (
    "view",
    "view-secrets",
    "edit",
    "delete",
    "make-public",
    "view-users",
) + _ALERT_SCOPES

GROUP_SCOPES: Tuple[str, ...] = (
    "view",
    "edit",
    "delete",
    "mark-alert-as-read",
    "view-users",
    "invite-user",
    "change-user-roles",
    "create-strategy",
    "create-bot",
    "create-exchange",
    "create-runner",
) + _ALERT_SCOPES

_SCOPES_BY_TYPE: Mapping[ResourceType, Tuple[str, ...]] = MappingProxyType({
    ResourceType.BOT: BOT_SCOPES,
    ResourceType.STRATEGY: STRATEGY_SCOPES,
    ResourceType.EXCHANGE: EXCHANGE_SCOPES,
    ResourceType.RUNNER: RUNNER_SCOPES,
    ResourceType.GROUP: GROUP_SCOPES,
})

_DISPLAY_NAME_TEMPLATES: Mapping[ResourceType, str] = MappingProxyType({
    ResourceType.BOT: "Bot: {name}",
    ResourceType.STRATEGY: "Strategy: {name}",
    ResourceType.EXCHANGE: "Exchange: {name}",
    ResourceType.RUNNER: "Runner: {name}",
    ResourceType.GROUP: "Group: {name}",
})

# Types whose resources carry a "public" attribute
_VISIBILITY_TYPES = frozenset({ResourceType.BOT, ResourceType.STRATEGY, ResourceType.RUNNER})


def get_scopes_for_type(resource_type: Union[ResourceType, str]) -> List[str]:
    """Return the scope list for a resource type.

    Args:
        resource_type: A ResourceType or its string value

    Returns:
        A new list of scopes, or an empty list for unknown types
    """
    parsed = ResourceType.parse(resource_type)
    if parsed is None:
        return []
    return list(_SCOPES_BY_TYPE[parsed])


def display_name_for(resource_type: ResourceType, name: str) -> str:
    """Render the human-readable resource name for a type."""
    return _DISPLAY_NAME_TEMPLATES[resource_type].format(name=name)


def supports_visibility(resource_type: ResourceType) -> bool:
    """Whether resources of this type carry the public attribute."""
    return resource_type in _VISIBILITY_TYPES

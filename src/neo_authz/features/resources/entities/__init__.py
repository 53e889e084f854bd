"""Resource entities: types, scope table, representations and store protocols."""

from .resource_type import (
    ResourceType,
    BOT_SCOPES,
    STRATEGY_SCOPES,
    EXCHANGE_SCOPES,
    RUNNER_SCOPES,
    GROUP_SCOPES,
    get_scopes_for_type,
    display_name_for,
    supports_visibility,
)
from .resource import (
    ATTR_OWNER_ID,
    ATTR_PUBLIC,
    ATTR_TYPE,
    DomainEntity,
    Resource,
    ResolvedResource,
    build_attributes,
    resolved_from_entity,
)
from .protocols import EntityStore, ResourceIndex, TransactionManager

__all__ = [
    "ResourceType",
    "BOT_SCOPES",
    "STRATEGY_SCOPES",
    "EXCHANGE_SCOPES",
    "RUNNER_SCOPES",
    "GROUP_SCOPES",
    "get_scopes_for_type",
    "display_name_for",
    "supports_visibility",
    "ATTR_OWNER_ID",
    "ATTR_PUBLIC",
    "ATTR_TYPE",
    "DomainEntity",
    "Resource",
    "ResolvedResource",
    "build_attributes",
    "resolved_from_entity",
    "EntityStore",
    "ResourceIndex",
    "TransactionManager",
]

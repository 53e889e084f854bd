"""Classification of authorization service errors.

Keycloak reports unknown scopes and unknown resources in the error text of a
400 response rather than with dedicated status codes, so classification is
done on the message.
"""

from typing import Optional

from ....core.exceptions import InvalidScopeError, ResourceNotFoundError

_STALE_METADATA_MARKERS = (
    "invalid_scope",
    "invalid scope",
    "invalid_resource",
    "does not exist",
)

_ACCESS_DENIED_MARKERS = (
    "access_denied",
    "not_authorized",
)


def is_invalid_scope_error(error: Optional[BaseException]) -> bool:
    """Whether an error means the service's scope/resource metadata is stale.

    True for unknown-scope and unknown-resource conditions, which a resync
    can repair. False for None and for anything else (network, 5xx, ...).
    """
    if error is None:
        return False
    if isinstance(error, (InvalidScopeError, ResourceNotFoundError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _STALE_METADATA_MARKERS)


def is_access_denied(status_code: int, body: str) -> bool:
    """Whether a token-endpoint response is a plain denial."""
    if status_code == 403:
        return True
    lowered = body.lower()
    return any(marker in lowered for marker in _ACCESS_DENIED_MARKERS)


def is_invalid_resource_message(message: str) -> bool:
    lowered = message.lower()
    return "invalid_resource" in lowered or "does not exist" in lowered


def is_invalid_scope_message(message: str) -> bool:
    lowered = message.lower()
    return "invalid_scope" in lowered or "invalid scope" in lowered

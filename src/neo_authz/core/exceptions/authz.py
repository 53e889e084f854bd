"""Authorization-specific exceptions for neo-authz."""

from .base import NeoAuthzError


class AuthorizationServiceError(NeoAuthzError):
    """Raised when the external authorization service fails or is unreachable.

    Never used to signal a legitimate denial; denials are a plain ``False``.
    """
    pass


class InvalidScopeError(AuthorizationServiceError):
    """Raised when the service rejects a scope it does not know for a resource."""
    pass


class ResourceNotFoundError(AuthorizationServiceError):
    """Raised when the service has no resource registered under an id."""
    pass


class ResourceRegistrationError(NeoAuthzError):
    """Raised when registering a resource or its owner grant fails at create time."""
    pass


class ResourceSyncError(NeoAuthzError):
    """Raised when a self-healing sync could not be pushed to the service."""
    pass


class SyncCooldownError(ResourceSyncError):
    """Raised when a sync is skipped because a recent attempt for the id failed."""
    pass


class EntityNotFoundError(NeoAuthzError):
    """Raised when a domain entity does not exist in the store."""
    pass


class InvalidResourceIdError(NeoAuthzError, ValueError):
    """Raised when a domain resource id is not a valid UUID."""
    pass

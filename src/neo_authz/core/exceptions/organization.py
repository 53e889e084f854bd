"""Organization exceptions for neo-authz."""

from .base import NeoAuthzError


class OrganizationError(NeoAuthzError):
    """Base exception for organization (group) resource errors."""
    pass


class OrganizationValidationError(OrganizationError, ValueError):
    """Raised when an organization title or alias is invalid."""
    pass


class OrganizationAlreadyExistsError(OrganizationError):
    """Raised when an organization alias is already registered."""
    pass

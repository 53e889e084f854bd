"""Exceptions module for neo-authz.

This module provides the complete exception hierarchy for neo-authz,
organized by concern.
"""

from .base import (
    NeoAuthzError,
    ConfigurationError,
    create_error_response,
)

from .authz import (
    AuthorizationServiceError,
    InvalidScopeError,
    ResourceNotFoundError,
    ResourceRegistrationError,
    ResourceSyncError,
    SyncCooldownError,
    EntityNotFoundError,
    InvalidResourceIdError,
)

from .organization import (
    OrganizationError,
    OrganizationValidationError,
    OrganizationAlreadyExistsError,
)

__all__ = [
    "NeoAuthzError",
    "ConfigurationError",
    "create_error_response",
    "AuthorizationServiceError",
    "InvalidScopeError",
    "ResourceNotFoundError",
    "ResourceRegistrationError",
    "ResourceSyncError",
    "SyncCooldownError",
    "EntityNotFoundError",
    "InvalidResourceIdError",
    "OrganizationError",
    "OrganizationValidationError",
    "OrganizationAlreadyExistsError",
]

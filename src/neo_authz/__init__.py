"""Neo-Authz - resource-scoped authorization core for the Neo platform.

Mirrors domain entities (bots, strategies, exchanges, runners) as UMA
resources in Keycloak, keeps their scopes in sync and repairs stale
resource metadata when a permission check is denied.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import AuthzSettings, get_settings

from .core.exceptions import (
    NeoAuthzError,
    ConfigurationError,
    AuthorizationServiceError,
    InvalidScopeError,
    ResourceNotFoundError,
    ResourceRegistrationError,
    ResourceSyncError,
    SyncCooldownError,
    EntityNotFoundError,
    InvalidResourceIdError,
    OrganizationError,
    OrganizationValidationError,
    OrganizationAlreadyExistsError,
    create_error_response,
)

from .features.resources.entities import (
    ResourceType,
    DomainEntity,
    Resource,
    ResolvedResource,
    get_scopes_for_type,
)
from .features.resources.services import ResourceLifecycleManager, ResourceTypeResolver
from .features.authorization.entities import AuthorizationClient, PermissionCheck
from .features.authorization.adapters import KeycloakUMAAdapter
from .features.authorization.services import (
    AuthorizationService,
    PermissionVerifier,
    SelfHealingSynchronizer,
    should_trigger_self_healing,
)
from .features.organizations import Organization, OrganizationService

from .factory import AuthzServices, build_authorization_service

__all__ = [
    "__version__",
    "AuthzSettings",
    "get_settings",
    # Exceptions
    "NeoAuthzError",
    "ConfigurationError",
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
    "create_error_response",
    # Resources
    "ResourceType",
    "DomainEntity",
    "Resource",
    "ResolvedResource",
    "get_scopes_for_type",
    "ResourceLifecycleManager",
    "ResourceTypeResolver",
    # Authorization
    "AuthorizationClient",
    "PermissionCheck",
    "KeycloakUMAAdapter",
    "AuthorizationService",
    "PermissionVerifier",
    "SelfHealingSynchronizer",
    "should_trigger_self_healing",
    # Organizations
    "Organization",
    "OrganizationService",
    # Wiring
    "AuthzServices",
    "build_authorization_service",
]

"""Authorization entities."""

from .keycloak_config import KeycloakUMAConfig
from .permission_check import PermissionCheck
from .protocols import AuthorizationClient, SyncFailureStore

__all__ = [
    "AuthorizationClient",
    "KeycloakUMAConfig",
    "PermissionCheck",
    "SyncFailureStore",
]

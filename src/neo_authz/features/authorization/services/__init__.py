"""Authorization services: permission checks and self-healing."""

from .authorization_service import AuthorizationService
from .permission_verifier import PermissionVerifier
from .self_healing import SelfHealingSynchronizer, should_trigger_self_healing

__all__ = [
    "AuthorizationService",
    "PermissionVerifier",
    "SelfHealingSynchronizer",
    "should_trigger_self_healing",
]

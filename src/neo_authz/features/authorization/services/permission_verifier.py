"""Permission checks against the authorization service."""

import logging

from ....core.exceptions import AuthorizationServiceError
from ..entities.permission_check import PermissionCheck
from ..entities.protocols import AuthorizationClient

logger = logging.getLogger(__name__)


class PermissionVerifier:
    """Evaluates one scope on one resource for a caller. No caching."""

    def __init__(self, authorization_client: AuthorizationClient):
        self._client = authorization_client

    async def check_permission(self, caller_token: str, resource_id: str, scope: str) -> bool:
        """Check a scope for the caller.

        Returns:
            True if granted, False if legitimately denied

        Raises:
            AuthorizationServiceError: On transport or service failure, including
                unknown scope (InvalidScopeError) and unknown resource
                (ResourceNotFoundError)
        """
        if not caller_token:
            raise ValueError("Caller token is required")

        granted = await self._client.check_permission(caller_token, resource_id, scope)
        logger.debug(f"Permission {resource_id}#{scope}: {'granted' if granted else 'denied'}")
        return granted

    async def check(self, caller_token: str, resource_id: str, scope: str) -> PermissionCheck:
        """Check a scope and return the outcome with any service error instead of raising."""
        try:
            granted = await self.check_permission(caller_token, resource_id, scope)
        except AuthorizationServiceError as e:
            logger.warning(f"Permission check {resource_id}#{scope} failed: {e}")
            return PermissionCheck(resource_id=resource_id, scope=scope, granted=False, error=e)
        return PermissionCheck(resource_id=resource_id, scope=scope, granted=granted)

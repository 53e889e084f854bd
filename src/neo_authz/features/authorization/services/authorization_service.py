"""Permission checks with one self-healing retry."""

import logging
from typing import Optional

from ....core.exceptions import ResourceSyncError
from .permission_verifier import PermissionVerifier
from .self_healing import SelfHealingSynchronizer, should_trigger_self_healing

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Checks a scope, repairs stale resource metadata on denial and retries once."""

    def __init__(self, verifier: PermissionVerifier, synchronizer: SelfHealingSynchronizer):
        self.verifier = verifier
        self.synchronizer = synchronizer

    async def verify_with_healing(
        self,
        caller_token: str,
        resource_id: str,
        scope: str,
        user_id: Optional[str] = None,
    ) -> bool:
        """Check a scope, healing and retrying exactly once if the denial looks stale.

        Returns:
            True if granted (first time or after repair), False if denied

        Raises:
            AuthorizationServiceError: If the service fails in a way a sync cannot
                fix, or the check still fails after a repair
        """
        result = await self.verifier.check(caller_token, resource_id, scope)
        if result.granted:
            return True

        if not should_trigger_self_healing(result.granted, result.error):
            raise result.error

        try:
            await self.synchronizer.sync(resource_id, user_id=user_id)
        except ResourceSyncError as e:
            logger.warning(f"Self-healing failed for {resource_id}#{scope} (user {user_id or 'unknown'}): {e}")
            if result.error is not None:
                raise result.error from e
            return False

        granted = await self.verifier.check_permission(caller_token, resource_id, scope)
        logger.info(
            f"Retried {resource_id}#{scope} after self-healing for user {user_id or 'unknown'}: "
            f"{'granted' if granted else 'denied'}"
        )
        return granted

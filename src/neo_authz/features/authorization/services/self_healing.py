"""Self-healing of stale resource metadata in the authorization service.

When a permission check is denied, the resource may simply be missing a
scope that was added to the scope table after it was registered, or it may
not be registered at all. ``should_trigger_self_healing`` decides whether a
check result warrants a repair; ``SelfHealingSynchronizer.sync`` recomputes
the canonical resource state and pushes it as an idempotent upsert.

Repairs are guarded per resource id: concurrent syncs share one upsert, and
after a failed sync further attempts are rejected until a cooldown passes.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from ....core.exceptions import ResourceSyncError, SyncCooldownError
from ...resources.services.resource_resolver import ResourceTypeResolver
from ..entities.protocols import AuthorizationClient, SyncFailureStore
from ..repositories.memory_sync_failure_store import MemorySyncFailureStore
from ..utils.error_classification import is_invalid_scope_error

logger = logging.getLogger(__name__)


def should_trigger_self_healing(has_permission: bool, error: Optional[BaseException]) -> bool:
    """Whether a permission check result warrants a resource sync.

    A granted check never does. A denial does when there was no error (the
    resource may lack a newer scope) or when the error says the scope or
    resource is unknown to the service. Transport and other service errors
    do not, since a sync cannot fix them.
    """
    if has_permission:
        return False
    if error is None:
        return True
    return is_invalid_scope_error(error)


class SelfHealingSynchronizer:
    """Pushes the canonical state of a resource to the authorization service."""

    def __init__(
        self,
        resolver: ResourceTypeResolver,
        authorization_client: AuthorizationClient,
        failure_store: Optional[SyncFailureStore] = None,
        cooldown_seconds: float = 300.0,
    ):
        """Initialize the synchronizer.

        Args:
            resolver: Resolver computing canonical resource state
            authorization_client: Client receiving the upsert
            failure_store: Store of recent failures; in-process when omitted
            cooldown_seconds: How long a failed sync blocks further attempts
        """
        self._resolver = resolver
        self._client = authorization_client
        self.cooldown_seconds = cooldown_seconds
        self._failures = failure_store or MemorySyncFailureStore(cooldown_seconds)
        self._in_flight: Dict[str, asyncio.Future] = {}

    @property
    def in_flight(self) -> int:
        """Number of resource ids with a sync currently running."""
        return len(self._in_flight)

    async def sync(self, resource_id: str, user_id: Optional[str] = None) -> None:
        """Resolve a resource and upsert its scopes and attributes.

        Concurrent calls for the same id share one upsert and all receive its
        outcome. Cancelling one caller does not cancel the shared upsert.

        Args:
            resource_id: Resource to repair
            user_id: User whose denied check triggered the repair, for the audit log

        Raises:
            SyncCooldownError: If a sync for the id failed within the cooldown
            ResourceSyncError: If resolution or the upsert failed
        """
        key = str(resource_id)
        task = self._in_flight.get(key)
        if task is None or task.done():
            task = asyncio.ensure_future(self._run(key, user_id))
            self._in_flight[key] = task
            task.add_done_callback(lambda finished: self._finish(key, finished))
        else:
            logger.debug(f"Joining in-flight sync for resource {key}")

        await asyncio.shield(task)

    def _finish(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the outcome as retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _run(self, resource_id: str, user_id: Optional[str]) -> None:
        failed_at = await self._failures.get_failure(resource_id)
        if failed_at is not None:
            retry_after = max(0.0, failed_at + self.cooldown_seconds - time.time())
            raise SyncCooldownError(
                f"Resource {resource_id}: sync recently failed, retry after {retry_after:.0f}s",
                details={"resource_id": resource_id, "retry_after": retry_after},
            )

        logger.info(f"Self-healing resource {resource_id} (triggered by user {user_id or 'unknown'})")
        try:
            resolved = await self._resolver.resolve(resource_id)
            await self._client.sync_resource_scopes(
                resource_id,
                resolved.display_name,
                resolved.scopes,
                resolved.attributes,
            )
        except Exception as e:
            await self._failures.record_failure(resource_id, time.time())
            logger.error(f"Failed to sync resource {resource_id}: {e}")
            raise ResourceSyncError(
                f"Failed to sync resource {resource_id}: {e}",
                details={"resource_id": resource_id},
            ) from e

        await self._failures.clear_failure(resource_id)
        logger.info(
            f"Synced {resolved.resource_type.value} resource {resource_id} with {len(resolved.scopes)} scopes"
        )

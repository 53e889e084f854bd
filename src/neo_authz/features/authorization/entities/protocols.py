"""Protocols for the external authorization service and sync bookkeeping."""

from abc import abstractmethod
from typing import Dict, List, Optional, Protocol, runtime_checkable

from ...resources.entities.resource import Resource


@runtime_checkable
class AuthorizationClient(Protocol):
    """Client for a UMA-2.0 style authorization service."""

    @abstractmethod
    async def create_resource(
        self,
        resource_id: str,
        name: str,
        scopes: List[str],
        attributes: Dict[str, List[str]],
    ) -> None:
        """Register a new protected resource."""
        ...

    @abstractmethod
    async def sync_resource_scopes(
        self,
        resource_id: str,
        name: str,
        scopes: List[str],
        attributes: Dict[str, List[str]],
    ) -> None:
        """Idempotently upsert a resource, keeping existing permission grants."""
        ...

    @abstractmethod
    async def delete_resource(self, resource_id: str) -> None:
        """Delete a resource; deleting an absent resource succeeds."""
        ...

    @abstractmethod
    async def get_resource(self, resource_id: str) -> Resource:
        """Get a resource; raises ResourceNotFoundError when absent."""
        ...

    @abstractmethod
    async def create_permission(self, resource_id: str, owner_id: str) -> None:
        """Grant the owner every scope on the resource."""
        ...

    @abstractmethod
    async def check_permission(self, caller_token: str, resource_id: str, scope: str) -> bool:
        """Evaluate a scope for the caller.

        Returns False for a legitimate denial and raises
        AuthorizationServiceError for transport or service failures.
        """
        ...


@runtime_checkable
class SyncFailureStore(Protocol):
    """Remembers recently failed syncs so repairs are not retried in a tight loop."""

    @abstractmethod
    async def get_failure(self, resource_id: str) -> Optional[float]:
        """Get the epoch time of the last failure still inside the cooldown window."""
        ...

    @abstractmethod
    async def record_failure(self, resource_id: str, failed_at: float) -> None:
        """Record a failed sync."""
        ...

    @abstractmethod
    async def clear_failure(self, resource_id: str) -> None:
        """Forget a failure after a successful sync."""
        ...

"""Transactional store protocols for domain entities and the resource index."""

from abc import abstractmethod
from typing import Any, AsyncContextManager, Optional, Protocol, runtime_checkable
from uuid import UUID

from .resource import DomainEntity
from .resource_type import ResourceType


@runtime_checkable
class TransactionManager(Protocol):
    """Opens transactions against the transactional store."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[Any]:
        """Begin a transaction; commits on clean exit, rolls back on exception.

        The yielded handle is passed to store writes so they join the transaction.
        """
        ...


@runtime_checkable
class EntityStore(Protocol):
    """Point lookups and transactional writes for one domain entity type."""

    @abstractmethod
    async def get(self, entity_id: UUID) -> Optional[DomainEntity]:
        """Get an entity by id, or None when absent."""
        ...

    @abstractmethod
    async def create(self, tx: Any, entity: DomainEntity) -> DomainEntity:
        """Insert an entity inside a transaction."""
        ...

    @abstractmethod
    async def update(
        self,
        tx: Any,
        entity_id: UUID,
        name: Optional[str] = None,
        public: Optional[bool] = None,
    ) -> Optional[DomainEntity]:
        """Update name and/or visibility; returns None when the entity is absent."""
        ...

    @abstractmethod
    async def delete(self, tx: Any, entity_id: UUID) -> bool:
        """Delete an entity; returns False when it did not exist."""
        ...


@runtime_checkable
class ResourceIndex(Protocol):
    """Maps resource ids to the type of the domain entity that owns them."""

    @abstractmethod
    async def put(self, tx: Any, resource_id: UUID, resource_type: ResourceType) -> None:
        """Record the owning type inside the entity's creation transaction."""
        ...

    @abstractmethod
    async def get_type(self, resource_id: UUID) -> Optional[ResourceType]:
        """Get the recorded type, or None when the id was never indexed."""
        ...

    @abstractmethod
    async def remove(self, tx: Any, resource_id: UUID) -> None:
        """Remove the entry inside the entity's deletion transaction."""
        ...

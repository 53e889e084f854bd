"""In-memory transactional store for development and tests.

Writes made through a transaction handle are staged and only applied on
commit, so a failed create leaves no row behind, matching the database
implementation.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Callable, Dict, List, Optional
from uuid import UUID

from ..entities.resource import DomainEntity
from ..entities.resource_type import ResourceType

logger = logging.getLogger(__name__)


class InMemoryTransaction:
    """Staged writes applied together on commit."""

    def __init__(self):
        self._pending: List[Callable[[], None]] = []
        self.committed = False
        self.rolled_back = False

    def on_commit(self, action: Callable[[], None]) -> None:
        if self.committed or self.rolled_back:
            raise RuntimeError("Transaction is already finished")
        self._pending.append(action)

    def commit(self) -> None:
        for action in self._pending:
            action()
        self._pending.clear()
        self.committed = True

    def rollback(self) -> None:
        self._pending.clear()
        self.rolled_back = True


class InMemoryTransactionManager:
    """TransactionManager handing out InMemoryTransaction handles."""

    def __init__(self):
        self.transactions: List[InMemoryTransaction] = []

    @asynccontextmanager
    async def transaction(self):
        tx = InMemoryTransaction()
        self.transactions.append(tx)
        try:
            yield tx
        except BaseException:
            tx.rollback()
            logger.debug("In-memory transaction rolled back")
            raise
        tx.commit()


class InMemoryEntityStore:
    """Dict-backed entity store for one domain type."""

    def __init__(self):
        self._rows: Dict[UUID, DomainEntity] = {}

    def __contains__(self, entity_id: UUID) -> bool:
        return entity_id in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def seed(self, entity: DomainEntity) -> DomainEntity:
        """Insert an entity outside any transaction."""
        self._rows[entity.id] = entity
        return entity

    async def get(self, entity_id: UUID) -> Optional[DomainEntity]:
        entity = self._rows.get(entity_id)
        return replace(entity) if entity else None

    async def create(self, tx: InMemoryTransaction, entity: DomainEntity) -> DomainEntity:
        stored = replace(entity)
        tx.on_commit(lambda: self._rows.__setitem__(stored.id, stored))
        return replace(stored)

    async def update(
        self,
        tx: InMemoryTransaction,
        entity_id: UUID,
        name: Optional[str] = None,
        public: Optional[bool] = None,
    ) -> Optional[DomainEntity]:
        current = self._rows.get(entity_id)
        if current is None:
            return None
        updated = replace(
            current,
            name=name if name is not None else current.name,
            public=public if public is not None else current.public,
        )
        tx.on_commit(lambda: self._rows.__setitem__(entity_id, updated))
        return replace(updated)

    async def delete(self, tx: InMemoryTransaction, entity_id: UUID) -> bool:
        if entity_id not in self._rows:
            return False
        tx.on_commit(lambda: self._rows.pop(entity_id, None))
        return True


class InMemoryResourceIndex:
    """Dict-backed resource index."""

    def __init__(self):
        self._types: Dict[UUID, ResourceType] = {}

    async def put(self, tx: InMemoryTransaction, resource_id: UUID, resource_type: ResourceType) -> None:
        tx.on_commit(lambda: self._types.__setitem__(resource_id, resource_type))

    async def get_type(self, resource_id: UUID) -> Optional[ResourceType]:
        return self._types.get(resource_id)

    async def remove(self, tx: InMemoryTransaction, resource_id: UUID) -> None:
        tx.on_commit(lambda: self._types.pop(resource_id, None))

"""AsyncPG implementations of the entity store and resource index."""

import logging
from typing import Optional
from uuid import UUID

from asyncpg import Connection

from ....database.connection import DatabaseManager
from ..entities.resource import DomainEntity
from ..entities.resource_type import ResourceType
from . import queries

logger = logging.getLogger(__name__)


class AsyncPGEntityStore:
    """Entity store for one domain table with columns (id, name, owner_id, public)."""

    def __init__(self, database: DatabaseManager, table: str):
        self.database = database
        self.table = queries.validate_identifier(table)

    async def get(self, entity_id: UUID) -> Optional[DomainEntity]:
        row = await self.database.fetchrow(queries.ENTITY_GET.format(table=self.table), entity_id)
        return DomainEntity.from_record(row) if row else None

    async def create(self, tx: Connection, entity: DomainEntity) -> DomainEntity:
        row = await tx.fetchrow(
            queries.ENTITY_INSERT.format(table=self.table),
            entity.id,
            entity.name,
            entity.owner_id,
            entity.public,
        )
        logger.debug(f"Inserted {self.table} row {entity.id}")
        return DomainEntity.from_record(row)

    async def update(
        self,
        tx: Connection,
        entity_id: UUID,
        name: Optional[str] = None,
        public: Optional[bool] = None,
    ) -> Optional[DomainEntity]:
        row = await tx.fetchrow(queries.ENTITY_UPDATE.format(table=self.table), entity_id, name, public)
        return DomainEntity.from_record(row) if row else None

    async def delete(self, tx: Connection, entity_id: UUID) -> bool:
        deleted = await tx.fetchval(queries.ENTITY_DELETE.format(table=self.table), entity_id)
        return deleted is not None


class AsyncPGResourceIndex:
    """Resource index table mapping resource ids to their owning type."""

    def __init__(self, database: DatabaseManager, table: str = "resource_index"):
        self.database = database
        self.table = queries.validate_identifier(table)

    async def ensure_schema(self) -> None:
        """Create the index table if it does not exist."""
        await self.database.execute(queries.RESOURCE_INDEX_CREATE.format(table=self.table))

    async def put(self, tx: Connection, resource_id: UUID, resource_type: ResourceType) -> None:
        await tx.execute(queries.RESOURCE_INDEX_PUT.format(table=self.table), resource_id, resource_type.value)

    async def get_type(self, resource_id: UUID) -> Optional[ResourceType]:
        value = await self.database.fetchval(queries.RESOURCE_INDEX_GET.format(table=self.table), resource_id)
        if value is None:
            return None
        resource_type = ResourceType.parse(value)
        if resource_type is None:
            logger.warning(f"Resource index holds unknown type {value!r} for {resource_id}")
        return resource_type

    async def remove(self, tx: Connection, resource_id: UUID) -> None:
        await tx.execute(queries.RESOURCE_INDEX_DELETE.format(table=self.table), resource_id)

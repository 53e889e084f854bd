"""Entity store and resource index implementations."""

from .asyncpg_entity_store import AsyncPGEntityStore, AsyncPGResourceIndex
from .memory_entity_store import (
    InMemoryEntityStore,
    InMemoryResourceIndex,
    InMemoryTransaction,
    InMemoryTransactionManager,
)
from .queries import DEFAULT_ENTITY_TABLES

__all__ = [
    "AsyncPGEntityStore",
    "AsyncPGResourceIndex",
    "DEFAULT_ENTITY_TABLES",
    "InMemoryEntityStore",
    "InMemoryResourceIndex",
    "InMemoryTransaction",
    "InMemoryTransactionManager",
]

"""
asyncpg pool for the transactional store.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

import asyncpg
from asyncpg import Connection, Pool, Record

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the asyncpg pool and opens transactions on it.

    Implements the TransactionManager protocol: the connection yielded by
    ``transaction()`` is the handle entity store and resource index writes
    take, so they commit or roll back together.
    """

    def __init__(self, database_url: Optional[str] = None, **pool_config):
        """Initialize DatabaseManager.

        Args:
            database_url: PostgreSQL DSN (defaults to DATABASE_URL env var)
            **pool_config: Extra asyncpg.create_pool options
        """
        self.pool: Optional[Pool] = None
        # SQLAlchemy-style DSNs are accepted for convenience
        self.dsn = (database_url or os.getenv("DATABASE_URL", "")).replace("+asyncpg", "")
        self.pool_config = {
            "min_size": 2,
            "max_size": 10,
            "command_timeout": 60,
            **pool_config,
        }

    @classmethod
    def from_settings(cls, settings) -> "DatabaseManager":
        """Build a manager from AuthzSettings."""
        return cls(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    async def create_pool(self) -> Pool:
        """Create the pool on first use."""
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings={"application_name": os.getenv("APP_NAME", "neo-authz")},
                **self.pool_config,
            )
            logger.info(
                f"Database pool ready (min={self.pool_config['min_size']}, max={self.pool_config['max_size']})"
            )
        return self.pool

    async def close_pool(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a pooled connection outside any transaction."""
        pool = await self.create_pool()
        async with pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Open a transaction; commits on clean exit, rolls back on exception."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args) -> str:
        async with self.acquire() as connection:
            return await connection.execute(query, *args)

    async def fetchrow(self, query: str, *args) -> Optional[Record]:
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args)

    async def fetchval(self, query: str, *args) -> Any:
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args)


__all__ = ["DatabaseManager", "Connection"]

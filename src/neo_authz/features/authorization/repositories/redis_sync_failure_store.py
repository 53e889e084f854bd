"""Redis-backed store of recently failed resource syncs."""

import logging
import math
from typing import Optional

import redis.asyncio as redis

from ....core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RedisSyncFailureStore:
    """Shares sync cooldowns across instances using expiring Redis keys."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        cooldown_seconds: float = 300.0,
        key_prefix: str = "neo_authz:sync_failure",
        client: Optional[redis.Redis] = None,
    ):
        """Initialize the store.

        Args:
            redis_url: Redis connection URL (ignored when client is given)
            cooldown_seconds: How long a failure blocks further syncs
            key_prefix: Namespace for failure keys
            client: Pre-built Redis client
        """
        if cooldown_seconds <= 0:
            raise ValueError("Cooldown must be positive")
        self.redis_url = redis_url
        self.cooldown_seconds = cooldown_seconds
        self.key_prefix = key_prefix
        self._redis: Optional[redis.Redis] = client

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._redis is not None:
            return
        try:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
            await self._redis.ping()
            logger.info("Connected to Redis for sync failure tracking")
        except Exception as e:
            self._redis = None
            logger.error(f"Failed to connect to Redis: {e}")
            raise ConfigurationError(f"Redis connection failed: {e}") from e

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    def _ensure_connected(self) -> redis.Redis:
        if not self._redis:
            raise ConfigurationError("Redis not connected. Use async context manager or call connect().")
        return self._redis

    def _make_key(self, resource_id: str) -> str:
        return f"{self.key_prefix}:{resource_id}"

    async def get_failure(self, resource_id: str) -> Optional[float]:
        value = await self._ensure_connected().get(self._make_key(resource_id))
        return float(value) if value is not None else None

    async def record_failure(self, resource_id: str, failed_at: float) -> None:
        # Redis expiry enforces the cooldown window
        await self._ensure_connected().set(
            self._make_key(resource_id),
            str(failed_at),
            ex=max(1, math.ceil(self.cooldown_seconds)),
        )

    async def clear_failure(self, resource_id: str) -> None:
        await self._ensure_connected().delete(self._make_key(resource_id))

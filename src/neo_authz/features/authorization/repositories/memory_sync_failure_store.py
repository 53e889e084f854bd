"""In-process store of recently failed resource syncs."""

import asyncio
import time
from typing import Dict, Optional


class MemorySyncFailureStore:
    """Keeps failure timestamps in a dict; entries expire after the cooldown.

    Suitable for a single process. Use RedisSyncFailureStore when several
    instances should share one cooldown per resource.
    """

    def __init__(self, cooldown_seconds: float = 300.0):
        if cooldown_seconds <= 0:
            raise ValueError("Cooldown must be positive")
        self.cooldown_seconds = cooldown_seconds
        self._failures: Dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def get_failure(self, resource_id: str) -> Optional[float]:
        async with self._lock:
            failed_at = self._failures.get(resource_id)
            if failed_at is None:
                return None
            if time.time() - failed_at >= self.cooldown_seconds:
                del self._failures[resource_id]
                return None
            return failed_at

    async def record_failure(self, resource_id: str, failed_at: float) -> None:
        async with self._lock:
            self._failures[resource_id] = failed_at

    async def clear_failure(self, resource_id: str) -> None:
        async with self._lock:
            self._failures.pop(resource_id, None)

    def __len__(self) -> int:
        return len(self._failures)

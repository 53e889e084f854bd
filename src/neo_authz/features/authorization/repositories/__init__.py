from .memory_sync_failure_store import MemorySyncFailureStore
from .redis_sync_failure_store import RedisSyncFailureStore

__all__ = ["MemorySyncFailureStore", "RedisSyncFailureStore"]

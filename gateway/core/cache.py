from typing import Any
from cachetools import TTLCache
from .config import settings

# In-process store for session state and local dev.
_local_cache = TTLCache(maxsize=4096, ttl=settings.PREFS_TTL_SECONDS)

class Cache:
    """
    Thin abstraction over Redis/in-memory so swapping is one flag away.
    """
    def __init__(self, ttl_seconds: int = settings.PREFS_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self.backend = None
        if settings.USE_REDIS:
            import redis  # Only needed when the flag is on
            self.backend = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)

    def get(self, key: str) -> Any | None:
        if self.backend:
            return self.backend.get(key)
        return _local_cache.get(key)

    def set(self, key: str, value: str) -> None:
        if self.backend:
            self.backend.setex(key, self.ttl_seconds, value)
        else:
            _local_cache[key] = value

    def clear(self) -> None:
        """Drop in-process entries (tests and local resets)."""
        _local_cache.clear()

cache = Cache()

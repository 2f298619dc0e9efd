"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (In-Memory, Redis, Null).
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, NamedTuple, Optional

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    A cache here is only a lookup accelerator: a miss means "not in cache",
    never "does not exist". Callers fall back to the mapping store.

    All methods are async because some backends do network I/O (Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if absent or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (None uses the backend default)

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a live entry exists for key"""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Clear all cache entries.

        Returns:
            True if successful
        """
        pass


class CacheEntry(NamedTuple):
    value: str
    cached_at: float
    ttl: float


def _entry_expiry(key, entry: CacheEntry, now: float) -> float:
    return now + entry.ttl


class InMemoryCache(CacheStrategy):
    """
    Process-local cache with per-entry TTL and a hard size bound.

    Backed by cachetools.TLRUCache:
    - an entry is live while now - cached_at < ttl
    - once maxsize entries are held, the least recently used one is evicted

    Not shared between processes; lost on restart. Runs on the event loop
    only, so no locking.
    """

    def __init__(
        self,
        ttl: float = 300,
        maxsize: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl: Default time to live in seconds
            maxsize: Maximum number of entries before LRU eviction
            timer: Clock used for expiry (injectable for tests)
        """
        self.ttl = ttl
        self.maxsize = maxsize
        self.timer = timer
        self._cache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)

    async def get(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        self._cache[key] = CacheEntry(
            value=value,
            cached_at=self.timer(),
            ttl=self.ttl if ttl is None else ttl,
        )
        return True

    async def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self._cache

    async def clear(self) -> bool:
        self._cache.clear()
        return True

    def __len__(self) -> int:
        # Drop expired entries first so the count only covers live ones
        self._cache.expire()
        return len(self._cache)


class RedisCache(CacheStrategy):
    """
    Redis cache implementation (redis.asyncio client).

    Lets several app processes share the redirect cache. Errors are logged
    and reported as a miss / failed write; the mapping store stays the
    source of truth, so a broken cache only costs latency.
    """

    def __init__(self, redis_client, ttl: int = 300):
        """
        Args:
            redis_client: redis.asyncio.Redis instance
            ttl: Default time to live in seconds
        """
        self.redis = redis_client
        self.ttl = ttl

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.redis.get(key)
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get error: %s", e)
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        try:
            return bool(await self.redis.setex(key, self.ttl if ttl is None else ttl, value))
        except Exception as e:
            logger.warning("Redis set error: %s", e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.redis.delete(key))
        except Exception as e:
            logger.warning("Redis delete error: %s", e)
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.redis.exists(key))
        except Exception as e:
            logger.warning("Redis exists error: %s", e)
            return False

    async def clear(self) -> bool:
        """Clear the whole Redis DB (use a dedicated DB number)"""
        try:
            await self.redis.flushdb()
            return True
        except Exception as e:
            logger.warning("Redis clear error: %s", e)
            return False


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup misses, so every redirect goes to the mapping store.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return False

    async def exists(self, key: str) -> bool:
        return False

    async def clear(self) -> bool:
        return True

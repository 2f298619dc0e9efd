"""
Factory for creating cache instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortlink_app.config import settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for the redirect cache.

    Uses Singleton Pattern - creates instance once, reuses it.
    Gets configuration from settings (not passed as parameters).
    """

    _instance: CacheStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: CacheBackend) -> CacheStrategy:
        """
        Create or return cached cache instance.

        Args:
            backend: Type of cache backend (from enum)

        Returns:
            Singleton cache instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == CacheBackend.REDIS:
            import redis
            import redis.asyncio as aioredis

            try:
                # Probe synchronously so a dead Redis is caught at startup
                probe = redis.from_url(
                    settings.redis_url,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                probe.ping()
                probe.close()

                redis_client = aioredis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                cls._instance = RedisCache(redis_client, ttl=settings.cache_ttl)
                logger.info("Redis cache initialized at %s", settings.redis_url)

            except Exception as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory cache", e)
                cls._instance = cls._in_memory()

        elif backend == CacheBackend.MEMORY:
            cls._instance = cls._in_memory()
            logger.info(
                "In-memory cache initialized (ttl=%ss, maxsize=%s)",
                settings.cache_ttl, settings.cache_max_entries,
            )

        elif backend == CacheBackend.NULL:
            cls._instance = NullCache()
            logger.info("Null cache initialized")

        else:
            raise ValueError(f"Unknown cache backend: {backend}")

        return cls._instance

    @staticmethod
    def _in_memory() -> InMemoryCache:
        return InMemoryCache(ttl=settings.cache_ttl, maxsize=settings.cache_max_entries)

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None

"""
Tests for cache strategies.
"""
import asyncio

from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.cache.strategies import InMemoryCache, NullCache


class TestInMemoryCache:
    """Test TTL expiry, LRU bound and invalidation"""

    def test_get_set(self):
        cache = InMemoryCache(ttl=300, maxsize=10)

        asyncio.run(cache.set("url:abc123", "https://example.com"))

        assert asyncio.run(cache.get("url:abc123")) == "https://example.com"
        assert asyncio.run(cache.get("url:missing")) is None

    def test_entry_expires_after_ttl(self, clock):
        cache = InMemoryCache(ttl=300, maxsize=10, timer=clock)
        asyncio.run(cache.set("url:abc123", "https://example.com"))

        clock.advance(299.9)
        assert asyncio.run(cache.get("url:abc123")) == "https://example.com"

        # Live only while now - cached_at < ttl
        clock.advance(0.1)
        assert asyncio.run(cache.get("url:abc123")) is None
        assert asyncio.run(cache.exists("url:abc123")) is False

    def test_per_entry_ttl(self, clock):
        cache = InMemoryCache(ttl=300, maxsize=10, timer=clock)
        asyncio.run(cache.set("short", "a", ttl=10))
        asyncio.run(cache.set("long", "b"))

        clock.advance(11)
        assert asyncio.run(cache.get("short")) is None
        assert asyncio.run(cache.get("long")) == "b"

    def test_overwrite_resets_ttl(self, clock):
        cache = InMemoryCache(ttl=300, maxsize=10, timer=clock)
        asyncio.run(cache.set("url:abc123", "https://old.example.com"))

        clock.advance(200)
        asyncio.run(cache.set("url:abc123", "https://new.example.com"))
        clock.advance(200)

        assert asyncio.run(cache.get("url:abc123")) == "https://new.example.com"

    def test_size_bound_evicts_least_recently_used(self):
        cache = InMemoryCache(ttl=300, maxsize=3)

        async def scenario():
            await cache.set("a", "1")
            await cache.set("b", "2")
            await cache.set("c", "3")
            await cache.get("a")  # a is now most recently used
            await cache.set("d", "4")
            return [await cache.get(key) for key in "abcd"]

        assert asyncio.run(scenario()) == ["1", None, "3", "4"]
        assert len(cache) == 3

    def test_delete(self):
        cache = InMemoryCache(ttl=300, maxsize=10)
        asyncio.run(cache.set("url:abc123", "https://example.com"))

        assert asyncio.run(cache.delete("url:abc123")) is True
        assert asyncio.run(cache.delete("url:abc123")) is False
        assert asyncio.run(cache.get("url:abc123")) is None

    def test_clear(self):
        cache = InMemoryCache(ttl=300, maxsize=10)

        async def scenario():
            await cache.set("a", "1")
            await cache.set("b", "2")
            await cache.clear()

        asyncio.run(scenario())
        assert len(cache) == 0


class TestNullCache:

    def test_always_misses(self):
        cache = NullCache()
        asyncio.run(cache.set("url:abc123", "https://example.com"))
        assert asyncio.run(cache.get("url:abc123")) is None
        assert asyncio.run(cache.exists("url:abc123")) is False


class TestCacheFactory:
    """Test cache factory"""

    def setup_method(self):
        CacheFactory.clear_instance()

    def teardown_method(self):
        CacheFactory.clear_instance()

    def test_creates_memory_cache(self):
        cache = CacheFactory.create(CacheBackend.MEMORY)
        assert isinstance(cache, InMemoryCache)

    def test_creates_null_cache(self):
        assert isinstance(CacheFactory.create(CacheBackend.NULL), NullCache)

    def test_singleton(self):
        first = CacheFactory.create(CacheBackend.MEMORY)
        second = CacheFactory.create(CacheBackend.NULL)
        assert first is second

    def test_redis_unreachable_falls_back_to_memory(self, monkeypatch):
        from shortlink_app.config import settings

        monkeypatch.setattr(settings, "redis_url", "redis://127.0.0.1:1/0")
        cache = CacheFactory.create(CacheBackend.REDIS)
        assert isinstance(cache, InMemoryCache)

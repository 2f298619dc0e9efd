"""
Redirect Service

Resolves a short code to its destination and records the visit.

Counting policy: every resolved redirect increments the store counter
exactly once, cache hit or not. The cache only saves the destination
lookup; it never holds or bumps the counter, so the store stays the single
source of truth for visits.
"""

import logging
import re
from typing import Optional

from shortlink_app.cache.keys import redirect_key_for_code
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.errors import NotFoundError
from shortlink_app.storage.strategies import MappingStore

logger = logging.getLogger(__name__)

# Anything outside this shape cannot have been issued, so skip the store
SHORT_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,16}$")


class RedirectService:
    """
    Service for resolving short codes.

    Owns the redirect cache: populates it on store hits and drops entries
    when the store says the mapping is gone.
    """

    def __init__(self, store: MappingStore, cache: Optional[CacheStrategy] = None):
        """
        Args:
            store: Mapping store with atomic increment
            cache: Ephemeral destination cache (optional)
        """
        self.store = store
        self.cache = cache

    async def resolve(self, short_code: str) -> str:
        """
        Get the destination for a short code, counting the visit.

        Flow:
        1. Reject codes that cannot exist
        2. Cache hit: atomic increment at the store; if the row vanished,
           drop the entry and report not found
        3. Cache miss: atomic find-and-increment at the store, then cache
           the destination

        Raises:
            NotFoundError: unknown, deleted or malformed code
            DependencyError: store failed or timed out (never masked by
                a cached destination)
        """
        if not short_code or not SHORT_CODE_PATTERN.match(short_code):
            raise NotFoundError()

        cache_key = redirect_key_for_code(short_code)

        if self.cache is not None:
            cached_url = await self.cache.get(cache_key)
            if cached_url:
                if await self.store.increment(short_code):
                    logger.debug("Cache hit for %s", short_code)
                    return cached_url
                # Deleted behind our back (another process, or a lost invalidation)
                await self.cache.delete(cache_key)
                raise NotFoundError()

        logger.debug("Cache miss for %s", short_code)
        mapping = await self.store.find_and_increment(short_code)
        if mapping is None:
            raise NotFoundError()

        if self.cache is not None:
            await self.cache.set(cache_key, mapping.original_url)

        return mapping.original_url

    async def invalidate(self, short_code: str) -> None:
        """Forget a cached destination (called on admin delete)"""
        if self.cache is not None:
            await self.cache.delete(redirect_key_for_code(short_code))

    async def invalidate_all(self) -> None:
        if self.cache is not None:
            await self.cache.clear()

import logging
from typing import List, Optional

from pydantic import TypeAdapter

from shortlink_app.cache.keys import LISTING_CACHE_KEY
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.schemas.url import UrlMappingRecord
from shortlink_app.services.redirect_service import RedirectService
from shortlink_app.storage.strategies import MappingStore

logger = logging.getLogger(__name__)

_listing_adapter = TypeAdapter(List[UrlMappingRecord])


class AdminService:
    """
    Listing and removal of mappings for the admin dashboard.

    The full listing is cached for a few seconds (listing_cache); any delete
    drops it, and deletes also go through the resolver so no stale redirect
    survives a removal.
    """

    def __init__(
        self,
        store: MappingStore,
        redirect_service: RedirectService,
        listing_cache: Optional[CacheStrategy] = None,
    ):
        self.store = store
        self.redirect_service = redirect_service
        self.listing_cache = listing_cache

    async def list_urls(self) -> List[UrlMappingRecord]:
        """All mappings, newest first. May lag writes by up to the listing TTL."""
        if self.listing_cache is not None:
            cached = await self.listing_cache.get(LISTING_CACHE_KEY)
            if cached:
                return _listing_adapter.validate_json(cached)

        records = await self.store.list()

        if self.listing_cache is not None:
            await self.listing_cache.set(
                LISTING_CACHE_KEY, _listing_adapter.dump_json(records).decode("utf-8")
            )
        return records

    async def delete_url(self, short_code: str) -> int:
        """
        Delete one mapping and invalidate both caches.

        Returns:
            Number of mappings removed (0 if the code was unknown)
        """
        deleted = await self.store.delete(short_code)
        # Invalidate even on a miss: a cached entry for a vanished row is stale
        await self.redirect_service.invalidate(short_code)
        await self._drop_listing()

        if deleted:
            logger.info("Deleted short code %s", short_code)
        return deleted

    async def delete_all(self) -> int:
        deleted = await self.store.delete_all()
        await self.redirect_service.invalidate_all()
        await self._drop_listing()
        logger.info("Deleted all mappings (%d)", deleted)
        return deleted

    async def _drop_listing(self) -> None:
        if self.listing_cache is not None:
            await self.listing_cache.delete(LISTING_CACHE_KEY)

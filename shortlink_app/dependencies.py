"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the mapping store and caches
that are injected into services and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_store / get_cache with app.dependency_overrides)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends

from shortlink_app.cache.factory import CacheFactory, CacheBackend
from shortlink_app.cache.strategies import CacheStrategy, InMemoryCache
from shortlink_app.config import settings
from shortlink_app.storage.factory import MappingStoreFactory, StoreBackend
from shortlink_app.storage.strategies import MappingStore


@lru_cache()
def get_store() -> MappingStore:
    """
    Get mapping store instance (singleton).

    Factory gets config from settings internally.
    """
    backend = StoreBackend(settings.store_backend)
    return MappingStoreFactory.create(backend)


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get redirect cache instance (singleton).

    Factory gets config from settings internally.
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_listing_cache() -> CacheStrategy:
    """
    Get the admin listing cache (singleton).

    Always process-local and holds a single entry: the full listing.
    """
    return InMemoryCache(ttl=settings.listing_cache_ttl, maxsize=1)


def get_redirect_service(
    store: MappingStore = Depends(get_store),
    cache: CacheStrategy = Depends(get_cache),
):
    from shortlink_app.services.redirect_service import RedirectService
    return RedirectService(store=store, cache=cache)


def get_url_service(
    store: MappingStore = Depends(get_store),
    cache: CacheStrategy = Depends(get_cache),
    listing_cache: CacheStrategy = Depends(get_listing_cache),
):
    """
    Get URLService with all dependencies injected.

    Controller depends on service; service depends on infrastructure
    (store, caches).
    """
    from shortlink_app.services.url_service import URLService
    return URLService(store=store, cache=cache, listing_cache=listing_cache)


def get_admin_service(
    store: MappingStore = Depends(get_store),
    listing_cache: CacheStrategy = Depends(get_listing_cache),
    redirect_service=Depends(get_redirect_service),
):
    from shortlink_app.services.admin_service import AdminService
    return AdminService(store=store, redirect_service=redirect_service, listing_cache=listing_cache)

import logging
import re
from typing import Optional

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from shortlink_app.cache.keys import LISTING_CACHE_KEY, redirect_key_for_code
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import settings
from shortlink_app.errors import CodeGenerationError, DuplicateShortCodeError, ValidationError
from shortlink_app.schemas.url import UrlMappingRecord
from shortlink_app.services.short_code_factory import ShortCodeFactory
from shortlink_app.services.short_code_strategies import ShortCodeStrategy
from shortlink_app.storage.strategies import MappingStore

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(HttpUrl)

# A scheme only counts at the very start; "?next=https://..." is not one
_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def normalize_url(raw: Optional[str]) -> str:
    """
    Trim, default the scheme to https and check the result is an http(s) URL.

    The normalised string is what gets stored and redirected to; pydantic is
    only used as the validator, so paths are kept exactly as submitted.

    Raises:
        ValidationError: missing or malformed URL
    """
    url = (raw or "").strip()
    if not url:
        raise ValidationError("URL is required")
    if not _SCHEME_PREFIX.match(url):
        url = "https://" + url
    try:
        _http_url.validate_python(url)
    except PydanticValidationError:
        raise ValidationError("Invalid URL")
    return url


class URLService:
    """
    Shortening service with injected store, caches and code strategy.

    Mirrors the rest of the service layer:
    - Store and caches are injected (not created internally)
    - Easy to test (inject an in-memory store / stub strategy)
    """

    def __init__(
        self,
        store: MappingStore,
        cache: Optional[CacheStrategy] = None,
        listing_cache: Optional[CacheStrategy] = None,
        short_code_strategy: Optional[ShortCodeStrategy] = None,
        max_retries: Optional[int] = None,
    ):
        """
        Args:
            store: Mapping store (source of truth)
            cache: Redirect cache, primed with new mappings
            listing_cache: Admin listing cache, invalidated on create
            short_code_strategy: Code generator (defaults to the configured one)
            max_retries: Attempts before giving up on a unique code
        """
        self.store = store
        self.cache = cache
        self.listing_cache = listing_cache
        self.short_code_strategy = short_code_strategy or ShortCodeFactory.create_strategy()
        self.max_retries = max_retries or settings.max_retries

    async def create_short_url(self, original_url: Optional[str]) -> UrlMappingRecord:
        """Create a new short URL

        Note: Always creates a new mapping even if the URL was shortened
        before, so different shares of one destination count separately.

        Process:
        1. Normalise and validate the URL
        2. Generate a code and insert; on a duplicate code, retry with a
           fresh one (the store's unique constraint is the arbiter)
        3. Prime the redirect cache, drop the admin listing cache
        """
        url = normalize_url(original_url)

        for attempt in range(1, self.max_retries + 1):
            short_code = self.short_code_strategy.generate()
            try:
                record = await self.store.insert(url, short_code)
                break
            except DuplicateShortCodeError:
                logger.warning(
                    "Short code collision on %s (attempt %d/%d)",
                    short_code, attempt, self.max_retries,
                )
        else:
            logger.error("Gave up generating a short code after %d attempts", self.max_retries)
            raise CodeGenerationError()

        if self.cache is not None:
            await self.cache.set(redirect_key_for_code(record.short_code), record.original_url)
        if self.listing_cache is not None:
            await self.listing_cache.delete(LISTING_CACHE_KEY)

        logger.info("Created short code %s -> %s", record.short_code, record.original_url)
        return record

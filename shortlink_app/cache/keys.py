LISTING_CACHE_KEY = "admin:urls"


def redirect_key_for_code(short_code: str) -> str:
    return f"url:{short_code}"

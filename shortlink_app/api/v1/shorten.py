from fastapi import APIRouter, Depends, Request, status
from shortlink_app.config import settings
from shortlink_app.schemas.url import ShortenRequest, ShortenResponse
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(tags=["shorten"])


def public_base_url(request: Request) -> str:
    """BASE_URL if configured, otherwise the host the request came in on"""
    return (settings.base_url or str(request.base_url)).rstrip("/")


@router.post("/shorten", response_model=ShortenResponse, status_code=status.HTTP_201_CREATED)
async def shorten_url(
    payload: ShortenRequest,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL (400 if the URL is missing or invalid)"""
    record = await url_service.create_short_url(payload.original_url)
    return ShortenResponse(
        short_url=f"{public_base_url(request)}/{record.short_code}",
        short_code=record.short_code,
        original_url=record.original_url,
    )

"""
Domain exceptions and their HTTP rendering.

Services raise these; the handlers registered by register_exception_handlers()
turn them into a JSON body for API/AJAX callers or a small HTML page for
browsers. The status code depends only on the exception class.
"""

import html
import logging
from typing import List, Tuple, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

logger = logging.getLogger(__name__)


class ShortlinkError(Exception):
    """Base class for errors that map onto an HTTP status"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ShortlinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFoundError(ShortlinkError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "URL not found"


class AuthError(ShortlinkError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class DependencyError(ShortlinkError):
    """Store unavailable, timed out or failed. Details stay in the logs."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"


class CodeGenerationError(DependencyError):
    message = "Could not allocate a short code"


class DuplicateShortCodeError(Exception):
    """Raised by a mapping store when short_code is already taken"""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code already exists: {short_code}")


def _parse_accept(accept: str) -> List[Tuple[str, float]]:
    """Media ranges from an Accept header with their q-values, in header order"""
    ranges = []
    for part in accept.split(","):
        media_type, *params = [piece.strip() for piece in part.split(";")]
        if not media_type:
            continue
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append((media_type.lower(), quality))
    return ranges


def _preference(ranges: List[Tuple[str, float]], media_type: str) -> Tuple[float, int]:
    """(q-value, -position) of the entry naming media_type explicitly"""
    for position, (candidate, quality) in enumerate(ranges):
        if candidate == media_type:
            return quality, -position
    return 0.0, -len(ranges)


def wants_json(request: Request) -> bool:
    """
    True for machine callers (AJAX / API clients).

    Browsers list text/html explicitly; fetch/axios send application/json
    or */* and usually X-Requested-With. When both types are named, the
    higher q-value wins and ties go to whichever is listed first.
    """
    if request.headers.get("x-requested-with", "").lower() == "xmlhttprequest":
        return True
    ranges = _parse_accept(request.headers.get("accept", ""))
    if all(media_type != "text/html" for media_type, _ in ranges):
        return True
    return _preference(ranges, "application/json") > _preference(ranges, "text/html")


def render_error(request: Request, status_code: int, message: str, **extra) -> Union[JSONResponse, HTMLResponse]:
    if wants_json(request):
        return JSONResponse(status_code=status_code, content={"error": message, **extra})
    body = (
        "<!doctype html><html><head><meta charset=utf-8>"
        f"<title>{status_code}</title></head>"
        f"<body><h1>{status_code}</h1><p>{html.escape(message)}</p></body></html>"
    )
    return HTMLResponse(status_code=status_code, content=body)


async def shortlink_error_handler(request: Request, exc: ShortlinkError):
    if isinstance(exc, DependencyError):
        logger.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc)
    return render_error(request, exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return render_error(request, status.HTTP_400_BAD_REQUEST, "Invalid request body")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortlinkError, shortlink_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

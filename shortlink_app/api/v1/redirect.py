from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from shortlink_app.errors import wants_json
from shortlink_app.services.redirect_service import RedirectService
from shortlink_app.dependencies import get_redirect_service

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
async def redirect_to_original_url(
    short_code: str,
    request: Request,
    redirect_service: RedirectService = Depends(get_redirect_service)
):
    """
    Redirect to the original URL (302, temporary).

    Flow:
    1. Resolve the code (cache first, store on a miss) - the visit is
       counted atomically at the store either way
    2. Redirect

    Browsers get a bare redirect; AJAX/API callers get the same 302 with a
    JSON body describing the target. Errors (404 / 500) are rendered by the
    app-level handlers in the matching shape.
    """
    original_url = await redirect_service.resolve(short_code)

    if wants_json(request):
        return JSONResponse(
            status_code=status.HTTP_302_FOUND,
            content={"short_code": short_code, "original_url": original_url},
            headers={"location": original_url},
        )
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)

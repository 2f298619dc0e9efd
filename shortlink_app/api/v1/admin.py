from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shortlink_app import auth
from shortlink_app.dependencies import get_admin_service
from shortlink_app.errors import AuthError
from shortlink_app.schemas.url import DeleteResponse, LoginRequest, LoginResponse, UrlMappingRecord
from shortlink_app.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest):
    """Exchange the admin secret for a signed bearer token"""
    try:
        token = auth.login(payload.password)
    except AuthError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )
    return LoginResponse(token=token)


@router.get("/urls", response_model=List[UrlMappingRecord])
async def list_urls(
    _admin: str = Depends(auth.require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """List all mappings, newest first (cached for a few seconds)"""
    return await admin_service.list_urls()


@router.delete("/urls/{short_code}", response_model=DeleteResponse)
async def delete_url(
    short_code: str,
    _admin: str = Depends(auth.require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """Delete one mapping; its cached redirect is dropped with it"""
    deleted = await admin_service.delete_url(short_code)
    if not deleted:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "deletedCount": 0, "error": "URL not found"},
        )
    return DeleteResponse(success=True, deleted_count=deleted, message="URL deleted successfully")


@router.delete("/urls", response_model=DeleteResponse)
async def delete_all_urls(
    _admin: str = Depends(auth.require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """Delete every mapping and clear the caches"""
    deleted = await admin_service.delete_all()
    return DeleteResponse(success=True, deleted_count=deleted, message=f"Deleted {deleted} URLs")

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime


class UrlMappingRecord(BaseModel):
    """Detached snapshot of a UrlMapping row

    Mapping stores return these instead of ORM instances so no session
    has to outlive a store call.
    """
    original_url: str
    short_code: str
    visits: int = 0
    created_at: datetime
    updated_at: datetime

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)


class ShortenRequest(BaseModel):
    # Optional so a missing field is a 400 from the service, not a 422
    original_url: Optional[str] = Field(None, description="The URL to shorten")


class ShortenResponse(BaseModel):
    short_url: str
    short_code: str
    original_url: str


class LoginRequest(BaseModel):
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    message: str = "Login successful"


class DeleteResponse(BaseModel):
    # Field names follow the admin dashboard's existing contract
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    deleted_count: int = Field(..., alias="deletedCount")
    message: Optional[str] = None


UrlMappingList = List[UrlMappingRecord]

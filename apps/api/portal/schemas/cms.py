"""Pydantic schemas for CMS admins, auth and the activity log."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from portal.db.enums import CmsRole


class CmsLoginRequest(BaseModel):
    # Optional so that a missing field is a 400 with a clear message, not a 422
    email: str | None = None
    password: str | None = None


class CmsAdminRead(BaseModel):
    id: int
    email: str
    name: str
    role: CmsRole
    is_active: bool
    last_login: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CmsLoginResponse(BaseModel):
    admin: CmsAdminRead
    token: str


class CmsAdminCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    role: CmsRole = CmsRole.EDITOR


class CmsAdminUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    role: CmsRole | None = None
    is_active: bool | None = None
    password: str | None = Field(None, min_length=8, max_length=128)


class CmsActivityRead(BaseModel):
    id: int
    admin_id: int | None
    action: str
    resource_type: str
    resource_id: int | None
    details: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime

    model_config = {"from_attributes": True}

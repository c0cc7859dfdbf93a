"""Pydantic schemas for portal users."""

from datetime import datetime

from pydantic import BaseModel, Field

from portal.db.enums import UserRole


class UserCreate(BaseModel):
    """Register a user on first sign-in."""
    email: str = Field(..., min_length=3, max_length=255)
    external_auth_id: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.CLIENT


class UserUpdate(BaseModel):
    """Partial update. role/is_active are admin-only."""
    name: str | None = Field(None, min_length=1, max_length=255)
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(BaseModel):
    id: int
    email: str
    external_auth_id: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

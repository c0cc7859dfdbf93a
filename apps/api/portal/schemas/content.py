"""Pydantic schemas for CMS content types, items, versions and locks."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Content types
# =============================================================================

class ContentTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z][a-z0-9_]*$")
    display_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    schema_: dict[str, Any] = Field(..., alias="schema")

    model_config = {"populate_by_name": True}


class ContentTypeUpdate(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    schema_: dict[str, Any] | None = Field(None, alias="schema")
    is_active: bool | None = None

    model_config = {"populate_by_name": True}


class ContentTypeRead(BaseModel):
    id: int
    name: str
    display_name: str
    description: str | None
    schema_: dict[str, Any] = Field(..., alias="schema")
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


# =============================================================================
# Content items
# =============================================================================

class ContentItemCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=255)
    content_type_id: int
    title: str = Field(..., min_length=1, max_length=255)
    content: dict[str, Any]


class ContentItemUpdate(BaseModel):
    """Partial update; sending content appends a new version."""
    title: str | None = Field(None, min_length=1, max_length=255)
    content: dict[str, Any] | None = None
    change_description: str | None = Field(None, max_length=500)


class ContentItemRead(BaseModel):
    id: int
    key: str
    content_type_id: int
    title: str
    content: dict[str, Any]
    is_published: bool
    published_at: datetime | None
    created_by: int | None
    updated_by: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PublicContentRead(BaseModel):
    key: str
    title: str
    content: dict[str, Any]
    published_at: datetime | None

    model_config = {"from_attributes": True}


# =============================================================================
# Versions
# =============================================================================

class ContentVersionRead(BaseModel):
    id: int
    content_item_id: int
    version_number: int
    content: dict[str, Any]
    change_description: str | None
    created_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


# =============================================================================
# Locks
# =============================================================================

class LockRequest(BaseModel):
    duration_minutes: int | None = Field(None, ge=1, le=24 * 60)


class LockRead(BaseModel):
    content_item_id: int
    locked_by: int
    lock_token: str
    expires_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class LockStatus(BaseModel):
    """Lock state as seen by other admins (no token)."""
    locked: bool
    locked_by: int | None = None
    locked_by_name: str | None = None
    expires_at: datetime | None = None
    held_by_me: bool = False

"""Pydantic schemas for guide configuration."""

from datetime import datetime

from pydantic import BaseModel, Field

from portal.db.enums import GuideType


class GuideConfigCreate(BaseModel):
    guide_type: GuideType
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    url: str = Field(..., min_length=1, max_length=2048)
    is_active: bool = True


class GuideConfigUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    url: str | None = Field(None, min_length=1, max_length=2048)
    is_active: bool | None = None


class GuideConfigRead(BaseModel):
    """A stored guide, or the built-in default when id is None."""
    id: int | None = None
    guide_type: str
    title: str
    description: str | None
    url: str
    is_active: bool
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

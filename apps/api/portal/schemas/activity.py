"""Pydantic schemas for activity tracking and tracking sessions."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from portal.db.enums import ActivityType


class ActivityCreate(BaseModel):
    """One telemetry event. metadata.timestamp (ISO 8601) is the event time."""
    user_id: int
    activity_type: ActivityType
    page: str | None = Field(None, max_length=255)
    metadata: dict[str, Any] | None = None


class ActivityRead(BaseModel):
    id: int
    user_id: int
    activity_type: str
    page: str | None
    metadata: dict[str, Any] | None = Field(None, validation_alias="activity_metadata")
    occurred_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionCreate(BaseModel):
    user_id: int
    session_id: str = Field(..., min_length=1, max_length=100)
    user_agent: str | None = None


class SessionUpdate(BaseModel):
    logout_time: datetime | None = None
    last_activity: datetime | None = None
    is_active: bool | None = None


class SessionRead(BaseModel):
    id: int
    session_id: str
    user_id: int
    user_agent: str | None
    login_time: datetime
    last_activity: datetime
    logout_time: datetime | None
    is_active: bool

    model_config = {"from_attributes": True}

"""Pydantic schemas for venues, team members and onboarding tasks."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from portal.db.enums import TaskStatus, VenueStatus


class VenueCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    venue_code: str | None = Field(None, max_length=100)
    go_live_date: date | None = None
    package_type: str | None = Field(None, max_length=100)
    selected_features: list[str] = Field(default_factory=list)
    status: VenueStatus = VenueStatus.PLANNING
    progress_data: dict[str, Any] = Field(default_factory=dict)


class VenueUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    venue_code: str | None = Field(None, max_length=100)
    go_live_date: date | None = None
    package_type: str | None = Field(None, max_length=100)
    selected_features: list[str] | None = None
    status: VenueStatus | None = None
    progress_data: dict[str, Any] | None = None


class VenueRead(BaseModel):
    id: int
    name: str
    venue_code: str | None
    go_live_date: date | None
    package_type: str | None
    selected_features: list[str]
    status: VenueStatus
    progress_data: dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    role: str | None = Field(None, max_length=100)


class TeamMemberRead(BaseModel):
    id: int
    venue_id: int
    name: str
    email: str | None
    role: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class OnboardingTaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    assigned_to: int | None = None
    due_date: date | None = None


class OnboardingTaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    assigned_to: int | None = None
    due_date: date | None = None
    status: TaskStatus | None = None


class OnboardingTaskRead(BaseModel):
    id: int
    venue_id: int
    title: str
    description: str | None
    status: TaskStatus
    assigned_to: int | None
    due_date: date | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

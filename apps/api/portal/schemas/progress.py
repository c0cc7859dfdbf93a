"""Pydantic schemas for onboarding progress."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from portal.db.enums import StepCategory


class ProgressUpdate(BaseModel):
    """Mark a checklist step. completed=false never un-completes a step."""
    step: str = Field(..., min_length=1, max_length=100)
    completed: bool = True
    data: dict[str, Any] | None = None


class ProgressRead(BaseModel):
    id: int
    user_id: int
    step: str
    completed: bool
    completed_at: datetime | None
    data: dict[str, Any] | None

    model_config = {"from_attributes": True}


class StepStatus(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    category: StepCategory
    completed: bool
    completed_at: datetime | None = None


class ProgressSummary(BaseModel):
    steps: list[StepStatus]
    completed: int
    total: int
    percentage: int

"""Venue onboarding service - venues, their team and onboarding tasks."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.db.enums import TaskStatus
from portal.db.models import OnboardingTask, TeamMember, Venue
from portal.db.types import utcnow
from portal.schemas.venue import (
    OnboardingTaskCreate,
    OnboardingTaskUpdate,
    TeamMemberCreate,
    VenueCreate,
    VenueUpdate,
)

logger = logging.getLogger(__name__)


class InvalidStatusTransitionError(Exception):
    """Task status may only move forward."""
    def __init__(self, current: TaskStatus, requested: TaskStatus):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move task from '{current.value}' back to '{requested.value}'"
        )


# =============================================================================
# Venues
# =============================================================================

def list_venues(db: Session, include_inactive: bool = False) -> list[Venue]:
    stmt = select(Venue)
    if not include_inactive:
        stmt = stmt.where(Venue.is_active.is_(True))
    return list(db.execute(stmt.order_by(Venue.created_at.desc(), Venue.id.desc())).scalars().all())


def get_venue(db: Session, venue_id: int) -> Venue | None:
    """Active venue by id (soft-deleted venues are invisible)."""
    venue = db.get(Venue, venue_id)
    if not venue or not venue.is_active:
        return None
    return venue


def create_venue(db: Session, data: VenueCreate) -> Venue:
    venue = Venue(
        name=data.name,
        venue_code=data.venue_code,
        go_live_date=data.go_live_date,
        package_type=data.package_type,
        selected_features=list(data.selected_features),
        status=data.status.value,
        progress_data=dict(data.progress_data),
    )
    db.add(venue)
    db.flush()
    return venue


def update_venue(db: Session, venue: Venue, data: VenueUpdate) -> Venue:
    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if value is None and field in {"name", "selected_features", "status", "progress_data"}:
            continue
        if field == "status":
            value = value.value
        setattr(venue, field, value)
    venue.updated_at = utcnow()
    db.flush()
    return venue


def deactivate_venue(db: Session, venue: Venue) -> Venue:
    """Soft delete."""
    venue.is_active = False
    venue.updated_at = utcnow()
    db.flush()
    return venue


# =============================================================================
# Team members
# =============================================================================

def list_team_members(db: Session, venue_id: int) -> list[TeamMember]:
    return list(db.execute(
        select(TeamMember).where(TeamMember.venue_id == venue_id).order_by(TeamMember.id)
    ).scalars().all())


def add_team_member(db: Session, venue: Venue, data: TeamMemberCreate) -> TeamMember:
    member = TeamMember(
        venue_id=venue.id,
        name=data.name,
        email=data.email.strip().lower() if data.email else None,
        role=data.role,
    )
    db.add(member)
    db.flush()
    return member


# =============================================================================
# Tasks
# =============================================================================

def list_tasks(db: Session, venue_id: int, status: TaskStatus | None = None) -> list[OnboardingTask]:
    stmt = select(OnboardingTask).where(OnboardingTask.venue_id == venue_id)
    if status is not None:
        stmt = stmt.where(OnboardingTask.status == status.value)
    return list(db.execute(stmt.order_by(OnboardingTask.id)).scalars().all())


def get_task(db: Session, task_id: int) -> OnboardingTask | None:
    return db.get(OnboardingTask, task_id)


def _check_assignee(db: Session, venue_id: int, member_id: int | None) -> None:
    if member_id is None:
        return
    member = db.get(TeamMember, member_id)
    if not member or member.venue_id != venue_id:
        raise ValueError("Assignee must be a team member of this venue")


def create_task(db: Session, venue: Venue, data: OnboardingTaskCreate) -> OnboardingTask:
    _check_assignee(db, venue.id, data.assigned_to)
    task = OnboardingTask(
        venue_id=venue.id,
        title=data.title,
        description=data.description,
        assigned_to=data.assigned_to,
        due_date=data.due_date,
        status=TaskStatus.NOT_STARTED.value,
    )
    db.add(task)
    db.flush()
    return task


def transition_status(task: OnboardingTask, new_status: TaskStatus) -> bool:
    """
    Move a task to new_status.

    Same status is a no-op (returns False); moving backwards raises.
    """
    current = TaskStatus(task.status)
    if new_status == current:
        return False
    if new_status.rank < current.rank:
        raise InvalidStatusTransitionError(current, new_status)
    task.status = new_status.value
    if new_status == TaskStatus.COMPLETED:
        task.completed_at = utcnow()
    return True


def update_task(db: Session, task: OnboardingTask, data: OnboardingTaskUpdate) -> OnboardingTask:
    updates = data.model_dump(exclude_unset=True)
    if "assigned_to" in updates:
        _check_assignee(db, task.venue_id, updates["assigned_to"])
        task.assigned_to = updates["assigned_to"]
    if updates.get("status") is not None:
        transition_status(task, updates["status"])
    if updates.get("title"):
        task.title = updates["title"]
    if "description" in updates:
        task.description = updates["description"]
    if "due_date" in updates:
        task.due_date = updates["due_date"]
    task.updated_at = utcnow()
    db.flush()
    logger.info("task %s now %s", task.id, task.status)
    return task

"""Onboarding progress service - checklist state per user."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.onboarding_steps import ONBOARDING_STEPS, STEP_IDS, completion_percentage
from portal.db.models import OnboardingProgress
from portal.db.types import utcnow
from portal.schemas.progress import ProgressSummary, StepStatus

logger = logging.getLogger(__name__)


class UnknownStepError(ValueError):
    def __init__(self, step: str):
        self.step = step
        super().__init__(f"Unknown onboarding step: {step}")


def list_progress(db: Session, user_id: int) -> list[OnboardingProgress]:
    return list(db.execute(
        select(OnboardingProgress)
        .where(OnboardingProgress.user_id == user_id)
        .order_by(OnboardingProgress.id)
    ).scalars().all())


def get_progress_row(db: Session, user_id: int, step: str) -> OnboardingProgress | None:
    return db.execute(
        select(OnboardingProgress)
        .where(OnboardingProgress.user_id == user_id)
        .where(OnboardingProgress.step == step)
    ).scalar_one_or_none()


def get_step_status(db: Session, user_id: int, step: str) -> bool:
    """A step is complete iff its row exists and is marked completed."""
    row = get_progress_row(db, user_id, step)
    return bool(row and row.completed)


def track_progress(
    db: Session,
    user_id: int,
    step: str,
    completed: bool = True,
    data: dict | None = None,
) -> tuple[OnboardingProgress, bool]:
    """
    Record progress on a step. Idempotent.

    - Already completed: no write at all
    - completed=False never un-completes a step
    Returns (row, written).
    """
    if step not in STEP_IDS:
        raise UnknownStepError(step)

    row = get_progress_row(db, user_id, step)
    if row and row.completed:
        return row, False

    if row is None:
        row = OnboardingProgress(user_id=user_id, step=step, completed=False)
        db.add(row)
    if completed:
        row.completed = True
        row.completed_at = utcnow()
    if data is not None:
        row.data = data

    try:
        db.commit()
    except IntegrityError:
        # Concurrent first write for the same (user, step); the other one wins
        db.rollback()
        existing = get_progress_row(db, user_id, step)
        if existing is None:
            raise
        return existing, False

    db.refresh(row)
    logger.info("progress user=%s step=%s completed=%s", user_id, step, row.completed)
    return row, True


def get_summary(db: Session, user_id: int) -> ProgressSummary:
    """Catalogue with per-step status and rounded completion percentage."""
    rows = {row.step: row for row in list_progress(db, user_id)}
    steps = []
    for step in ONBOARDING_STEPS:
        row = rows.get(step.id)
        done = bool(row and row.completed)
        steps.append(StepStatus(
            id=step.id,
            title=step.title,
            description=step.description,
            icon=step.icon,
            category=step.category,
            completed=done,
            completed_at=row.completed_at if done else None,
        ))
    completed = sum(1 for s in steps if s.completed)
    return ProgressSummary(
        steps=steps,
        completed=completed,
        total=len(steps),
        percentage=completion_percentage(completed, len(steps)),
    )

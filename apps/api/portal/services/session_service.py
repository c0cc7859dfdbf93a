"""Tracking session service - one row per browser session.

Rows are updated in place (last activity, logout) and never deleted.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.db.models import UserSession
from portal.db.types import utcnow

logger = logging.getLogger(__name__)


class DuplicateSessionError(ValueError):
    """session_id already registered."""


def get_session(db: Session, session_id: str) -> UserSession | None:
    return db.execute(
        select(UserSession).where(UserSession.session_id == session_id)
    ).scalar_one_or_none()


def create_session(
    db: Session,
    user_id: int,
    session_id: str,
    user_agent: str | None = None,
) -> UserSession:
    """Register a new tracking session."""
    now = utcnow()
    session = UserSession(
        session_id=session_id,
        user_id=user_id,
        user_agent=user_agent[:1000] if user_agent else None,
        login_time=now,
        last_activity=now,
        is_active=True,
    )
    db.add(session)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateSessionError(f"Session {session_id} already exists") from exc
    db.refresh(session)

    logger.info("Created tracking session %s for user=%s", session_id, user_id)
    return session


def update_session(
    db: Session,
    session: UserSession,
    logout_time: datetime | None = None,
    last_activity: datetime | None = None,
    is_active: bool | None = None,
) -> UserSession:
    """Apply in-place updates. Ending a session stamps logout_time if missing."""
    if last_activity is not None:
        session.last_activity = last_activity
    if logout_time is not None:
        session.logout_time = logout_time
    if is_active is not None:
        session.is_active = is_active
        if not is_active and session.logout_time is None:
            session.logout_time = utcnow()
    if last_activity is None:
        session.last_activity = utcnow()
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: Session, user_id: int) -> UserSession | None:
    """Most recent active session for a user."""
    return db.execute(
        select(UserSession)
        .where(UserSession.user_id == user_id)
        .where(UserSession.is_active.is_(True))
        .order_by(UserSession.login_time.desc(), UserSession.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def list_sessions(db: Session, user_id: int, limit: int = 50) -> list[UserSession]:
    """Sessions for a user, newest first."""
    return list(db.execute(
        select(UserSession)
        .where(UserSession.user_id == user_id)
        .order_by(UserSession.login_time.desc(), UserSession.id.desc())
        .limit(limit)
    ).scalars().all())

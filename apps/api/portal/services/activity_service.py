"""Activity service - append-only user telemetry.

Events are fire-and-forget from the browser and may arrive out of order.
Each row keeps the client event time (metadata.timestamp) in occurred_at,
and every listing sorts on it.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.db.enums import ActivityType
from portal.db.models import UserActivity
from portal.db.types import utcnow

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 100
MAX_ACTIVITY_LIMIT = 1000


def parse_event_time(metadata: dict[str, Any] | None) -> datetime | None:
    """Parse metadata.timestamp (ISO 8601, 'Z' allowed) into an aware datetime."""
    if not metadata:
        return None
    raw = metadata.get("timestamp")
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_activity(
    db: Session,
    user_id: int,
    activity_type: ActivityType,
    page: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> UserActivity:
    """Append one event. Falls back to ingestion time when no timestamp is given."""
    activity = UserActivity(
        user_id=user_id,
        activity_type=activity_type.value,
        page=page,
        activity_metadata=metadata,
        occurred_at=parse_event_time(metadata) or utcnow(),
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    logger.debug("activity %s user=%s page=%s", activity_type.value, user_id, page)
    return activity


def list_activities(
    db: Session,
    user_id: int | None = None,
    activity_type: ActivityType | None = None,
    limit: int = DEFAULT_ACTIVITY_LIMIT,
    newest_first: bool = False,
) -> list[UserActivity]:
    """
    Events ordered by event time (oldest first unless newest_first).

    Ties on occurred_at fall back to id so ordering is deterministic.
    """
    limit = max(1, min(limit, MAX_ACTIVITY_LIMIT))
    stmt = select(UserActivity)
    if user_id is not None:
        stmt = stmt.where(UserActivity.user_id == user_id)
    if activity_type is not None:
        stmt = stmt.where(UserActivity.activity_type == activity_type.value)
    if newest_first:
        stmt = stmt.order_by(UserActivity.occurred_at.desc(), UserActivity.id.desc())
    else:
        stmt = stmt.order_by(UserActivity.occurred_at, UserActivity.id)
    return list(db.execute(stmt.limit(limit)).scalars().all())

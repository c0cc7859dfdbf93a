"""Activities router - telemetry ingestion and read-back."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from portal.core.deps import (
    ensure_self_or_admin,
    get_current_user,
    get_db,
    require_csrf_header,
    require_portal_admin,
)
from portal.db.enums import ActivityType
from portal.db.models import User
from portal.schemas.activity import ActivityCreate, ActivityRead
from portal.services import activity_service

router = APIRouter()


@router.post(
    "",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def record_activity(
    data: ActivityCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Append one event for the signed-in user."""
    ensure_self_or_admin(user, data.user_id)
    return activity_service.record_activity(
        db,
        user_id=data.user_id,
        activity_type=data.activity_type,
        page=data.page,
        metadata=data.metadata,
    )


@router.get("/me", response_model=list[ActivityRead])
def my_activities(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    activity_type: ActivityType | None = None,
    limit: int = Query(activity_service.DEFAULT_ACTIVITY_LIMIT, ge=1, le=activity_service.MAX_ACTIVITY_LIMIT),
):
    """The caller's own events in event-time order."""
    return activity_service.list_activities(
        db, user_id=user.id, activity_type=activity_type, limit=limit
    )


@router.get("", response_model=list[ActivityRead], dependencies=[Depends(require_portal_admin)])
def list_activities(
    db: Session = Depends(get_db),
    user_id: int | None = None,
    activity_type: ActivityType | None = None,
    limit: int = Query(activity_service.DEFAULT_ACTIVITY_LIMIT, ge=1, le=activity_service.MAX_ACTIVITY_LIMIT),
    newest_first: bool = False,
):
    """All events (admin only), sorted by event time."""
    return activity_service.list_activities(
        db,
        user_id=user_id,
        activity_type=activity_type,
        limit=limit,
        newest_first=newest_first,
    )

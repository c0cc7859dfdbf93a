"""Sessions router - browser tracking sessions."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portal.core.deps import ensure_self_or_admin, get_current_user, get_db, require_csrf_header
from portal.db.models import User
from portal.schemas.activity import SessionCreate, SessionRead, SessionUpdate
from portal.services import session_service

router = APIRouter()


@router.post(
    "",
    response_model=SessionRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_session(
    data: SessionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self_or_admin(user, data.user_id)
    try:
        return session_service.create_session(
            db, user_id=data.user_id, session_id=data.session_id, user_agent=data.user_agent
        )
    except session_service.DuplicateSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=list[SessionRead])
def list_sessions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return session_service.list_sessions(db, user.id)


@router.get("/active", response_model=SessionRead)
def get_active_session(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    session = session_service.get_active_session(db, user.id)
    if not session:
        raise HTTPException(status_code=404, detail="No active session")
    return session


@router.patch(
    "/{session_id}",
    response_model=SessionRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_session(
    session_id: str,
    data: SessionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Touch, end or annotate a session. Rows are never deleted."""
    session = session_service.get_session(db, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    ensure_self_or_admin(user, session.user_id)
    return session_service.update_session(
        db,
        session,
        logout_time=data.logout_time,
        last_activity=data.last_activity,
        is_active=data.is_active,
    )

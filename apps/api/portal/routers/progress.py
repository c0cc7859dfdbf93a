"""Progress router - the signed-in user's onboarding checklist."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from portal.core.deps import get_current_user, get_db, require_csrf_header
from portal.db.models import User
from portal.schemas.progress import ProgressRead, ProgressSummary, ProgressUpdate
from portal.services import progress_service

router = APIRouter()


@router.get("", response_model=list[ProgressRead])
def list_progress(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return progress_service.list_progress(db, user.id)


@router.get("/summary", response_model=ProgressSummary)
def progress_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Every catalogue step with its status, plus the completion percentage."""
    return progress_service.get_summary(db, user.id)


@router.post("", response_model=ProgressRead, dependencies=[Depends(require_csrf_header)])
def track_progress(
    data: ProgressUpdate,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Record progress on a step.

    Idempotent: re-completing a completed step writes nothing (200).
    A first write returns 201.
    """
    try:
        row, written = progress_service.track_progress(
            db, user.id, data.step, completed=data.completed, data=data.data
        )
    except progress_service.UnknownStepError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response.status_code = 201 if written else 200
    return row

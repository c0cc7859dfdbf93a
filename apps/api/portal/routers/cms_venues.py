"""CMS venues router - venue onboarding, team members and tasks."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_db, require_cms_roles
from portal.db.enums import CmsAction, CmsResourceType, ROLES_CAN_MANAGE_VENUES, TaskStatus
from portal.db.models import CmsAdmin, Venue
from portal.schemas.venue import (
    OnboardingTaskCreate,
    OnboardingTaskRead,
    OnboardingTaskUpdate,
    TeamMemberCreate,
    TeamMemberRead,
    VenueCreate,
    VenueRead,
    VenueUpdate,
)
from portal.services import cms_activity_service, venue_service

router = APIRouter(prefix="/api/cms", tags=["cms-venues"])

require_venue_manager = require_cms_roles(ROLES_CAN_MANAGE_VENUES)


def _get_venue_or_404(db: Session, venue_id: int) -> Venue:
    venue = venue_service.get_venue(db, venue_id)
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")
    return venue


def _log(
    db: Session,
    request: Request,
    admin: CmsAdmin,
    action: CmsAction,
    resource_type: CmsResourceType,
    resource_id: int,
    body: dict | None = None,
) -> None:
    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        request=request,
        body=body,
    )


@router.get("/venues", response_model=list[VenueRead], dependencies=[Depends(require_venue_manager)])
def list_venues(db: Session = Depends(get_db)):
    return venue_service.list_venues(db)


@router.post("/venues", response_model=VenueRead, status_code=201)
def create_venue(
    request: Request,
    data: VenueCreate,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    venue = venue_service.create_venue(db, data)
    _log(db, request, admin, CmsAction.CREATE, CmsResourceType.VENUE, venue.id, data.model_dump(mode="json"))
    db.commit()
    db.refresh(venue)
    return venue


@router.get("/venues/{venue_id}", response_model=VenueRead, dependencies=[Depends(require_venue_manager)])
def get_venue(venue_id: int, db: Session = Depends(get_db)):
    return _get_venue_or_404(db, venue_id)


@router.put("/venues/{venue_id}", response_model=VenueRead)
def update_venue(
    venue_id: int,
    request: Request,
    data: VenueUpdate,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    venue = _get_venue_or_404(db, venue_id)
    venue_service.update_venue(db, venue, data)
    _log(
        db, request, admin, CmsAction.UPDATE, CmsResourceType.VENUE, venue.id,
        data.model_dump(mode="json", exclude_unset=True),
    )
    db.commit()
    db.refresh(venue)
    return venue


@router.delete("/venues/{venue_id}", status_code=204)
def delete_venue(
    venue_id: int,
    request: Request,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    """Soft delete: the venue disappears from listings but keeps its data."""
    venue = _get_venue_or_404(db, venue_id)
    venue_service.deactivate_venue(db, venue)
    _log(db, request, admin, CmsAction.DELETE, CmsResourceType.VENUE, venue.id)
    db.commit()
    return None


@router.get(
    "/venues/{venue_id}/team-members",
    response_model=list[TeamMemberRead],
    dependencies=[Depends(require_venue_manager)],
)
def list_team_members(venue_id: int, db: Session = Depends(get_db)):
    _get_venue_or_404(db, venue_id)
    return venue_service.list_team_members(db, venue_id)


@router.post("/venues/{venue_id}/team-members", response_model=TeamMemberRead, status_code=201)
def add_team_member(
    venue_id: int,
    request: Request,
    data: TeamMemberCreate,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    venue = _get_venue_or_404(db, venue_id)
    member = venue_service.add_team_member(db, venue, data)
    _log(db, request, admin, CmsAction.CREATE, CmsResourceType.TEAM_MEMBER, member.id, data.model_dump(mode="json"))
    db.commit()
    db.refresh(member)
    return member


@router.get(
    "/venues/{venue_id}/tasks",
    response_model=list[OnboardingTaskRead],
    dependencies=[Depends(require_venue_manager)],
)
def list_tasks(venue_id: int, status: TaskStatus | None = None, db: Session = Depends(get_db)):
    _get_venue_or_404(db, venue_id)
    return venue_service.list_tasks(db, venue_id, status=status)


@router.post("/venues/{venue_id}/tasks", response_model=OnboardingTaskRead, status_code=201)
def create_task(
    venue_id: int,
    request: Request,
    data: OnboardingTaskCreate,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    venue = _get_venue_or_404(db, venue_id)
    try:
        task = venue_service.create_task(db, venue, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _log(db, request, admin, CmsAction.CREATE, CmsResourceType.TASK, task.id, data.model_dump(mode="json"))
    db.commit()
    db.refresh(task)
    return task


@router.patch("/tasks/{task_id}", response_model=OnboardingTaskRead)
def update_task(
    task_id: int,
    request: Request,
    data: OnboardingTaskUpdate,
    admin: CmsAdmin = Depends(require_venue_manager),
    db: Session = Depends(get_db),
):
    """Edit a task. Status only moves forward; going back is a 409."""
    task = venue_service.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        venue_service.update_task(db, task, data)
    except venue_service.InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _log(
        db, request, admin, CmsAction.UPDATE, CmsResourceType.TASK, task.id,
        data.model_dump(mode="json", exclude_unset=True),
    )
    db.commit()
    db.refresh(task)
    return task

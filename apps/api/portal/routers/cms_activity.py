"""CMS activity router - read the append-only activity log."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from portal.core.deps import get_current_cms_admin, get_db, require_cms_roles
from portal.db.enums import ROLES_CAN_VIEW_ACTIVITY
from portal.db.models import CmsAdmin
from portal.schemas.cms import CmsActivityRead
from portal.services import cms_activity_service

router = APIRouter(prefix="/api/cms/activity", tags=["cms-activity"])


@router.get(
    "",
    response_model=list[CmsActivityRead],
    dependencies=[Depends(require_cms_roles(ROLES_CAN_VIEW_ACTIVITY))],
)
def list_activity(
    db: Session = Depends(get_db),
    limit: int = Query(cms_activity_service.DEFAULT_ACTIVITY_LIMIT, ge=1, le=cms_activity_service.MAX_ACTIVITY_LIMIT),
    admin_id: int | None = None,
):
    """Recent activity across all admins, newest first."""
    return cms_activity_service.list_activity(db, limit=limit, admin_id=admin_id)


@router.get("/my", response_model=list[CmsActivityRead])
def my_activity(
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
    limit: int = Query(cms_activity_service.DEFAULT_ACTIVITY_LIMIT, ge=1, le=cms_activity_service.MAX_ACTIVITY_LIMIT),
):
    return cms_activity_service.list_activity(db, limit=limit, admin_id=admin.id)

"""CMS admins router - super admin account management."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_db, require_cms_roles
from portal.db.enums import CmsAction, CmsResourceType, ROLES_CAN_MANAGE_ADMINS
from portal.db.models import CmsAdmin
from portal.schemas.cms import CmsAdminCreate, CmsAdminRead, CmsAdminUpdate
from portal.services import cms_activity_service, cms_admin_service

router = APIRouter(prefix="/api/cms/admins", tags=["cms-admins"])


@router.get("", response_model=list[CmsAdminRead])
def list_admins(
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_MANAGE_ADMINS)),
    db: Session = Depends(get_db),
):
    return cms_admin_service.list_admins(db)


@router.post("", response_model=CmsAdminRead, status_code=201)
def create_admin(
    request: Request,
    data: CmsAdminCreate,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_MANAGE_ADMINS)),
    db: Session = Depends(get_db),
):
    try:
        created = cms_admin_service.create_admin(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.CREATE,
        resource_type=CmsResourceType.ADMIN,
        resource_id=created.id,
        request=request,
        body=data.model_dump(mode="json"),
    )
    db.commit()
    db.refresh(created)
    return created


@router.patch("/{admin_id}", response_model=CmsAdminRead)
def update_admin(
    admin_id: int,
    request: Request,
    data: CmsAdminUpdate,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_MANAGE_ADMINS)),
    db: Session = Depends(get_db),
):
    """Rename, re-role, deactivate or reset the password of an admin."""
    target = cms_admin_service.get_admin(db, admin_id)
    if not target:
        raise HTTPException(status_code=404, detail="Admin not found")
    try:
        cms_admin_service.update_admin(db, target, data, acting_admin_id=admin.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.UPDATE,
        resource_type=CmsResourceType.ADMIN,
        resource_id=target.id,
        request=request,
        body=data.model_dump(mode="json", exclude_unset=True),
    )
    db.commit()
    db.refresh(target)
    return target

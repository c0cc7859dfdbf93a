"""CMS content types router."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_current_cms_admin, get_db, require_cms_roles
from portal.db.enums import CmsAction, CmsResourceType, ROLES_CAN_MANAGE_CONTENT_TYPES
from portal.db.models import CmsAdmin
from portal.schemas.content import ContentTypeCreate, ContentTypeRead, ContentTypeUpdate
from portal.services import cms_activity_service, content_type_service

router = APIRouter(prefix="/api/cms/content-types", tags=["cms-content-types"])


@router.get("", response_model=list[ContentTypeRead], dependencies=[Depends(get_current_cms_admin)])
def list_content_types(db: Session = Depends(get_db)):
    """Active content types ordered by display name."""
    return content_type_service.list_content_types(db)


@router.post("", response_model=ContentTypeRead, status_code=201)
def create_content_type(
    request: Request,
    data: ContentTypeCreate,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_MANAGE_CONTENT_TYPES)),
    db: Session = Depends(get_db),
):
    try:
        content_type = content_type_service.create_content_type(db, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.CREATE,
        resource_type=CmsResourceType.CONTENT_TYPE,
        resource_id=content_type.id,
        request=request,
        body=data.model_dump(mode="json", by_alias=True),
    )
    db.commit()
    db.refresh(content_type)
    return content_type


@router.put("/{content_type_id}", response_model=ContentTypeRead)
def update_content_type(
    content_type_id: int,
    request: Request,
    data: ContentTypeUpdate,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_MANAGE_CONTENT_TYPES)),
    db: Session = Depends(get_db),
):
    content_type = content_type_service.get_content_type(db, content_type_id)
    if not content_type:
        raise HTTPException(status_code=404, detail="Content type not found")
    try:
        content_type_service.update_content_type(db, content_type, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.UPDATE,
        resource_type=CmsResourceType.CONTENT_TYPE,
        resource_id=content_type.id,
        request=request,
        body=data.model_dump(mode="json", by_alias=True, exclude_unset=True),
    )
    db.commit()
    db.refresh(content_type)
    return content_type

"""CMS content router - items, publishing and version history."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_current_cms_admin, get_db, require_cms_roles
from portal.db.enums import (
    CmsAction,
    CmsResourceType,
    ROLES_CAN_DELETE_CONTENT,
    ROLES_CAN_PUBLISH,
    ROLES_CAN_RESTORE,
    ROLES_CAN_UNPUBLISH,
)
from portal.db.models import CmsAdmin, ContentItem
from portal.schemas.content import (
    ContentItemCreate,
    ContentItemRead,
    ContentItemUpdate,
    ContentVersionRead,
)
from portal.services import cms_activity_service, content_service, content_version_service
from portal.services.content_lock_service import ContentLockedError
from portal.services.content_version_service import VersionConflictError

router = APIRouter(prefix="/api/cms/content", tags=["cms-content"])


def _get_item_or_404(db: Session, item_id: int) -> ContentItem:
    item = content_service.get_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Content item not found")
    return item


def _log(
    db: Session,
    request: Request,
    admin: CmsAdmin,
    action: CmsAction,
    item_id: int,
    body: dict | None = None,
) -> None:
    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=action,
        resource_type=CmsResourceType.CONTENT,
        resource_id=item_id,
        request=request,
        body=body,
    )


@router.get("", response_model=list[ContentItemRead], dependencies=[Depends(get_current_cms_admin)])
def list_content(
    db: Session = Depends(get_db),
    type: str | None = Query(None, description="Content type name"),
):
    return content_service.list_items(db, type_name=type)


@router.get("/{key}", response_model=ContentItemRead, dependencies=[Depends(get_current_cms_admin)])
def get_content(key: str, db: Session = Depends(get_db)):
    """Any item by key, published or not."""
    item = content_service.get_item_by_key(db, key)
    if not item:
        raise HTTPException(status_code=404, detail="Content item not found")
    return item


@router.post("", response_model=ContentItemRead, status_code=201)
def create_content(
    request: Request,
    data: ContentItemCreate,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    """Create an item; its content becomes version 1."""
    try:
        item, _ = content_service.create_item(db, data, admin.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _log(db, request, admin, CmsAction.CREATE, item.id, data.model_dump(mode="json"))
    db.commit()
    db.refresh(item)
    return item


@router.put("/{item_id}", response_model=ContentItemRead)
def update_content(
    item_id: int,
    request: Request,
    data: ContentItemUpdate,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    """
    Save an item.

    Content changes append a new version. 409 while another admin holds
    the edit lock.
    """
    item = _get_item_or_404(db, item_id)
    try:
        content_service.update_item(db, item, data, admin.id)
    except ContentLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except VersionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _log(db, request, admin, CmsAction.UPDATE, item.id, data.model_dump(mode="json", exclude_unset=True))
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=204)
def delete_content(
    item_id: int,
    request: Request,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_DELETE_CONTENT)),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    try:
        content_service.delete_item(db, item, admin.id)
    except ContentLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))

    _log(db, request, admin, CmsAction.DELETE, item_id)
    db.commit()
    return None


@router.post("/{item_id}/publish", response_model=ContentItemRead)
def publish_content(
    item_id: int,
    request: Request,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_PUBLISH)),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    content_service.publish_item(db, item, admin.id)
    _log(db, request, admin, CmsAction.PUBLISH, item.id)
    db.commit()
    db.refresh(item)
    return item


@router.post("/{item_id}/unpublish", response_model=ContentItemRead)
def unpublish_content(
    item_id: int,
    request: Request,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_UNPUBLISH)),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, item_id)
    content_service.unpublish_item(db, item, admin.id)
    _log(db, request, admin, CmsAction.UNPUBLISH, item.id)
    db.commit()
    db.refresh(item)
    return item


# =============================================================================
# Versions
# =============================================================================

@router.get(
    "/{item_id}/versions",
    response_model=list[ContentVersionRead],
    dependencies=[Depends(get_current_cms_admin)],
)
def list_versions(item_id: int, db: Session = Depends(get_db)):
    """Version history, newest first."""
    _get_item_or_404(db, item_id)
    return content_version_service.get_version_history(db, item_id)


@router.get(
    "/{item_id}/versions/{version_number}",
    response_model=ContentVersionRead,
    dependencies=[Depends(get_current_cms_admin)],
)
def get_version(item_id: int, version_number: int, db: Session = Depends(get_db)):
    _get_item_or_404(db, item_id)
    version = content_version_service.get_version(db, item_id, version_number)
    if not version:
        raise HTTPException(status_code=404, detail=f"Version {version_number} not found")
    return version


@router.post("/{item_id}/restore/{version_id}", response_model=ContentVersionRead)
def restore_version(
    item_id: int,
    version_id: int,
    request: Request,
    admin: CmsAdmin = Depends(require_cms_roles(ROLES_CAN_RESTORE)),
    db: Session = Depends(get_db),
):
    """Re-save an old snapshot as a new version (history is never rewritten)."""
    item = _get_item_or_404(db, item_id)
    try:
        version = content_service.restore_version(db, item, version_id, admin.id)
    except ContentLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except VersionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not version:
        raise HTTPException(status_code=404, detail="Version not found")

    _log(db, request, admin, CmsAction.RESTORE, item.id, {"version_id": version_id})
    db.commit()
    db.refresh(version)
    return version

"""CMS lock router - acquire, inspect, renew and release edit locks."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_current_cms_admin, get_db
from portal.db.enums import CmsAction, CmsResourceType
from portal.db.models import CmsAdmin
from portal.schemas.content import LockRead, LockRequest, LockStatus
from portal.services import cms_activity_service, content_lock_service, content_service
from portal.services.content_lock_service import LockConflictError

router = APIRouter(prefix="/api/cms/content", tags=["cms-locks"])


@router.post("/{item_id}/lock", response_model=LockRead)
def acquire_lock(
    item_id: int,
    request: Request,
    data: LockRequest | None = None,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    """
    Take the edit lock (default 30 minutes).

    Re-acquiring your own lock extends it and keeps the token.
    """
    duration = data.duration_minutes if data else None
    if not content_service.get_item(db, item_id):
        raise HTTPException(status_code=404, detail="Content item not found")
    try:
        lock = content_lock_service.acquire_lock(db, item_id, admin.id, duration)
    except LockConflictError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Content is already locked by another user")

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.LOCK,
        resource_type=CmsResourceType.CONTENT,
        resource_id=item_id,
        request=request,
        body={"duration_minutes": duration},
    )
    db.commit()
    db.refresh(lock)
    return lock


@router.get("/{item_id}/lock", response_model=LockStatus)
def get_lock(
    item_id: int,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    """Who holds the lock, if anyone. Expired locks read as unlocked."""
    lock = content_lock_service.get_active_lock(db, item_id)
    if not lock:
        return LockStatus(locked=False)
    return LockStatus(
        locked=True,
        locked_by=lock.locked_by,
        locked_by_name=lock.holder.name if lock.holder else None,
        expires_at=lock.expires_at,
        held_by_me=lock.locked_by == admin.id,
    )


@router.delete("/lock/{lock_token}")
def release_lock(
    lock_token: str,
    request: Request,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    """Release a lock you hold."""
    lock = content_lock_service.get_lock_by_token(db, lock_token)
    item_id = lock.content_item_id if lock else None
    if not content_lock_service.release_lock(db, lock_token, admin.id):
        raise HTTPException(status_code=404, detail="Lock not found or not owned by you")

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.UNLOCK,
        resource_type=CmsResourceType.CONTENT_LOCK,
        resource_id=item_id,
        request=request,
    )
    db.commit()
    return {"message": "Lock released"}


@router.put("/lock/{lock_token}/renew", response_model=LockRead)
def renew_lock(
    lock_token: str,
    request: Request,
    data: LockRequest | None = None,
    admin: CmsAdmin = Depends(get_current_cms_admin),
    db: Session = Depends(get_db),
):
    duration = data.duration_minutes if data else None
    lock = content_lock_service.renew_lock(db, lock_token, admin.id, duration)
    if not lock:
        raise HTTPException(status_code=404, detail="Lock not found or not owned by you")

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.RENEW_LOCK,
        resource_type=CmsResourceType.CONTENT_LOCK,
        resource_id=lock.content_item_id,
        request=request,
        body={"duration_minutes": duration},
    )
    db.commit()
    db.refresh(lock)
    return lock

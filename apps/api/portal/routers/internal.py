"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from external cron every few minutes.
"""
from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel

from portal.core.config import settings
from portal.db.session import SessionLocal
from portal.services import content_lock_service


router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    expected = settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if x_internal_secret != expected:
        raise HTTPException(status_code=403, detail="Invalid internal secret")


class LockCleanupResponse(BaseModel):
    locks_removed: int


@router.post("/lock-cleanup", response_model=LockCleanupResponse)
def cleanup_locks(x_internal_secret: str = Header(...)):
    """Delete expired content locks."""
    verify_internal_secret(x_internal_secret)
    with SessionLocal() as db:
        removed = content_lock_service.cleanup_expired_locks(db)
    return LockCleanupResponse(locks_removed=removed)

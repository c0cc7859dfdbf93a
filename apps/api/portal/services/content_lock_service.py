"""Content lock service - time-boxed exclusive edit locks.

One lock row per content item, enforced by a unique constraint on
content_locks.content_item_id. A lock whose expires_at has passed is
treated as absent and is replaced on the next acquire.
"""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.db.models import ContentLock
from portal.db.types import utcnow

logger = logging.getLogger(__name__)


class LockConflictError(Exception):
    """Another admin holds an unexpired lock on the item."""
    def __init__(self, content_item_id: int, locked_by: int | None = None):
        self.content_item_id = content_item_id
        self.locked_by = locked_by
        super().__init__("Content is already locked by another user")


class ContentLockedError(Exception):
    """A write was attempted while another admin holds the lock."""
    def __init__(self, content_item_id: int, locked_by: int):
        self.content_item_id = content_item_id
        self.locked_by = locked_by
        super().__init__("Content is locked by another user")


def get_active_lock(
    db: Session, content_item_id: int, now: datetime | None = None
) -> ContentLock | None:
    """Unexpired lock for an item, if any."""
    now = now or utcnow()
    return db.execute(
        select(ContentLock)
        .where(ContentLock.content_item_id == content_item_id)
        .where(ContentLock.expires_at > now)
    ).scalar_one_or_none()


def get_lock_by_token(db: Session, lock_token: str) -> ContentLock | None:
    return db.execute(
        select(ContentLock).where(ContentLock.lock_token == lock_token)
    ).scalar_one_or_none()


def acquire_lock(
    db: Session,
    content_item_id: int,
    admin_id: int,
    duration_minutes: int | None = None,
    now: datetime | None = None,
) -> ContentLock:
    """
    Acquire (or extend) the edit lock on an item.

    - No lock or an expired lock: a fresh lock with a new token
    - Unexpired lock held by admin_id: expiry extended, same token
    - Unexpired lock held by someone else: LockConflictError

    Caller commits.
    """
    now = now or utcnow()
    minutes = duration_minutes or settings.CMS_LOCK_DEFAULT_MINUTES
    expires_at = now + timedelta(minutes=minutes)

    existing = get_active_lock(db, content_item_id, now)
    if existing:
        if existing.locked_by != admin_id:
            raise LockConflictError(content_item_id, existing.locked_by)
        existing.expires_at = expires_at
        db.flush()
        return existing

    # Expired rows for this item are dead; clear them so the insert can land
    db.execute(
        delete(ContentLock)
        .where(ContentLock.content_item_id == content_item_id)
        .where(ContentLock.expires_at <= now)
    )

    lock = ContentLock(
        content_item_id=content_item_id,
        locked_by=admin_id,
        lock_token=str(uuid.uuid4()),
        expires_at=expires_at,
    )
    try:
        with db.begin_nested():
            db.add(lock)
            db.flush()
    except IntegrityError as exc:
        # Lost the race to a concurrent acquirer
        logger.info("lock race lost on item %s by admin %s", content_item_id, admin_id)
        raise LockConflictError(content_item_id) from exc
    return lock


def release_lock(db: Session, lock_token: str, admin_id: int) -> bool:
    """
    Release a lock by token. Only the holder may release it.

    Returns False when no such lock is held by admin_id. Caller commits.
    """
    result = db.execute(
        delete(ContentLock)
        .where(ContentLock.lock_token == lock_token)
        .where(ContentLock.locked_by == admin_id)
    )
    return result.rowcount > 0


def renew_lock(
    db: Session,
    lock_token: str,
    admin_id: int,
    duration_minutes: int | None = None,
    now: datetime | None = None,
) -> ContentLock | None:
    """
    Push out the expiry of an unexpired lock held by admin_id.

    Returns None when the token is unknown, expired or held by someone else.
    """
    now = now or utcnow()
    lock = get_lock_by_token(db, lock_token)
    if not lock or lock.locked_by != admin_id or lock.expires_at <= now:
        return None
    minutes = duration_minutes or settings.CMS_LOCK_DEFAULT_MINUTES
    lock.expires_at = now + timedelta(minutes=minutes)
    db.flush()
    return lock


def ensure_editable(db: Session, content_item_id: int, admin_id: int) -> None:
    """
    Raise ContentLockedError if another admin holds an unexpired lock.

    Editing without a lock is allowed; the lock is advisory against
    other lock holders only.
    """
    lock = get_active_lock(db, content_item_id)
    if lock and lock.locked_by != admin_id:
        raise ContentLockedError(content_item_id, lock.locked_by)


def cleanup_expired_locks(db: Session, now: datetime | None = None) -> int:
    """Delete expired lock rows. Returns number removed. Commits."""
    now = now or utcnow()
    result = db.execute(delete(ContentLock).where(ContentLock.expires_at <= now))
    db.commit()
    removed = result.rowcount or 0
    if removed:
        logger.info("Cleaned up %s expired content locks", removed)
    return removed

"""Content version service - append-only snapshots of CMS content.

- Version numbers are 1..n per item, allocated as max + 1
- The (item, number) unique constraint settles concurrent writers
- Restore re-submits an old snapshot as a new version (never rewrites history)
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.db.models import ContentVersion

logger = logging.getLogger(__name__)

MAX_VERSION_ATTEMPTS = 3


class VersionConflictError(Exception):
    """Raised when a version number could not be allocated."""
    def __init__(self, content_item_id: int):
        self.content_item_id = content_item_id
        super().__init__(f"Could not allocate a version number for item {content_item_id}")


def _is_version_conflict(error: IntegrityError) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name and "content_versions" in constraint_name:
        return True
    message = str(error.orig) if error.orig else str(error)
    return "content_versions" in message and "version_number" in message


def get_latest_version_number(db: Session, content_item_id: int) -> int:
    """Highest version number for an item (0 when none)."""
    return db.execute(
        select(func.max(ContentVersion.version_number))
        .where(ContentVersion.content_item_id == content_item_id)
    ).scalar() or 0


def create_version(
    db: Session,
    content_item_id: int,
    content: dict[str, Any],
    created_by: int | None,
    change_description: str | None = None,
) -> ContentVersion:
    """
    Append a new version snapshot.

    Automatically increments the version number. A lost race on the unique
    constraint is retried with a fresh max.
    """
    for attempt in range(MAX_VERSION_ATTEMPTS):
        next_version = get_latest_version_number(db, content_item_id) + 1
        version = ContentVersion(
            content_item_id=content_item_id,
            version_number=next_version,
            content=content,
            change_description=change_description,
            created_by=created_by,
        )
        try:
            with db.begin_nested():
                db.add(version)
                db.flush()
            return version
        except IntegrityError as exc:
            if _is_version_conflict(exc) and attempt < MAX_VERSION_ATTEMPTS - 1:
                logger.warning(
                    "version %s for item %s taken, retrying", next_version, content_item_id
                )
                continue
            if _is_version_conflict(exc):
                raise VersionConflictError(content_item_id) from exc
            raise

    raise VersionConflictError(content_item_id)


def get_version(db: Session, content_item_id: int, version_number: int) -> ContentVersion | None:
    """Get a specific version of an item by number."""
    return db.execute(
        select(ContentVersion)
        .where(ContentVersion.content_item_id == content_item_id)
        .where(ContentVersion.version_number == version_number)
    ).scalar_one_or_none()


def get_version_by_id(db: Session, content_item_id: int, version_id: int) -> ContentVersion | None:
    """Get a version by its row id, only if it belongs to the item."""
    version = db.get(ContentVersion, version_id)
    if not version or version.content_item_id != content_item_id:
        return None
    return version


def get_version_history(
    db: Session,
    content_item_id: int,
    limit: int | None = None,
) -> list[ContentVersion]:
    """Version history for an item (newest first)."""
    stmt = (
        select(ContentVersion)
        .where(ContentVersion.content_item_id == content_item_id)
        .order_by(ContentVersion.version_number.desc())
    )
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())

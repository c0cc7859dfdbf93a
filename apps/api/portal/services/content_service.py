"""Content item service - CRUD, publishing and versioned saves."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from portal.db.models import ContentItem, ContentLock, ContentType, ContentVersion
from portal.db.types import utcnow
from portal.schemas.content import ContentItemCreate, ContentItemUpdate
from portal.services import content_lock_service, content_type_service, content_version_service

logger = logging.getLogger(__name__)


def list_items(db: Session, type_name: str | None = None) -> list[ContentItem]:
    """All items, optionally filtered by content type name, newest edit first."""
    stmt = select(ContentItem)
    if type_name:
        stmt = stmt.join(ContentType, ContentItem.content_type_id == ContentType.id).where(
            ContentType.name == type_name
        )
    stmt = stmt.order_by(ContentItem.updated_at.desc(), ContentItem.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_item(db: Session, item_id: int) -> ContentItem | None:
    return db.get(ContentItem, item_id)


def get_item_by_key(db: Session, key: str) -> ContentItem | None:
    return db.execute(
        select(ContentItem).where(ContentItem.key == key)
    ).scalar_one_or_none()


def get_published_item(db: Session, key: str) -> ContentItem | None:
    """Public read: only published items are visible."""
    return db.execute(
        select(ContentItem)
        .where(ContentItem.key == key)
        .where(ContentItem.is_published.is_(True))
    ).scalar_one_or_none()


def get_published_items(db: Session, keys: list[str]) -> list[ContentItem]:
    if not keys:
        return []
    return list(db.execute(
        select(ContentItem)
        .where(ContentItem.key.in_(keys))
        .where(ContentItem.is_published.is_(True))
    ).scalars().all())


def _content_type_for(db: Session, content_type_id: int) -> ContentType:
    content_type = content_type_service.get_content_type(db, content_type_id)
    if not content_type or not content_type.is_active:
        raise ValueError("Content type not found")
    return content_type


def create_item(
    db: Session,
    data: ContentItemCreate,
    admin_id: int,
) -> tuple[ContentItem, ContentVersion]:
    """
    Create a content item and its version 1.

    Content is validated against the content type schema first; nothing
    is written on failure. Caller commits.
    """
    if get_item_by_key(db, data.key):
        raise ValueError(f"Content key '{data.key}' already exists")
    content_type = _content_type_for(db, data.content_type_id)
    content_type_service.validate_content(content_type.schema, data.content)

    item = ContentItem(
        key=data.key,
        content_type_id=content_type.id,
        title=data.title,
        content=data.content,
        created_by=admin_id,
        updated_by=admin_id,
    )
    db.add(item)
    db.flush()

    version = content_version_service.create_version(
        db,
        content_item_id=item.id,
        content=data.content,
        created_by=admin_id,
        change_description="Initial version",
    )
    logger.info("content item %s created by admin %s", item.key, admin_id)
    return item, version


def update_item(
    db: Session,
    item: ContentItem,
    data: ContentItemUpdate,
    admin_id: int,
) -> tuple[ContentItem, ContentVersion | None]:
    """
    Save edits to an item.

    Every save carrying content appends version max+1 holding exactly that
    content, and overwrites the live copy. Title-only edits add no version.

    Raises:
        ContentLockedError: another admin holds an unexpired lock
        ContentValidationError: content does not match the schema
    """
    content_lock_service.ensure_editable(db, item.id, admin_id)

    updates = data.model_dump(exclude_unset=True)
    new_content = updates.get("content")
    if "content" in updates and new_content is None:
        raise ValueError("Content cannot be null")
    if new_content is not None:
        content_type = _content_type_for(db, item.content_type_id)
        content_type_service.validate_content(content_type.schema, new_content)

    if updates.get("title"):
        item.title = updates["title"]
    item.updated_by = admin_id
    item.updated_at = utcnow()

    version = None
    if new_content is not None:
        item.content = new_content
        version = content_version_service.create_version(
            db,
            content_item_id=item.id,
            content=new_content,
            created_by=admin_id,
            change_description=updates.get("change_description")
            or f"Updated by admin {admin_id}",
        )
    db.flush()
    return item, version


def restore_version(
    db: Session,
    item: ContentItem,
    version_id: int,
    admin_id: int,
) -> ContentVersion | None:
    """
    Restore an older snapshot by saving it again as a new version.

    Returns None if the version does not belong to the item.
    """
    content_lock_service.ensure_editable(db, item.id, admin_id)
    target = content_version_service.get_version_by_id(db, item.id, version_id)
    if not target:
        return None

    restored_content = dict(target.content)
    item.content = restored_content
    item.updated_by = admin_id
    item.updated_at = utcnow()
    version = content_version_service.create_version(
        db,
        content_item_id=item.id,
        content=restored_content,
        created_by=admin_id,
        change_description=f"Restored from version {target.version_number}",
    )
    db.flush()
    return version


def delete_item(db: Session, item: ContentItem, admin_id: int) -> None:
    """Hard delete; versions and locks go with it. Caller commits."""
    content_lock_service.ensure_editable(db, item.id, admin_id)
    db.execute(delete(ContentLock).where(ContentLock.content_item_id == item.id))
    db.execute(delete(ContentVersion).where(ContentVersion.content_item_id == item.id))
    db.delete(item)
    db.flush()


def publish_item(db: Session, item: ContentItem, admin_id: int) -> ContentItem:
    item.is_published = True
    item.published_at = utcnow()
    item.updated_by = admin_id
    db.flush()
    return item


def unpublish_item(db: Session, item: ContentItem, admin_id: int) -> ContentItem:
    item.is_published = False
    item.published_at = None
    item.updated_by = admin_id
    db.flush()
    return item

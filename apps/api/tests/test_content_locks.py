"""Tests for content edit locks."""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from portal.db.models import ContentLock
from portal.db.types import utcnow
from portal.schemas.content import ContentItemCreate
from portal.services import content_lock_service, content_service
from portal.services.content_lock_service import LockConflictError


@pytest.fixture
def home_hero(db, hero_type, editor):
    item, _ = content_service.create_item(
        db,
        ContentItemCreate(
            key="home_hero", content_type_id=hero_type.id, title="Home hero", content={"headline": "Welcome"}
        ),
        editor.admin.id,
    )
    db.commit()
    return item


def test_unexpired_lock_blocks_other_admin(db, home_hero, editor, other_editor):
    content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id)

    with pytest.raises(LockConflictError):
        content_lock_service.acquire_lock(db, home_hero.id, other_editor.admin.id)


def test_expired_lock_does_not_block(db, home_hero, editor, other_editor):
    past = utcnow() - timedelta(hours=2)
    stale = content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id, 30, now=past)
    stale_token = stale.lock_token
    db.commit()

    assert content_lock_service.get_active_lock(db, home_hero.id) is None

    fresh = content_lock_service.acquire_lock(db, home_hero.id, other_editor.admin.id)
    db.commit()

    assert fresh.locked_by == other_editor.admin.id
    assert fresh.lock_token != stale_token
    assert content_lock_service.get_lock_by_token(db, stale_token) is None


def test_holder_reacquire_extends_same_lock(db, home_hero, editor):
    start = utcnow()
    first = content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id, 5, now=start)
    token = first.lock_token

    again = content_lock_service.acquire_lock(
        db, home_hero.id, editor.admin.id, 60, now=start + timedelta(minutes=1)
    )

    assert again.lock_token == token
    assert again.expires_at == start + timedelta(minutes=61)


def test_database_allows_one_lock_row_per_item(db, home_hero, editor, other_editor):
    expires = utcnow() + timedelta(minutes=30)
    db.add(ContentLock(content_item_id=home_hero.id, locked_by=editor.admin.id,
                       lock_token="a" * 36, expires_at=expires))
    db.commit()

    db.add(ContentLock(content_item_id=home_hero.id, locked_by=other_editor.admin.id,
                       lock_token="b" * 36, expires_at=expires))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_edit_blocked_only_for_other_admins(db, home_hero, editor, other_editor):
    content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id)

    content_lock_service.ensure_editable(db, home_hero.id, editor.admin.id)
    with pytest.raises(content_lock_service.ContentLockedError):
        content_lock_service.ensure_editable(db, home_hero.id, other_editor.admin.id)


def test_renew_and_release(db, home_hero, editor, other_editor):
    lock = content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id, 5)
    token = lock.lock_token

    assert content_lock_service.renew_lock(db, token, other_editor.admin.id) is None
    renewed = content_lock_service.renew_lock(db, token, editor.admin.id, 20)
    assert renewed.expires_at > utcnow() + timedelta(minutes=19)

    assert content_lock_service.release_lock(db, token, other_editor.admin.id) is False
    assert content_lock_service.release_lock(db, token, editor.admin.id) is True
    assert content_lock_service.get_active_lock(db, home_hero.id) is None


def test_cleanup_removes_only_expired(db, home_hero, hero_type, editor):
    other, _ = content_service.create_item(
        db,
        ContentItemCreate(key="other", content_type_id=hero_type.id, title="Other", content={"headline": "x"}),
        editor.admin.id,
    )
    content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id, 5, now=utcnow() - timedelta(hours=1))
    content_lock_service.acquire_lock(db, other.id, editor.admin.id)

    assert content_lock_service.cleanup_expired_locks(db) == 1
    assert content_lock_service.get_active_lock(db, other.id) is not None


# =============================================================================
# HTTP
# =============================================================================

@pytest.mark.asyncio
async def test_lock_conflict_over_http(client: AsyncClient, home_hero, editor, other_editor):
    acquired = await client.post(f"/api/cms/content/{home_hero.id}/lock", headers=editor.headers)
    assert acquired.status_code == 200
    assert acquired.json()["locked_by"] == editor.admin.id

    blocked = await client.post(f"/api/cms/content/{home_hero.id}/lock", headers=other_editor.headers)
    assert blocked.status_code == 409
    assert blocked.json()["detail"] == "Content is already locked by another user"

    status = await client.get(f"/api/cms/content/{home_hero.id}/lock", headers=other_editor.headers)
    assert status.json()["locked"] is True
    assert status.json()["held_by_me"] is False
    assert status.json()["locked_by_name"] == "Editor"


@pytest.mark.asyncio
async def test_locked_item_rejects_other_admins_save(client: AsyncClient, home_hero, editor, other_editor):
    await client.post(f"/api/cms/content/{home_hero.id}/lock", headers=editor.headers)

    response = await client.put(
        f"/api/cms/content/{home_hero.id}",
        json={"content": {"headline": "Sneaky"}},
        headers=other_editor.headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_lock_edit_save_scenario(client: AsyncClient, home_hero, editor):
    lock = await client.post(
        f"/api/cms/content/{home_hero.id}/lock", json={"duration_minutes": 15}, headers=editor.headers
    )
    assert lock.status_code == 200

    saved = await client.put(
        f"/api/cms/content/{home_hero.id}",
        json={"content": {"headline": "Kickstart your success"}},
        headers=editor.headers,
    )
    assert saved.status_code == 200
    assert saved.json()["content"] == {"headline": "Kickstart your success"}

    versions = await client.get(f"/api/cms/content/{home_hero.id}/versions", headers=editor.headers)
    assert versions.json()[0]["version_number"] == 2

    status = await client.get(f"/api/cms/content/{home_hero.id}/lock", headers=editor.headers)
    assert status.json()["locked"] is True
    assert status.json()["held_by_me"] is True

    token = lock.json()["lock_token"]
    renewed = await client.put(f"/api/cms/content/lock/{token}/renew", headers=editor.headers)
    assert renewed.status_code == 200
    assert renewed.json()["lock_token"] == token

    released = await client.delete(f"/api/cms/content/lock/{token}", headers=editor.headers)
    assert released.json() == {"message": "Lock released"}

    status = await client.get(f"/api/cms/content/{home_hero.id}/lock", headers=editor.headers)
    assert status.json()["locked"] is False


@pytest.mark.asyncio
async def test_release_unknown_lock(client: AsyncClient, editor):
    response = await client.delete("/api/cms/content/lock/does-not-exist", headers=editor.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_lock_missing_item(client: AsyncClient, editor):
    response = await client.post("/api/cms/content/999/lock", headers=editor.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_scheduled_lock_cleanup(client: AsyncClient, monkeypatch, session_factory, db, home_hero, editor):
    from portal.routers import internal

    content_lock_service.acquire_lock(db, home_hero.id, editor.admin.id, 5, now=utcnow() - timedelta(hours=1))
    db.commit()
    monkeypatch.setattr(internal, "SessionLocal", session_factory)

    denied = await client.post("/internal/scheduled/lock-cleanup", headers={"X-Internal-Secret": "wrong"})
    assert denied.status_code == 403

    response = await client.post(
        "/internal/scheduled/lock-cleanup", headers={"X-Internal-Secret": "test-internal-secret"}
    )
    assert response.status_code == 200
    assert response.json() == {"locks_removed": 1}

"""Tests for CMS content items, versioning and publishing."""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from portal.db.models import ContentVersion
from portal.schemas.content import ContentItemCreate, ContentItemUpdate
from portal.services import content_service, content_type_service, content_version_service
from portal.services.content_type_service import ContentValidationError


HERO = {"headline": "Welcome", "subheading": "Grow your venue"}


async def _create_item(client, auth, hero_type, key="home_hero", content=HERO):
    response = await client.post(
        "/api/cms/content",
        json={"key": key, "content_type_id": hero_type.id, "title": "Home hero", "content": content},
        headers=auth.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Schema validation
# =============================================================================

def test_validate_content_required_and_types():
    schema = {
        "type": "object",
        "properties": {
            "headline": {"type": "string", "title": "Headline"},
            "order": {"type": "number", "title": "Order"},
            "show_cta": {"type": "boolean"},
        },
        "required": ["headline"],
    }
    content_type_service.validate_content(schema, {"headline": "Hi", "order": 2, "extra": [1]})

    with pytest.raises(ContentValidationError, match="Missing required field: Headline"):
        content_type_service.validate_content(schema, {"order": 1})
    with pytest.raises(ContentValidationError, match="Order"):
        content_type_service.validate_content(schema, {"headline": "Hi", "order": "2"})
    with pytest.raises(ContentValidationError):
        content_type_service.validate_content(schema, {"headline": "Hi", "order": True})
    with pytest.raises(ContentValidationError):
        content_type_service.validate_content(schema, ["not", "an", "object"])


def test_validate_content_enum():
    schema = {"properties": {"layout": {"type": "string", "title": "Layout", "enum": ["wide", "narrow"]}}}

    content_type_service.validate_content(schema, {"layout": "wide"})
    with pytest.raises(ContentValidationError, match="Layout"):
        content_type_service.validate_content(schema, {"layout": "tall"})


def test_invalid_content_writes_nothing(db, hero_type, editor):
    with pytest.raises(ContentValidationError):
        content_service.create_item(
            db,
            ContentItemCreate(key="bad", content_type_id=hero_type.id, title="Bad", content={"subheading": "x"}),
            editor.admin.id,
        )
    assert content_service.get_item_by_key(db, "bad") is None


# =============================================================================
# Versioning
# =============================================================================

def test_three_saves_give_versions_one_two_three(db, hero_type, editor):
    payloads = [
        {"headline": "First"},
        {"headline": "Second", "subheading": "two"},
        {"headline": "Third", "show_cta": True},
    ]
    item, first = content_service.create_item(
        db,
        ContentItemCreate(key="versioned", content_type_id=hero_type.id, title="V", content=payloads[0]),
        editor.admin.id,
    )
    for payload in payloads[1:]:
        content_service.update_item(db, item, ContentItemUpdate(content=payload), editor.admin.id)
    db.commit()

    count = db.execute(
        select(func.count(ContentVersion.id)).where(ContentVersion.content_item_id == item.id)
    ).scalar()
    assert count == 3
    assert first.version_number == 1
    for number, payload in enumerate(payloads, start=1):
        assert content_version_service.get_version(db, item.id, number).content == payload
    assert item.content == payloads[-1]


def test_title_only_edit_adds_no_version(db, hero_type, editor):
    item, _ = content_service.create_item(
        db,
        ContentItemCreate(key="titled", content_type_id=hero_type.id, title="Old", content=HERO),
        editor.admin.id,
    )
    _, version = content_service.update_item(db, item, ContentItemUpdate(title="New"), editor.admin.id)

    assert version is None
    assert item.title == "New"
    assert content_version_service.get_latest_version_number(db, item.id) == 1


@pytest.mark.asyncio
async def test_update_over_http_versions_and_history(client: AsyncClient, hero_type, editor):
    item = await _create_item(client, editor, hero_type)

    for headline in ("Second", "Third"):
        response = await client.put(
            f"/api/cms/content/{item['id']}",
            json={"content": {"headline": headline}, "change_description": f"set {headline}"},
            headers=editor.headers,
        )
        assert response.status_code == 200
        assert response.json()["content"] == {"headline": headline}

    history = await client.get(f"/api/cms/content/{item['id']}/versions", headers=editor.headers)
    assert [v["version_number"] for v in history.json()] == [3, 2, 1]
    assert history.json()[0]["change_description"] == "set Third"
    assert history.json()[2]["change_description"] == "Initial version"

    v1 = await client.get(f"/api/cms/content/{item['id']}/versions/1", headers=editor.headers)
    assert v1.json()["content"] == HERO

    missing = await client.get(f"/api/cms/content/{item['id']}/versions/9", headers=editor.headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_rejects_invalid_content(client: AsyncClient, hero_type, editor):
    item = await _create_item(client, editor, hero_type)

    response = await client.put(
        f"/api/cms/content/{item['id']}",
        json={"content": {"headline": 42}},
        headers=editor.headers,
    )
    assert response.status_code == 400

    history = await client.get(f"/api/cms/content/{item['id']}/versions", headers=editor.headers)
    assert len(history.json()) == 1


@pytest.mark.asyncio
async def test_create_rejects_missing_required_field(client: AsyncClient, hero_type, editor):
    response = await client.post(
        "/api/cms/content",
        json={"key": "k", "content_type_id": hero_type.id, "title": "K", "content": {}},
        headers=editor.headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required field: Headline"


@pytest.mark.asyncio
async def test_duplicate_key(client: AsyncClient, hero_type, editor):
    await _create_item(client, editor, hero_type)
    response = await client.post(
        "/api/cms/content",
        json={"key": "home_hero", "content_type_id": hero_type.id, "title": "Again", "content": HERO},
        headers=editor.headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_restore_creates_new_version(client: AsyncClient, hero_type, editor):
    item = await _create_item(client, editor, hero_type)
    await client.put(
        f"/api/cms/content/{item['id']}", json={"content": {"headline": "Changed"}}, headers=editor.headers
    )
    history = await client.get(f"/api/cms/content/{item['id']}/versions", headers=editor.headers)
    v1_id = history.json()[-1]["id"]

    response = await client.post(f"/api/cms/content/{item['id']}/restore/{v1_id}", headers=editor.headers)

    assert response.status_code == 200
    assert response.json()["version_number"] == 3
    assert response.json()["content"] == HERO
    assert response.json()["change_description"] == "Restored from version 1"

    current = await client.get("/api/cms/content/home_hero", headers=editor.headers)
    assert current.json()["content"] == HERO


@pytest.mark.asyncio
async def test_restore_version_of_other_item_is_404(client: AsyncClient, hero_type, editor):
    first = await _create_item(client, editor, hero_type, key="one")
    second = await _create_item(client, editor, hero_type, key="two")
    history = await client.get(f"/api/cms/content/{second['id']}/versions", headers=editor.headers)

    response = await client.post(
        f"/api/cms/content/{first['id']}/restore/{history.json()[0]['id']}", headers=editor.headers
    )
    assert response.status_code == 404


# =============================================================================
# Publishing and deletion
# =============================================================================

@pytest.mark.asyncio
async def test_publish_roles(client: AsyncClient, hero_type, editor, cms_admin):
    item = await _create_item(client, editor, hero_type)

    published = await client.post(f"/api/cms/content/{item['id']}/publish", headers=editor.headers)
    assert published.status_code == 200
    assert published.json()["is_published"] is True
    assert published.json()["published_at"] is not None

    denied = await client.post(f"/api/cms/content/{item['id']}/unpublish", headers=editor.headers)
    assert denied.status_code == 403

    unpublished = await client.post(f"/api/cms/content/{item['id']}/unpublish", headers=cms_admin.headers)
    assert unpublished.json()["is_published"] is False


@pytest.mark.asyncio
async def test_delete_requires_admin_role(client: AsyncClient, hero_type, editor, cms_admin):
    item = await _create_item(client, editor, hero_type)

    denied = await client.delete(f"/api/cms/content/{item['id']}", headers=editor.headers)
    assert denied.status_code == 403

    deleted = await client.delete(f"/api/cms/content/{item['id']}", headers=cms_admin.headers)
    assert deleted.status_code == 204
    gone = await client.get("/api/cms/content/home_hero", headers=cms_admin.headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_list_filtered_by_type(client: AsyncClient, hero_type, editor):
    await _create_item(client, editor, hero_type)

    matching = await client.get("/api/cms/content", params={"type": "hero_section"}, headers=editor.headers)
    other = await client.get("/api/cms/content", params={"type": "navigation"}, headers=editor.headers)

    assert [i["key"] for i in matching.json()] == ["home_hero"]
    assert other.json() == []


# =============================================================================
# Public content
# =============================================================================

@pytest.mark.asyncio
async def test_public_content_only_serves_published(client: AsyncClient, hero_type, editor):
    item = await _create_item(client, editor, hero_type)
    await _create_item(client, editor, hero_type, key="draft_hero")

    hidden = await client.get("/api/content/home_hero")
    assert hidden.status_code == 404

    await client.post(f"/api/cms/content/{item['id']}/publish", headers=editor.headers)

    shown = await client.get("/api/content/home_hero")
    assert shown.status_code == 200
    assert shown.json()["content"] == HERO
    assert "created_by" not in shown.json()

    many = await client.get("/api/content", params={"keys": "home_hero,draft_hero,nope"})
    assert list(many.json()) == ["home_hero"]
    assert many.json()["home_hero"]["title"] == "Home hero"

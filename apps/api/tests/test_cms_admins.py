"""Tests for CMS admin management."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_only_super_admin_manages_admins(client: AsyncClient, cms_admin, editor):
    for auth in (cms_admin, editor):
        response = await client.get("/api/cms/admins", headers=auth.headers)
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_admin_and_duplicate(client: AsyncClient, super_admin):
    body = {"email": "New@cms.test", "password": "long-enough", "name": "New", "role": "admin"}
    created = await client.post("/api/cms/admins", json=body, headers=super_admin.headers)

    assert created.status_code == 201
    assert created.json()["email"] == "new@cms.test"
    assert "password" not in created.json()
    assert "password_hash" not in created.json()

    duplicate = await client.post("/api/cms/admins", json=body, headers=super_admin.headers)
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_password_is_redacted_in_activity_log(client: AsyncClient, super_admin):
    body = {"email": "new@cms.test", "password": "long-enough", "name": "New"}
    await client.post("/api/cms/admins", json=body, headers=super_admin.headers)

    log = await client.get("/api/cms/activity", headers=super_admin.headers)
    entry = log.json()[0]
    assert entry["action"] == "create"
    assert entry["resource_type"] == "admin"
    assert entry["details"]["body"]["password"] != "long-enough"


@pytest.mark.asyncio
async def test_deactivate_other_admin(client: AsyncClient, super_admin, editor):
    response = await client.patch(
        f"/api/cms/admins/{editor.admin.id}", json={"is_active": False}, headers=super_admin.headers
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    locked_out = await client.post("/api/cms/auth/verify", headers=editor.headers)
    assert locked_out.status_code == 401


@pytest.mark.asyncio
async def test_cannot_deactivate_or_demote_self(client: AsyncClient, super_admin):
    url = f"/api/cms/admins/{super_admin.admin.id}"
    deactivate = await client.patch(url, json={"is_active": False}, headers=super_admin.headers)
    demote = await client.patch(url, json={"role": "editor"}, headers=super_admin.headers)

    assert deactivate.status_code == 400
    assert demote.status_code == 400

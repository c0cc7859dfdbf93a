"""Tests for venue onboarding management."""
import pytest
from httpx import AsyncClient

from portal.db.enums import TaskStatus
from portal.db.models import OnboardingTask
from portal.services import venue_service


def test_task_status_moves_forward_only():
    task = OnboardingTask(title="Import guests", status=TaskStatus.NOT_STARTED.value)

    assert venue_service.transition_status(task, TaskStatus.IN_PROGRESS) is True
    assert venue_service.transition_status(task, TaskStatus.IN_PROGRESS) is False
    assert venue_service.transition_status(task, TaskStatus.COMPLETED) is True
    assert task.completed_at is not None

    with pytest.raises(venue_service.InvalidStatusTransitionError):
        venue_service.transition_status(task, TaskStatus.NOT_STARTED)
    assert task.status == TaskStatus.COMPLETED.value


def test_skipping_ahead_is_allowed():
    task = OnboardingTask(title="Go live", status=TaskStatus.NOT_STARTED.value)
    assert venue_service.transition_status(task, TaskStatus.COMPLETED) is True


async def _venue(client, auth, **overrides):
    body = {"name": "The Crown", "venue_code": "CRN-01", "selected_features": ["bookings", "loyalty"]}
    body.update(overrides)
    response = await client.post("/api/cms/venues", json=body, headers=auth.headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_venue_crud_and_soft_delete(client: AsyncClient, cms_admin):
    venue = await _venue(client, cms_admin)
    assert venue["status"] == "planning"
    assert venue["selected_features"] == ["bookings", "loyalty"]

    updated = await client.put(
        f"/api/cms/venues/{venue['id']}",
        json={"status": "in-progress", "go_live_date": "2026-12-01"},
        headers=cms_admin.headers,
    )
    assert updated.json()["status"] == "in-progress"
    assert updated.json()["go_live_date"] == "2026-12-01"

    deleted = await client.delete(f"/api/cms/venues/{venue['id']}", headers=cms_admin.headers)
    assert deleted.status_code == 204

    assert (await client.get(f"/api/cms/venues/{venue['id']}", headers=cms_admin.headers)).status_code == 404
    assert (await client.get("/api/cms/venues", headers=cms_admin.headers)).json() == []


@pytest.mark.asyncio
async def test_editor_cannot_manage_venues(client: AsyncClient, editor):
    response = await client.post("/api/cms/venues", json={"name": "Nope"}, headers=editor.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_tasks_and_assignment(client: AsyncClient, cms_admin):
    venue = await _venue(client, cms_admin)
    other = await _venue(client, cms_admin, name="The Anchor", venue_code="ANC-01")

    member = await client.post(
        f"/api/cms/venues/{venue['id']}/team-members",
        json={"name": "Sam", "email": "Sam@Crown.test", "role": "GM"},
        headers=cms_admin.headers,
    )
    assert member.status_code == 201
    assert member.json()["email"] == "sam@crown.test"
    member_id = member.json()["id"]

    task = await client.post(
        f"/api/cms/venues/{venue['id']}/tasks",
        json={"title": "Configure floor plan", "assigned_to": member_id},
        headers=cms_admin.headers,
    )
    assert task.status_code == 201
    assert task.json()["status"] == "not-started"

    foreign = await client.post(
        f"/api/cms/venues/{other['id']}/tasks",
        json={"title": "Wrong venue", "assigned_to": member_id},
        headers=cms_admin.headers,
    )
    assert foreign.status_code == 400

    listed = await client.get(f"/api/cms/venues/{venue['id']}/tasks", headers=cms_admin.headers)
    assert [t["title"] for t in listed.json()] == ["Configure floor plan"]


@pytest.mark.asyncio
async def test_task_status_over_http(client: AsyncClient, cms_admin):
    venue = await _venue(client, cms_admin)
    task = await client.post(
        f"/api/cms/venues/{venue['id']}/tasks", json={"title": "Train staff"}, headers=cms_admin.headers
    )
    task_id = task.json()["id"]

    done = await client.patch(f"/api/cms/tasks/{task_id}", json={"status": "completed"}, headers=cms_admin.headers)
    assert done.status_code == 200
    assert done.json()["completed_at"] is not None

    back = await client.patch(f"/api/cms/tasks/{task_id}", json={"status": "in-progress"}, headers=cms_admin.headers)
    assert back.status_code == 409

    filtered = await client.get(
        f"/api/cms/venues/{venue['id']}/tasks", params={"status": "completed"}, headers=cms_admin.headers
    )
    assert len(filtered.json()) == 1

    missing = await client.patch("/api/cms/tasks/9999", json={"title": "x"}, headers=cms_admin.headers)
    assert missing.status_code == 404

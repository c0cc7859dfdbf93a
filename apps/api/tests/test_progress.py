"""Tests for onboarding progress tracking."""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from portal.core.onboarding_steps import ONBOARDING_STEPS, STEP_IDS, completion_percentage
from portal.db.models import OnboardingProgress
from portal.services import progress_service


def _row_count(db, user_id):
    return db.execute(
        select(func.count(OnboardingProgress.id)).where(OnboardingProgress.user_id == user_id)
    ).scalar()


def test_catalogue_order_is_fixed():
    assert [s.id for s in ONBOARDING_STEPS] == [
        "account_setup",
        "viewed_bookings_guide",
        "viewed_loyalty_guide",
        "viewed_marketing_guide",
        "feature_configuration",
        "go_live",
    ]


@pytest.mark.parametrize(
    "completed,total,expected",
    [(0, 6, 0), (1, 6, 17), (2, 6, 33), (3, 6, 50), (6, 6, 100), (1, 8, 13), (0, 0, 0)],
)
def test_completion_percentage(completed, total, expected):
    assert completion_percentage(completed, total) == expected


@pytest.mark.parametrize("step", sorted(STEP_IDS))
def test_track_progress_twice_writes_once(db, test_user, step):
    row, written = progress_service.track_progress(db, test_user.id, step)
    first_completed_at = row.completed_at

    again, written_again = progress_service.track_progress(db, test_user.id, step)

    assert written is True
    assert written_again is False
    assert again.id == row.id
    assert again.completed_at == first_completed_at
    assert _row_count(db, test_user.id) == 1


def test_completed_step_is_never_uncompleted(db, test_user):
    progress_service.track_progress(db, test_user.id, "go_live")

    row, written = progress_service.track_progress(db, test_user.id, "go_live", completed=False)

    assert written is False
    assert row.completed is True
    assert progress_service.get_step_status(db, test_user.id, "go_live") is True


def test_incomplete_row_then_complete(db, test_user):
    row, _ = progress_service.track_progress(
        db, test_user.id, "feature_configuration", completed=False, data={"features": ["bookings"]}
    )
    assert row.completed is False
    assert row.completed_at is None
    assert progress_service.get_step_status(db, test_user.id, "feature_configuration") is False

    row, written = progress_service.track_progress(db, test_user.id, "feature_configuration")
    assert written is True
    assert row.completed is True
    assert row.completed_at is not None
    assert _row_count(db, test_user.id) == 1


def test_unknown_step_rejected(db, test_user):
    with pytest.raises(progress_service.UnknownStepError):
        progress_service.track_progress(db, test_user.id, "not_a_step")


def test_summary_for_new_user_is_zero(db, test_user):
    summary = progress_service.get_summary(db, test_user.id)

    assert summary.percentage == 0
    assert summary.completed == 0
    assert summary.total == len(ONBOARDING_STEPS)
    assert all(not step.completed for step in summary.steps)


def test_summary_two_of_six(db, test_user):
    progress_service.track_progress(db, test_user.id, "account_setup")
    progress_service.track_progress(db, test_user.id, "viewed_loyalty_guide")

    summary = progress_service.get_summary(db, test_user.id)

    assert summary.completed == 2
    assert summary.percentage == 33
    done = {s.id for s in summary.steps if s.completed}
    assert done == {"account_setup", "viewed_loyalty_guide"}


@pytest.mark.asyncio
async def test_progress_requires_session(client: AsyncClient):
    response = await client.get("/api/progress")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_post_progress_201_then_200(authed_client: AsyncClient):
    first = await authed_client.post("/api/progress", json={"step": "account_setup"})
    assert first.status_code == 201
    assert first.json()["completed"] is True

    second = await authed_client.post("/api/progress", json={"step": "account_setup"})
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    rows = await authed_client.get("/api/progress")
    assert [r["step"] for r in rows.json()] == ["account_setup"]


@pytest.mark.asyncio
async def test_post_progress_unknown_step(authed_client: AsyncClient):
    response = await authed_client.post("/api/progress", json={"step": "launch_rocket"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_post_progress_requires_csrf_header(authed_client: AsyncClient):
    response = await authed_client.post(
        "/api/progress",
        json={"step": "account_setup"},
        headers={"X-Requested-With": ""},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_summary_endpoint(authed_client: AsyncClient):
    for step in ("account_setup", "viewed_bookings_guide", "viewed_loyalty_guide"):
        await authed_client.post("/api/progress", json={"step": step})

    response = await authed_client.get("/api/progress/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["completed"] == 3
    assert data["total"] == 6
    assert data["percentage"] == 50
    assert [s["id"] for s in data["steps"]][0] == "account_setup"

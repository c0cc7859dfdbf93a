"""Tests for the progress event bus and the progress tracker client."""
import json

import httpx
import pytest

from portal.client.progress_tracker import ProgressTracker
from portal.core.events import ProgressEventBus, StepCompleted


@pytest.mark.asyncio
async def test_report_reaches_sync_and_async_handlers_in_order():
    bus = ProgressEventBus()
    seen = []

    def sync_handler(event: StepCompleted):
        seen.append(("sync", event.step_id))

    async def async_handler(event: StepCompleted):
        seen.append(("async", event.step_id))

    bus.subscribe(sync_handler)
    bus.subscribe(async_handler)

    event = await bus.report_step_complete("go_live", "launch")

    assert seen == [("sync", "go_live"), ("async", "go_live")]
    assert event.step_type == "launch"


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = ProgressEventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(lambda event: seen.append(event.step_id))

    await bus.report_step_complete("account_setup")

    assert seen == ["account_setup"]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = ProgressEventBus()
    seen = []
    unsubscribe = bus.subscribe(lambda event: seen.append(event.step_id))
    assert bus.subscriber_count == 1

    unsubscribe()
    unsubscribe()
    await bus.report_step_complete("account_setup")

    assert seen == []
    assert bus.subscriber_count == 0


def _progress_backend(rows: list[dict], requests: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, json=rows)
        body = json.loads(request.content)
        row = {"id": len(rows) + 1, "user_id": 1, "step": body["step"], "completed": True,
               "completed_at": "2026-01-01T00:00:00+00:00", "data": body.get("data")}
        rows.append(row)
        return httpx.Response(201, json=row)
    return handler


@pytest.mark.asyncio
async def test_progress_tracker_records_steps_reported_on_bus():
    rows, requests = [], []
    bus = ProgressEventBus()
    transport = httpx.MockTransport(_progress_backend(rows, requests))

    async with httpx.AsyncClient(transport=transport, base_url="http://portal") as http:
        async with ProgressTracker(http, bus) as tracker:
            await tracker.refresh()
            await bus.report_step_complete("viewed_bookings_guide", "training")
            await bus.report_step_complete("viewed_bookings_guide", "training")

            assert tracker.get_step_status("viewed_bookings_guide") is True
            assert tracker.completed_steps() == ["viewed_bookings_guide"]
            assert tracker.completion_percentage() == 17

        assert bus.subscriber_count == 0

    posts = [r for r in requests if r.method == "POST"]
    assert len(posts) == 1
    assert posts[0].headers["X-Requested-With"] == "XMLHttpRequest"


@pytest.mark.asyncio
async def test_progress_tracker_swallows_http_errors():
    def handler(request):
        return httpx.Response(500, json={"detail": "down"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://portal") as http:
        tracker = ProgressTracker(http)
        assert await tracker.refresh() == []
        assert await tracker.track_progress("go_live") is False
        assert tracker.completion_percentage() == 0

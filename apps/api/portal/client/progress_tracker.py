"""Onboarding progress client, fed by the progress event bus."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from portal.client import CSRF_HEADERS
from portal.core.events import ProgressEventBus, StepCompleted
from portal.core.onboarding_steps import ONBOARDING_STEPS, completion_percentage

logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Caches the signed-in user's progress rows and records completions.

    Subscribes to the given bus on construction; call close() (or use as an
    async context manager) to unsubscribe.
    """

    def __init__(self, client: httpx.AsyncClient, bus: ProgressEventBus | None = None):
        self._client = client
        self._rows: dict[str, dict[str, Any]] = {}
        self._unsubscribe: Callable[[], None] | None = None
        if bus is not None:
            self._unsubscribe = bus.subscribe(self._on_step_complete)

    async def __aenter__(self) -> "ProgressTracker":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_step_complete(self, event: StepCompleted) -> None:
        await self.track_progress(event.step_id)

    async def refresh(self) -> list[dict[str, Any]]:
        """Reload the progress rows from the server."""
        try:
            response = await self._client.get("/api/progress")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to load onboarding progress: %s", e)
            return list(self._rows.values())
        self._rows = {row["step"]: row for row in response.json()}
        return list(self._rows.values())

    def get_step_status(self, step_id: str) -> bool:
        row = self._rows.get(step_id)
        return bool(row and row.get("completed"))

    async def track_progress(self, step_id: str, data: dict[str, Any] | None = None) -> bool:
        """Mark step_id complete. Returns False without a request when already done."""
        if self.get_step_status(step_id):
            return False
        try:
            response = await self._client.post(
                "/api/progress",
                json={"step": step_id, "completed": True, "data": data},
                headers=CSRF_HEADERS,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to track progress for %s: %s", step_id, e)
            return False
        row = response.json()
        self._rows[row["step"]] = row
        return True

    def completed_steps(self) -> list[str]:
        return [step.id for step in ONBOARDING_STEPS if self.get_step_status(step.id)]

    def completion_percentage(self) -> int:
        return completion_percentage(len(self.completed_steps()), len(ONBOARDING_STEPS))

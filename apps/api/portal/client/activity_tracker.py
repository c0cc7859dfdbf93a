"""
Activity tracking client.

Monitors user interactions, page visits and onboarding progress and sends
them to the portal API. Telemetry is fire-and-forget: failures are logged
and never raised or retried.
"""

from __future__ import annotations

import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from portal.client import CSRF_HEADERS
from portal.db.enums import ActivityType, EngagementLevel, GuideAction, PageAction

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase

LOW_ENGAGEMENT_MS = 30_000
MEDIUM_ENGAGEMENT_MS = 120_000


def generate_session_id(now_ms: int | None = None) -> str:
    """session-<epoch millis>-<9 random base36 chars>"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session-{now_ms}-{suffix}"


def engagement_for(time_on_page_ms: float) -> EngagementLevel:
    if time_on_page_ms < LOW_ENGAGEMENT_MS:
        return EngagementLevel.LOW
    if time_on_page_ms < MEDIUM_ENGAGEMENT_MS:
        return EngagementLevel.MEDIUM
    return EngagementLevel.HIGH


class ActivityTracker:
    """
    Per-user tracking session against the portal API.

    The client passed in must already carry the portal session cookie.
    Use as an async context manager to end the session on exit.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        user_agent: str | None = None,
        base_url: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._user_agent = user_agent
        self._base_url = base_url
        self._clock = clock
        self.session_id: str | None = None
        self.user_id: int | None = None
        self.current_page = ""
        self._page_started_ms = self._now_ms()
        self._session_started_ms: int | None = None

    async def __aenter__(self) -> "ActivityTracker":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _timestamp(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat()

    def _page_url(self) -> str:
        return f"{self._base_url}/{self.current_page}" if self.current_page else self._base_url or "/"

    async def _send(self, method: str, url: str, payload: dict[str, Any]) -> bool:
        try:
            response = await self._client.request(
                method, url, json=payload, headers=CSRF_HEADERS
            )
        except Exception:
            # Includes payloads httpx cannot encode
            logger.exception("Activity tracking request failed: %s %s", method, url)
            return False
        if response.is_error:
            logger.error(
                "Activity tracking request rejected: %s %s -> %s",
                method, url, response.status_code,
            )
            return False
        return True

    async def start_session(self, user_id: int) -> str:
        """Register a new tracking session and emit session_start."""
        self.user_id = user_id
        self._session_started_ms = self._now_ms()
        self.session_id = generate_session_id(self._session_started_ms)

        await self._send(
            "POST",
            "/api/sessions",
            {"user_id": user_id, "session_id": self.session_id, "user_agent": self._user_agent},
        )
        await self.track_activity(
            ActivityType.SESSION_START,
            metadata={"userAgent": self._user_agent},
        )
        logger.info("Activity tracking started for user %s", user_id)
        return self.session_id

    async def track_activity(
        self,
        activity_type: ActivityType,
        page: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        if not self.user_id:
            logger.warning("Activity tracking: no user session active")
            return False

        try:
            enriched = dict(metadata or {})
            enriched.update(
                sessionId=self.session_id,
                timestamp=self._timestamp(),
                url=self._page_url(),
            )
            payload = {
                "user_id": self.user_id,
                "activity_type": ActivityType(activity_type).value,
                "page": page or self.current_page or None,
                "metadata": enriched,
            }
        except Exception:
            logger.exception("Activity tracking: could not build %r event", activity_type)
            return False
        return await self._send("POST", "/api/activities", payload)

    async def track_page_visit(self, page_name: str) -> None:
        """Close out the current page (page_exit) before entering the next one."""
        referrer = self.current_page
        if self.current_page:
            spent = self._now_ms() - self._page_started_ms
            await self.track_activity(
                ActivityType.PAGE_VISIT,
                page=self.current_page,
                metadata={
                    "timeSpentMs": spent,
                    "timeSpentSeconds": int(spent / 1000 + 0.5),
                    "action": PageAction.PAGE_EXIT.value,
                },
            )

        self.current_page = page_name
        self._page_started_ms = self._now_ms()
        await self.track_activity(
            ActivityType.PAGE_VISIT,
            page=page_name,
            metadata={"action": PageAction.PAGE_ENTER.value, "referrer": referrer},
        )

    def engagement_level(self) -> EngagementLevel:
        return engagement_for(self._now_ms() - self._page_started_ms)

    async def track_guide_view(self, guide_type: str, action: GuideAction) -> None:
        try:
            action_value = GuideAction(action).value
        except ValueError:
            logger.exception("Activity tracking: unknown guide action %r", action)
            return
        await self.track_activity(
            ActivityType.GUIDE_VIEW,
            page=f"guide_{guide_type}",
            metadata={
                "guideType": guide_type,
                "action": action_value,
                "engagementLevel": self.engagement_level().value,
            },
        )

    async def track_step_complete(self, step_id: str, step_type: str | None = None) -> None:
        await self.track_activity(
            ActivityType.STEP_COMPLETE,
            metadata={
                "stepId": step_id,
                "stepType": step_type,
                "completionTime": self._timestamp(),
            },
        )

    async def track_visibility_change(self, hidden: bool) -> None:
        action = PageAction.PAGE_HIDDEN if hidden else PageAction.PAGE_VISIBLE
        await self.track_activity(ActivityType.PAGE_VISIT, metadata={"action": action.value})

    async def end_session(self) -> None:
        """Emit session_end and logout, mark the server session inactive, reset."""
        if self.current_page:
            await self.track_activity(
                ActivityType.PAGE_VISIT,
                page=self.current_page,
                metadata={
                    "timeSpentMs": self._now_ms() - self._page_started_ms,
                    "action": PageAction.SESSION_END.value,
                },
            )

        duration = self._now_ms() - self._session_started_ms if self._session_started_ms else 0
        await self.track_activity(ActivityType.LOGOUT, metadata={"sessionDuration": duration})

        if self.session_id:
            await self._send(
                "PATCH",
                f"/api/sessions/{self.session_id}",
                {"logout_time": self._timestamp(), "is_active": False},
            )

        self.session_id = None
        self.user_id = None
        self.current_page = ""
        self._session_started_ms = None

    async def close(self) -> None:
        if self.session_id:
            await self.end_session()

    def session_info(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "currentPage": self.current_page,
            "isActive": bool(self.session_id),
        }

"""
In-process event bus for onboarding progress.

Components that finish a checklist step report it here; the progress
tracker subscribes and persists it. One bus lives for the lifetime of the
application (or client) that created it.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepCompleted:
    step_id: str
    step_type: str | None = None
    reported_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


StepCompletedHandler = Callable[[StepCompleted], Union[Awaitable[None], None]]


class ProgressEventBus:
    """Typed publish/subscribe channel for step-complete events."""

    def __init__(self):
        self._handlers: list[StepCompletedHandler] = []

    def subscribe(self, handler: StepCompletedHandler) -> Callable[[], None]:
        """Register a handler; returns a function that removes it again."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    async def report_step_complete(
        self, step_id: str, step_type: str | None = None
    ) -> StepCompleted:
        """
        Publish a step completion to every subscriber, in subscription order.

        A failing handler is logged and does not stop the others.
        """
        event = StepCompleted(step_id=step_id, step_type=step_type)
        handlers = list(self._handlers)

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("step_complete handler failed for %s", step_id)
        return event

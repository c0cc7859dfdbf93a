"""Onboarding-related enums."""

from enum import Enum


class StepCategory(str, Enum):
    """Grouping of checklist steps."""

    SETUP = "setup"
    CONFIGURATION = "configuration"
    TRAINING = "training"
    LAUNCH = "launch"


class GuideType(str, Enum):
    """Embedded guides shown in the portal."""

    OVERVIEW = "overview"
    BOOKINGS = "bookings"
    LOYALTY = "loyalty"
    MARKETING = "marketing"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class TaskStatus(str, Enum):
    """
    Venue onboarding task status.

    Moves forward only: not-started -> in-progress -> completed.
    """

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _TASK_STATUS_ORDER.index(self)


_TASK_STATUS_ORDER = [TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]


class VenueStatus(str, Enum):
    """Lifecycle of a venue onboarding."""

    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    LIVE = "live"

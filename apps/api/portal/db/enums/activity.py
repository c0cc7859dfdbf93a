"""Activity tracking enums."""

from enum import Enum


class ActivityType(str, Enum):
    """Kinds of user activity events."""

    LOGIN = "login"
    PAGE_VISIT = "page_visit"
    GUIDE_VIEW = "guide_view"
    STEP_COMPLETE = "step_complete"
    LOGOUT = "logout"
    SESSION_START = "session_start"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class PageAction(str, Enum):
    """Value of metadata.action on page_visit events."""

    PAGE_ENTER = "page_enter"
    PAGE_EXIT = "page_exit"
    SESSION_END = "session_end"
    PAGE_HIDDEN = "page_hidden"
    PAGE_VISIBLE = "page_visible"


class GuideAction(str, Enum):
    """Value of metadata.action on guide_view events."""

    START = "start"
    COMPLETE = "complete"
    PROGRESS = "progress"


class EngagementLevel(str, Enum):
    """Time-on-page bucket: low under 30s, medium under 120s, high otherwise."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

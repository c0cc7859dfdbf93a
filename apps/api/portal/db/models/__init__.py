"""ORM model registry."""

from portal.db.models.activity import UserActivity, UserSession
from portal.db.models.auth import User
from portal.db.models.cms import (
    CmsActivityLog,
    CmsAdmin,
    ContentItem,
    ContentLock,
    ContentType,
    ContentVersion,
)
from portal.db.models.onboarding import GuideConfig, OnboardingProgress
from portal.db.models.venues import OnboardingTask, TeamMember, Venue

__all__ = [
    "CmsActivityLog",
    "CmsAdmin",
    "ContentItem",
    "ContentLock",
    "ContentType",
    "ContentVersion",
    "GuideConfig",
    "OnboardingProgress",
    "OnboardingTask",
    "TeamMember",
    "User",
    "UserActivity",
    "UserSession",
    "Venue",
]

"""Enum definitions for application constants."""

from portal.db.enums.activity import ActivityType, EngagementLevel, GuideAction, PageAction
from portal.db.enums.auth import CmsRole, UserRole
from portal.db.enums.cms import CmsAction, CmsResourceType
from portal.db.enums.onboarding import GuideType, StepCategory, TaskStatus, VenueStatus
from portal.db.enums.permissions import (
    ALL_CMS_ROLES,
    ROLES_CAN_DELETE_CONTENT,
    ROLES_CAN_MANAGE_ADMINS,
    ROLES_CAN_MANAGE_CONTENT_TYPES,
    ROLES_CAN_MANAGE_VENUES,
    ROLES_CAN_PUBLISH,
    ROLES_CAN_RESTORE,
    ROLES_CAN_UNPUBLISH,
    ROLES_CAN_VIEW_ACTIVITY,
)

__all__ = [
    "ActivityType",
    "ALL_CMS_ROLES",
    "CmsAction",
    "CmsResourceType",
    "CmsRole",
    "EngagementLevel",
    "GuideAction",
    "GuideType",
    "PageAction",
    "ROLES_CAN_DELETE_CONTENT",
    "ROLES_CAN_MANAGE_ADMINS",
    "ROLES_CAN_MANAGE_CONTENT_TYPES",
    "ROLES_CAN_MANAGE_VENUES",
    "ROLES_CAN_PUBLISH",
    "ROLES_CAN_RESTORE",
    "ROLES_CAN_UNPUBLISH",
    "ROLES_CAN_VIEW_ACTIVITY",
    "StepCategory",
    "TaskStatus",
    "UserRole",
    "VenueStatus",
]

"""CMS activity log enums."""

from enum import Enum


class CmsAction(str, Enum):
    """Verbs recorded in the CMS activity log."""

    LOGIN = "login"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    RESTORE = "restore"
    LOCK = "lock"
    UNLOCK = "unlock"
    RENEW_LOCK = "renew_lock"


class CmsResourceType(str, Enum):
    """Resource kinds referenced by CMS activity entries."""

    ADMIN = "admin"
    CONTENT_TYPE = "content_type"
    CONTENT = "content"
    CONTENT_LOCK = "content_lock"
    VENUE = "venue"
    TEAM_MEMBER = "team_member"
    TASK = "task"

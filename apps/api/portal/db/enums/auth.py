"""Auth-related enums."""

from enum import Enum


class UserRole(str, Enum):
    """Roles for portal (main-app) users."""

    CLIENT = "client"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class CmsRole(str, Enum):
    """
    CMS admin roles with increasing privilege levels.

    - EDITOR: Edit and publish content
    - ADMIN: Everything an editor can do plus content types, deletes, unpublish
    - SUPER_ADMIN: Everything plus managing other admins
    """

    EDITOR = "editor"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_

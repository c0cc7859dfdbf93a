"""Role permission helper sets."""

from portal.db.enums.auth import CmsRole

ALL_CMS_ROLES = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN, CmsRole.EDITOR}

# Roles that can create, deactivate and re-role CMS admins
ROLES_CAN_MANAGE_ADMINS = {CmsRole.SUPER_ADMIN}

# Roles that can create/update content types
ROLES_CAN_MANAGE_CONTENT_TYPES = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN}

# Roles that can permanently delete content items
ROLES_CAN_DELETE_CONTENT = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN}

# Roles that can publish content
ROLES_CAN_PUBLISH = ALL_CMS_ROLES

# Roles that can take content offline
ROLES_CAN_UNPUBLISH = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN}

# Roles that can restore an older content version
ROLES_CAN_RESTORE = ALL_CMS_ROLES

# Roles that can read the global CMS activity log
ROLES_CAN_VIEW_ACTIVITY = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN}

# Roles that can manage venues, team members and onboarding tasks
ROLES_CAN_MANAGE_VENUES = {CmsRole.SUPER_ADMIN, CmsRole.ADMIN}

"""CMS admin accounts - authentication and management."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.core.security import create_cms_token, hash_password, verify_password
from portal.db.enums import CmsRole
from portal.db.models import CmsAdmin
from portal.db.types import utcnow
from portal.schemas.cms import CmsAdminCreate, CmsAdminUpdate
from portal.services.cms_activity_service import hash_email

logger = logging.getLogger(__name__)


def get_admin(db: Session, admin_id: int) -> CmsAdmin | None:
    return db.get(CmsAdmin, admin_id)


def get_admin_by_email(db: Session, email: str) -> CmsAdmin | None:
    return db.execute(
        select(CmsAdmin).where(CmsAdmin.email == email.strip().lower())
    ).scalar_one_or_none()


def list_admins(db: Session) -> list[CmsAdmin]:
    return list(db.execute(select(CmsAdmin).order_by(CmsAdmin.created_at, CmsAdmin.id)).scalars().all())


def authenticate(db: Session, email: str, password: str) -> CmsAdmin | None:
    """
    Check credentials for an active admin.

    Returns None for unknown email, wrong password or a deactivated
    account (callers must not distinguish these). Updates last_login.
    """
    admin = get_admin_by_email(db, email)
    if not admin or not admin.is_active:
        logger.info("cms login rejected for %s", hash_email(email))
        return None
    if not verify_password(password, admin.password_hash):
        logger.info("cms login rejected for %s", hash_email(email))
        return None

    admin.last_login = utcnow()
    db.flush()
    return admin


def issue_token(admin: CmsAdmin) -> str:
    """24h bearer token carrying {adminId, email, role}."""
    return create_cms_token(admin.id, admin.email, admin.role)


def create_admin(db: Session, data: CmsAdminCreate) -> CmsAdmin:
    """Create an admin. Caller commits."""
    email = data.email.strip().lower()
    if get_admin_by_email(db, email):
        raise ValueError("Admin with this email already exists")
    admin = CmsAdmin(
        email=email,
        password_hash=hash_password(data.password),
        name=data.name,
        role=data.role.value,
    )
    db.add(admin)
    db.flush()
    return admin


def update_admin(
    db: Session,
    admin: CmsAdmin,
    data: CmsAdminUpdate,
    acting_admin_id: int,
) -> CmsAdmin:
    """
    Update name/role/active flag/password. Caller commits.

    An admin cannot demote or deactivate themselves.
    """
    updates = data.model_dump(exclude_unset=True)
    if admin.id == acting_admin_id:
        if updates.get("is_active") is False:
            raise ValueError("You cannot deactivate your own account")
        if "role" in updates and updates["role"] != CmsRole(admin.role):
            raise ValueError("You cannot change your own role")

    if updates.get("name"):
        admin.name = updates["name"]
    if updates.get("role") is not None:
        admin.role = updates["role"].value
    if updates.get("is_active") is not None:
        admin.is_active = updates["is_active"]
    if updates.get("password"):
        admin.password_hash = hash_password(updates["password"])
    db.flush()
    return admin

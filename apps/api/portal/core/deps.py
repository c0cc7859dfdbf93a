"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.security import decode_cms_token, decode_session_token
from portal.db.enums import CmsRole, UserRole
from portal.db.models import CmsAdmin, User
from portal.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "portal_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Portal users (session cookie)
# =============================================================================

def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Get authenticated portal user from session cookie.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - User exists and is active

    Raises:
        HTTPException 401: Authentication failed
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    return user


def require_portal_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only portal users with the admin role."""
    if user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return user


def ensure_self_or_admin(user: User, target_user_id: int) -> None:
    """Reject acting on another user's data unless the caller is an admin."""
    if user.id != target_user_id and user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Cannot act on behalf of another user")


# =============================================================================
# CMS admins (Authorization: Bearer)
# =============================================================================

def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_cms_admin(
    request: Request,
    db: Session = Depends(get_db)
) -> CmsAdmin:
    """
    Resolve the CMS admin behind the bearer token.

    The admin row is re-read on every request, so a deactivated or deleted
    admin is rejected even while their token is still within its lifetime.

    Raises:
        HTTPException 401: Missing/invalid/expired token or inactive admin
    """
    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication token required")

    try:
        payload = decode_cms_token(token)
        admin_id = int(payload["adminId"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    admin = db.get(CmsAdmin, admin_id)
    if not admin or not admin.is_active:
        raise HTTPException(status_code=401, detail="Admin account not found or inactive")

    request.state.cms_admin_id = admin.id
    return admin


def require_cms_roles(allowed_roles: set[CmsRole]):
    """
    Dependency factory for CMS role-based authorization.

    Usage:
        @router.post("", dependencies=[Depends(require_cms_roles(ROLES_CAN_MANAGE_ADMINS))])
    """
    allowed = {role.value for role in allowed_roles}

    def dependency(admin: CmsAdmin = Depends(get_current_cms_admin)) -> CmsAdmin:
        if admin.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return admin
    return dependency


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on cookie-authenticated mutations.

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )

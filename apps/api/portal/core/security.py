"""Security utilities: session cookies, CMS bearer tokens and password hashing."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from portal.core.config import settings


# =============================================================================
# Main-app session token (JWT in cookie)
# =============================================================================

def create_session_token(user_id: int, email: str, role: str) -> str:
    """
    Create signed session JWT for a portal user.

    Issued after the identity provider accepts the sign-in.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=settings.SESSION_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Raises:
        jwt.InvalidTokenError: If token is invalid or expired
    """
    return jwt.decode(token, settings.SESSION_SECRET, algorithms=["HS256"])


# =============================================================================
# CMS admin token (Authorization: Bearer)
# =============================================================================

def create_cms_token(
    admin_id: int,
    email: str,
    role: str,
    issued_at: datetime | None = None,
) -> str:
    """
    Create a CMS admin JWT carrying {adminId, email, role}.

    The token only proves who signed in; the admin row is re-read on every
    request, so role changes and deactivation apply immediately.
    """
    iat = issued_at or datetime.now(timezone.utc)
    payload = {
        "adminId": admin_id,
        "email": email,
        "role": role,
        "iat": iat,
        "exp": iat + timedelta(hours=settings.CMS_JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.CMS_JWT_SECRET, algorithm="HS256")


def decode_cms_token(token: str) -> dict:
    """
    Decode and verify a CMS admin JWT.

    Raises:
        jwt.InvalidTokenError: If token is invalid or expired
    """
    return jwt.decode(token, settings.CMS_JWT_SECRET, algorithms=["HS256"])


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False

"""CMS activity log - who changed what, with the request that did it.

Security guidelines:
- NEVER log secrets (passwords, tokens); bodies go through redact_secrets
- IP: Trust X-Forwarded-For only in production behind LB
"""

import hashlib
import logging
from typing import Any

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.db.enums import CmsAction, CmsResourceType
from portal.db.models import CmsActivityLog

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 50
MAX_ACTIVITY_LIMIT = 500

SECRET_FIELDS = {"password", "password_hash", "token", "lock_token", "secret"}


def hash_email(email: str) -> str:
    """Hash email for log lines (prefix + SHA256 suffix for debugging)."""
    if not email:
        return ""
    prefix = email.split("@")[0][:3] if "@" in email else email[:3]
    suffix = hashlib.sha256(email.lower().encode()).hexdigest()[:12]
    return f"{prefix}...@[hash:{suffix}]"


def redact_secrets(payload: Any) -> Any:
    """Recursively replace secret fields with [REDACTED]."""
    if isinstance(payload, dict):
        return {
            key: "[REDACTED]" if key.lower() in SECRET_FIELDS else redact_secrets(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact_secrets(item) for item in payload]
    return payload


def get_client_ip(request: Request | None) -> str | None:
    """
    Extract client IP from request.

    Only trusts X-Forwarded-For when TRUST_PROXY_HEADERS=True (behind reverse proxy).
    """
    if not request:
        return None

    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # X-Forwarded-For: client, proxy1, proxy2 - take first
            return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return None


def get_user_agent(request: Request | None) -> str | None:
    """Extract user agent from request."""
    if not request:
        return None
    ua = request.headers.get("user-agent", "")
    # Truncate to 500 chars (DB limit)
    return ua[:500] if ua else None


def log_activity(
    db: Session,
    admin_id: int | None,
    action: CmsAction,
    resource_type: CmsResourceType,
    resource_id: int | None = None,
    request: Request | None = None,
    body: Any = None,
) -> CmsActivityLog:
    """
    Append a CMS activity entry.

    details carries the request snapshot {method, url, body} with secrets
    redacted. Caller commits.
    """
    details: dict[str, Any] = {"body": redact_secrets(body) if body is not None else None}
    if request is not None:
        details["method"] = request.method
        details["url"] = request.url.path
        if request.url.query:
            details["url"] = f"{request.url.path}?{request.url.query}"

    entry = CmsActivityLog(
        admin_id=admin_id,
        action=action.value,
        resource_type=resource_type.value,
        resource_id=resource_id,
        details=details,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    db.add(entry)
    db.flush()
    logger.info(
        "cms activity %s %s id=%s by admin=%s",
        action.value,
        resource_type.value,
        resource_id,
        admin_id,
    )
    return entry


def list_activity(
    db: Session,
    limit: int = DEFAULT_ACTIVITY_LIMIT,
    admin_id: int | None = None,
) -> list[CmsActivityLog]:
    """Newest first, optionally for one admin."""
    limit = max(1, min(limit, MAX_ACTIVITY_LIMIT))
    stmt = select(CmsActivityLog)
    if admin_id is not None:
        stmt = stmt.where(CmsActivityLog.admin_id == admin_id)
    stmt = stmt.order_by(CmsActivityLog.created_at.desc(), CmsActivityLog.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())

"""Rate limiting for login and general API traffic."""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from portal.core.config import settings

logger = logging.getLogger(__name__)

AUTH_LIMIT = "1000/minute" if settings.TESTING else f"{settings.RATE_LIMIT_AUTH}/minute"


def rate_limit_key(request: Request) -> str:
    """Client address, honouring X-Forwarded-For only behind a trusted proxy."""
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _storage_uri() -> str:
    # Counters must be shared once there is more than one worker
    if settings.TESTING or not settings.REDIS_URL:
        return "memory://"
    try:
        import redis

        redis.from_url(settings.REDIS_URL, socket_connect_timeout=1).ping()
    except Exception as e:
        logger.warning("Redis unavailable for rate limiting, using in-memory: %s", e)
        return "memory://"
    return settings.REDIS_URL


def build_limiter() -> Limiter:
    default_limits = []
    if not settings.TESTING and settings.RATE_LIMIT_API > 0:
        default_limits = [f"{settings.RATE_LIMIT_API}/minute"]
    return Limiter(
        key_func=rate_limit_key,
        storage_uri=_storage_uri(),
        default_limits=default_limits,
    )


limiter = build_limiter()

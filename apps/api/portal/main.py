"""FastAPI application entry point."""
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from portal.core.config import settings
from portal.core.structured_logging import build_log_context
from portal.db.session import engine
from portal.schemas.auth import PublicConfig

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from portal.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Onboarding Portal API",
    description="Hospitality venue onboarding portal and CMS",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag each request with an id and log failures with it."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled error",
            extra=build_log_context(
                request_id=request_id,
                route=request.url.path,
                method=request.method,
            ),
        )
        raise
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Routers
# ============================================================================

from portal.routers import activities, auth, guides, progress, sessions, users

# Portal (session cookie)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(guides.router, prefix="/api/guides", tags=["guides"])
app.include_router(progress.router, prefix="/api/progress", tags=["progress"])
app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])

# CMS (bearer token) - routers carry their own prefixes
from portal.routers import (
    cms_activity,
    cms_admins,
    cms_auth,
    cms_content,
    cms_content_types,
    cms_locks,
    cms_venues,
)
app.include_router(cms_auth.router)
app.include_router(cms_admins.router)
app.include_router(cms_content_types.router)
app.include_router(cms_locks.router)
app.include_router(cms_content.router)
app.include_router(cms_activity.router)
app.include_router(cms_venues.router)

# Published content (unauthenticated)
from portal.routers import public_content
app.include_router(public_content.router)

# Internal endpoints (scheduled/cron jobs - protected by INTERNAL_SECRET)
from portal.routers import internal
app.include_router(internal.router)


@app.get("/api/config", response_model=PublicConfig, tags=["config"])
def public_config():
    """Frontend boot config (chat widget property, version)."""
    return PublicConfig(
        tawk_property_id=settings.TAWK_PROPERTY_ID or None,
        version=settings.VERSION,
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

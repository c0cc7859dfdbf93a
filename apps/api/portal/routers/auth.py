"""Portal sign-in via the identity provider, backed by a session cookie."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.deps import COOKIE_NAME, get_current_user, get_db, require_csrf_header
from portal.core.identity import IdentityError, IdentityProvider, get_identity_provider
from portal.core.rate_limit import AUTH_LIMIT, limiter
from portal.core.security import create_session_token
from portal.core.structured_logging import build_log_context
from portal.db.models import User
from portal.schemas.auth import LoginRequest, LoginResponse
from portal.schemas.user import UserRead
from portal.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """
    Sign in through the identity provider.

    The portal user is created on first sign-in. Sets the session cookie.
    """
    try:
        identity = provider.sign_in(body.email, body.password)
    except IdentityError:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user, created = user_service.get_or_create_from_identity(db, identity)
    if not user.is_active:
        provider.sign_out(identity.uid)
        raise HTTPException(status_code=401, detail="Account disabled")

    token = create_session_token(user.id, user.email, user.role)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
    logger.info(
        "portal login",
        extra=build_log_context(user_id=user.id, route="/api/auth/login", method="POST"),
    )
    return LoginResponse(user=UserRead.model_validate(user), created=created)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(
    response: Response,
    user: User = Depends(get_current_user),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """Sign out at the provider and clear the session cookie."""
    provider.sign_out(user.external_auth_id)
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    """Current signed-in user."""
    return user

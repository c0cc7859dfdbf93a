"""CMS auth router - admin login and token verification."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from portal.core.deps import get_current_cms_admin, get_db
from portal.core.rate_limit import AUTH_LIMIT, limiter
from portal.db.enums import CmsAction, CmsResourceType
from portal.db.models import CmsAdmin
from portal.schemas.cms import CmsAdminRead, CmsLoginRequest, CmsLoginResponse
from portal.services import cms_activity_service, cms_admin_service

router = APIRouter(prefix="/api/cms/auth", tags=["cms-auth"])


@router.post("/login", response_model=CmsLoginResponse)
@limiter.limit(AUTH_LIMIT)
def login(request: Request, body: CmsLoginRequest, db: Session = Depends(get_db)):
    """
    Exchange email/password for a 24h bearer token.

    Unknown email, wrong password and deactivated accounts all return the
    same 401.
    """
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    admin = cms_admin_service.authenticate(db, body.email, body.password)
    if not admin:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    cms_activity_service.log_activity(
        db,
        admin_id=admin.id,
        action=CmsAction.LOGIN,
        resource_type=CmsResourceType.ADMIN,
        resource_id=admin.id,
        request=request,
        body={"email": admin.email},
    )
    db.commit()
    return CmsLoginResponse(
        admin=CmsAdminRead.model_validate(admin),
        token=cms_admin_service.issue_token(admin),
    )


@router.post("/verify", response_model=CmsAdminRead)
def verify(admin: CmsAdmin = Depends(get_current_cms_admin)):
    """Echo the admin behind the token (401 if it no longer resolves)."""
    return admin

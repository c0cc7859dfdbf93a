"""Users router - portal user registration and administration."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portal.core.deps import get_current_user, get_db, require_csrf_header, require_portal_admin
from portal.db.enums import UserRole
from portal.db.models import User
from portal.schemas.user import UserCreate, UserRead, UserUpdate
from portal.services import user_service

router = APIRouter()


@router.get("", response_model=list[UserRead], dependencies=[Depends(require_portal_admin)])
def list_users(db: Session = Depends(get_db)):
    """All users (admin only)."""
    return user_service.list_users(db)


@router.post(
    "",
    response_model=UserRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_user(
    data: UserCreate,
    user: User = Depends(require_portal_admin),
    db: Session = Depends(get_db),
):
    """Register a user ahead of their first sign-in (admin only)."""
    try:
        return user_service.create_user(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/firebase/{uid}", response_model=UserRead)
def get_user_by_auth_id(
    uid: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Look up a user by identity-provider uid."""
    target = user_service.get_user_by_external_id(db, uid)
    if not target or (target.id != user.id and user.role != UserRole.ADMIN.value):
        raise HTTPException(status_code=404, detail="User not found")
    return target


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if user_id != user.id and user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=404, detail="User not found")
    target = user_service.get_user_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=404, detail="User not found")
    return target


@router.patch("/{user_id}", response_model=UserRead, dependencies=[Depends(require_csrf_header)])
def update_user(
    user_id: int,
    data: UserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a user.

    - Anyone may change their own name
    - role and is_active are admin-only
    """
    is_admin = user.role == UserRole.ADMIN.value
    if user_id != user.id and not is_admin:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    fields = data.model_fields_set
    if fields & {"role", "is_active"} and not is_admin:
        raise HTTPException(status_code=403, detail="Only admins can change role or status")

    target = user_service.get_user_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=404, detail="User not found")
    return user_service.update_user(db, target, data)

"""User service - portal user lookups and updates."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.core.identity import Identity
from portal.db.models import User
from portal.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar_one_or_none()


def get_user_by_external_id(db: Session, external_auth_id: str) -> User | None:
    return db.execute(
        select(User).where(User.external_auth_id == external_auth_id)
    ).scalar_one_or_none()


def list_users(db: Session) -> list[User]:
    return list(db.execute(select(User).order_by(User.created_at, User.id)).scalars().all())


def create_user(db: Session, data: UserCreate) -> User:
    """Register a user. Email and external id must both be new."""
    email = data.email.strip().lower()
    if get_user_by_email(db, email):
        raise ValueError("User with this email already exists")
    if get_user_by_external_id(db, data.external_auth_id):
        raise ValueError("User with this auth id already exists")

    user = User(
        email=email,
        external_auth_id=data.external_auth_id,
        name=data.name,
        role=data.role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return user


def get_or_create_from_identity(db: Session, identity: Identity) -> tuple[User, bool]:
    """
    Resolve the portal user behind a provider identity.

    Created on first sign-in. Returns (user, created).
    """
    user = get_user_by_external_id(db, identity.uid)
    if user:
        return user, False

    user = create_user(
        db,
        UserCreate(
            email=identity.email,
            external_auth_id=identity.uid,
            name=identity.display_name,
            role=identity.role,
        ),
    )
    return user, True


def update_user(db: Session, user: User, data: UserUpdate) -> User:
    """Apply a partial update. Authorization is the router's job."""
    updates = data.model_dump(exclude_unset=True)
    if updates.get("name"):
        user.name = updates["name"]
    if updates.get("role") is not None:
        user.role = updates["role"].value
    if updates.get("is_active") is not None:
        user.is_active = updates["is_active"]
    db.commit()
    db.refresh(user)
    return user

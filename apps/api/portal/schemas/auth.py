"""Pydantic schemas for portal sign-in."""

from pydantic import BaseModel, Field

from portal.schemas.user import UserRead


class LoginRequest(BaseModel):
    """Credentials passed through to the identity provider."""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    user: UserRead
    created: bool = False


class PublicConfig(BaseModel):
    """Non-secret settings the frontend needs at boot."""
    tawk_property_id: str | None
    version: str

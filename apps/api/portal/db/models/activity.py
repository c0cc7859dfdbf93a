"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import Base
from portal.db.types import JSONType, utcnow


class UserActivity(Base):
    """
    Append-only telemetry event.

    occurred_at is the client-side event time (metadata.timestamp); events
    may arrive out of order, so readers sort on it rather than on id.
    """

    __tablename__ = "user_activities"
    __table_args__ = (
        Index("idx_user_activities_user_time", "user_id", "occurred_at"),
        Index("idx_user_activities_type_time", "activity_type", "occurred_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    activity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    page: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # "metadata" is reserved on declarative classes
    activity_metadata: Mapped[dict | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )
    occurred_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class UserSession(Base):
    """Browser tracking session. Updated in place, never deleted."""

    __tablename__ = "user_sessions"
    __table_args__ = (
        Index("idx_user_sessions_user_active", "user_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    login_time: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    last_activity: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    logout_time: Mapped[datetime | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

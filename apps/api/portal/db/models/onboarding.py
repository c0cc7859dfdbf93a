"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.db.base import Base
from portal.db.types import JSONType, utcnow

if TYPE_CHECKING:
    from portal.db.models import User


class OnboardingProgress(Base):
    """
    Per-user checklist state.

    One row per (user, step). A completed row is never flipped back.
    """

    __tablename__ = "onboarding_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "step", name="uq_onboarding_progress_user_step"),
        Index("idx_onboarding_progress_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    step: Mapped[str] = mapped_column(String(100), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    user: Mapped["User"] = relationship()


class GuideConfig(Base):
    """Admin-editable link target for an embedded guide."""

    __tablename__ = "guide_configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    guide_type: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

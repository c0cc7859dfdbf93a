"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.db.base import Base
from portal.db.enums import TaskStatus, VenueStatus
from portal.db.types import JSONType, utcnow


class Venue(Base):
    """
    A hospitality venue being onboarded.

    Soft-deleted via is_active.
    """

    __tablename__ = "venues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    go_live_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    package_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    selected_features: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=VenueStatus.PLANNING.value, nullable=False
    )
    progress_data: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    team_members: Mapped[list["TeamMember"]] = relationship(
        back_populates="venue", cascade="all, delete-orphan"
    )
    tasks: Mapped[list["OnboardingTask"]] = relationship(
        back_populates="venue", cascade="all, delete-orphan"
    )


class TeamMember(Base):
    """Venue staff member that tasks can be assigned to."""

    __tablename__ = "team_members"
    __table_args__ = (Index("idx_team_members_venue", "venue_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    venue_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    venue: Mapped["Venue"] = relationship(back_populates="team_members")


class OnboardingTask(Base):
    """
    Venue onboarding task.

    Status moves forward only (see TaskStatus).
    """

    __tablename__ = "onboarding_tasks"
    __table_args__ = (Index("idx_onboarding_tasks_venue_status", "venue_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    venue_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TaskStatus.NOT_STARTED.value, nullable=False
    )
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    venue: Mapped["Venue"] = relationship(back_populates="tasks")
    assignee: Mapped["TeamMember | None"] = relationship()

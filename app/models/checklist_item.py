"""
ChecklistItem - one actionable task generated from a standup session.

Each day's session gets a fresh set; items of earlier sessions are never
rewritten by generation. status and strikes are set directly by the
lifecycle operations, never recomputed from check-in history.
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from app.db.base import Base, new_id, utcnow


class ChecklistStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    blocked = "blocked"
    at_risk = "at_risk"


class ChecklistItem(Base):
    __tablename__ = "checklist_items"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("standup_sessions.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    actual_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    status: Mapped[str] = mapped_column(
        Enum(ChecklistStatus, name="checklist_status_enum"),
        nullable=False,
        default=ChecklistStatus.pending,
    )
    strikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_strikes: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    clarity_score: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    # Weak references: no FK, the goal/person may be archived or removed.
    goal_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    assigned_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(128), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    check_ins: Mapped[list["CheckIn"]] = relationship(  # noqa: F821
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="CheckIn.created_at",
    )

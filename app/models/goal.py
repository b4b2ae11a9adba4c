"""
Goal - a user's structured goal, routine or business objective.

Edited by the user, archived rather than deleted.
stakeholders: JSON-encoded list of person ids stored as Text.
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Enum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base, new_id, utcnow


class GoalType(str, enum.Enum):
    goal = "goal"
    routine = "routine"
    business_objective = "business_objective"


class GoalStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    paused = "paused"
    archived = "archived"


class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        Enum(GoalType, name="goal_type_enum"),
        nullable=False,
        default=GoalType.goal,
    )
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3, comment="1 (high) .. 5 (low)"
    )
    status: Mapped[str] = mapped_column(
        Enum(GoalStatus, name="goal_status_enum"),
        nullable=False,
        default=GoalStatus.active,
        index=True,
    )
    stakeholders: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="JSON array of person ids"
    )
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

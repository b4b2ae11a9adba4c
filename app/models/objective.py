from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Enum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base, new_id, utcnow


class ObjectiveStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    paused = "paused"


class ObjectiveProgress(Base):
    """A longer-running objective whose progress the user reports by hand."""

    __tablename__ = "objective_progress"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    progress_percentage: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="0..100"
    )
    status: Mapped[str] = mapped_column(
        Enum(ObjectiveStatus, name="objective_status_enum"),
        nullable=False,
        default=ObjectiveStatus.active,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

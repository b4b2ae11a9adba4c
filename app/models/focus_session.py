from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base, new_id, utcnow


class SessionType(str, enum.Enum):
    deep_work = "deep_work"
    meetings = "meetings"
    admin = "admin"
    break_ = "break"


class FocusSession(Base):
    """A timed block of work. Open while end_time is NULL."""

    __tablename__ = "focus_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    session_type: Mapped[str] = mapped_column(
        Enum(SessionType, name="session_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SessionType.deep_work,
    )
    interruptions_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def is_open(self) -> bool:
        return self.end_time is None

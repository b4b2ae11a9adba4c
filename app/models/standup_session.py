from datetime import datetime, date
from sqlalchemy import String, Text, DateTime, Date, Enum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base, new_id, utcnow


class StandupMode(str, enum.Enum):
    cadence = "cadence"
    waterfall = "waterfall"


class StandupSession(Base):
    """One day's answers to the fixed reflective standup questions."""

    __tablename__ = "standup_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    session_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    what_did_yesterday: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_not_able_yesterday: Mapped[str | None] = mapped_column(Text, nullable=True)
    who_need_to_do: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_need_to_do: Mapped[str | None] = mapped_column(Text, nullable=True)
    why_not_able: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_doing_today: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_could_stop: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_need_understand: Mapped[str | None] = mapped_column(Text, nullable=True)

    mode: Mapped[str] = mapped_column(
        Enum(StandupMode, name="standup_mode_enum"),
        nullable=False,
        default=StandupMode.cadence,
    )
    checklist_generated: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON of the last accepted proposal payload (items + insights)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

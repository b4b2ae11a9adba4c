from datetime import datetime, date
from sqlalchemy import Integer, String, Float, DateTime, Date, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, new_id, utcnow


class DailyMetric(Base):
    """
    Explicit per-day scores and counters, one row per (user_id, day).

    The four scores are owned by the scoring collaborator; rollups read them
    verbatim. A second write for the same day is merged into this row by
    app.services.daily_metrics, the unique constraint is only the backstop.
    """

    __tablename__ = "daily_metrics"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_metric_user_date"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    day: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)

    focus_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    completion_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    proactiveness_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    alignment_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    tasks_planned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tasks_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    blockers_encountered: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    blockers_resolved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    distractions_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    focus_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_work_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

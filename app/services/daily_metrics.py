"""
Daily metrics: explicit per-day scores, one row per (user, day).

Writes are an explicit read-merge-write: fields supplied by the caller
overwrite the stored value, omitted fields keep it, and a new row starts
from zeros. The invariant holds regardless of the backend's constraints.

Public API
----------
upsert_daily_metric(db, user_id, day, values)   -> DailyMetric
get_daily_metric(db, user_id, day)              -> DailyMetric | None
list_daily_metrics(db, user_id, days, end_date) -> list[DailyMetric]   (newest first)
sync_checklist_counts(db, user_id, day)         -> DailyMetric
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError
from app.models.checklist_item import ChecklistItem, ChecklistStatus
from app.models.daily_metric import DailyMetric
from app.services.standup import latest_session_for_day

logger = logging.getLogger(__name__)

SCORE_FIELDS = ("focus_score", "completion_rate", "proactiveness_score", "alignment_score")
COUNT_FIELDS = (
    "tasks_planned",
    "tasks_completed",
    "blockers_encountered",
    "blockers_resolved",
    "distractions_count",
    "focus_time_minutes",
    "total_work_minutes",
)
METRIC_FIELDS = SCORE_FIELDS + COUNT_FIELDS


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _validate(values: dict[str, Any]) -> None:
    for name in SCORE_FIELDS:
        v = values.get(name)
        if v is not None and not 0 <= v <= 100:
            raise InvalidArgumentError(name, f"{name} must be between 0 and 100", v)
    for name in COUNT_FIELDS:
        v = values.get(name)
        if v is not None and v < 0:
            raise InvalidArgumentError(name, f"{name} must not be negative", v)


def get_daily_metric(db: Session, user_id: str, day: date) -> Optional[DailyMetric]:
    return (
        db.query(DailyMetric)
        .filter(DailyMetric.user_id == user_id, DailyMetric.day == day)
        .first()
    )


def upsert_daily_metric(
    db: Session,
    user_id: str,
    day: Optional[date],
    values: dict[str, Any],
) -> DailyMetric:
    """Merge `values` into the (user, day) row, creating it if needed."""
    target = day or _today()
    supplied = {k: v for k, v in values.items() if k in METRIC_FIELDS and v is not None}
    _validate(supplied)

    metric = get_daily_metric(db, user_id, target)
    if metric is None:
        metric = DailyMetric(user_id=user_id, day=target, **{f: 0 for f in METRIC_FIELDS})
        db.add(metric)
        created = True
    else:
        created = False

    for name, value in supplied.items():
        setattr(metric, name, value)

    db.commit()
    db.refresh(metric)
    logger.info(
        "Daily metric %s for %s (%s)",
        "created" if created else "merged", target, ", ".join(sorted(supplied)) or "no fields",
    )
    return metric


def list_daily_metrics(
    db: Session,
    user_id: str,
    days: int = 7,
    end_date: Optional[date] = None,
) -> list[DailyMetric]:
    """Rows in the `days`-long window ending at end_date, newest first."""
    if days < 1:
        raise InvalidArgumentError("days", "days must be at least 1", days)
    end = end_date or _today()
    start = end - timedelta(days=days - 1)
    return (
        db.query(DailyMetric)
        .filter(
            DailyMetric.user_id == user_id,
            DailyMetric.day >= start,
            DailyMetric.day <= end,
        )
        .order_by(DailyMetric.day.desc())
        .all()
    )


def sync_checklist_counts(db: Session, user_id: str, day: Optional[date] = None) -> DailyMetric:
    """
    Fold the day's checklist into tasks_planned / tasks_completed.
    Scores are left alone; they belong to the scoring collaborator.
    """
    target = day or _today()
    session = latest_session_for_day(db, user_id, target)
    planned = completed = 0
    if session is not None:
        items = (
            db.query(ChecklistItem)
            .filter(ChecklistItem.user_id == user_id, ChecklistItem.session_id == session.id)
            .all()
        )
        planned = len(items)
        completed = sum(1 for i in items if i.status == ChecklistStatus.completed)
    return upsert_daily_metric(
        db, user_id, target, {"tasks_planned": planned, "tasks_completed": completed}
    )

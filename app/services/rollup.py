"""
Metrics rollup - "today", 7-day trend and 28-day heatmap.

Definition
----------
Three independent streams are folded per calendar day:

  * DailyMetric rows - explicit scores owned by the scoring collaborator
  * TaskRecords - bucketed by the date of created_at
  * FocusSessions - bucketed by the date of start_time

current   : the DailyMetric for as_of, verbatim; all zeros when absent.
            No task/session-derived substitute is computed.
weekly    : 7 points ending at as_of, oldest first.
            completion = 100 * completed / total of that day's tasks,
            else DailyMetric.completion_rate, else 0.
calendar  : 28 points ending at as_of, oldest first.
            completion as weekly;
            focus = DailyMetric.focus_score, else min(100, focus minutes / 2), else 0;
            proactiveness = DailyMetric.proactiveness_score, else 0.

Values are never rounded here; rounding is a presentation concern.
A day without tasks goes straight to the metric fallback (no division).

The snapshot is derived and never persisted: every read recomputes it, so
records backfilled after their nominal date are picked up automatically.

Public API
----------
rollup(daily_metrics, tasks, focus_sessions, as_of)  -> MetricsSnapshot   (pure)
get_metrics_snapshot(db, user_id, as_of)             -> MetricsSnapshot
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional, Protocol

from sqlalchemy.orm import Session

from app.db.base import as_utc
from app.models.daily_metric import DailyMetric
from app.models.focus_session import FocusSession
from app.models.task_record import TaskRecord, TaskStatus
from app.services.daily_metrics import COUNT_FIELDS, SCORE_FIELDS


WEEK_DAYS = 7
CALENDAR_DAYS = 28


# ---------------------------------------------------------------------------
# Input shapes (ORM rows satisfy these; tests may pass plain objects)
# ---------------------------------------------------------------------------

class MetricRow(Protocol):
    day: date
    focus_score: float
    completion_rate: float
    proactiveness_score: float
    alignment_score: float


class TaskRow(Protocol):
    status: str
    created_at: datetime


class FocusRow(Protocol):
    start_time: datetime
    duration_minutes: int


# ---------------------------------------------------------------------------
# Result types (plain dataclasses - no ORM, no Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class CurrentMetrics:
    day: date
    focus_score: float = 0.0
    completion_rate: float = 0.0
    proactiveness_score: float = 0.0
    alignment_score: float = 0.0
    tasks_planned: int = 0
    tasks_completed: int = 0
    blockers_encountered: int = 0
    blockers_resolved: int = 0
    distractions_count: int = 0
    focus_time_minutes: int = 0
    total_work_minutes: int = 0
    has_record: bool = False


@dataclass
class WeeklyPoint:
    day: date
    completion_percentage: float


@dataclass
class CalendarPoint:
    day: date
    completion_percentage: float
    focus_percentage: float
    proactiveness_percentage: float


@dataclass
class MetricsSnapshot:
    as_of: date
    current: CurrentMetrics
    weekly: list[WeeklyPoint] = field(default_factory=list)
    calendar: list[CalendarPoint] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _day_of(value: datetime | date) -> date:
    # UTC calendar day, whatever offset the backend hands back
    return as_utc(value).date() if isinstance(value, datetime) else value


def _window(end: date, length: int) -> list[date]:
    return [end - timedelta(days=i) for i in range(length - 1, -1, -1)]  # oldest → newest


@dataclass
class _TaskTally:
    total: int = 0
    completed: int = 0


def _index_metrics(rows: Iterable[MetricRow]) -> dict[date, MetricRow]:
    # (user, day) is unique; if a caller passes duplicates the last one wins.
    return {row.day: row for row in rows}


def _tally_tasks(rows: Iterable[TaskRow]) -> dict[date, _TaskTally]:
    tallies: dict[date, _TaskTally] = defaultdict(_TaskTally)
    for task in rows:
        tally = tallies[_day_of(task.created_at)]
        tally.total += 1
        status = task.status.value if hasattr(task.status, "value") else task.status
        if status == TaskStatus.completed.value:
            tally.completed += 1
    return tallies


def _sum_focus(rows: Iterable[FocusRow]) -> dict[date, int]:
    minutes: dict[date, int] = defaultdict(int)
    for session in rows:
        minutes[_day_of(session.start_time)] += session.duration_minutes or 0
    return minutes


def _completion(day: date, tallies: dict[date, _TaskTally], metrics: dict[date, MetricRow]) -> float:
    tally = tallies.get(day)
    if tally is not None and tally.total > 0:
        return 100.0 * tally.completed / tally.total
    metric = metrics.get(day)
    if metric is not None:
        return float(metric.completion_rate)
    return 0.0


def _focus(day: date, focus_minutes: dict[date, int], metrics: dict[date, MetricRow]) -> float:
    metric = metrics.get(day)
    if metric is not None:
        return float(metric.focus_score)
    total = focus_minutes.get(day, 0)
    if total > 0:
        return min(100.0, total / 2.0)
    return 0.0


def _current(as_of: date, metrics: dict[date, MetricRow]) -> CurrentMetrics:
    metric = metrics.get(as_of)
    if metric is None:
        return CurrentMetrics(day=as_of)
    values = {name: getattr(metric, name, 0) for name in SCORE_FIELDS + COUNT_FIELDS}
    return CurrentMetrics(day=as_of, has_record=True, **values)


# ---------------------------------------------------------------------------
# Public - pure fold
# ---------------------------------------------------------------------------

def rollup(
    daily_metrics: Iterable[MetricRow],
    tasks: Iterable[TaskRow],
    focus_sessions: Iterable[FocusRow],
    as_of: date,
) -> MetricsSnapshot:
    """Fold the three streams into a snapshot for the windows ending at as_of."""
    metrics = _index_metrics(daily_metrics)
    tallies = _tally_tasks(tasks)
    focus_minutes = _sum_focus(focus_sessions)

    weekly = [
        WeeklyPoint(day=d, completion_percentage=_completion(d, tallies, metrics))
        for d in _window(as_of, WEEK_DAYS)
    ]

    calendar = []
    for d in _window(as_of, CALENDAR_DAYS):
        metric = metrics.get(d)
        calendar.append(CalendarPoint(
            day=d,
            completion_percentage=_completion(d, tallies, metrics),
            focus_percentage=_focus(d, focus_minutes, metrics),
            proactiveness_percentage=float(metric.proactiveness_score) if metric is not None else 0.0,
        ))

    return MetricsSnapshot(
        as_of=as_of,
        current=_current(as_of, metrics),
        weekly=weekly,
        calendar=calendar,
    )


# ---------------------------------------------------------------------------
# Public - load the window and fold
# ---------------------------------------------------------------------------

def get_metrics_snapshot(
    db: Session,
    user_id: str,
    as_of: Optional[date] = None,
) -> MetricsSnapshot:
    """Read the 28-day window for one user and return the rolled-up snapshot."""
    end = as_of or _today()
    start = end - timedelta(days=CALENDAR_DAYS - 1)
    lower = datetime.combine(start, time.min)
    upper = datetime.combine(end + timedelta(days=1), time.min)

    metrics = (
        db.query(DailyMetric)
        .filter(DailyMetric.user_id == user_id, DailyMetric.day >= start, DailyMetric.day <= end)
        .all()
    )
    tasks = (
        db.query(TaskRecord)
        .filter(
            TaskRecord.user_id == user_id,
            TaskRecord.created_at >= lower,
            TaskRecord.created_at < upper,
        )
        .all()
    )
    sessions = (
        db.query(FocusSession)
        .filter(
            FocusSession.user_id == user_id,
            FocusSession.start_time >= lower,
            FocusSession.start_time < upper,
        )
        .all()
    )
    return rollup(metrics, tasks, sessions, end)

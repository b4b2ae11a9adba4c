"""
Metrics router.

GET /metrics/snapshot - today's metric, 7-day completion trend, 28-day heatmap
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.schemas.common import ERROR_RESPONSES
from app.schemas.metrics import (
    CalendarPointResponse,
    CurrentMetricsResponse,
    MetricsSnapshotResponse,
    WeeklyPointResponse,
)
from app.services.daily_metrics import METRIC_FIELDS
from app.services.rollup import CurrentMetrics, MetricsSnapshot, get_metrics_snapshot

router = APIRouter(prefix="/metrics", tags=["metrics"], responses=ERROR_RESPONSES)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _current_to_response(c: CurrentMetrics) -> CurrentMetricsResponse:
    return CurrentMetricsResponse(
        date=str(c.day),
        has_record=c.has_record,
        **{name: getattr(c, name) for name in METRIC_FIELDS},
    )


def _snapshot_to_response(s: MetricsSnapshot) -> MetricsSnapshotResponse:
    return MetricsSnapshotResponse(
        as_of=str(s.as_of),
        current=_current_to_response(s.current),
        weekly=[
            WeeklyPointResponse(date=str(p.day), completion_percentage=p.completion_percentage)
            for p in s.weekly
        ],
        calendar=[
            CalendarPointResponse(
                date=str(p.day),
                completion_percentage=p.completion_percentage,
                focus_percentage=p.focus_percentage,
                proactiveness_percentage=p.proactiveness_percentage,
            )
            for p in s.calendar
        ],
    )


# ---------------------------------------------------------------------------
# GET /metrics/snapshot
# ---------------------------------------------------------------------------

@router.get(
    "/snapshot",
    response_model=MetricsSnapshotResponse,
    summary="Metrics snapshot: current day, weekly trend, monthly calendar",
    responses={
        200: {"description": "Snapshot for the windows ending on as_of."},
    },
)
def metrics_snapshot(
    as_of: Optional[date] = Query(
        default=None,
        description="Last day (inclusive) of both windows. Defaults to today (UTC).",
        examples=["2026-10-19"],
    ),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Fold daily metrics, task records and focus sessions into:

    ### current
    The daily metric recorded for `as_of`, or zeros (`has_record=false`).

    ### weekly
    Seven points, oldest first. Completion is the share of that day's tasks
    that are completed; days without tasks use the recorded completion rate.

    ### calendar
    Twenty-eight points, oldest first, with completion as above, focus
    (recorded score, else half the focus minutes capped at 100) and
    proactiveness (recorded score, else 0).

    Nothing is cached: tasks or sessions backfilled for earlier days show up
    on the next read.
    """
    return _snapshot_to_response(get_metrics_snapshot(db, user_id, as_of=as_of))

"""
Analytics router - the three streams the metrics rollup reads, plus objectives.

GET  /analytics/daily-metrics - rows of the last `days` days, newest first
POST /analytics/daily-metrics - merge scores/counters into a day
POST /analytics/daily-metrics/sync-checklist - fold the day's checklist into the counters
GET  /analytics/tasks - task records (date range, status)
POST /analytics/tasks
PATCH /analytics/tasks/{task_id}
DELETE /analytics/tasks/{task_id}
GET  /analytics/focus-sessions
POST /analytics/focus-sessions - start a session
POST /analytics/focus-sessions/{id}/end - close a session
GET  /analytics/objectives - objective progress, newest first
POST /analytics/objectives
PATCH /analytics/objectives/{objective_id}
DELETE /analytics/objectives/{objective_id}
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.schemas.common import ERROR_RESPONSES
from app.models.daily_metric import DailyMetric
from app.models.focus_session import FocusSession
from app.models.objective import ObjectiveProgress, ObjectiveStatus
from app.models.task_record import TaskRecord, TaskStatus
from app.schemas.analytics import (
    DailyMetricListResponse,
    DailyMetricResponse,
    DailyMetricUpsert,
    FocusSessionEnd,
    FocusSessionListResponse,
    FocusSessionResponse,
    FocusSessionStart,
    ObjectiveCreate,
    ObjectiveListResponse,
    ObjectiveResponse,
    ObjectiveUpdate,
    SyncChecklistRequest,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from app.services.daily_metrics import (
    METRIC_FIELDS,
    list_daily_metrics,
    sync_checklist_counts,
    upsert_daily_metric,
)
from app.services.focus_sessions import end_focus_session, list_focus_sessions, start_focus_session
from app.services.objectives import (
    create_objective,
    delete_objective,
    list_objectives,
    update_objective,
)
from app.services.task_records import NewTask, create_task, delete_task, list_tasks, update_task

router = APIRouter(prefix="/analytics", tags=["analytics"], responses=ERROR_RESPONSES)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _metric_to_response(m: DailyMetric) -> DailyMetricResponse:
    return DailyMetricResponse(
        id=m.id,
        date=str(m.day),
        **{name: getattr(m, name) for name in METRIC_FIELDS},
    )


def _task_to_response(t: TaskRecord) -> TaskResponse:
    return TaskResponse(
        id=t.id,
        title=t.title,
        description=t.description,
        priority=_ev(t.priority),
        estimated_minutes=t.estimated_minutes,
        actual_minutes=t.actual_minutes,
        status=_ev(t.status),
        due_date=str(t.due_date) if t.due_date else None,
        completed_at=_iso(t.completed_at),
        created_at=t.created_at.isoformat(),
    )


def _focus_to_response(fs: FocusSession) -> FocusSessionResponse:
    return FocusSessionResponse(
        id=fs.id,
        start_time=fs.start_time.isoformat(),
        end_time=_iso(fs.end_time),
        duration_minutes=fs.duration_minutes,
        session_type=_ev(fs.session_type),
        interruptions_count=fs.interruptions_count,
        notes=fs.notes,
        is_open=fs.is_open,
    )


def _objective_to_response(o: ObjectiveProgress) -> ObjectiveResponse:
    return ObjectiveResponse(
        id=o.id,
        title=o.title,
        description=o.description,
        target_date=str(o.target_date) if o.target_date else None,
        progress_percentage=o.progress_percentage,
        status=_ev(o.status),
        created_at=o.created_at.isoformat(),
        updated_at=o.updated_at.isoformat(),
    )


# ---------------------------------------------------------------------------
# Daily metrics
# ---------------------------------------------------------------------------

@router.get("/daily-metrics", response_model=DailyMetricListResponse, summary="Recent daily metrics")
def get_daily_metrics(
    days: int = Query(default=7, ge=1, le=366),
    end_date: Optional[date] = Query(default=None, description="Defaults to today (UTC)."),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_daily_metrics(db, user_id, days=days, end_date=end_date)
    return DailyMetricListResponse(total=len(rows), items=[_metric_to_response(m) for m in rows])


@router.post("/daily-metrics", response_model=DailyMetricResponse, summary="Upsert a daily metric")
def post_daily_metric(
    payload: DailyMetricUpsert,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    One row per (user, day). Supplied fields overwrite, omitted fields keep
    their stored value; a day seen for the first time starts from zeros.
    Scores must be within 0..100 and counters non-negative.
    """
    values = payload.model_dump(exclude={"day"}, exclude_none=True)
    metric = upsert_daily_metric(db, user_id, payload.day, values)
    return _metric_to_response(metric)


@router.post(
    "/daily-metrics/sync-checklist",
    response_model=DailyMetricResponse,
    summary="Copy checklist counts into the day's metric",
)
def post_sync_checklist(
    payload: SyncChecklistRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _metric_to_response(sync_checklist_counts(db, user_id, payload.day))


# ---------------------------------------------------------------------------
# Task records
# ---------------------------------------------------------------------------

@router.get("/tasks", response_model=TaskListResponse, summary="List task records")
def get_tasks(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    task_status: Optional[TaskStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_tasks(db, user_id, start_date=start_date, end_date=end_date, status=task_status)
    return TaskListResponse(total=len(rows), items=[_task_to_response(t) for t in rows])


@router.post(
    "/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a task",
)
def post_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    task = create_task(db, user_id, NewTask(**payload.model_dump()))
    return _task_to_response(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse, summary="Update a task")
def patch_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """completed_at is stamped the first time the task becomes completed."""
    task = update_task(db, user_id, task_id, payload.model_dump(exclude_unset=True))
    return _task_to_response(task)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
def remove_task(
    task_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    delete_task(db, user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Focus sessions
# ---------------------------------------------------------------------------

@router.get("/focus-sessions", response_model=FocusSessionListResponse, summary="List focus sessions")
def get_focus_sessions(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_focus_sessions(db, user_id, start_date=start_date, end_date=end_date)
    return FocusSessionListResponse(total=len(rows), items=[_focus_to_response(f) for f in rows])


@router.post(
    "/focus-sessions",
    response_model=FocusSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a focus session",
)
def post_focus_session(
    payload: FocusSessionStart,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    fs = start_focus_session(db, user_id, **payload.model_dump())
    return _focus_to_response(fs)


@router.post(
    "/focus-sessions/{session_id}/end",
    response_model=FocusSessionResponse,
    summary="End a focus session",
)
def post_end_focus_session(
    session_id: str,
    payload: FocusSessionEnd,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Without `end_time` or `duration_minutes` the session ends now. With only
    `end_time`, the duration is derived in whole minutes.
    """
    fs = end_focus_session(db, user_id, session_id, **payload.model_dump())
    return _focus_to_response(fs)


# ---------------------------------------------------------------------------
# Objectives
# ---------------------------------------------------------------------------

@router.get("/objectives", response_model=ObjectiveListResponse, summary="List objectives")
def get_objectives(
    objective_status: Optional[ObjectiveStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_objectives(db, user_id, status=objective_status)
    return ObjectiveListResponse(total=len(rows), items=[_objective_to_response(o) for o in rows])


@router.post(
    "/objectives",
    response_model=ObjectiveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an objective",
)
def post_objective(
    payload: ObjectiveCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    objective = create_objective(db, user_id, **payload.model_dump())
    return _objective_to_response(objective)


@router.patch("/objectives/{objective_id}", response_model=ObjectiveResponse, summary="Update an objective")
def patch_objective(
    objective_id: str,
    payload: ObjectiveUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    objective = update_objective(db, user_id, objective_id, payload.model_dump(exclude_unset=True))
    return _objective_to_response(objective)


@router.delete(
    "/objectives/{objective_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an objective",
)
def remove_objective(
    objective_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    delete_objective(db, user_id, objective_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

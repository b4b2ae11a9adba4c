"""
Ad-hoc task records, tracked independently of the standup flow.

completed_at is stamped automatically, exactly once, on the first
transition into `completed`; later edits never move it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.db.base import as_utc
from app.models.task_record import TaskPriority, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {
    "title", "description", "priority", "estimated_minutes",
    "actual_minutes", "due_date", "status",
}


@dataclass
class NewTask:
    """Lightweight DTO so the service layer stays schema-agnostic."""
    title: str
    description: Optional[str] = None
    priority: str = TaskPriority.medium
    estimated_minutes: Optional[int] = None
    actual_minutes: Optional[int] = None
    due_date: Optional[date] = None
    status: str = TaskStatus.pending


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _check(field: str, value: Any, enum_cls) -> str:
    allowed = {m.value for m in enum_cls}
    if _ev(value) not in allowed:
        raise InvalidArgumentError(field, f"{field} must be one of {sorted(allowed)}", _ev(value))
    return _ev(value)


def _check_minutes(field: str, value: Optional[int]) -> None:
    if value is not None and value < 0:
        raise InvalidArgumentError(field, f"{field} must not be negative", value)


def get_task(db: Session, user_id: str, task_id: str) -> TaskRecord:
    task = db.query(TaskRecord).filter(TaskRecord.id == task_id, TaskRecord.user_id == user_id).first()
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def create_task(
    db: Session,
    user_id: str,
    new: NewTask,
    created_at: Optional[datetime] = None,
) -> TaskRecord:
    """created_at may be supplied for backfilled records."""
    priority = _check("priority", new.priority, TaskPriority)
    status = _check("status", new.status, TaskStatus)
    _check_minutes("estimated_minutes", new.estimated_minutes)
    _check_minutes("actual_minutes", new.actual_minutes)

    task = TaskRecord(
        user_id=user_id,
        title=new.title,
        description=new.description,
        priority=priority,
        estimated_minutes=new.estimated_minutes,
        actual_minutes=new.actual_minutes,
        due_date=new.due_date,
        status=status,
    )
    if created_at is not None:
        task.created_at = as_utc(created_at)
    if status == TaskStatus.completed:
        task.completed_at = _now()
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def list_tasks(
    db: Session,
    user_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
) -> list[TaskRecord]:
    """Tasks by creation date (inclusive bounds), newest first."""
    q = db.query(TaskRecord).filter(TaskRecord.user_id == user_id)
    if start_date is not None:
        q = q.filter(TaskRecord.created_at >= datetime.combine(start_date, time.min))
    if end_date is not None:
        q = q.filter(TaskRecord.created_at < datetime.combine(end_date + timedelta(days=1), time.min))
    if status:
        q = q.filter(TaskRecord.status == _check("status", status, TaskStatus))
    return q.order_by(TaskRecord.created_at.desc()).all()


def update_task(db: Session, user_id: str, task_id: str, changes: dict[str, Any]) -> TaskRecord:
    """Partial update; None values and unknown keys are ignored."""
    task = get_task(db, user_id, task_id)
    was_completed = task.status == TaskStatus.completed

    for field, value in changes.items():
        if field not in _EDITABLE_FIELDS or value is None:
            continue
        if field == "priority":
            value = _check("priority", value, TaskPriority)
        elif field == "status":
            value = _check("status", value, TaskStatus)
        elif field in ("estimated_minutes", "actual_minutes"):
            _check_minutes(field, value)
        setattr(task, field, value)

    if not was_completed and _ev(task.status) == TaskStatus.completed and task.completed_at is None:
        task.completed_at = _now()
        logger.info("Task %s completed", task_id)

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user_id: str, task_id: str) -> None:
    task = get_task(db, user_id, task_id)
    db.delete(task)
    db.commit()

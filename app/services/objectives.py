"""
Objective progress: longer-running objectives with a hand-reported percentage.

Public API
----------
list_objectives(db, user_id, status)                  -> list[ObjectiveProgress]  (newest first)
get_objective(db, user_id, objective_id)              -> ObjectiveProgress        (NotFoundError)
create_objective(db, user_id, title, ...)             -> ObjectiveProgress
update_objective(db, user_id, objective_id, changes)  -> ObjectiveProgress
delete_objective(db, user_id, objective_id)           -> None
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.objective import ObjectiveProgress, ObjectiveStatus

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"title", "description", "target_date", "progress_percentage", "status"}


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _check_progress(value: int) -> None:
    if not 0 <= value <= 100:
        raise InvalidArgumentError(
            "progress_percentage", "progress_percentage must be between 0 and 100", value
        )


def _check_status(value: str) -> str:
    allowed = {s.value for s in ObjectiveStatus}
    if _ev(value) not in allowed:
        raise InvalidArgumentError("status", f"status must be one of {sorted(allowed)}", _ev(value))
    return _ev(value)


def _check_title(value: str) -> str:
    title = value.strip() if isinstance(value, str) else ""
    if not title:
        raise InvalidArgumentError("title", "title is required", value)
    return title


def list_objectives(
    db: Session, user_id: str, status: Optional[str] = None
) -> list[ObjectiveProgress]:
    q = db.query(ObjectiveProgress).filter(ObjectiveProgress.user_id == user_id)
    if status:
        q = q.filter(ObjectiveProgress.status == _check_status(status))
    return q.order_by(ObjectiveProgress.created_at.desc()).all()


def get_objective(db: Session, user_id: str, objective_id: str) -> ObjectiveProgress:
    objective = (
        db.query(ObjectiveProgress)
        .filter(ObjectiveProgress.id == objective_id, ObjectiveProgress.user_id == user_id)
        .first()
    )
    if objective is None:
        raise NotFoundError("Objective", objective_id)
    return objective


def create_objective(
    db: Session,
    user_id: str,
    title: str,
    description: Optional[str] = None,
    target_date: Optional[date] = None,
    progress_percentage: int = 0,
    status: str = ObjectiveStatus.active,
) -> ObjectiveProgress:
    title = _check_title(title)
    _check_progress(progress_percentage)
    objective = ObjectiveProgress(
        user_id=user_id,
        title=title,
        description=description,
        target_date=target_date,
        progress_percentage=progress_percentage,
        status=_check_status(status),
    )
    db.add(objective)
    db.commit()
    db.refresh(objective)
    logger.info("Objective %s created for user %s", objective.id, user_id)
    return objective


def update_objective(
    db: Session, user_id: str, objective_id: str, changes: dict[str, Any]
) -> ObjectiveProgress:
    """Partial update; None values and keys outside the editable set are ignored."""
    objective = get_objective(db, user_id, objective_id)

    for field, value in changes.items():
        if field not in _EDITABLE_FIELDS or value is None:
            continue
        if field == "title":
            value = _check_title(value)
        elif field == "progress_percentage":
            _check_progress(value)
        elif field == "status":
            value = _check_status(value)
        setattr(objective, field, value)

    db.commit()
    db.refresh(objective)
    return objective


def delete_objective(db: Session, user_id: str, objective_id: str) -> None:
    objective = get_objective(db, user_id, objective_id)
    db.delete(objective)
    db.commit()
    logger.info("Objective %s deleted", objective_id)

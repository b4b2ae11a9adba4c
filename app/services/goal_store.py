"""
Goal store: the read path feeding goal alignment, plus goal editing.

Public API
----------
get_active_goals(db, user_id)                   -> list[Goal]   (priority ASC, newest first)
list_goals(db, user_id, status)                 -> list[Goal]
get_goal(db, user_id, goal_id)                  -> Goal         (NotFoundError)
goals_by_id(db, user_id, goal_ids)              -> dict[str, Goal]
create_goal(db, user_id, ...)                   -> Goal
update_goal(db, user_id, goal_id, changes)      -> Goal
archive_goal(db, user_id, goal_id)              -> Goal         (never deleted)
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.goal import Goal, GoalStatus, GoalType

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"title", "description", "type", "priority", "status", "stakeholders", "deadline"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def encode_stakeholders(people: Optional[Iterable[str]]) -> Optional[str]:
    if people is None:
        return None
    # set semantics, stable order for storage
    return json.dumps(sorted(set(people)))


def decode_stakeholders(text: Optional[str]) -> list[str]:
    if not text:
        return []
    try:
        result = json.loads(text)
        return result if isinstance(result, list) else []
    except (ValueError, TypeError):
        return []


def _check_priority(priority: int) -> None:
    if not 1 <= priority <= 5:
        raise InvalidArgumentError("priority", "priority must be between 1 and 5", priority)


def _check_enum(field: str, value: str, enum_cls) -> None:
    allowed = {m.value for m in enum_cls}
    if _ev(value) not in allowed:
        raise InvalidArgumentError(field, f"{field} must be one of {sorted(allowed)}", _ev(value))


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------

def get_active_goals(db: Session, user_id: str) -> list[Goal]:
    """Active goals in alignment order: priority ASC, then most recent first."""
    return (
        db.query(Goal)
        .filter(Goal.user_id == user_id, Goal.status == GoalStatus.active)
        .order_by(Goal.priority.asc(), Goal.created_at.desc())
        .all()
    )


def list_goals(db: Session, user_id: str, status: Optional[str] = None) -> list[Goal]:
    q = db.query(Goal).filter(Goal.user_id == user_id)
    if status:
        _check_enum("status", status, GoalStatus)
        q = q.filter(Goal.status == _ev(status))
    return q.order_by(Goal.priority.asc(), Goal.created_at.desc()).all()


def get_goal(db: Session, user_id: str, goal_id: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id).first()
    if goal is None:
        raise NotFoundError("Goal", goal_id)
    return goal


def goals_by_id(db: Session, user_id: str, goal_ids: Iterable[Optional[str]]) -> dict[str, Goal]:
    """Goals of this user among goal_ids, keyed by id. Unknown ids are left out."""
    wanted = {g for g in goal_ids if g}
    if not wanted:
        return {}
    rows = db.query(Goal).filter(Goal.user_id == user_id, Goal.id.in_(wanted)).all()
    return {g.id: g for g in rows}


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------

def create_goal(
    db: Session,
    user_id: str,
    title: str,
    description: Optional[str] = None,
    type: str = GoalType.goal,
    priority: int = 3,
    status: str = GoalStatus.active,
    stakeholders: Optional[Iterable[str]] = None,
    deadline: Optional[date] = None,
) -> Goal:
    _check_priority(priority)
    _check_enum("type", type, GoalType)
    _check_enum("status", status, GoalStatus)

    goal = Goal(
        user_id=user_id,
        title=title,
        description=description,
        type=_ev(type),
        priority=priority,
        status=_ev(status),
        stakeholders=encode_stakeholders(stakeholders),
        deadline=deadline,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("Goal %s created for user %s", goal.id, user_id)
    return goal


def update_goal(db: Session, user_id: str, goal_id: str, changes: dict[str, Any]) -> Goal:
    """Apply a partial update. Keys outside the editable set are ignored."""
    goal = get_goal(db, user_id, goal_id)

    for field, value in changes.items():
        if field not in _EDITABLE_FIELDS or value is None:
            continue
        if field == "priority":
            _check_priority(value)
        elif field == "type":
            _check_enum("type", value, GoalType)
            value = _ev(value)
        elif field == "status":
            _check_enum("status", value, GoalStatus)
            value = _ev(value)
        elif field == "stakeholders":
            value = encode_stakeholders(value)
        setattr(goal, field, value)

    db.commit()
    db.refresh(goal)
    return goal


def archive_goal(db: Session, user_id: str, goal_id: str) -> Goal:
    goal = get_goal(db, user_id, goal_id)
    goal.status = GoalStatus.archived
    db.commit()
    db.refresh(goal)
    logger.info("Goal %s archived", goal_id)
    return goal

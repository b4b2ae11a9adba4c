"""
Goals router.

GET   /goals - list the caller's goals (optional status filter)
GET   /goals/active - active goals, most urgent first
POST  /goals - create a goal
PATCH /goals/{goal_id} - partial update
POST  /goals/{goal_id}/archive
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.schemas.common import ERROR_RESPONSES
from app.models.goal import Goal, GoalStatus
from app.schemas.goal import GoalCreate, GoalListResponse, GoalResponse, GoalUpdate
from app.services.goal_store import (
    archive_goal,
    create_goal,
    decode_stakeholders,
    get_active_goals,
    list_goals,
    update_goal,
)

router = APIRouter(prefix="/goals", tags=["goals"], responses=ERROR_RESPONSES)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _goal_to_response(goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        type=_ev(goal.type),
        priority=goal.priority,
        status=_ev(goal.status),
        stakeholders=decode_stakeholders(goal.stakeholders),
        deadline=str(goal.deadline) if goal.deadline else None,
        created_at=goal.created_at.isoformat(),
        updated_at=goal.updated_at.isoformat(),
    )


def _list_response(goals: list[Goal]) -> GoalListResponse:
    return GoalListResponse(total=len(goals), items=[_goal_to_response(g) for g in goals])


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@router.get("", response_model=GoalListResponse, summary="List goals")
def get_goals(
    goal_status: Optional[GoalStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _list_response(list_goals(db, user_id, status=goal_status))


@router.get("/active", response_model=GoalListResponse, summary="Active goals")
def get_active(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Active goals ordered by priority (1 first), newest first within a priority."""
    return _list_response(get_active_goals(db, user_id))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a goal",
)
def post_goal(
    payload: GoalCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    goal = create_goal(
        db,
        user_id,
        title=payload.title,
        description=payload.description,
        type=payload.type,
        priority=payload.priority,
        status=payload.status,
        stakeholders=payload.stakeholders,
        deadline=payload.deadline,
    )
    return _goal_to_response(goal)


@router.patch("/{goal_id}", response_model=GoalResponse, summary="Update a goal")
def patch_goal(
    goal_id: str,
    payload: GoalUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    goal = update_goal(db, user_id, goal_id, payload.model_dump(exclude_unset=True))
    return _goal_to_response(goal)


@router.post("/{goal_id}/archive", response_model=GoalResponse, summary="Archive a goal")
def post_archive(
    goal_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _goal_to_response(archive_goal(db, user_id, goal_id))

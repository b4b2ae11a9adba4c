"""
Checklist router.

GET  /checklist - items of one session (by id, or the day's latest)
POST /checklist/generate - persist proposed items for a session
POST /checklist/{item_id}/check-ins - report progress on an item
GET  /checklist/{item_id}/check-ins - check-in history, oldest first
POST /checklist/{item_id}/strike - one missed check-in (scheduler)
PUT  /checklist/{item_id}/clarity - set the item's clarity score
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.schemas.common import ERROR_RESPONSES
from app.models.check_in import CheckIn
from app.models.checklist_item import ChecklistItem
from app.models.goal import Goal
from app.schemas.checklist import (
    CheckInListResponse,
    CheckInRequest,
    CheckInResponse,
    ChecklistItemResponse,
    ChecklistListResponse,
    ClarityRequest,
    GenerateRequest,
    GenerateResponse,
)
from app.services.checklist_lifecycle import (
    apply_strike,
    list_check_ins,
    list_items,
    record_check_in,
    set_clarity_score,
)
from app.services.goal_store import get_active_goals, goals_by_id
from app.services.orchestrator import generate
from app.services.proposals import ProposedItems, parse_proposals, proposals_or_fallback
from app.services.standup import latest_session_for_day

router = APIRouter(prefix="/checklist", tags=["checklist"], responses=ERROR_RESPONSES)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _item_to_response(item: ChecklistItem, goals: dict[str, Goal]) -> ChecklistItemResponse:
    goal = goals.get(item.goal_id) if item.goal_id else None
    return ChecklistItemResponse(
        id=item.id,
        session_id=item.session_id,
        title=item.title,
        description=item.description,
        estimated_minutes=item.estimated_minutes,
        actual_minutes=item.actual_minutes,
        priority=item.priority,
        status=_ev(item.status),
        strikes=item.strikes,
        max_strikes=item.max_strikes,
        clarity_score=item.clarity_score,
        goal_id=item.goal_id,
        goal_title=goal.title if goal is not None else None,
        goal_type=_ev(goal.type) if goal is not None else None,
        assigned_by=item.assigned_by,
        assigned_to=item.assigned_to,
        due_date=str(item.due_date) if item.due_date else None,
        completed_at=_iso(item.completed_at),
        created_at=item.created_at.isoformat(),
    )


def _items_to_response(
    db: Session, user_id: str, items: list[ChecklistItem]
) -> list[ChecklistItemResponse]:
    goals = goals_by_id(db, user_id, (i.goal_id for i in items))
    return [_item_to_response(i, goals) for i in items]


def _check_in_to_response(ci: CheckIn) -> CheckInResponse:
    return CheckInResponse(
        id=ci.id,
        checklist_item_id=ci.checklist_item_id,
        status=ci.status,
        notes=ci.notes,
        blockers=ci.blockers,
        time_spent_minutes=ci.time_spent_minutes,
        progress_percentage=ci.progress_percentage,
        created_at=ci.created_at.isoformat(),
    )


# ---------------------------------------------------------------------------
# GET /checklist
# ---------------------------------------------------------------------------

@router.get("", response_model=ChecklistListResponse, summary="Checklist of a session")
def get_checklist(
    session_id: Optional[str] = Query(default=None),
    day: Optional[date] = Query(
        default=None,
        alias="date",
        description="Use the latest standup of this day. Defaults to today (UTC).",
    ),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Items ordered by priority, then generation order. When `session_id` is
    omitted the latest standup of `date` is used; a day without a standup
    has an empty checklist.
    """
    if session_id is None:
        session = latest_session_for_day(db, user_id, day or datetime.now(tz=timezone.utc).date())
        if session is None:
            return ChecklistListResponse(total=0, items=[])
        session_id = session.id

    items = list_items(db, user_id, session_id)
    return ChecklistListResponse(total=len(items), items=_items_to_response(db, user_id, items))


# ---------------------------------------------------------------------------
# POST /checklist/generate
# ---------------------------------------------------------------------------

@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate checklist items for a standup session",
    responses={
        201: {"description": "Items persisted, in input order."},
        404: {"description": "Session not found for this user."},
    },
)
def post_generate(
    payload: GenerateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Link each proposed item to the first active goal its alignment labels
    hit and persist it as a pending item. All items are written or none are.

    `raw_response` is parsed here; text that does not parse falls back to a
    single "Review and prioritize today's tasks" item.
    """
    if payload.raw_response is not None:
        proposals = proposals_or_fallback(parse_proposals(payload.raw_response))
    else:
        proposals = ProposedItems(items=payload.items or [])

    items = generate(
        db,
        user_id,
        payload.session_id,
        get_active_goals(db, user_id),
        proposals.items,
        mode=payload.mode,
    )
    return GenerateResponse(
        session_id=payload.session_id,
        mode=_ev(payload.mode),
        insights=proposals.insights,
        items=_items_to_response(db, user_id, items),
    )


# ---------------------------------------------------------------------------
# Check-ins
# ---------------------------------------------------------------------------

@router.post(
    "/{item_id}/check-ins",
    response_model=CheckInResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check in on an item",
)
def post_check_in(
    item_id: str,
    payload: CheckInRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """The item's status becomes the reported status."""
    check_in = record_check_in(
        db,
        user_id,
        item_id,
        status=payload.status,
        progress_percentage=payload.progress_percentage,
        notes=payload.notes,
        blockers=payload.blockers,
        time_spent_minutes=payload.time_spent_minutes,
    )
    return _check_in_to_response(check_in)


@router.get("/{item_id}/check-ins", response_model=CheckInListResponse, summary="Check-in history")
def get_check_ins(
    item_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_check_ins(db, user_id, item_id)
    return CheckInListResponse(total=len(rows), items=[_check_in_to_response(c) for c in rows])


# ---------------------------------------------------------------------------
# Strikes & clarity
# ---------------------------------------------------------------------------

@router.post("/{item_id}/strike", response_model=ChecklistItemResponse, summary="Record a strike")
def post_strike(
    item_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = apply_strike(db, user_id, item_id)
    return _items_to_response(db, user_id, [item])[0]


@router.put("/{item_id}/clarity", response_model=ChecklistItemResponse, summary="Set clarity score")
def put_clarity(
    item_id: str,
    payload: ClarityRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = set_clarity_score(db, user_id, item_id, payload.clarity_score)
    return _items_to_response(db, user_id, [item])[0]

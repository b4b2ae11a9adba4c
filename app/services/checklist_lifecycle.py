"""
Checklist item lifecycle: check-ins, strikes and clarity scores.

States
------
  pending ──► in_progress ──► completed          (terminal success)
  pending | in_progress ──► blocked              (terminal unless reopened by a check-in)
  pending | in_progress ──► at_risk              (recoverable)

Check-ins assign the reported status directly; nothing is inferred from
notes or blockers text. Strikes come from an external scheduler and push an
item to at_risk when they reach max_strikes.

Every mutating call checks ownership: an item belonging to another user is
reported exactly like a missing one (NotFoundError). Validation happens
before any write, so a rejected call leaves the item untouched.

Public API
----------
get_item(db, user_id, item_id)                        -> ChecklistItem
list_items(db, user_id, session_id)                   -> list[ChecklistItem]
record_check_in(db, user_id, item_id, status, ...)    -> CheckIn
list_check_ins(db, user_id, item_id)                  -> list[CheckIn]
apply_strike(db, user_id, item_id)                    -> ChecklistItem
set_clarity_score(db, user_id, item_id, score)        -> ChecklistItem
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.check_in import CheckIn
from app.models.checklist_item import ChecklistItem, ChecklistStatus

logger = logging.getLogger(__name__)

CLARITY_MIN = 1
CLARITY_MAX = 10

# Strikes never move an item out of these.
_STRIKE_EXEMPT = {ChecklistStatus.completed, ChecklistStatus.blocked}


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def parse_status(status: str) -> ChecklistStatus:
    try:
        return ChecklistStatus(_ev(status))
    except ValueError:
        raise InvalidArgumentError(
            "status",
            f"status must be one of {[s.value for s in ChecklistStatus]}",
            _ev(status),
        ) from None


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def _mark_completed(item: ChecklistItem, new_status: ChecklistStatus) -> None:
    """Stamp completed_at once, on the first transition into completed."""
    if new_status == ChecklistStatus.completed and item.completed_at is None:
        item.completed_at = _now()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_item(db: Session, user_id: str, item_id: str) -> ChecklistItem:
    item = (
        db.query(ChecklistItem)
        .filter(ChecklistItem.id == item_id, ChecklistItem.user_id == user_id)
        .first()
    )
    if item is None:
        raise NotFoundError("ChecklistItem", item_id)
    return item


def list_items(db: Session, user_id: str, session_id: str) -> list[ChecklistItem]:
    """Items of one session, most urgent first, then in generation order."""
    return (
        db.query(ChecklistItem)
        .filter(ChecklistItem.user_id == user_id, ChecklistItem.session_id == session_id)
        .order_by(ChecklistItem.priority.asc(), ChecklistItem.created_at.asc())
        .all()
    )


def list_check_ins(db: Session, user_id: str, item_id: str) -> list[CheckIn]:
    get_item(db, user_id, item_id)
    return (
        db.query(CheckIn)
        .filter(CheckIn.checklist_item_id == item_id)
        .order_by(CheckIn.created_at.asc())
        .all()
    )


# ---------------------------------------------------------------------------
# Check-ins
# ---------------------------------------------------------------------------

def record_check_in(
    db: Session,
    user_id: str,
    item_id: str,
    status: str,
    progress_percentage: int = 0,
    notes: Optional[str] = None,
    blockers: Optional[str] = None,
    time_spent_minutes: Optional[int] = None,
) -> CheckIn:
    """
    Append a CheckIn and set the item's status to the reported one.
    Both writes land in a single commit.
    """
    new_status = parse_status(status)
    if not 0 <= progress_percentage <= 100:
        raise InvalidArgumentError(
            "progress_percentage",
            "progress_percentage must be between 0 and 100",
            progress_percentage,
        )
    if time_spent_minutes is not None and time_spent_minutes < 0:
        raise InvalidArgumentError(
            "time_spent_minutes", "time_spent_minutes must not be negative", time_spent_minutes
        )

    item = get_item(db, user_id, item_id)
    previous = _ev(item.status)

    check_in = CheckIn(
        checklist_item_id=item.id,
        user_id=user_id,
        status=new_status.value,
        notes=notes,
        blockers=blockers,
        time_spent_minutes=time_spent_minutes,
        progress_percentage=progress_percentage,
    )
    db.add(check_in)

    item.status = new_status
    _mark_completed(item, new_status)
    if time_spent_minutes is not None:
        item.actual_minutes = (item.actual_minutes or 0) + time_spent_minutes

    _commit(db)
    db.refresh(check_in)
    logger.info(
        "Check-in on item %s: %s -> %s (%d%%)",
        item_id, previous, new_status.value, progress_percentage,
    )
    return check_in


# ---------------------------------------------------------------------------
# Strikes
# ---------------------------------------------------------------------------

def apply_strike(db: Session, user_id: str, item_id: str) -> ChecklistItem:
    """
    Add one strike, capped at max_strikes. Reaching the cap forces at_risk
    unless the item is already completed or blocked. At the cap this is a no-op.
    """
    item = get_item(db, user_id, item_id)

    if item.strikes >= item.max_strikes:
        logger.debug("Item %s already at %d/%d strikes", item_id, item.strikes, item.max_strikes)
        return item

    item.strikes += 1
    if item.strikes >= item.max_strikes and ChecklistStatus(_ev(item.status)) not in _STRIKE_EXEMPT:
        item.status = ChecklistStatus.at_risk
        logger.info("Item %s escalated to at_risk after %d strikes", item_id, item.strikes)

    _commit(db)
    db.refresh(item)
    return item


# ---------------------------------------------------------------------------
# Clarity
# ---------------------------------------------------------------------------

def set_clarity_score(db: Session, user_id: str, item_id: str, score: int) -> ChecklistItem:
    """Record how well-specified the item is. Never changes status."""
    if not CLARITY_MIN <= score <= CLARITY_MAX:
        raise InvalidArgumentError(
            "clarity_score",
            f"clarity_score must be between {CLARITY_MIN} and {CLARITY_MAX}",
            score,
        )
    item = get_item(db, user_id, item_id)
    if item.clarity_score != score:
        item.clarity_score = score
        _commit(db)
        db.refresh(item)
    return item

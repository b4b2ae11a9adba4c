"""
Standup-to-checklist orchestrator.

Turns AI-proposed items into persisted, goal-linked checklist items for one
standup session.

Public API
----------
generate(db, user_id, session_id, active_goals, proposed_items, mode)  -> list[ChecklistItem]
generate_from_standup(db, user_id, session_id, client, mode)           -> GenerationResult

`generate` backs POST /checklist/generate, whose caller has already talked to
the provider. `generate_from_standup` is the library entry point for callers
that hold a provider client of their own (a worker or a chat flow). No HTTP
route constructs a client.

Unit of work
------------
A call either persists every item or none: items are flushed one by one and
committed once at the end; any error rolls the whole call back, so a failed
generation never leaves a partial checklist visible for the session.

Modes
-----
append - add to whatever the session already holds (top-up, e.g. items
           suggested later from chat context)
replace - drop the session's current items (and their check-ins) first,
           inside the same unit of work
"""
from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.checklist_item import ChecklistItem, ChecklistStatus
from app.models.goal import Goal
from app.services.alignment import match_goal
from app.services.goal_store import get_active_goals
from app.services.proposals import (
    ProposedItem,
    TextClient,
    build_checklist_prompt,
    request_proposals,
)
from app.services.standup import answers_of, get_session

logger = logging.getLogger(__name__)


class GenerateMode(str, enum.Enum):
    append = "append"
    replace = "replace"


@dataclass
class GenerationResult:
    session_id: str
    items: list[ChecklistItem]
    insights: Optional[str]


# ---------------------------------------------------------------------------
# Core - flush only
# ---------------------------------------------------------------------------

def _clear_session(db: Session, user_id: str, session_id: str) -> int:
    existing = (
        db.query(ChecklistItem)
        .filter(ChecklistItem.user_id == user_id, ChecklistItem.session_id == session_id)
        .all()
    )
    for item in existing:
        db.delete(item)  # check-ins go with it (cascade)
    db.flush()
    return len(existing)


def _build_item(
    user_id: str,
    session_id: str,
    proposed: ProposedItem,
    goals: Sequence[Goal],
) -> ChecklistItem:
    goal = match_goal(proposed.goal_alignment_labels, goals)
    return ChecklistItem(
        session_id=session_id,
        user_id=user_id,
        title=proposed.title,
        description=proposed.description,
        estimated_minutes=proposed.estimated_minutes,
        priority=proposed.priority,
        status=ChecklistStatus.pending,
        strikes=0,
        max_strikes=settings.DEFAULT_MAX_STRIKES,
        clarity_score=10,
        goal_id=goal.id if goal is not None else None,
    )


def _persist_items(
    db: Session,
    user_id: str,
    session_id: str,
    active_goals: Sequence[Goal],
    proposed_items: Sequence[ProposedItem],
    mode: GenerateMode,
) -> list[ChecklistItem]:
    """Write the items without committing. The caller owns commit/rollback."""
    if GenerateMode(mode) == GenerateMode.replace:
        removed = _clear_session(db, user_id, session_id)
        if removed:
            logger.info("Replacing %d existing item(s) in session %s", removed, session_id)

    created: list[ChecklistItem] = []
    for proposed in proposed_items:
        item = _build_item(user_id, session_id, proposed, active_goals)
        db.add(item)
        db.flush()  # keeps created_at / insertion order aligned with input order
        created.append(item)
    return created


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def generate(
    db: Session,
    user_id: str,
    session_id: str,
    active_goals: Sequence[Goal],
    proposed_items: Sequence[ProposedItem],
    mode: GenerateMode = GenerateMode.append,
) -> list[ChecklistItem]:
    """
    Persist one pending checklist item per proposed item, in input order,
    each linked to the first active goal its labels hit. No content checks:
    titles are stored verbatim. An empty proposal list yields [].
    """
    get_session(db, user_id, session_id)

    try:
        created = _persist_items(db, user_id, session_id, active_goals, proposed_items, mode)
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Checklist generation for session %s rolled back", session_id)
        raise

    for item in created:
        db.refresh(item)
    logger.info(
        "Generated %d checklist item(s) for session %s (%s, %d goal-linked)",
        len(created), session_id, GenerateMode(mode).value,
        sum(1 for i in created if i.goal_id),
    )
    return created


def generate_from_standup(
    db: Session,
    user_id: str,
    session_id: str,
    client: TextClient,
    mode: GenerateMode = GenerateMode.append,
) -> GenerationResult:
    """
    Full flow: read the session answers and active goals, ask the provider
    for items (fallback on malformed output), persist them and remember the
    accepted payload on the session.
    """
    session = get_session(db, user_id, session_id)
    goals = get_active_goals(db, user_id)

    prompt = build_checklist_prompt(answers_of(session), [g.title for g in goals])
    proposals = request_proposals(client, prompt)

    try:
        created = _persist_items(db, user_id, session_id, goals, proposals.items, mode)
        session.checklist_generated = json.dumps({
            "items": [p.model_dump(by_alias=True) for p in proposals.items],
            "insights": proposals.insights,
        })
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Checklist generation for session %s rolled back", session_id)
        raise

    for item in created:
        db.refresh(item)
    logger.info("Generated %d checklist item(s) from standup %s", len(created), session_id)
    return GenerationResult(session_id=session_id, items=created, insights=proposals.insights)

"""
Standup sessions: the daily answers that checklist generation works from.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.standup_session import StandupMode, StandupSession

logger = logging.getLogger(__name__)


@dataclass
class StandupAnswers:
    """The eight fixed reflective questions, all optional free text."""
    what_did_yesterday: Optional[str] = None
    what_not_able_yesterday: Optional[str] = None
    who_need_to_do: Optional[str] = None
    what_need_to_do: Optional[str] = None
    why_not_able: Optional[str] = None
    what_doing_today: Optional[str] = None
    what_could_stop: Optional[str] = None
    what_need_understand: Optional[str] = None


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def answers_of(session: StandupSession) -> StandupAnswers:
    return StandupAnswers(**{f.name: getattr(session, f.name) for f in fields(StandupAnswers)})


def create_session(
    db: Session,
    user_id: str,
    answers: StandupAnswers,
    session_date: Optional[date] = None,
    mode: str = StandupMode.cadence,
) -> StandupSession:
    session = StandupSession(
        user_id=user_id,
        session_date=session_date or _today(),
        mode=mode,
        **{f.name: getattr(answers, f.name) for f in fields(StandupAnswers)},
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Standup session %s opened for %s", session.id, session.session_date)
    return session


def get_session(db: Session, user_id: str, session_id: str) -> StandupSession:
    session = (
        db.query(StandupSession)
        .filter(StandupSession.id == session_id, StandupSession.user_id == user_id)
        .first()
    )
    if session is None:
        raise NotFoundError("StandupSession", session_id)
    return session


def latest_session_for_day(db: Session, user_id: str, day: date) -> Optional[StandupSession]:
    return (
        db.query(StandupSession)
        .filter(StandupSession.user_id == user_id, StandupSession.session_date == day)
        .order_by(StandupSession.created_at.desc())
        .first()
    )

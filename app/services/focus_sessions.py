"""
Focus sessions: timed blocks of deep work, meetings, admin or breaks.

A session is open until `end_focus_session` supplies end_time and/or
duration_minutes. When only end_time is given the duration is derived
from end_time - start_time in whole minutes.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.db.base import as_utc
from app.models.focus_session import FocusSession, SessionType

logger = logging.getLogger(__name__)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _check_non_negative(field: str, value: Optional[int]) -> None:
    if value is not None and value < 0:
        raise InvalidArgumentError(field, f"{field} must not be negative", value)


def get_focus_session(db: Session, user_id: str, session_id: str) -> FocusSession:
    fs = (
        db.query(FocusSession)
        .filter(FocusSession.id == session_id, FocusSession.user_id == user_id)
        .first()
    )
    if fs is None:
        raise NotFoundError("FocusSession", session_id)
    return fs


def start_focus_session(
    db: Session,
    user_id: str,
    start_time: Optional[datetime] = None,
    session_type: str = SessionType.deep_work,
    duration_minutes: int = 0,
    interruptions_count: int = 0,
    notes: Optional[str] = None,
) -> FocusSession:
    try:
        kind = SessionType(_ev(session_type))
    except ValueError:
        raise InvalidArgumentError(
            "session_type",
            f"session_type must be one of {[s.value for s in SessionType]}",
            _ev(session_type),
        ) from None
    _check_non_negative("duration_minutes", duration_minutes)
    _check_non_negative("interruptions_count", interruptions_count)

    fs = FocusSession(
        user_id=user_id,
        start_time=as_utc(start_time) if start_time is not None else datetime.now(tz=timezone.utc),
        duration_minutes=duration_minutes,
        session_type=kind,
        interruptions_count=interruptions_count,
        notes=notes,
    )
    db.add(fs)
    db.commit()
    db.refresh(fs)
    logger.info("Focus session %s started (%s)", fs.id, kind.value)
    return fs


def end_focus_session(
    db: Session,
    user_id: str,
    session_id: str,
    end_time: Optional[datetime] = None,
    duration_minutes: Optional[int] = None,
    interruptions_count: Optional[int] = None,
    notes: Optional[str] = None,
) -> FocusSession:
    _check_non_negative("duration_minutes", duration_minutes)
    _check_non_negative("interruptions_count", interruptions_count)
    fs = get_focus_session(db, user_id, session_id)

    if end_time is None and duration_minutes is None:
        end_time = datetime.now(tz=timezone.utc)

    if end_time is not None:
        # stored wall-clock is UTC; SQLite drops any offset
        end_time = as_utc(end_time)
        if end_time < as_utc(fs.start_time):
            raise InvalidArgumentError("end_time", "end_time must not precede start_time", str(end_time))
        fs.end_time = end_time
        if duration_minutes is None:
            elapsed = end_time - as_utc(fs.start_time)
            duration_minutes = int(elapsed.total_seconds() // 60)
    else:
        fs.end_time = as_utc(fs.start_time) + timedelta(minutes=duration_minutes)

    fs.duration_minutes = duration_minutes
    if interruptions_count is not None:
        fs.interruptions_count = interruptions_count
    if notes is not None:
        fs.notes = notes

    db.commit()
    db.refresh(fs)
    logger.info("Focus session %s closed after %d min", session_id, fs.duration_minutes)
    return fs


def list_focus_sessions(
    db: Session,
    user_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[FocusSession]:
    """Sessions by start date (inclusive bounds), newest first."""
    q = db.query(FocusSession).filter(FocusSession.user_id == user_id)
    if start_date is not None:
        q = q.filter(FocusSession.start_time >= datetime.combine(start_date, time.min))
    if end_date is not None:
        q = q.filter(FocusSession.start_time < datetime.combine(end_date + timedelta(days=1), time.min))
    return q.order_by(FocusSession.start_time.desc()).all()

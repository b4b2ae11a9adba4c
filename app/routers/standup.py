"""
Standup router.

POST /standup - open a session with the day's answers
GET  /standup/{session_id} - read a session back
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.schemas.common import ERROR_RESPONSES
from app.models.standup_session import StandupSession
from app.schemas.standup import StandupCreate, StandupResponse
from app.services.standup import StandupAnswers, create_session, get_session

router = APIRouter(prefix="/standup", tags=["standup"], responses=ERROR_RESPONSES)

_ANSWER_FIELDS = (
    "what_did_yesterday",
    "what_not_able_yesterday",
    "who_need_to_do",
    "what_need_to_do",
    "why_not_able",
    "what_doing_today",
    "what_could_stop",
    "what_need_understand",
)


def _session_to_response(session: StandupSession) -> StandupResponse:
    mode = session.mode
    return StandupResponse(
        id=session.id,
        session_date=str(session.session_date),
        mode=mode.value if hasattr(mode, "value") else str(mode),
        created_at=session.created_at.isoformat(),
        **{name: getattr(session, name) for name in _ANSWER_FIELDS},
    )


@router.post(
    "",
    response_model=StandupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a standup session",
)
def post_standup(
    payload: StandupCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Store the answers to the eight standup questions. Checklist generation
    is a separate call (`POST /checklist/generate`) so a client can retry it
    without re-submitting the answers.
    """
    answers = StandupAnswers(**{name: getattr(payload, name) for name in _ANSWER_FIELDS})
    session = create_session(
        db, user_id, answers, session_date=payload.session_date, mode=payload.mode,
    )
    return _session_to_response(session)


@router.get("/{session_id}", response_model=StandupResponse, summary="Get a standup session")
def get_standup(
    session_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _session_to_response(get_session(db, user_id, session_id))

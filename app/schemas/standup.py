from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.standup_session import StandupMode


class StandupCreate(BaseModel):
    """Answers to the daily standup questions. Every answer is optional."""
    model_config = ConfigDict(use_enum_values=True)

    session_date: Optional[date] = Field(
        default=None, description="Defaults to today (UTC).", examples=["2026-10-19"],
    )
    mode: StandupMode = StandupMode.cadence

    what_did_yesterday: Optional[str] = None
    what_not_able_yesterday: Optional[str] = None
    who_need_to_do: Optional[str] = None
    what_need_to_do: Optional[str] = None
    why_not_able: Optional[str] = None
    what_doing_today: Optional[str] = None
    what_could_stop: Optional[str] = None
    what_need_understand: Optional[str] = None


class StandupResponse(BaseModel):
    id: str
    session_date: str
    mode: str
    what_did_yesterday: Optional[str] = None
    what_not_able_yesterday: Optional[str] = None
    who_need_to_do: Optional[str] = None
    what_need_to_do: Optional[str] = None
    why_not_able: Optional[str] = None
    what_doing_today: Optional[str] = None
    what_could_stop: Optional[str] = None
    what_need_understand: Optional[str] = None
    created_at: str

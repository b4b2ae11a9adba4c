"""
Checklist schemas.

POST /checklist/generate           → GenerateRequest  → GenerateResponse
POST /checklist/{id}/check-ins     → CheckInRequest   → CheckInResponse
PUT  /checklist/{id}/clarity       → ClarityRequest   → ChecklistItemResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.services.orchestrator import GenerateMode
from app.services.proposals import ProposedItem


class GenerateRequest(BaseModel):
    """
    Either `items` (already structured) or `raw_response` (the provider's
    raw text, parsed here; unusable text falls back to a single review item).
    """
    model_config = ConfigDict(use_enum_values=True)

    session_id: Annotated[str, Field(min_length=1)]
    mode: GenerateMode = Field(
        default=GenerateMode.append,
        description='"append" adds to the session, "replace" swaps its items out.',
    )
    items: Optional[list[ProposedItem]] = Field(
        default=None,
        description="Structured proposals: title, description, priority, estimatedTimeMinutes, goalAlignment.",
    )
    raw_response: Optional[str] = Field(
        default=None,
        description="Unparsed text-generation output.",
    )

    @model_validator(mode="after")
    def exactly_one_source(self) -> "GenerateRequest":
        if (self.items is None) == (self.raw_response is None):
            raise ValueError("provide exactly one of `items` or `raw_response`")
        return self


class ChecklistItemResponse(BaseModel):
    id: str
    session_id: str
    title: str
    description: Optional[str] = None
    estimated_minutes: int
    actual_minutes: Optional[int] = None
    priority: int
    status: str
    strikes: int
    max_strikes: int
    clarity_score: int
    goal_id: Optional[str] = None
    goal_title: Optional[str] = None
    goal_type: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: str


class GenerateResponse(BaseModel):
    session_id: str
    mode: str
    insights: Optional[str] = None
    items: list[ChecklistItemResponse]


class ChecklistListResponse(BaseModel):
    total: int
    items: list[ChecklistItemResponse]


class CheckInRequest(BaseModel):
    # Range checks live in the lifecycle service so callers get INVALID_ARGUMENT.
    status: str = Field(examples=["in_progress", "completed", "blocked"])
    progress_percentage: int = Field(default=0, description="0-100.")
    notes: Optional[str] = None
    blockers: Optional[str] = None
    time_spent_minutes: Optional[int] = None


class CheckInResponse(BaseModel):
    id: str
    checklist_item_id: str
    status: str
    notes: Optional[str] = None
    blockers: Optional[str] = None
    time_spent_minutes: Optional[int] = None
    progress_percentage: int
    created_at: str


class CheckInListResponse(BaseModel):
    total: int
    items: list[CheckInResponse]


class ClarityRequest(BaseModel):
    clarity_score: int = Field(description="1 (vague) to 10 (crystal clear).")

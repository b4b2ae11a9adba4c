"""
Goal schemas.

POST  /goals              → GoalCreate → GoalResponse
PATCH /goals/{id}         → GoalUpdate → GoalResponse
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.goal import GoalStatus, GoalType


class GoalCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Annotated[str, Field(min_length=1, max_length=256)]
    description: Optional[str] = None
    type: GoalType = GoalType.goal
    priority: Annotated[int, Field(ge=1, le=5, description="1 = highest, 5 = lowest.")] = 3
    status: GoalStatus = GoalStatus.active
    stakeholders: list[str] = Field(default_factory=list, description="Person ids.")
    deadline: Optional[date] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("title must not be empty after stripping whitespace")
        return stripped


class GoalUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[Annotated[str, Field(min_length=1, max_length=256)]] = None
    description: Optional[str] = None
    type: Optional[GoalType] = None
    priority: Optional[Annotated[int, Field(ge=1, le=5)]] = None
    status: Optional[GoalStatus] = None
    stakeholders: Optional[list[str]] = None
    deadline: Optional[date] = None


class GoalResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    type: str
    priority: int
    status: str
    stakeholders: list[str]
    deadline: Optional[str] = None
    created_at: str
    updated_at: str


class GoalListResponse(BaseModel):
    total: int
    items: list[GoalResponse]

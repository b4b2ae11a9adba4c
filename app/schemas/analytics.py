"""
Analytics schemas: daily metrics, task records, focus sessions and objectives.
"""
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.focus_session import SessionType
from app.models.objective import ObjectiveStatus
from app.models.task_record import TaskPriority, TaskStatus


# ---------------------------------------------------------------------------
# Daily metrics
# ---------------------------------------------------------------------------

class DailyMetricUpsert(BaseModel):
    """Omitted fields keep their stored value (or 0 for a new day)."""
    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(default=None, alias="date", description="Defaults to today (UTC).")
    focus_score: Optional[float] = None
    completion_rate: Optional[float] = None
    proactiveness_score: Optional[float] = None
    alignment_score: Optional[float] = None
    tasks_planned: Optional[int] = None
    tasks_completed: Optional[int] = None
    blockers_encountered: Optional[int] = None
    blockers_resolved: Optional[int] = None
    distractions_count: Optional[int] = None
    focus_time_minutes: Optional[int] = None
    total_work_minutes: Optional[int] = None


class DailyMetricResponse(BaseModel):
    id: str
    date: str
    focus_score: float
    completion_rate: float
    proactiveness_score: float
    alignment_score: float
    tasks_planned: int
    tasks_completed: int
    blockers_encountered: int
    blockers_resolved: int
    distractions_count: int
    focus_time_minutes: int
    total_work_minutes: int


class DailyMetricListResponse(BaseModel):
    total: int
    items: list[DailyMetricResponse]


class SyncChecklistRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(default=None, alias="date")


# ---------------------------------------------------------------------------
# Task records
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Annotated[str, Field(min_length=1, max_length=512)]
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium
    estimated_minutes: Optional[Annotated[int, Field(ge=0)]] = None
    actual_minutes: Optional[Annotated[int, Field(ge=0)]] = None
    due_date: Optional[date] = None
    status: TaskStatus = TaskStatus.pending


class TaskUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[Annotated[str, Field(min_length=1, max_length=512)]] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    estimated_minutes: Optional[Annotated[int, Field(ge=0)]] = None
    actual_minutes: Optional[Annotated[int, Field(ge=0)]] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None


class TaskResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    priority: str
    estimated_minutes: Optional[int] = None
    actual_minutes: Optional[int] = None
    status: str
    due_date: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: str


class TaskListResponse(BaseModel):
    total: int
    items: list[TaskResponse]


# ---------------------------------------------------------------------------
# Focus sessions
# ---------------------------------------------------------------------------

class FocusSessionStart(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    start_time: Optional[datetime] = Field(default=None, description="Defaults to now (UTC).")
    session_type: SessionType = SessionType.deep_work
    duration_minutes: Annotated[int, Field(ge=0)] = 0
    interruptions_count: Annotated[int, Field(ge=0)] = 0
    notes: Optional[str] = None


class FocusSessionEnd(BaseModel):
    end_time: Optional[datetime] = None
    duration_minutes: Optional[Annotated[int, Field(ge=0)]] = None
    interruptions_count: Optional[Annotated[int, Field(ge=0)]] = None
    notes: Optional[str] = None


class FocusSessionResponse(BaseModel):
    id: str
    start_time: str
    end_time: Optional[str] = None
    duration_minutes: int
    session_type: str
    interruptions_count: int
    notes: Optional[str] = None
    is_open: bool


class FocusSessionListResponse(BaseModel):
    total: int
    items: list[FocusSessionResponse]


# ---------------------------------------------------------------------------
# Objectives
# ---------------------------------------------------------------------------

class ObjectiveCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Annotated[str, Field(min_length=1, max_length=256)]
    description: Optional[str] = None
    target_date: Optional[date] = None
    progress_percentage: Annotated[int, Field(ge=0, le=100)] = 0
    status: ObjectiveStatus = ObjectiveStatus.active


class ObjectiveUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[Annotated[str, Field(min_length=1, max_length=256)]] = None
    description: Optional[str] = None
    target_date: Optional[date] = None
    progress_percentage: Optional[Annotated[int, Field(ge=0, le=100)]] = None
    status: Optional[ObjectiveStatus] = None


class ObjectiveResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    target_date: Optional[str] = None
    progress_percentage: int
    status: str
    created_at: str
    updated_at: str


class ObjectiveListResponse(BaseModel):
    total: int
    items: list[ObjectiveResponse]

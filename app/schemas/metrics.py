"""
Metrics snapshot schemas.

GET /metrics/snapshot → MetricsSnapshotResponse

Percentages are passed through unrounded; display rounding is the client's job.
"""
from pydantic import BaseModel, Field


class CurrentMetricsResponse(BaseModel):
    date: str
    has_record: bool = Field(description="False when no daily metric exists and zeros are reported.")
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


class WeeklyPointResponse(BaseModel):
    date: str
    completion_percentage: float


class CalendarPointResponse(BaseModel):
    date: str
    completion_percentage: float
    focus_percentage: float
    proactiveness_percentage: float


class MetricsSnapshotResponse(BaseModel):
    as_of: str
    current: CurrentMetricsResponse
    weekly: list[WeeklyPointResponse] = Field(description="7 points, oldest first, ending at as_of.")
    calendar: list[CalendarPointResponse] = Field(description="28 points, oldest first, ending at as_of.")

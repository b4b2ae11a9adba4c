from .goal import Goal
from .standup_session import StandupSession
from .checklist_item import ChecklistItem
from .check_in import CheckIn
from .daily_metric import DailyMetric
from .task_record import TaskRecord
from .focus_session import FocusSession
from .objective import ObjectiveProgress
from .person import Person

__all__ = [
    "Goal",
    "StandupSession",
    "ChecklistItem",
    "CheckIn",
    "DailyMetric",
    "TaskRecord",
    "FocusSession",
    "ObjectiveProgress",
    "Person",
]

"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


_ENUMS = {
    "goal_type_enum": ("goal", "routine", "business_objective"),
    "goal_status_enum": ("active", "completed", "paused", "archived"),
    "standup_mode_enum": ("cadence", "waterfall"),
    "checklist_status_enum": ("pending", "in_progress", "completed", "blocked", "at_risk"),
    "task_priority_enum": ("low", "medium", "high"),
    "task_status_enum": ("pending", "in_progress", "completed", "cancelled"),
    "session_type_enum": ("deep_work", "meetings", "admin", "break"),
    "objective_status_enum": ("active", "completed", "paused"),
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*_ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- ENUM types ---
    for name, values in _ENUMS.items():
        sa.Enum(*values, name=name).create(op.get_bind(), checkfirst=True)

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", _enum("goal_type_enum"), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, comment="1 (high) .. 5 (low)"),
        sa.Column("status", _enum("goal_status_enum"), nullable=False),
        sa.Column("stakeholders", sa.Text(), nullable=True, comment="JSON array of person ids"),
        sa.Column("deadline", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"])
    op.create_index("ix_goals_status", "goals", ["status"])

    # --- standup_sessions ---
    op.create_table(
        "standup_sessions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("what_did_yesterday", sa.Text(), nullable=True),
        sa.Column("what_not_able_yesterday", sa.Text(), nullable=True),
        sa.Column("who_need_to_do", sa.Text(), nullable=True),
        sa.Column("what_need_to_do", sa.Text(), nullable=True),
        sa.Column("why_not_able", sa.Text(), nullable=True),
        sa.Column("what_doing_today", sa.Text(), nullable=True),
        sa.Column("what_could_stop", sa.Text(), nullable=True),
        sa.Column("what_need_understand", sa.Text(), nullable=True),
        sa.Column("mode", _enum("standup_mode_enum"), nullable=False),
        sa.Column("checklist_generated", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_standup_sessions_user_id", "standup_sessions", ["user_id"])
    op.create_index("ix_standup_sessions_session_date", "standup_sessions", ["session_date"])

    # --- checklist_items ---
    op.create_table(
        "checklist_items",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("session_id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimated_minutes", sa.Integer(), nullable=False),
        sa.Column("actual_minutes", sa.Integer(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("status", _enum("checklist_status_enum"), nullable=False),
        sa.Column("strikes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_strikes", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("clarity_score", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("goal_id", sa.String(32), nullable=True),
        sa.Column("assigned_by", sa.String(128), nullable=True),
        sa.Column("assigned_to", sa.String(128), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["session_id"], ["standup_sessions.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_checklist_items_session_id", "checklist_items", ["session_id"])
    op.create_index("ix_checklist_items_user_id", "checklist_items", ["user_id"])
    op.create_index("ix_checklist_items_goal_id", "checklist_items", ["goal_id"])

    # --- checkins ---
    op.create_table(
        "checkins",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("checklist_item_id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("blockers", sa.Text(), nullable=True),
        sa.Column("time_spent_minutes", sa.Integer(), nullable=True),
        sa.Column("progress_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["checklist_item_id"], ["checklist_items.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_checkins_checklist_item_id", "checkins", ["checklist_item_id"])
    op.create_index("ix_checkins_user_id", "checkins", ["user_id"])

    # --- daily_metrics ---
    op.create_table(
        "daily_metrics",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("focus_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("completion_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("proactiveness_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("alignment_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("tasks_planned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tasks_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("blockers_encountered", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("blockers_resolved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("distractions_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("focus_time_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_work_minutes", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_metric_user_date"),
    )
    op.create_index("ix_daily_metrics_user_id", "daily_metrics", ["user_id"])
    op.create_index("ix_daily_metrics_date", "daily_metrics", ["date"])

    # --- task_tracking ---
    op.create_table(
        "task_tracking",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", _enum("task_priority_enum"), nullable=False),
        sa.Column("estimated_minutes", sa.Integer(), nullable=True),
        sa.Column("actual_minutes", sa.Integer(), nullable=True),
        sa.Column("status", _enum("task_status_enum"), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_tracking_user_id", "task_tracking", ["user_id"])
    op.create_index("ix_task_tracking_created_at", "task_tracking", ["created_at"])

    # --- focus_sessions ---
    op.create_table(
        "focus_sessions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("session_type", _enum("session_type_enum"), nullable=False),
        sa.Column("interruptions_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_focus_sessions_user_id", "focus_sessions", ["user_id"])
    op.create_index("ix_focus_sessions_start_time", "focus_sessions", ["start_time"])

    # --- objective_progress ---
    op.create_table(
        "objective_progress",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_date", sa.Date(), nullable=True),
        sa.Column("progress_percentage", sa.Integer(), nullable=False, server_default="0", comment="0..100"),
        sa.Column("status", _enum("objective_status_enum"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_objective_progress_user_id", "objective_progress", ["user_id"])

    # --- people_profiles ---
    op.create_table(
        "people_profiles",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("work_function", sa.String(256), nullable=True),
        sa.Column("characteristics", sa.Text(), nullable=True),
        sa.Column("biases", sa.Text(), nullable=True),
        sa.Column("communication_style", sa.Text(), nullable=True),
        sa.Column("relationship_type", sa.String(64), nullable=True),
        sa.Column("profile_picture", sa.Text(), nullable=True, comment="URL"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_people_profiles_user_id", "people_profiles", ["user_id"])


def downgrade() -> None:
    op.drop_table("people_profiles")
    op.drop_table("objective_progress")
    op.drop_table("focus_sessions")
    op.drop_table("task_tracking")
    op.drop_table("daily_metrics")
    op.drop_table("checkins")
    op.drop_table("checklist_items")
    op.drop_table("standup_sessions")
    op.drop_table("goals")

    for name in reversed(list(_ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")

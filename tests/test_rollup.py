"""
Tests for the metrics rollup.

The pure fold is exercised with plain objects; the DB-backed entry point is
checked for window selection and backfill pickup. Far-off dates keep each
test's window to itself.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from app.services.daily_metrics import upsert_daily_metric
from app.services.focus_sessions import start_focus_session
from app.services.rollup import CALENDAR_DAYS, WEEK_DAYS, get_metrics_snapshot, rollup
from app.services.task_records import NewTask, create_task

AS_OF = date(2031, 3, 15)


def _metric(day, focus=0.0, completion=0.0, proactive=0.0, alignment=0.0, **counts):
    return SimpleNamespace(
        day=day,
        focus_score=focus,
        completion_rate=completion,
        proactiveness_score=proactive,
        alignment_score=alignment,
        **counts,
    )


def _task(day, status="pending"):
    return SimpleNamespace(status=status, created_at=datetime.combine(day, datetime.min.time()) + timedelta(hours=9))


def _focus(day, minutes):
    return SimpleNamespace(start_time=datetime.combine(day, datetime.min.time()) + timedelta(hours=10),
                           duration_minutes=minutes)


# ---------------------------------------------------------------------------
# Pure fold
# ---------------------------------------------------------------------------

class TestRollupShape:
    def test_window_lengths_and_order(self):
        snap = rollup([], [], [], AS_OF)
        assert len(snap.weekly) == WEEK_DAYS == 7
        assert len(snap.calendar) == CALENDAR_DAYS == 28
        weekly_days = [p.day for p in snap.weekly]
        calendar_days = [p.day for p in snap.calendar]
        assert weekly_days == sorted(weekly_days)
        assert calendar_days == sorted(calendar_days)
        assert weekly_days[-1] == calendar_days[-1] == AS_OF
        assert weekly_days[0] == AS_OF - timedelta(days=6)
        assert calendar_days[0] == AS_OF - timedelta(days=27)

    def test_empty_streams_are_all_zero(self):
        snap = rollup([], [], [], AS_OF)
        assert snap.current.has_record is False
        assert snap.current.focus_score == 0
        assert all(p.completion_percentage == 0 for p in snap.weekly)
        assert all(
            p.focus_percentage == 0 and p.proactiveness_percentage == 0 for p in snap.calendar
        )


class TestCurrent:
    def test_current_focus_comes_from_the_daily_metric(self):
        snap = rollup([_metric(AS_OF, focus=87)], [], [], AS_OF)
        assert snap.current.focus_score == 87
        assert snap.current.has_record is True

    def test_current_ignores_other_days(self):
        snap = rollup([_metric(AS_OF - timedelta(days=1), focus=50)], [], [], AS_OF)
        assert snap.current.has_record is False
        assert snap.current.focus_score == 0


class TestCompletion:
    def test_task_ratio(self):
        tasks = [_task(AS_OF, "completed"), _task(AS_OF, "completed"), _task(AS_OF), _task(AS_OF)]
        snap = rollup([], tasks, [], AS_OF)
        assert snap.weekly[-1].completion_percentage == 50.0
        assert snap.calendar[-1].completion_percentage == 50.0

    def test_tasks_take_precedence_over_metric(self):
        snap = rollup([_metric(AS_OF, completion=10)], [_task(AS_OF, "completed")], [], AS_OF)
        assert snap.weekly[-1].completion_percentage == 100.0

    def test_zero_tasks_falls_back_to_metric_rate(self):
        yesterday = AS_OF - timedelta(days=1)
        snap = rollup([_metric(yesterday, completion=62.5)], [], [], AS_OF)
        assert snap.weekly[-2].completion_percentage == 62.5
        assert snap.weekly[-1].completion_percentage == 0.0

    def test_values_are_not_rounded(self):
        tasks = [_task(AS_OF, "completed"), _task(AS_OF), _task(AS_OF)]
        snap = rollup([], tasks, [], AS_OF)
        assert snap.weekly[-1].completion_percentage == 100.0 / 3


class TestCalendarFocusAndProactiveness:
    def test_metric_focus_wins_over_minutes(self):
        snap = rollup([_metric(AS_OF, focus=40)], [], [_focus(AS_OF, 180)], AS_OF)
        assert snap.calendar[-1].focus_percentage == 40.0

    def test_focus_minutes_fallback_is_half_capped_at_100(self):
        d1 = AS_OF - timedelta(days=1)
        d2 = AS_OF - timedelta(days=2)
        sessions = [_focus(d1, 60), _focus(d1, 30), _focus(d2, 500)]
        snap = rollup([], [], sessions, AS_OF)
        by_day = {p.day: p for p in snap.calendar}
        assert by_day[d1].focus_percentage == 45.0
        assert by_day[d2].focus_percentage == 100.0

    def test_proactiveness_from_metric_else_zero(self):
        snap = rollup([_metric(AS_OF, proactive=73)], [], [], AS_OF)
        assert snap.calendar[-1].proactiveness_percentage == 73.0
        assert snap.calendar[-2].proactiveness_percentage == 0.0

    def test_records_outside_window_are_ignored(self):
        old = AS_OF - timedelta(days=40)
        snap = rollup([_metric(old, focus=99)], [_task(old, "completed")], [_focus(old, 600)], AS_OF)
        assert all(p.focus_percentage == 0 for p in snap.calendar)
        assert all(p.completion_percentage == 0 for p in snap.calendar)

    def test_offset_timestamps_bucket_by_utc_day(self):
        # 21:00 at -05:00 is 02:00 UTC on the next day
        eastern = timezone(timedelta(hours=-5))
        evening = datetime.combine(AS_OF - timedelta(days=1), datetime.min.time()) + timedelta(hours=21)
        task = SimpleNamespace(status="completed", created_at=evening.replace(tzinfo=eastern))
        session = SimpleNamespace(start_time=evening.replace(tzinfo=eastern), duration_minutes=80)
        snap = rollup([], [task], [session], AS_OF)
        assert snap.calendar[-1].completion_percentage == 100.0
        assert snap.calendar[-1].focus_percentage == 40.0
        assert snap.calendar[-2].completion_percentage == 0.0
        assert snap.calendar[-2].focus_percentage == 0.0


# ---------------------------------------------------------------------------
# DB-backed snapshot
# ---------------------------------------------------------------------------

class TestGetMetricsSnapshot:
    def test_reads_three_streams_for_user(self, db, user_id):
        as_of = date(2031, 6, 30)
        upsert_daily_metric(db, user_id, as_of, {"focus_score": 87, "proactiveness_score": 20})
        noon = datetime(2031, 6, 29, 12, 0, tzinfo=timezone.utc)
        create_task(db, user_id, NewTask(title="done", status="completed"), created_at=noon)
        create_task(db, user_id, NewTask(title="open"), created_at=noon)
        start_focus_session(db, user_id, start_time=noon, duration_minutes=120)

        snap = get_metrics_snapshot(db, user_id, as_of=as_of)

        assert snap.as_of == as_of
        assert snap.current.focus_score == 87
        assert snap.weekly[-2].completion_percentage == 50.0
        assert snap.calendar[-2].focus_percentage == 60.0
        assert snap.calendar[-1].proactiveness_percentage == 20.0

    def test_other_users_records_are_invisible(self, db, user_id):
        as_of = date(2031, 7, 31)
        upsert_daily_metric(db, "another-user", as_of, {"focus_score": 99})
        snap = get_metrics_snapshot(db, user_id, as_of=as_of)
        assert snap.current.has_record is False

    def test_backfilled_task_is_picked_up_on_next_read(self, db, user_id):
        as_of = date(2031, 8, 31)
        before = get_metrics_snapshot(db, user_id, as_of=as_of)
        assert before.weekly[0].completion_percentage == 0.0

        week_start = datetime(2031, 8, 25, 8, 0, tzinfo=timezone.utc)
        create_task(db, user_id, NewTask(title="late entry", status="completed"), created_at=week_start)

        after = get_metrics_snapshot(db, user_id, as_of=as_of)
        assert after.weekly[0].completion_percentage == 100.0

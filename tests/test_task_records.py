"""
Tests for task records.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.task_record import TaskStatus
from app.services.task_records import (
    NewTask,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)


class TestCreate:
    def test_defaults(self, db, user_id):
        task = create_task(db, user_id, NewTask(title="Expense report"))
        assert task.status == TaskStatus.pending
        assert task.completed_at is None

    def test_created_completed_is_stamped(self, db, user_id):
        task = create_task(db, user_id, NewTask(title="Already done", status="completed"))
        assert task.completed_at is not None

    @pytest.mark.parametrize("new", [
        NewTask(title="x", priority="urgent"),
        NewTask(title="x", status="done"),
        NewTask(title="x", estimated_minutes=-10),
    ])
    def test_invalid(self, db, user_id, new):
        with pytest.raises(InvalidArgumentError):
            create_task(db, user_id, new)


class TestUpdate:
    def test_completed_at_is_set_once(self, db, user_id):
        task = create_task(db, user_id, NewTask(title="Ship"))
        task = update_task(db, user_id, task.id, {"status": "completed"})
        first = task.completed_at
        assert first is not None

        task = update_task(db, user_id, task.id, {"status": "in_progress"})
        task = update_task(db, user_id, task.id, {"status": "completed"})
        assert task.completed_at == first

    def test_partial_update_ignores_none_and_unknown_keys(self, db, user_id):
        task = create_task(db, user_id, NewTask(title="Keep", description="d"))
        task = update_task(db, user_id, task.id, {"description": None, "user_id": "hijack", "title": "New"})
        assert task.title == "New"
        assert task.description == "d"
        assert task.user_id == user_id

    def test_unknown_task(self, db, user_id):
        with pytest.raises(NotFoundError):
            update_task(db, user_id, "missing", {"title": "x"})


class TestListAndDelete:
    def test_range_and_status_filters(self, db, user_id):
        d1 = datetime(2029, 5, 1, 9, tzinfo=timezone.utc)
        d2 = datetime(2029, 5, 3, 23, 59, tzinfo=timezone.utc)
        d3 = datetime(2029, 5, 9, 9, tzinfo=timezone.utc)
        create_task(db, user_id, NewTask(title="a"), created_at=d1)
        create_task(db, user_id, NewTask(title="b", status="completed"), created_at=d2)
        create_task(db, user_id, NewTask(title="c"), created_at=d3)

        in_range = list_tasks(db, user_id, start_date=date(2029, 5, 1), end_date=date(2029, 5, 3))
        assert [t.title for t in in_range] == ["b", "a"]

        completed = list_tasks(db, user_id, status="completed")
        assert [t.title for t in completed] == ["b"]

    def test_backfill_with_offset_lands_on_utc_day(self, db, user_id):
        # 22:00 at -04:00 is 02:00 UTC on the 13th
        evening = datetime(2029, 6, 12, 22, tzinfo=timezone(timedelta(hours=-4)))
        task = create_task(db, user_id, NewTask(title="late"), created_at=evening)
        assert task.created_at.replace(tzinfo=None) == datetime(2029, 6, 13, 2)
        assert list_tasks(db, user_id, start_date=date(2029, 6, 12), end_date=date(2029, 6, 12)) == []
        on_13th = list_tasks(db, user_id, start_date=date(2029, 6, 13), end_date=date(2029, 6, 13))
        assert [t.id for t in on_13th] == [task.id]

    def test_delete(self, db, user_id):
        task = create_task(db, user_id, NewTask(title="Temp"))
        delete_task(db, user_id, task.id)
        with pytest.raises(NotFoundError):
            get_task(db, user_id, task.id)

"""Tests for core task logic."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from singletask.core.tasks import (
    DueDate,
    Priority,
    Task,
    filter_suppressed,
    sort_by_due,
)

from .fakes import make_task


@pytest.fixture
def api_task():
    """A task as the REST API returns it."""
    return {
        "id": "2995104339",
        "content": "Buy Milk",
        "description": "",
        "labels": ["Food", "Shopping"],
        "parent_id": None,
        "priority": 4,
        "project_id": "2203306141",
        "is_completed": False,
        "due": {
            "date": "2016-09-01",
            "is_recurring": False,
            "string": "tomorrow",
            "timezone": None,
        },
        "duration": {"amount": 15, "unit": "minute"},
    }


class TestTask:
    def test_from_api(self, api_task):
        task = Task.from_api(api_task)
        assert task.id == "2995104339"
        assert task.content == "Buy Milk"
        assert task.priority is Priority.HIGH
        assert task.labels == ["Food", "Shopping"]
        assert task.due == DueDate(date="2016-09-01", is_recurring=False, string="tomorrow")
        assert task.duration.amount == 15
        assert task.is_completed is False
        assert task.checked is None

    def test_from_api_minimal(self):
        task = Task.from_api({"id": 7, "content": "Call mom"})
        assert task.id == "7"
        assert task.priority is Priority.NONE
        assert task.due is None
        assert task.duration is None

    def test_to_dict_is_accepted_by_from_api(self, api_task):
        task = Task.from_api(api_task)
        assert Task.from_api(task.to_dict()) == task

    def test_invalid_priority(self, api_task):
        api_task["priority"] = 9
        with pytest.raises(ValueError):
            Task.from_api(api_task)

    def test_effective_datetime_none_without_due(self, tz):
        assert make_task("1").effective_datetime(tz) is None

    def test_effective_datetime_date_only(self, tz):
        task = make_task("1", due="2025-01-15")
        assert task.effective_datetime(tz) == datetime(2025, 1, 15, 23, 59, tzinfo=tz)


class TestPriority:
    def test_ordering(self):
        assert Priority.NONE < Priority.LOW < Priority.MEDIUM < Priority.HIGH

    def test_labels(self):
        assert [p.label for p in Priority] == ["None", "Low", "Medium", "High"]


class TestDueDate:
    def test_is_date_only(self):
        assert DueDate(date="2025-01-15").is_date_only is True
        assert DueDate(date="2025-01-15T10:00:00").is_date_only is False

    def test_recurring_from_api(self):
        due = DueDate.from_api({"date": "2025-01-15", "is_recurring": True, "string": "every day"})
        assert due.is_recurring is True
        assert due.timezone is None

    def test_floating_time_uses_own_timezone(self, tz):
        due = DueDate(date="2025-01-15T09:00:00", timezone="Europe/Paris")
        expected = datetime(2025, 1, 15, 9, 0, tzinfo=ZoneInfo("Europe/Paris"))

        assert due.effective_datetime(tz) == expected
        assert due.effective_datetime(tz).hour == 3

    def test_utc_time_ignores_own_timezone(self, tz):
        due = DueDate(date="2025-01-15T14:00:00Z", timezone="Europe/Paris")
        assert due.effective_datetime(tz).hour == 9

    def test_due_on_follows_own_timezone(self, tz):
        due = DueDate(date="2025-01-16T02:00:00", timezone="Europe/Paris")
        assert due.due_on(tz).day == 15


class TestSortByDue:
    def test_ascending(self, tz):
        tasks = [
            make_task("late", due="2025-01-20"),
            make_task("early", due="2025-01-10"),
            make_task("mid", due="2025-01-15T12:00:00"),
        ]
        assert [t.id for t in sort_by_due(tasks, tz)] == ["early", "mid", "late"]

    def test_date_only_counts_as_end_of_day(self, tz):
        tasks = [
            make_task("date-only", due="2025-01-15"),
            make_task("evening", due="2025-01-15T22:00:00"),
            make_task("next-morning", due="2025-01-16T00:30:00"),
        ]
        assert [t.id for t in sort_by_due(tasks, tz)] == ["evening", "date-only", "next-morning"]

    def test_utc_and_local_compare_as_instants(self, tz):
        # 14:00 UTC is 09:00 in Toronto
        tasks = [
            make_task("local-10", due="2025-01-15T10:00:00"),
            make_task("utc-9", due="2025-01-15T14:00:00Z"),
        ]
        assert [t.id for t in sort_by_due(tasks, tz)] == ["utc-9", "local-10"]

    def test_undated_last_in_original_order(self, tz):
        tasks = [
            make_task("u1"),
            make_task("d1", due="2025-01-15"),
            make_task("u2"),
            make_task("u3"),
        ]
        assert [t.id for t in sort_by_due(tasks, tz)] == ["d1", "u1", "u2", "u3"]

    def test_stable_for_equal_due(self, tz):
        tasks = [make_task("a", due="2025-01-15"), make_task("b", due="2025-01-15")]
        assert [t.id for t in sort_by_due(tasks, tz)] == ["a", "b"]

    def test_empty(self, tz):
        assert sort_by_due([], tz) == []


class TestFilterSuppressed:
    def test_removes_completing_and_suppressed(self):
        tasks = [make_task("1"), make_task("2"), make_task("3")]
        result = filter_suppressed(tasks, completing_id="1", suppressed_ids={"3"})
        assert [t.id for t in result] == ["2"]

    def test_nothing_to_remove(self):
        tasks = [make_task("1"), make_task("2")]
        assert filter_suppressed(tasks) == tasks

    def test_keeps_order(self):
        tasks = [make_task(str(i)) for i in range(5)]
        result = filter_suppressed(tasks, suppressed_ids={"1", "3"})
        assert [t.id for t in result] == ["0", "2", "4"]

"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import IntEnum

from singletask.core.time import parse_date, parse_datetime, resolve_timezone


class Priority(IntEnum):
    """Task priority as the task API numbers it (1 = none, 4 = highest)."""

    NONE = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass
class DueDate:
    """
    A due descriptor as returned by the task API.

    `date` is either a plain date ("2024-01-31") or a date-time, floating
    ("2024-01-31T09:30:00") or UTC ("2024-01-31T09:30:00Z").
    """

    date: str
    is_recurring: bool = False
    string: str = ""
    timezone: str | None = None

    @property
    def is_date_only(self) -> bool:
        return len(self.date) == 10

    @property
    def is_floating(self) -> bool:
        return not self.is_date_only and not self.date.endswith("Z")

    def effective_datetime(self, tz: tzinfo) -> datetime:
        """
        Instant the task is due, expressed in `tz`.

        Date-only values count as 23:59 local. A floating date-time is read
        in the due date's own `timezone` when it carries one.
        """
        if self.timezone and self.is_floating:
            return parse_datetime(self.date, resolve_timezone(self.timezone)).astimezone(tz)
        return parse_datetime(self.date, tz)

    def due_on(self, tz: tzinfo) -> date:
        if self.is_date_only:
            return parse_date(self.date, tz)
        return self.effective_datetime(tz).date()

    @classmethod
    def from_api(cls, data: dict) -> "DueDate":
        return cls(
            date=data["date"],
            is_recurring=bool(data.get("is_recurring", False)),
            string=data.get("string", "") or "",
            timezone=data.get("timezone"),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "is_recurring": self.is_recurring,
            "string": self.string,
            "timezone": self.timezone,
        }


@dataclass
class Duration:
    amount: int
    unit: str  # "minute" or "day"

    @classmethod
    def from_api(cls, data: dict) -> "Duration":
        return cls(amount=int(data["amount"]), unit=data["unit"])

    def to_dict(self) -> dict:
        return {"amount": self.amount, "unit": self.unit}


@dataclass
class Task:
    """A task from the remote task list."""

    id: str
    content: str
    priority: Priority = Priority.NONE
    description: str = ""
    project_id: str = ""
    labels: list[str] = field(default_factory=list)
    parent_id: str | None = None
    due: DueDate | None = None
    is_completed: bool | None = None
    is_deleted: bool | None = None
    checked: bool | None = None
    duration: Duration | None = None

    def effective_datetime(self, tz: tzinfo) -> datetime | None:
        """Due instant used for ordering, or None when the task has no due date."""
        if not self.due:
            return None
        return self.due.effective_datetime(tz)

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from a task API response item."""
        due = DueDate.from_api(data["due"]) if data.get("due") else None
        duration = Duration.from_api(data["duration"]) if data.get("duration") else None
        return cls(
            id=str(data["id"]),
            content=data["content"],
            priority=Priority(data.get("priority", Priority.NONE)),
            description=data.get("description", "") or "",
            project_id=str(data.get("project_id", "") or ""),
            labels=list(data.get("labels") or []),
            parent_id=data.get("parent_id"),
            due=due,
            is_completed=data.get("is_completed"),
            is_deleted=data.get("is_deleted"),
            checked=data.get("checked"),
            duration=duration,
        )

    def to_dict(self) -> dict:
        """Inverse of from_api, used when persisting cached tasks."""
        return {
            "id": self.id,
            "content": self.content,
            "priority": int(self.priority),
            "description": self.description,
            "project_id": self.project_id,
            "labels": list(self.labels),
            "parent_id": self.parent_id,
            "due": self.due.to_dict() if self.due else None,
            "is_completed": self.is_completed,
            "is_deleted": self.is_deleted,
            "checked": self.checked,
            "duration": self.duration.to_dict() if self.duration else None,
        }


def sort_by_due(tasks: list[Task], tz: tzinfo) -> list[Task]:
    """
    Sort tasks ascending by effective due date-time.

    Tasks without a due date go last, keeping their original relative order.
    Pure function - no I/O.
    """
    dated = [t for t in tasks if t.due]
    undated = [t for t in tasks if not t.due]
    return sorted(dated, key=lambda t: t.effective_datetime(tz)) + undated


def filter_suppressed(
    tasks: list[Task],
    completing_id: str | None = None,
    suppressed_ids: set[str] | frozenset[str] = frozenset(),
) -> list[Task]:
    """Drop the task being completed and every suppressed task."""
    return [t for t in tasks if t.id != completing_id and t.id not in suppressed_ids]

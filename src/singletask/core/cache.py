"""Pure cache-entry logic: freshness decisions and suppression. No I/O."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo

from singletask.core.tasks import Task, filter_suppressed
from singletask.core.time import age_in_minutes, resolve_timezone

# Cached tasks are reused for this many minutes after a fetch
FRESH_WINDOW_MINUTES = 15


class Freshness(Enum):
    """Outcome of checking a cache entry against a request."""

    HIT = "hit"  # recent data with something left to show
    EXPIRED = "expired"  # old data, or nothing left after this request
    MISS = "miss"  # never fetched


@dataclass
class CacheEntry:
    """Cached task list for one (account, filter) pair."""

    tasks: list[Task] = field(default_factory=list)
    suppressed_ids: set[str] = field(default_factory=set)
    fetched_at: datetime | None = None
    timezone: ZoneInfo | None = None

    def visible_tasks(self, completing_id: str | None = None, skip_id: str | None = None) -> list[Task]:
        """Tasks left after removing the completing task and all suppressions."""
        return filter_suppressed(self.tasks, completing_id, merge_suppressed(self, skip_id))

    def to_dict(self) -> dict:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "suppressed_ids": sorted(self.suppressed_ids),
            "fetched_at": self.fetched_at.isoformat() if self.fetched_at else None,
            "timezone": self.timezone.key if self.timezone else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheEntry":
        fetched_at = data.get("fetched_at")
        tz_name = data.get("timezone")
        return cls(
            tasks=[Task.from_api(t) for t in data.get("tasks", [])],
            suppressed_ids=set(data.get("suppressed_ids", [])),
            fetched_at=datetime.fromisoformat(fetched_at) if fetched_at else None,
            timezone=resolve_timezone(tz_name) if tz_name else None,
        )


def merge_suppressed(entry: CacheEntry, skip_id: str | None) -> set[str]:
    """Entry suppressions plus `skip_id`. Set semantics, so repeats are harmless."""
    if skip_id is None:
        return set(entry.suppressed_ids)
    return entry.suppressed_ids | {skip_id}


def determine_freshness(
    entry: CacheEntry,
    now: datetime,
    completing_id: str | None = None,
    skip_id: str | None = None,
) -> Freshness:
    """
    Decide whether the cached list can serve this request.

    An entry is a HIT only while it is younger than the freshness window AND
    still has a visible task once this request's completion and skip are
    applied. An entry that would go empty is EXPIRED so that the remote list
    gets a chance to supply more tasks before an empty page is shown.
    """
    if entry.fetched_at is None:
        return Freshness.MISS

    age = age_in_minutes(entry.fetched_at, now.tzinfo, as_of=now)
    if age < FRESH_WINDOW_MINUTES and entry.visible_tasks(completing_id, skip_id):
        return Freshness.HIT
    return Freshness.EXPIRED


def is_fresh(
    entry: CacheEntry,
    now: datetime,
    completing_id: str | None = None,
    skip_id: str | None = None,
) -> bool:
    return determine_freshness(entry, now, completing_id, skip_id) is Freshness.HIT

"""Per-user task cache on top of a transactional key-value store.

Each (account token, filter) pair owns one CacheEntry. Reads go through
`read_through`, which either serves the cached list (dropping the task being
completed and anything skipped) or refetches the full list from the task API.
Read-modify-write of one key is serialized by a per-key asyncio.Lock; other
keys never wait on it.
"""

import asyncio
import json
import logging
import weakref
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime
from zoneinfo import ZoneInfo

from singletask.core.cache import CacheEntry, Freshness, determine_freshness, merge_suppressed
from singletask.core.tasks import Task, filter_suppressed
from singletask.core.time import resolve_timezone
from singletask.errors import DecodeError
from singletask.ports.cache_store import KeyValueStore

logger = logging.getLogger(__name__)

FetchTasks = Callable[[], Awaitable[list[Task]]]
FetchTimezoneName = Callable[[], Awaitable[str]]


def make_cache_key(token: str, filter_expression: str) -> str:
    """Cache key for an account and filter."""
    return f"{token}{filter_expression}"


class TaskCache:
    """Process-wide task cache."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        # Keyed by (event loop, cache key); a lock lives only while a request holds or awaits it
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock_key = (asyncio.get_running_loop(), key)
        lock = self._locks.get(lock_key)
        if lock is None:
            lock = self._locks[lock_key] = asyncio.Lock()
        return lock

    def _load(self, key: str) -> CacheEntry | None:
        tx = self.store.begin(False)
        raw = tx.get(key)
        tx.commit()
        if raw is None:
            return None
        try:
            return CacheEntry.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(f"Corrupt cache entry for {key!r}: {e!r}") from e

    def _save(self, key: str, entry: CacheEntry) -> None:
        tx = self.store.begin(True)
        tx.set(key, json.dumps(entry.to_dict()))
        tx.commit()

    async def get_or_create(self, key: str) -> CacheEntry:
        """Stored entry for `key`, or an empty one if nothing is stored yet."""
        entry = await asyncio.to_thread(self._load, key)
        return entry if entry is not None else CacheEntry()

    async def read_through(
        self,
        key: str,
        fetch: FetchTasks,
        now: datetime,
        completing_id: str | None = None,
        skip_id: str | None = None,
    ) -> list[Task]:
        """
        Return the visible task list for `key`.

        On a hit the skip is merged into the entry's suppressions and the
        completing task is removed, leaving `fetched_at` untouched. Otherwise
        `fetch` supplies the full remote list, which becomes a new cache
        generation: earlier skips are forgotten, this request's skip and
        completion still apply.
        """
        async with self._lock_for(key):
            entry = await self.get_or_create(key)
            freshness = determine_freshness(entry, now, completing_id, skip_id)

            if freshness is Freshness.HIT:
                logger.info(f"Cache hit ({len(entry.tasks)} tasks)")
                suppressed = merge_suppressed(entry, skip_id)
                tasks = filter_suppressed(entry.tasks, completing_id, suppressed)
                entry = replace(entry, tasks=tasks, suppressed_ids=suppressed)
            else:
                logger.info(f"Cache {freshness.value}, fetching tasks")
                fetched = await fetch()
                suppressed = {skip_id} if skip_id is not None else set()
                tasks = filter_suppressed(fetched, completing_id, suppressed)
                fetched_at = now
                if entry.fetched_at is not None and entry.fetched_at > now:
                    fetched_at = entry.fetched_at
                entry = CacheEntry(
                    tasks=tasks,
                    suppressed_ids=suppressed,
                    fetched_at=fetched_at,
                    timezone=entry.timezone,
                )

            await asyncio.to_thread(self._save, key, entry)
            return list(tasks)

    async def cached_timezone(self, key: str, fetch_name: FetchTimezoneName) -> ZoneInfo:
        """The account's timezone, looked up remotely once and then kept on the entry."""
        async with self._lock_for(key):
            entry = await self.get_or_create(key)
            if entry.timezone is not None:
                return entry.timezone

            tz = resolve_timezone(await fetch_name())
            await asyncio.to_thread(self._save, key, replace(entry, timezone=tz))
            logger.info(f"Cached timezone {tz.key}")
            return tz

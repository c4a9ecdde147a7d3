"""Shared fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from singletask.adapters.memory_store import MemoryStore
from singletask.task_cache import TaskCache


@pytest.fixture
def tz():
    return ZoneInfo("America/Toronto")


@pytest.fixture
def now(tz):
    return datetime(2025, 1, 15, 9, 0, tzinfo=tz)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cache(store):
    return TaskCache(store)

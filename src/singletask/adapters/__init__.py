"""Adapters - I/O implementations of ports."""

from .todoist_api import TodoistAdapter
from .unsplash_api import UnsplashAdapter
from .memory_store import MemoryStore
from .sqlite_store import SqliteStore

__all__ = [
    "TodoistAdapter",
    "UnsplashAdapter",
    "MemoryStore",
    "SqliteStore",
]

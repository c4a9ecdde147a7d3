"""Task source interface."""

from datetime import tzinfo
from typing import Protocol

from singletask.core.tasks import Task


class TaskSource(Protocol):
    """Interface for reading and completing tasks on a remote task API."""

    async def list_by_filter(
        self, token: str, filter_expression: str, tz: tzinfo = ...
    ) -> list[Task]:
        """Fetch every task matching a (possibly comma-separated) filter, sorted by due."""
        ...

    async def complete(self, token: str, task_id: str) -> str:
        """Mark a task complete. Returns an acknowledgement."""
        ...

    async def fetch_timezone(self, token: str) -> str:
        """Fetch the account's configured timezone name."""
        ...

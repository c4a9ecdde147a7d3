"""Todoist API adapter - HTTP client for task fetching and completion."""

import asyncio
import json
import logging
import uuid
from datetime import timezone, tzinfo

import requests

from singletask.core.tasks import Task, sort_by_due
from singletask.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

API_BASE = "https://api.todoist.com"
SYNC_URL = "/sync/v9/sync"
REST_TASKS_URL = "/rest/v2/tasks"
COMPLETED_ACK = "✓"


class TodoistAdapter:
    """
    Todoist API adapter.

    Implements TaskSource protocol. Blocking HTTP calls run on the default
    thread pool so callers on the event loop only suspend. No business
    logic - just I/O and decoding.
    """

    def __init__(
        self,
        base_url: str = API_BASE,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, endpoint: str, token: str, **kwargs) -> str:
        """Make authenticated API request, returning the response body."""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")
        try:
            resp = self._session.request(
                method,
                url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise TransportError(str(e), method=method, url=url) from e

        if not resp.ok:
            body = kwargs.get("json") or kwargs.get("params") or {}
            raise TransportError.from_response(method, endpoint, body, resp.text)
        return resp.text

    @staticmethod
    def _decode(text: str):
        try:
            return json.loads(text)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from task API: {e}") from e

    def _get_tasks_for_filter(self, token: str, sub_filter: str) -> list[Task]:
        text = self._request("GET", REST_TASKS_URL, token, params={"filter": sub_filter})
        return rest_json_to_tasks(self._decode(text))

    async def list_by_filter(
        self, token: str, filter_expression: str, tz: tzinfo = timezone.utc
    ) -> list[Task]:
        """
        Fetch tasks for every comma-separated sub-filter concurrently.

        Results are concatenated without de-duplication and sorted by due
        date-time. The first failing sub-filter fails the whole call.
        """
        sub_filters = filter_expression.split(",")
        results = await asyncio.gather(
            *(asyncio.to_thread(self._get_tasks_for_filter, token, f) for f in sub_filters)
        )

        tasks = [task for batch in results for task in batch]
        logger.debug(f"Fetched {len(tasks)} tasks for {len(sub_filters)} filter(s)")
        return sort_by_due(tasks, tz)

    def _complete(self, token: str, task_id: str) -> str:
        command_id = str(uuid.uuid4())
        body = {
            "commands": [
                {
                    "type": "item_close",
                    "uuid": command_id,
                    "temp_id": command_id,
                    "args": {"id": task_id},
                }
            ]
        }
        self._request("POST", SYNC_URL, token, json=body)
        return COMPLETED_ACK

    async def complete(self, token: str, task_id: str) -> str:
        """Close a task via the sync API. No retry on failure."""
        return await asyncio.to_thread(self._complete, token, task_id)

    def _fetch_timezone(self, token: str) -> str:
        body = {"resource_types": ["user"], "sync_token": "*"}
        data = self._decode(self._request("POST", SYNC_URL, token, json=body))
        try:
            return data["user"]["tz_info"]["timezone"]
        except (KeyError, TypeError) as e:
            raise DecodeError(f"Sync response has no user timezone: {e!r}") from e

    async def fetch_timezone(self, token: str) -> str:
        """Fetch the user's timezone name from the sync API."""
        return await asyncio.to_thread(self._fetch_timezone, token)


def rest_json_to_tasks(data) -> list[Task]:
    """Convert a REST task list payload into Tasks."""
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of tasks, got {type(data).__name__}")
    try:
        return [Task.from_api(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Malformed task in response: {e!r}") from e

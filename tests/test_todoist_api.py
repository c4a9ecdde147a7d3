"""Tests for the Todoist adapter, with HTTP mocked at the session."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from singletask.adapters.todoist_api import (
    COMPLETED_ACK,
    REST_TASKS_URL,
    SYNC_URL,
    TodoistAdapter,
    rest_json_to_tasks,
)
from singletask.errors import DecodeError, TransportError


def api_task(task_id: str, due: str | None = None) -> dict:
    return {
        "id": task_id,
        "content": f"Task {task_id}",
        "priority": 1,
        "project_id": "p1",
        "labels": [],
        "due": {"date": due, "is_recurring": False, "string": due, "timezone": None} if due else None,
    }


def response(payload=None, status: int = 200, text: str | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text if text is not None else json.dumps(payload)
    return resp


def session_for(by_filter: dict[str, MagicMock]) -> MagicMock:
    """Session whose GET responses depend on the `filter` query parameter."""
    session = MagicMock()

    def request(method, url, **kwargs):
        return by_filter[kwargs["params"]["filter"]]

    session.request.side_effect = request
    return session


class TestListByFilter:
    @pytest.mark.asyncio
    async def test_single_filter(self, tz):
        session = session_for({"today": response([api_task("1")])})
        adapter = TodoistAdapter(base_url="https://example.test", session=session)

        tasks = await adapter.list_by_filter("tok", "today", tz)

        assert [t.id for t in tasks] == ["1"]
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url == f"https://example.test{REST_TASKS_URL}"
        kwargs = session.request.call_args.kwargs
        assert kwargs["params"] == {"filter": "today"}
        assert kwargs["headers"]["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_multi_filter_merges_and_sorts(self, tz):
        session = session_for(
            {
                "A": response([api_task("a1", "2025-01-20"), api_task("a2")]),
                "B": response(
                    [
                        api_task("b1", "2025-01-15"),
                        api_task("b2", "2025-01-15T22:00:00"),
                        api_task("b3", "2025-01-16T08:00:00"),
                    ]
                ),
            }
        )
        adapter = TodoistAdapter(session=session)

        tasks = await adapter.list_by_filter("tok", "A,B", tz)

        assert len(tasks) == 5
        assert [t.id for t in tasks] == ["b2", "b1", "b3", "a1", "a2"]
        assert session.request.call_count == 2

    @pytest.mark.asyncio
    async def test_overlapping_filters_keep_duplicates(self, tz):
        session = session_for(
            {
                "A": response([api_task("1", "2025-01-15")]),
                "B": response([api_task("1", "2025-01-15")]),
            }
        )
        tasks = await TodoistAdapter(session=session).list_by_filter("tok", "A,B", tz)
        assert [t.id for t in tasks] == ["1", "1"]

    @pytest.mark.asyncio
    async def test_any_failing_filter_fails_the_call(self, tz):
        session = session_for(
            {
                "A": response([api_task("1")]),
                "B": response(status=403, text="Forbidden"),
            }
        )
        with pytest.raises(TransportError) as exc:
            await TodoistAdapter(session=session).list_by_filter("tok", "A,B", tz)
        assert "Forbidden" in exc.value.response
        assert exc.value.method == "GET"

    @pytest.mark.asyncio
    async def test_connection_error(self, tz):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("no route")
        with pytest.raises(TransportError, match="no route"):
            await TodoistAdapter(session=session).list_by_filter("tok", "today", tz)

    @pytest.mark.asyncio
    async def test_invalid_json(self, tz):
        session = session_for({"today": response(text="<html>oops</html>")})
        with pytest.raises(DecodeError):
            await TodoistAdapter(session=session).list_by_filter("tok", "today", tz)

    @pytest.mark.asyncio
    async def test_schema_mismatch(self, tz):
        session = session_for({"today": response([{"id": "1"}])})
        with pytest.raises(DecodeError):
            await TodoistAdapter(session=session).list_by_filter("tok", "today", tz)


class TestComplete:
    @pytest.mark.asyncio
    async def test_posts_item_close(self):
        session = MagicMock()
        session.request.return_value = response({"sync_status": {}})
        adapter = TodoistAdapter(base_url="https://example.test", session=session)

        ack = await adapter.complete("tok", "42")

        assert ack == COMPLETED_ACK
        method, url = session.request.call_args.args
        assert method == "POST"
        assert url == f"https://example.test{SYNC_URL}"
        (command,) = session.request.call_args.kwargs["json"]["commands"]
        assert command["type"] == "item_close"
        assert command["args"] == {"id": "42"}
        assert command["uuid"] == command["temp_id"]

    @pytest.mark.asyncio
    async def test_fresh_uuid_per_call(self):
        session = MagicMock()
        session.request.return_value = response({})
        adapter = TodoistAdapter(session=session)

        await adapter.complete("tok", "1")
        await adapter.complete("tok", "1")

        uuids = [c.kwargs["json"]["commands"][0]["uuid"] for c in session.request.call_args_list]
        assert uuids[0] != uuids[1]

    @pytest.mark.asyncio
    async def test_failure_is_typed_and_not_retried(self):
        session = MagicMock()
        session.request.return_value = response(status=500, text="server down")

        with pytest.raises(TransportError):
            await TodoistAdapter(session=session).complete("tok", "1")
        assert session.request.call_count == 1


class TestFetchTimezone:
    @pytest.mark.asyncio
    async def test_reads_user_timezone(self):
        session = MagicMock()
        session.request.return_value = response({"user": {"tz_info": {"timezone": "GMT -7:00"}}})

        assert await TodoistAdapter(session=session).fetch_timezone("tok") == "GMT -7:00"
        body = session.request.call_args.kwargs["json"]
        assert body == {"resource_types": ["user"], "sync_token": "*"}

    @pytest.mark.asyncio
    async def test_missing_user(self):
        session = MagicMock()
        session.request.return_value = response({"items": []})
        with pytest.raises(DecodeError):
            await TodoistAdapter(session=session).fetch_timezone("tok")


def test_rest_json_to_tasks_requires_list():
    with pytest.raises(DecodeError):
        rest_json_to_tasks({"tasks": []})

"""Tests for the tasks and lists endpoint wrappers."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from tempus_cli.exceptions import ServerError
from tempus_cli.services.api.lists import ListsAPI
from tempus_cli.services.api.tasks import TasksAPI, envelope_data


def _make_response(status_code: int = 200, json_data=None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "https://api.test/x")
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json_data, request=request)


def _mock_client(response: httpx.Response) -> MagicMock:
    client = MagicMock()
    for method in ("get", "post", "patch", "delete"):
        setattr(client, method, AsyncMock(return_value=response))
    return client


# ---------------------------------------------------------------------------
# envelope_data
# ---------------------------------------------------------------------------


def test_envelope_returns_data_field():
    assert envelope_data(_make_response(json_data={"message": "ok", "data": [1]})) == [1]


def test_envelope_falls_back_to_legacy_key():
    response = _make_response(json_data={"message": "ok", "tasksArr": [{"task_id": "1"}]})
    assert envelope_data(response, "tasksArr") == [{"task_id": "1"}]


def test_envelope_without_data_raises():
    with pytest.raises(ServerError, match="missing its data"):
        envelope_data(_make_response(json_data={"message": "ok"}))


def test_envelope_with_invalid_json_raises():
    with pytest.raises(ServerError, match="Malformed"):
        envelope_data(_make_response(text="not json"))


# ---------------------------------------------------------------------------
# TasksAPI
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_task_posts_payload():
    client = _mock_client(_make_response(json_data={"data": {"task_id": "9"}}))

    result = await TasksAPI(client).create_task({"task_name": "A"})

    assert result == {"task_id": "9"}
    client.post.assert_awaited_once_with("/task", json={"task_name": "A"}, fallback_message="Failed to add task")


@pytest.mark.asyncio
async def test_update_task_repeats_id_in_body():
    client = _mock_client(_make_response(json_data={"data": {"task_id": "9"}}))

    await TasksAPI(client).update_task("9", {"is_completed": True})

    client.patch.assert_awaited_once_with(
        "/task/9",
        json={"task_id": "9", "is_completed": True},
        fallback_message="Failed to update task",
    )


@pytest.mark.asyncio
async def test_delete_task():
    client = _mock_client(_make_response(json_data={"message": "deleted", "data": None}))

    assert await TasksAPI(client).delete_task("9") is None
    client.delete.assert_awaited_once_with("/task/9", fallback_message="Failed to delete task")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call,args,path,fallback",
    [
        ("get_task", ("9",), "/task/9", "Failed to fetch task"),
        ("tasks_by_day", ("2025-04-14",), "/tasks/day/2025-04-14", "Failed to fetch tasks"),
        ("tasks_by_month", (4, 2025), "/tasks/month/4/2025", "Failed to fetch tasks by month"),
        ("tasks_by_year", (2025,), "/tasks/year/2025", "Failed to fetch tasks by year"),
        ("tasks_by_list", ("7",), "/tasks/list/7", "Failed to fetch tasks by list ID"),
    ],
)
async def test_query_paths(call, args, path, fallback):
    client = _mock_client(_make_response(json_data={"data": []}))

    await getattr(TasksAPI(client), call)(*args)

    client.get.assert_awaited_once_with(path, fallback_message=fallback)


@pytest.mark.asyncio
async def test_null_collection_becomes_empty_list():
    client = _mock_client(_make_response(json_data={"data": None}))
    assert await TasksAPI(client).tasks_by_month(4, 2025) == []


# ---------------------------------------------------------------------------
# ListsAPI
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_list_posts_payload():
    client = _mock_client(_make_response(json_data={"data": {"list_id": 3}}))

    result = await ListsAPI(client).create_list({"list_name": "Home"})

    assert result == {"list_id": 3}
    client.post.assert_awaited_once_with("/list", json={"list_name": "Home"}, fallback_message="Failed to add list")


@pytest.mark.asyncio
async def test_get_lists_accepts_legacy_key():
    client = _mock_client(_make_response(json_data={"listsArr": [{"list_id": 1}]}))

    assert await ListsAPI(client).get_lists() == [{"list_id": 1}]
    client.get.assert_awaited_once_with("/lists", fallback_message="Failed to fetch lists")

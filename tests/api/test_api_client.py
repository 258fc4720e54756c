"""Tests for API client."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tempus_cli.exceptions import AuthError, NetworkError, ServerError
from tempus_cli.models.config_models import DEFAULT_ENDPOINT
from tempus_cli.services.api.client import APIClient, error_message
from tempus_cli.services.auth_service import StaticTokenIdentity


def _make_client(tmp_config, handler, token="tok-123"):
    return APIClient(
        identity=StaticTokenIdentity(token),
        config_service=tmp_config,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_client_initialization(tmp_config):
    """Test API client initialization."""
    client = APIClient(identity=StaticTokenIdentity("t"), config_service=tmp_config)
    assert client.base_url == DEFAULT_ENDPOINT
    assert client.timeout == 30
    assert client.retry == 0
    assert client._client is None


@pytest.mark.asyncio
async def test_request_sends_bearer_token_and_json(tmp_config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": "ok", "data": {}})

    async with _make_client(tmp_config, handler) as client:
        response = await client.post("/task", json={"task_name": "A"})

    assert response.status_code == 200
    assert seen["auth"] == "Bearer tok-123"
    assert seen["url"] == f"{DEFAULT_ENDPOINT}/task"
    assert seen["body"] == {"task_name": "A"}


@pytest.mark.asyncio
async def test_missing_token_fails_before_any_request(tmp_config):
    handler = AsyncMock()

    client = _make_client(tmp_config, handler, token=None)
    with pytest.raises(AuthError, match="No auth token available"):
        await client.get("/lists")

    handler.assert_not_called()
    assert client._client is None


@pytest.mark.asyncio
async def test_401_maps_to_auth_error_with_server_message(tmp_config):
    def handler(request):
        return httpx.Response(401, json={"message": "Token expired"})

    async with _make_client(tmp_config, handler) as client:
        with pytest.raises(AuthError, match="Token expired"):
            await client.get("/lists")


@pytest.mark.asyncio
async def test_server_message_is_propagated_verbatim(tmp_config):
    def handler(request):
        return httpx.Response(400, json={"message": "task_name is required"})

    async with _make_client(tmp_config, handler) as client:
        with pytest.raises(ServerError) as exc_info:
            await client.post("/task", json={}, fallback_message="Failed to add task")

    assert exc_info.value.message == "task_name is required"
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_fallback_message_used_without_server_message(tmp_config):
    def handler(request):
        return httpx.Response(500, text="<html>Internal error</html>")

    async with _make_client(tmp_config, handler) as client:
        with pytest.raises(ServerError, match="Failed to fetch tasks by month"):
            await client.get("/tasks/month/4/2025", fallback_message="Failed to fetch tasks by month")


@pytest.mark.asyncio
async def test_http_errors_are_not_retried(tmp_config):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, json={"message": "busy"})

    tmp_config.set("api.retry", 3)
    async with _make_client(tmp_config, handler) as client:
        with pytest.raises(ServerError):
            await client.get("/lists")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_connection_error_becomes_network_error(tmp_config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _make_client(tmp_config, handler) as client:
        with pytest.raises(NetworkError, match="Failed to fetch lists"):
            await client.get("/lists", fallback_message="Failed to fetch lists")


@pytest.mark.asyncio
async def test_connection_errors_are_retried_when_configured(tmp_config):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("flaky", request=request)
        return httpx.Response(200, json={"data": []})

    tmp_config.set("api.retry", 2)
    with patch("tempus_cli.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
        async with _make_client(tmp_config, handler) as client:
            response = await client.get("/lists")

    assert response.status_code == 200
    assert len(calls) == 3
    assert [c.args[0] for c in sleep.await_args_list] == [1, 2]


@pytest.mark.asyncio
async def test_read_timeout_is_not_retried(tmp_config):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ReadTimeout("no answer", request=request)

    tmp_config.set("api.retry", 3)
    with patch("tempus_cli.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
        async with _make_client(tmp_config, handler) as client:
            with pytest.raises(NetworkError, match="Failed to create task"):
                await client.post(
                    "/task", json={"task_name": "A"}, fallback_message="Failed to create task"
                )

    assert len(calls) == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_close_resets_client(tmp_config):
    client = _make_client(tmp_config, lambda request: httpx.Response(200, json={"data": None}))
    await client.delete("/task/1")
    assert client._client is not None

    await client.close()
    assert client._client is None


def test_error_message_prefers_server_message():
    assert error_message(httpx.Response(400, json={"message": "bad"}), "fallback") == "bad"
    assert error_message(httpx.Response(400, json={"message": ""}), "fallback") == "fallback"
    assert error_message(httpx.Response(400, json=["x"]), "fallback") == "fallback"
    assert error_message(httpx.Response(400, text="nope"), "fallback") == "fallback"

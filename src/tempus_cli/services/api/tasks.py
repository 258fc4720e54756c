"""Tasks API endpoints.

Every endpoint answers ``{"message": ..., "data": ...}``. These functions
return the decoded ``data`` part as plain dicts; turning them into models is
the adapter's job.
"""

from typing import Any

import httpx

from tempus_cli.exceptions import ServerError
from tempus_cli.services.api.client import APIClient


def envelope_data(response: httpx.Response, legacy_key: str | None = None) -> Any:
    """Extract ``data`` from a response envelope.

    Older backend versions sent collections under ``tasksArr`` / ``listsArr``;
    ``legacy_key`` names that fallback.
    """
    try:
        body = response.json()
    except ValueError as e:
        raise ServerError("Malformed response from server", response.status_code) from e

    if not isinstance(body, dict):
        return body
    if "data" in body:
        return body["data"]
    if legacy_key and legacy_key in body:
        return body[legacy_key]
    raise ServerError("Response is missing its data field", response.status_code)


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def create_task(self, payload: dict[str, Any]) -> dict:
        """Create a new task; the server assigns its id and timestamps."""
        response = await self.client.post(
            "/task", json=payload, fallback_message="Failed to add task"
        )
        return envelope_data(response)

    async def get_task(self, task_id: str) -> dict:
        """Get a specific task by ID."""
        response = await self.client.get(
            f"/task/{task_id}", fallback_message="Failed to fetch task"
        )
        return envelope_data(response)

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> dict:
        """Send a partial update. ``task_id`` is repeated in the body as the API expects."""
        response = await self.client.patch(
            f"/task/{task_id}",
            json={"task_id": task_id, **changes},
            fallback_message="Failed to update task",
        )
        return envelope_data(response)

    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        await self.client.delete(
            f"/task/{task_id}", fallback_message="Failed to delete task"
        )

    async def tasks_by_day(self, day: str) -> list[dict]:
        """Tasks starting on ``day`` (``YYYY-MM-DD``)."""
        response = await self.client.get(
            f"/tasks/day/{day}", fallback_message="Failed to fetch tasks"
        )
        return envelope_data(response, "tasksArr") or []

    async def tasks_by_month(self, month: int, year: int) -> list[dict]:
        """Tasks of a calendar month; ``month`` is 1-indexed."""
        response = await self.client.get(
            f"/tasks/month/{month}/{year}",
            fallback_message="Failed to fetch tasks by month",
        )
        return envelope_data(response, "tasksArr") or []

    async def tasks_by_year(self, year: int) -> list[dict]:
        """Tasks of a whole year."""
        response = await self.client.get(
            f"/tasks/year/{year}", fallback_message="Failed to fetch tasks by year"
        )
        return envelope_data(response, "tasksArr") or []

    async def tasks_by_list(self, list_id: str) -> list[dict]:
        """Tasks belonging to one list."""
        response = await self.client.get(
            f"/tasks/list/{list_id}",
            fallback_message="Failed to fetch tasks by list ID",
        )
        return envelope_data(response, "tasksArr") or []

"""Lists API endpoints."""

from typing import Any

from tempus_cli.services.api.client import APIClient
from tempus_cli.services.api.tasks import envelope_data


class ListsAPI:
    """Lists API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def create_list(self, payload: dict[str, Any]) -> dict:
        """Create a new list."""
        response = await self.client.post(
            "/list", json=payload, fallback_message="Failed to add list"
        )
        return envelope_data(response)

    async def get_lists(self) -> list[dict]:
        """All lists of the signed-in user."""
        response = await self.client.get("/lists", fallback_message="Failed to fetch lists")
        return envelope_data(response, "listsArr") or []

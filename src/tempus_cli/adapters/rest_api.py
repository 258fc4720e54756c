"""REST API adapter - TaskGateway implementation using the Tempus REST API.

This adapter wraps the endpoint clients and turns their dicts into models.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from tempus_cli.exceptions import ServerError
from tempus_cli.models import Task, TaskCreate, TaskList, TaskListCreate, TaskUpdate
from tempus_cli.repositories.repository import TaskGateway
from tempus_cli.services.api.client import APIClient
from tempus_cli.services.api.lists import ListsAPI
from tempus_cli.services.api.tasks import TasksAPI


def _decode(model, data):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ServerError(f"Unexpected {model.__name__} shape from server: {e}") from e


def _decode_many(model, items) -> list:
    if not isinstance(items, list):
        raise ServerError(f"Expected a list of {model.__name__} from server")
    return [_decode(model, item) for item in items]


class RestApiGateway(TaskGateway):
    """TaskGateway implementation over HTTP."""

    def __init__(self, client: APIClient | None = None):
        self._client = client
        self._tasks_api: TasksAPI | None = None
        self._lists_api: ListsAPI | None = None

    @property
    def client(self) -> APIClient:
        if self._client is None:
            self._client = APIClient()
        return self._client

    @property
    def tasks_api(self) -> TasksAPI:
        """Get or create TasksAPI instance."""
        if self._tasks_api is None:
            self._tasks_api = TasksAPI(self.client)
        return self._tasks_api

    @property
    def lists_api(self) -> ListsAPI:
        """Get or create ListsAPI instance."""
        if self._lists_api is None:
            self._lists_api = ListsAPI(self.client)
        return self._lists_api

    async def create_task(self, task_data: TaskCreate) -> Task:
        result = await self.tasks_api.create_task(task_data.to_payload())
        return _decode(Task, result)

    async def get_task(self, task_id: str) -> Task:
        result = await self.tasks_api.get_task(task_id)
        return _decode(Task, result)

    async def update_task(self, update: TaskUpdate) -> Task:
        result = await self.tasks_api.update_task(update.task_id, update.changes())
        return _decode(Task, result)

    async def delete_task(self, task_id: str) -> None:
        await self.tasks_api.delete_task(task_id)

    async def tasks_by_day(self, day: str) -> list[Task]:
        return _decode_many(Task, await self.tasks_api.tasks_by_day(day))

    async def tasks_by_month(self, month: int, year: int) -> list[Task]:
        return _decode_many(Task, await self.tasks_api.tasks_by_month(month, year))

    async def tasks_by_year(self, year: int) -> list[Task]:
        return _decode_many(Task, await self.tasks_api.tasks_by_year(year))

    async def tasks_by_list(self, list_id: str) -> list[Task]:
        return _decode_many(Task, await self.tasks_api.tasks_by_list(list_id))

    async def create_list(self, list_data: TaskListCreate) -> TaskList:
        result = await self.lists_api.create_list(list_data.to_payload())
        return _decode(TaskList, result)

    async def get_lists(self) -> list[TaskList]:
        return _decode_many(TaskList, await self.lists_api.get_lists())

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

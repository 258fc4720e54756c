"""Lists screen: the list overview and the tasks of one selected list."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from tempus_cli.exceptions import ValidationError
from tempus_cli.models import Err, Result, Task, TaskList
from tempus_cli.services.task_store import LISTS, TASKS, StoreEvent, TaskStore

OVERVIEW_TITLE = "My Lists"


class ListsView:
    """State behind the lists screen."""

    def __init__(self, store: TaskStore):
        self.store = store
        self.selected_list: TaskList | None = None
        self.last_error: Err | None = None
        self.notice: str | None = None
        self._unsubscribe = store.subscribe(self._on_store_event)

    def _on_store_event(self, event: StoreEvent) -> None:
        if event.kind == "toggle_rolled_back":
            self.notice = f"Could not update task: {event.error}"

    def close(self) -> None:
        self._unsubscribe()

    @property
    def title(self) -> str:
        return self.selected_list.list_name if self.selected_list else OVERVIEW_TITLE

    @property
    def lists(self) -> list[TaskList]:
        return list(self.store.lists)

    @property
    def tasks(self) -> list[Task]:
        """Tasks of the selected list; empty on the overview."""
        if self.selected_list is None:
            return []
        return self.store.tasks_for_list(self.selected_list.list_id)

    @property
    def loading(self) -> bool:
        resource = TASKS if self.selected_list else LISTS
        return self.store.status(resource).loading

    @property
    def error(self) -> str | None:
        resource = TASKS if self.selected_list else LISTS
        return self.store.status(resource).error

    def _remember(self, result: Result) -> Result:
        self.last_error = None if result.ok else result
        return result

    async def refresh(self) -> Result[list[TaskList]]:
        return self._remember(await self.store.attempt(self.store.load_lists()))

    async def select_list(self, list_id: str) -> Result[list[Task]]:
        """Open a list and load its tasks. The list must be among the loaded lists."""
        match = next((lst for lst in self.store.lists if lst.list_id == str(list_id)), None)
        if match is None:
            error = ValidationError(f"No list with id {list_id}")
            return self._remember(Err(error.kind, error.message, error))

        self.selected_list = match
        return self._remember(
            await self.store.attempt(self.store.load_tasks_for_list(match.list_id))
        )

    def back(self) -> None:
        """Return to the overview."""
        self.selected_list = None

    async def add_list(self, data: Mapping[str, Any]) -> Result[TaskList]:
        return self._remember(await self.store.attempt(self.store.create_list(data)))

    async def add_task(self, data: Mapping[str, Any]) -> Result[Task]:
        """Create a task, filed under the selected list unless one is given."""
        payload = dict(data)
        if self.selected_list is not None and not payload.get("task_list_id"):
            payload["task_list_id"] = self.selected_list.list_id
        return self._remember(await self.store.attempt(self.store.create_task(payload)))

    async def delete_task(self, task_id: str) -> Result[None]:
        return self._remember(await self.store.attempt(self.store.delete_task(task_id)))

    def toggle(self, task: Task, is_completed: bool) -> asyncio.Future:
        self.notice = None
        return self.store.toggle_task_completion(task, is_completed)

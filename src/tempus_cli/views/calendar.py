"""Calendar screen: one month window, a selected day, and its tasks."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from tempus_cli.exceptions import ParseError
from tempus_cli.models import Err, Result, Task
from tempus_cli.services.task_store import TASKS, StoreEvent, TaskStore
from tempus_cli.utils.dates import (
    format_short_label,
    in_window,
    parse_date,
    to_date_key,
    window_key,
)

MARK_COLOR = "#5D87FF"


def _date_key_or_none(task: Task) -> str | None:
    try:
        return task.start_date_key
    except ParseError:
        return None


@dataclass
class DaySection:
    """Tasks of one day under a short header such as ``14 Apr``."""

    date_key: str
    label: str
    tasks: list[Task] = field(default_factory=list)


class CalendarView:
    """State behind the calendar screen.

    The view never touches the cache directly. It reads the window partition
    of its store and sends every change through the store.
    """

    def __init__(self, store: TaskStore, *, selected_date: Any = None):
        self.store = store
        self.selected_date = to_date_key(selected_date or date.today())
        day = parse_date(self.selected_date)
        self.month = day.month
        self.year = day.year
        self.last_error: Err | None = None
        self.notice: str | None = None
        self.revision = 0
        self._unsubscribe = store.subscribe(self._on_store_event)

    def _on_store_event(self, event: StoreEvent) -> None:
        self.revision += 1
        if event.kind == "toggle_rolled_back":
            self.notice = f"Could not update task: {event.error}"

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()

    @property
    def window_key(self) -> str:
        return window_key(self.month, self.year)

    @property
    def loading(self) -> bool:
        return self.store.status(TASKS).loading

    @property
    def error(self) -> str | None:
        return self.store.status(TASKS).error

    @property
    def tasks(self) -> list[Task]:
        """Every cached task of the visible month."""
        return self.store.window(self.month, self.year)

    async def refresh(self) -> Result[list[Task]]:
        """Reload the visible month; cached tasks stay visible on failure."""
        result = await self.store.attempt(
            self.store.load_tasks_for_window(self.month, self.year)
        )
        self.last_error = None if result.ok else result
        return result

    async def change_month(self, month: int, year: int) -> Result[list[Task]]:
        window_key(month, year)
        self.month = month
        self.year = year
        return await self.refresh()

    def select_date(self, value: Any) -> bool:
        """Select a day. Returns True when it lies outside the visible month."""
        self.selected_date = to_date_key(value)
        return not in_window(self.selected_date, self.month, self.year)

    def tasks_for_selected_date(self) -> list[Task]:
        return [t for t in self.tasks if _date_key_or_none(t) == self.selected_date]

    def section(self) -> DaySection:
        return DaySection(
            date_key=self.selected_date,
            label=format_short_label(self.selected_date),
            tasks=self.tasks_for_selected_date(),
        )

    def marked_dates(self) -> dict[str, dict[str, Any]]:
        """Calendar markings: a dot on days with tasks, a highlight on the selected day."""
        marked: dict[str, dict[str, Any]] = {}
        for task in self.tasks:
            key = _date_key_or_none(task)
            if key:
                marked.setdefault(key, {}).update(marked=True, dotColor=MARK_COLOR)

        marked.setdefault(self.selected_date, {}).update(
            selected=True, selectedColor=MARK_COLOR
        )
        return marked

    async def add_task(self, data: Mapping[str, Any]) -> Result[Task]:
        """Create a task, scheduled on the selected day unless a start date is given."""
        payload = dict(data)
        if not payload.get("task_start_date"):
            payload["task_start_date"] = self.selected_date
        return await self.store.attempt(self.store.create_task(payload))

    async def delete_task(self, task_id: str) -> Result[None]:
        return await self.store.attempt(self.store.delete_task(task_id))

    def toggle(self, task: Task, is_completed: bool) -> asyncio.Future:
        self.notice = None
        return self.store.toggle_task_completion(task, is_completed)

"""Client-side state store for tasks and lists.

The store keeps three caches:

- ``tasks_by_window``: tasks of a calendar month, keyed ``YYYY-MM``
- ``tasks_by_list``: tasks of a list, keyed by ``list_id``
- ``lists``: every list of the user, unpartitioned

The window and list partitions are independent. Editing a task refreshes
whichever partitions currently hold it, but a partition is never populated
from another one; loading a window or a list always goes to the server.

All mutations go through the gateway. Every gateway call is one suspension
point; partitions are replaced wholesale between suspension points, so an
out-of-order response can show a stale page but never a half-merged one.

Completion toggling is optimistic: the cache changes before the request is
sent, and is rolled back to the captured prior value when the request fails.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from tempus_cli.exceptions import ParseError, TempusError, ValidationError
from tempus_cli.models import (
    Err,
    Ok,
    Result,
    Task,
    TaskCreate,
    TaskList,
    TaskListCreate,
    TaskUpdate,
    validate_list_for_create,
    validate_task_for_create,
    validate_task_update,
)
from tempus_cli.repositories import TaskGateway
from tempus_cli.utils.dates import DEFAULT_MIN_DELTA_MINUTES, to_date_key, window_key, window_key_for
from tempus_cli.utils.logger import get_logger

T = TypeVar("T")

TASKS = "tasks"
LISTS = "lists"

WINDOW = "window"
LIST = "list"

PartitionKey = tuple[str, str]
Listener = Callable[["StoreEvent"], None]


class CompletionState(str, Enum):
    """Completion state of an event task, including in-flight toggles."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    TOGGLING_TO_COMPLETED = "TogglingToCompleted"
    TOGGLING_TO_PENDING = "TogglingToPending"


@dataclass
class ResourceStatus:
    """Coarse loading/error flags for one resource class."""

    loading: bool = False
    error: str | None = None


@dataclass(frozen=True)
class StoreEvent:
    """Notification sent to subscribers after the store state changed.

    ``kind`` is one of ``window_loaded``, ``window_failed``,
    ``list_tasks_loaded``, ``list_tasks_failed``, ``lists_loaded``,
    ``lists_failed``, ``task_created``, ``task_updated``, ``task_deleted``,
    ``list_created``, ``toggle_applied``, ``toggle_confirmed`` or
    ``toggle_rolled_back``.
    """

    kind: str
    key: str | None = None
    task_id: str | None = None
    error: Exception | None = None


@dataclass
class _PendingToggle:
    value: bool
    previous: dict[PartitionKey, bool | None] = field(default_factory=dict)


class TaskStore:
    """Cache of tasks and lists mediating every change through a gateway.

    Construct one per session and hand it to the views; there is no module
    level instance.
    """

    def __init__(
        self,
        gateway: TaskGateway,
        *,
        min_event_minutes: int = DEFAULT_MIN_DELTA_MINUTES,
        palette_seed: int | None = None,
    ):
        self.gateway = gateway
        self.min_event_minutes = min_event_minutes
        self.palette_seed = palette_seed

        self.tasks_by_window: dict[str, list[Task]] = {}
        self.tasks_by_list: dict[str, list[Task]] = {}
        self.lists: list[TaskList] = []

        self._status = {TASKS: ResourceStatus(), LISTS: ResourceStatus()}
        self._inflight = {TASKS: 0, LISTS: 0}
        self._listeners: list[Listener] = []
        self._toggles: dict[str, list[_PendingToggle]] = {}
        self._toggle_locks: dict[str, asyncio.Lock] = {}
        self.logger = get_logger("store")

    # ------------------------------------------------------------------
    # Subscriptions and status
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def status(self, resource: str) -> ResourceStatus:
        """Snapshot of the loading/error flags for ``tasks`` or ``lists``."""
        current = self._status[resource]
        return ResourceStatus(loading=current.loading, error=current.error)

    def _begin(self, resource: str) -> None:
        self._inflight[resource] += 1
        self._status[resource].loading = True

    def _end(self, resource: str) -> None:
        self._inflight[resource] -= 1
        self._status[resource].loading = self._inflight[resource] > 0

    @staticmethod
    async def attempt(awaitable: Awaitable[T]) -> Result[T]:
        """Await a store operation and return ``Ok`` or ``Err`` instead of raising."""
        try:
            return Ok(await awaitable)
        except TempusError as e:
            return Err(e.kind, e.message or str(e) or type(e).__name__, e)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def window(self, month: int, year: int) -> list[Task]:
        """Cached tasks of a window; empty when it was never loaded."""
        return list(self.tasks_by_window.get(window_key(month, year), []))

    def is_window_loaded(self, month: int, year: int) -> bool:
        return window_key(month, year) in self.tasks_by_window

    def tasks_for_list(self, list_id: str) -> list[Task]:
        """Cached tasks of a list; empty when it was never loaded."""
        return list(self.tasks_by_list.get(str(list_id), []))

    def find_task(self, task_id: str) -> Task | None:
        """First cached copy of a task, searching windows then lists."""
        for _, partition in self._partitions():
            for task in partition:
                if task.task_id == task_id:
                    return task
        return None

    def completion_state(self, task_id: str) -> CompletionState | None:
        """Completion state of an event task; ``None`` for unknown or non-event tasks."""
        pending = self._toggles.get(task_id)
        if pending:
            if pending[-1].value:
                return CompletionState.TOGGLING_TO_COMPLETED
            return CompletionState.TOGGLING_TO_PENDING

        task = self.find_task(task_id)
        if task is None or not task.is_event:
            return None
        return CompletionState.COMPLETED if task.is_completed else CompletionState.PENDING

    async def load_tasks_for_window(self, month: int, year: int) -> list[Task]:
        """Fetch a month and replace its partition.

        On failure the previous partition stays in place, the ``tasks`` error
        flag carries the message, and the error is re-raised.
        """
        key = window_key(month, year)
        self._begin(TASKS)
        try:
            tasks = await self.gateway.tasks_by_month(month, year)
        except Exception as e:
            self._status[TASKS].error = str(e) or "Error fetching tasks"
            self.logger.warning("loading window %s failed: %s", key, e)
            self._notify(StoreEvent("window_failed", key=key, error=e))
            raise
        else:
            self.tasks_by_window[key] = list(tasks)
            self._status[TASKS].error = None
            self.logger.info("loaded window %s (%d tasks)", key, len(tasks))
            self._notify(StoreEvent("window_loaded", key=key))
            return list(tasks)
        finally:
            self._end(TASKS)

    async def load_tasks_for_list(self, list_id: str) -> list[Task]:
        """Fetch a list's tasks and replace its partition; same failure rules as windows."""
        key = str(list_id)
        self._begin(TASKS)
        try:
            tasks = await self.gateway.tasks_by_list(key)
        except Exception as e:
            self._status[TASKS].error = str(e) or "Error fetching tasks"
            self.logger.warning("loading list %s tasks failed: %s", key, e)
            self._notify(StoreEvent("list_tasks_failed", key=key, error=e))
            raise
        else:
            self.tasks_by_list[key] = list(tasks)
            self._status[TASKS].error = None
            self.logger.info("loaded list %s (%d tasks)", key, len(tasks))
            self._notify(StoreEvent("list_tasks_loaded", key=key))
            return list(tasks)
        finally:
            self._end(TASKS)

    async def load_lists(self) -> list[TaskList]:
        """Fetch every list and replace the cache; keeps the old one on failure."""
        self._begin(LISTS)
        try:
            lists = await self.gateway.get_lists()
        except Exception as e:
            self._status[LISTS].error = str(e) or "Error fetching lists"
            self.logger.warning("loading lists failed: %s", e)
            self._notify(StoreEvent("lists_failed", error=e))
            raise
        else:
            self.lists = list(lists)
            self._status[LISTS].error = None
            self.logger.info("loaded %d lists", len(lists))
            self._notify(StoreEvent("lists_loaded"))
            return list(lists)
        finally:
            self._end(LISTS)

    async def get_task(self, task_id: str) -> Task:
        """Fetch one task and refresh any cached copies of it."""
        task = await self.gateway.get_task(task_id)
        if self._replace_everywhere(task):
            self._notify(StoreEvent("task_updated", task_id=task.task_id))
        return task

    async def fetch_tasks_for_day(self, day: Any) -> list[Task]:
        """Uncached query for tasks starting on one day."""
        return await self.gateway.tasks_by_day(to_date_key(day))

    async def fetch_tasks_for_year(self, year: int) -> list[Task]:
        """Uncached query for a whole year."""
        window_key(1, year)  # validates the year
        return await self.gateway.tasks_by_year(year)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_task(self, data: Mapping[str, Any] | TaskCreate) -> Task:
        """Validate, create on the server, then add the server copy to loaded partitions."""
        payload = validate_task_for_create(data, min_delta_minutes=self.min_event_minutes)
        task = await self.gateway.create_task(payload)

        key = self._window_key_of(task)
        if key is not None and key in self.tasks_by_window:
            self.tasks_by_window[key] = self._upsert(self.tasks_by_window[key], task)
        if task.task_list_id is not None and task.task_list_id in self.tasks_by_list:
            list_key = task.task_list_id
            self.tasks_by_list[list_key] = self._upsert(self.tasks_by_list[list_key], task)

        self.logger.info("created task %s", task.task_id)
        self._notify(StoreEvent("task_created", key=key, task_id=task.task_id))
        return task

    async def create_list(self, data: Mapping[str, Any] | TaskListCreate) -> TaskList:
        """Validate, create on the server, then append to ``lists``."""
        payload = validate_list_for_create(data, seed=self.palette_seed)
        created = await self.gateway.create_list(payload)
        self.lists = [*self.lists, created]
        self.logger.info("created list %s", created.list_id)
        self._notify(StoreEvent("list_created", key=created.list_id))
        return created

    async def update_task(self, update: TaskUpdate | Mapping[str, Any]) -> Task:
        """Send only the changed fields; replace the task wherever it is cached."""
        update = validate_task_update(update, min_delta_minutes=self.min_event_minutes)
        if not update.changes():
            raise ValidationError("No fields to update")

        task = await self.gateway.update_task(update)
        self._replace_everywhere(task)
        self.logger.info("updated task %s (%s)", task.task_id, ", ".join(update.changes()))
        self._notify(StoreEvent("task_updated", task_id=task.task_id))
        return task

    async def delete_task(self, task_id: str) -> None:
        """Delete on the server, then drop the task from every partition."""
        if not task_id:
            raise ValidationError("task_id is required to delete a task")

        await self.gateway.delete_task(task_id)
        for pkey, partition in list(self._partitions()):
            if any(t.task_id == task_id for t in partition):
                self._store_partition(pkey, [t for t in partition if t.task_id != task_id])

        self.logger.info("deleted task %s", task_id)
        self._notify(StoreEvent("task_deleted", task_id=task_id))

    def toggle_task_completion(self, task: Task, is_completed: bool) -> asyncio.Future:
        """Optimistically set ``is_completed`` and confirm it with the server.

        Must be called from a running event loop. The cache is updated before
        this method returns; the returned future resolves to the server copy,
        or raises the gateway error after the cache has been rolled back.
        Non-event tasks are left alone and the future resolves to ``None``.
        """
        loop = asyncio.get_running_loop()
        if not task.is_event:
            self.logger.debug("ignoring completion toggle on non-event task %s", task.task_id)
            done = loop.create_future()
            done.set_result(None)
            return done

        task_id = task.task_id
        pending = _PendingToggle(value=is_completed)
        pending.previous = self._set_completion(task_id, is_completed)
        self._toggles.setdefault(task_id, []).append(pending)
        self._notify(StoreEvent("toggle_applied", task_id=task_id))

        return asyncio.ensure_future(self._confirm_toggle(task_id, pending))

    async def _confirm_toggle(self, task_id: str, pending: _PendingToggle) -> Task:
        # Requests for one task go out in the order the toggles were issued.
        lock = self._toggle_locks.setdefault(task_id, asyncio.Lock())
        try:
            async with lock:
                server_task = await self.gateway.update_task(
                    TaskUpdate(task_id=task_id, is_completed=pending.value)
                )
        except Exception as e:
            self._rollback_toggle(task_id, pending)
            self.logger.warning("completion toggle on %s rolled back: %s", task_id, e)
            self._notify(StoreEvent("toggle_rolled_back", task_id=task_id, error=e))
            raise

        is_latest = self._toggles[task_id][-1] is pending
        self._forget_toggle(task_id, pending)
        if is_latest:
            self._replace_everywhere(server_task)
        self._notify(StoreEvent("toggle_confirmed", task_id=task_id))
        return server_task

    def _rollback_toggle(self, task_id: str, pending: _PendingToggle) -> None:
        queue = self._toggles[task_id]
        index = queue.index(pending)
        if index + 1 < len(queue):
            # A later toggle already overwrote the cache; it inherits our
            # prior value so that its own rollback lands on real server state.
            successor = queue[index + 1]
            for pkey, value in pending.previous.items():
                if pkey in successor.previous:
                    successor.previous[pkey] = value
        else:
            for pkey, value in pending.previous.items():
                self._replace_in_partition(
                    pkey, task_id, lambda t, v=value: t.model_copy(update={"is_completed": v})
                )
        self._forget_toggle(task_id, pending)

    def _forget_toggle(self, task_id: str, pending: _PendingToggle) -> None:
        queue = self._toggles[task_id]
        queue.remove(pending)
        if not queue:
            del self._toggles[task_id]
            self._toggle_locks.pop(task_id, None)

    def clear(self) -> None:
        """Drop every cached partition, e.g. after signing out."""
        self.tasks_by_window.clear()
        self.tasks_by_list.clear()
        self.lists = []
        for status in self._status.values():
            status.error = None

    # ------------------------------------------------------------------
    # Partition helpers
    # ------------------------------------------------------------------

    def _partitions(self) -> Iterator[tuple[PartitionKey, list[Task]]]:
        for key, tasks in self.tasks_by_window.items():
            yield (WINDOW, key), tasks
        for key, tasks in self.tasks_by_list.items():
            yield (LIST, key), tasks

    def _store_partition(self, pkey: PartitionKey, tasks: list[Task]) -> None:
        kind, key = pkey
        if kind == WINDOW:
            self.tasks_by_window[key] = tasks
        else:
            self.tasks_by_list[key] = tasks

    def _replace_in_partition(
        self, pkey: PartitionKey, task_id: str, change: Callable[[Task], Task]
    ) -> bool:
        kind, key = pkey
        partition = (self.tasks_by_window if kind == WINDOW else self.tasks_by_list).get(key)
        if partition is None or not any(t.task_id == task_id for t in partition):
            return False
        self._store_partition(
            pkey, [change(t) if t.task_id == task_id else t for t in partition]
        )
        return True

    def _replace_everywhere(self, task: Task) -> list[PartitionKey]:
        touched = []
        for pkey, _ in list(self._partitions()):
            if self._replace_in_partition(pkey, task.task_id, lambda _old: task):
                touched.append(pkey)
        return touched

    def _set_completion(self, task_id: str, value: bool) -> dict[PartitionKey, bool | None]:
        previous: dict[PartitionKey, bool | None] = {}
        for pkey, partition in list(self._partitions()):
            for t in partition:
                if t.task_id == task_id:
                    previous[pkey] = t.is_completed
                    break
            else:
                continue
            self._replace_in_partition(
                pkey, task_id, lambda t: t.model_copy(update={"is_completed": value})
            )
        return previous

    @staticmethod
    def _upsert(partition: list[Task], task: Task) -> list[Task]:
        if any(t.task_id == task.task_id for t in partition):
            return [task if t.task_id == task.task_id else t for t in partition]
        return [*partition, task]

    def _window_key_of(self, task: Task) -> str | None:
        if not task.task_start_date:
            return None
        try:
            return window_key_for(task.task_start_date)
        except ParseError:
            self.logger.warning(
                "task %s has unparseable start date %r", task.task_id, task.task_start_date
            )
            return None

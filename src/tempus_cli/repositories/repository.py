"""Gateway abstraction for Tempus CLI.

The task store talks to persistence only through ``TaskGateway``, following
the Ports & Adapters pattern: the REST adapter implements it against the
Tempus API, and tests substitute fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tempus_cli.models import Task, TaskCreate, TaskList, TaskListCreate, TaskUpdate


class TaskGateway(ABC):
    """Abstract base class for remote task and list operations.

    Every method is a single suspension point. Implementations raise
    ``AuthError``, ``NetworkError`` or ``ServerError`` and never retry on
    behalf of the caller.
    """

    @abstractmethod
    async def create_task(self, task_data: TaskCreate) -> Task:
        """Create a task and return the server copy with its assigned id."""
        raise NotImplementedError("TaskGateway.create_task() must be implemented by adapter")

    @abstractmethod
    async def get_task(self, task_id: str) -> Task:
        """Fetch one task."""
        raise NotImplementedError("TaskGateway.get_task() must be implemented by adapter")

    @abstractmethod
    async def update_task(self, update: TaskUpdate) -> Task:
        """Send the fields set on ``update`` and return the merged server copy."""
        raise NotImplementedError("TaskGateway.update_task() must be implemented by adapter")

    @abstractmethod
    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        raise NotImplementedError("TaskGateway.delete_task() must be implemented by adapter")

    @abstractmethod
    async def tasks_by_day(self, day: str) -> list[Task]:
        """Tasks starting on one calendar day."""
        raise NotImplementedError("TaskGateway.tasks_by_day() must be implemented by adapter")

    @abstractmethod
    async def tasks_by_month(self, month: int, year: int) -> list[Task]:
        """Tasks of a (month, year) window, in server order."""
        raise NotImplementedError("TaskGateway.tasks_by_month() must be implemented by adapter")

    @abstractmethod
    async def tasks_by_year(self, year: int) -> list[Task]:
        """Tasks of a whole year."""
        raise NotImplementedError("TaskGateway.tasks_by_year() must be implemented by adapter")

    @abstractmethod
    async def tasks_by_list(self, list_id: str) -> list[Task]:
        """Tasks of one list."""
        raise NotImplementedError("TaskGateway.tasks_by_list() must be implemented by adapter")

    @abstractmethod
    async def create_list(self, list_data: TaskListCreate) -> TaskList:
        """Create a list."""
        raise NotImplementedError("TaskGateway.create_list() must be implemented by adapter")

    @abstractmethod
    async def get_lists(self) -> list[TaskList]:
        """All lists of the signed-in user."""
        raise NotImplementedError("TaskGateway.get_lists() must be implemented by adapter")

    async def close(self) -> None:
        """Release transport resources."""

"""Tempus CLI domain models.

Pydantic models for the entities exchanged with the Tempus API, plus the
validation predicates applied before any write request.
"""

from .core import Task, TaskCreate, TaskList, TaskListCreate, TaskUpdate, UserHandle
from .result import Err, Ok, Result
from .validation import (
    LIST_PALETTE,
    PriorityBand,
    normalize_attendees,
    priority_band,
    priority_color,
    validate_list_for_create,
    validate_task_for_create,
    validate_task_update,
)

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    # List models
    "TaskList",
    "TaskListCreate",
    # Identity
    "UserHandle",
    # Results
    "Ok",
    "Err",
    "Result",
    # Validation
    "LIST_PALETTE",
    "PriorityBand",
    "normalize_attendees",
    "priority_band",
    "priority_color",
    "validate_list_for_create",
    "validate_task_for_create",
    "validate_task_update",
]

"""Validation predicates run before any write request is issued.

Each validator either returns a payload model ready to be sent or raises
``tempus_cli.exceptions.ValidationError``. No network access happens here.
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from tempus_cli.exceptions import ValidationError
from tempus_cli.models.core import TaskCreate, TaskListCreate, TaskUpdate
from tempus_cli.utils.dates import (
    DEFAULT_MIN_DELTA_MINUTES,
    clamp_end_after_start,
    parse_time,
    to_date_key,
    to_instant,
)

DEFAULT_PRIORITY = 2
DEFAULT_ENERGY_LEVEL = 50
DEFAULT_LIST_ICON = "📋"

LIST_PALETTE = (
    "#FF6B6B", "#4ECDC4", "#FFD166", "#06D6A0",
    "#118AB2", "#073B4C", "#F15BB5", "#7209B7",
    "#3A86FF", "#FB5607", "#FCBF49", "#F72585",
    "#4361EE", "#480CA8", "#B5179E", "#560BAD",
    "#FF9A8B", "#01BAEF", "#FFCB77", "#00F5D4",
    "#845EC2", "#FF8066", "#4FFBDF", "#FFC75F",
    "#00C9A7", "#C34A36", "#D65DB1", "#FF6F91",
    "#FF9671", "#008F7A",
)  # fmt: skip

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_SCHEDULE_KEYS = ("task_start_date", "task_start_time", "task_end_date", "task_end_time")


class PriorityBand(str, Enum):
    """Display and sort band of a task priority."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"


_PRIORITY_BANDS = {1: PriorityBand.HIGH, 2: PriorityBand.MEDIUM, 3: PriorityBand.LOW}

_PRIORITY_COLORS = {
    PriorityBand.HIGH: "#FF5722",
    PriorityBand.MEDIUM: "#FFC107",
    PriorityBand.LOW: "#4CAF50",
    PriorityBand.NONE: "#888888",
}


def priority_band(priority: Any) -> PriorityBand:
    """1 -> High, 2 -> Medium, 3 -> Low, anything else -> None."""
    if isinstance(priority, bool):
        return PriorityBand.NONE
    return _PRIORITY_BANDS.get(priority, PriorityBand.NONE)


def priority_color(band: PriorityBand) -> str:
    return _PRIORITY_COLORS[band]


def normalize_attendees(value: str | Iterable[str] | None) -> list[str]:
    """Split, trim and deduplicate attendees, keeping first-seen order."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    cleaned = (str(item).strip() for item in items if item is not None)
    return list(dict.fromkeys(item for item in cleaned if item))


def _clamp_schedule(fields: dict[str, Any], min_delta_minutes: int) -> None:
    """Normalize start/end fields in place and push a bad end after the start."""
    for key in ("task_start_date", "task_end_date"):
        if fields.get(key):
            fields[key] = to_date_key(fields[key])
    for key in ("task_start_time", "task_end_time"):
        if fields.get(key):
            parse_time(fields[key])

    start_date = fields.get("task_start_date")
    if not start_date:
        return
    if not fields.get("task_end_date") and not fields.get("task_end_time"):
        return

    end_date = fields.get("task_end_date") or start_date
    start = to_instant(start_date, fields.get("task_start_time"))
    end = to_instant(end_date, fields.get("task_end_time"))
    clamped = clamp_end_after_start(start, end, min_delta_minutes)

    fields["task_end_date"] = clamped.date().isoformat()
    if clamped != end:
        fields["task_end_time"] = clamped.strftime("%H:%M")


def _check_energy(value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise ValidationError(f"Energy level must be an integer from 0 to 100, got {value!r}")


def validate_task_for_create(
    data: Mapping[str, Any] | TaskCreate,
    *,
    min_delta_minutes: int = DEFAULT_MIN_DELTA_MINUTES,
) -> TaskCreate:
    """Check and normalize a new task before it is sent to the server.

    Args:
        data: Raw field mapping or an already-built ``TaskCreate``
        min_delta_minutes: Offset applied when the end does not follow the start

    Returns:
        A ``TaskCreate`` with defaults filled in

    Raises:
        ValidationError: Empty name, bad energy level, malformed date or time
    """
    fields = data.model_dump() if isinstance(data, TaskCreate) else dict(data)

    name = fields.get("task_name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Task name is required")
    fields["task_name"] = name.strip()

    fields["task_attendees"] = normalize_attendees(fields.get("task_attendees"))

    if fields.get("task_priority") is None:
        fields["task_priority"] = DEFAULT_PRIORITY
    if fields.get("task_energy_level") is None:
        fields["task_energy_level"] = DEFAULT_ENERGY_LEVEL
    _check_energy(fields["task_energy_level"])

    _clamp_schedule(fields, min_delta_minutes)

    # Completion only exists for events.
    if fields.get("is_event"):
        if fields.get("is_completed") is None:
            fields["is_completed"] = False
    else:
        fields["is_completed"] = None

    try:
        return TaskCreate.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid task: {e.errors()[0]['msg']}") from e


def validate_task_update(
    update: TaskUpdate | Mapping[str, Any],
    *,
    min_delta_minutes: int = DEFAULT_MIN_DELTA_MINUTES,
) -> TaskUpdate:
    """Check a partial update, keeping track of which fields were given."""
    if isinstance(update, TaskUpdate):
        fields = {"task_id": update.task_id, **update.changes()}
    else:
        fields = dict(update)

    task_id = fields.get("task_id")
    if task_id is None or not str(task_id).strip():
        raise ValidationError("task_id is required to update a task")

    if "task_name" in fields:
        name = fields["task_name"]
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Task name cannot be empty")
        fields["task_name"] = name.strip()

    if fields.get("task_attendees") is not None:
        fields["task_attendees"] = normalize_attendees(fields["task_attendees"])

    _check_energy(fields.get("task_energy_level"))

    schedule = {k: v for k, v in fields.items() if k.startswith(("task_start", "task_end"))}
    # A clamp needs both instants in full; the server still holds any missing half.
    if all(schedule.get(k) for k in _SCHEDULE_KEYS):
        _clamp_schedule(schedule, min_delta_minutes)
        fields.update(schedule)
    else:
        for key in ("task_start_date", "task_end_date"):
            if fields.get(key):
                fields[key] = to_date_key(fields[key])
        for key in ("task_start_time", "task_end_time"):
            if fields.get(key):
                parse_time(fields[key])

    try:
        return TaskUpdate.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid task update: {e.errors()[0]['msg']}") from e


def validate_list_for_create(
    data: Mapping[str, Any] | TaskListCreate,
    *,
    seed: int | None = None,
) -> TaskListCreate:
    """Check a new list; a missing colour is drawn from ``LIST_PALETTE``.

    The same ``seed`` always yields the same colour.
    """
    fields = data.model_dump() if isinstance(data, TaskListCreate) else dict(data)

    name = fields.get("list_name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("List name is required")

    color = fields.get("list_color")
    if color:
        if not isinstance(color, str) or not _HEX_COLOR_RE.match(color):
            raise ValidationError(f"List color must be a hex color, got {color!r}")
    else:
        color = random.Random(seed).choice(LIST_PALETTE)

    icon = fields.get("list_icon") or DEFAULT_LIST_ICON

    return TaskListCreate(list_name=name.strip(), list_icon=icon, list_color=color)

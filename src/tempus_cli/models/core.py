"""Task and list data models.

These mirror the JSON shapes exchanged with the Tempus API. Identifiers are
always strings on the client, even when the server sends integers.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tempus_cli.utils.dates import to_date_key


def _id_to_str(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValueError("identifier must be a string or integer")
    if isinstance(value, int):
        return str(value)
    return value


def _attendees_or_empty(value: Any) -> Any:
    return [] if value is None else value


class Task(BaseModel):
    """Task as returned by the server.

    Attributes:
        task_id: Server-assigned identifier, immutable once created
        user_id: Owner, attached server-side from the auth token
        task_name: Title, never empty
        task_list_id: Owning list; ``None`` means the default list
        is_event: Scheduled event rather than a plain checklist task
        task_start_date: Calendar date ``YYYY-MM-DD`` (ISO datetimes tolerated)
        task_priority: 1=High, 2=Medium, 3=Low, anything else means none
        task_energy_level: 0-100
        is_completed: Only meaningful when ``is_event`` is true
        task_creation_date: Server-assigned timestamp
    """

    model_config = ConfigDict(extra="allow")

    task_id: str
    user_id: str | None = None
    task_name: str
    task_description: str | None = None
    task_list_id: str | None = None
    is_event: bool = False
    is_ai_generated: bool = False
    task_start_date: str | None = None
    task_start_time: str | None = None
    task_end_date: str | None = None
    task_end_time: str | None = None
    task_reminder: bool = False
    task_location: str | None = None
    task_attendees: list[str] = Field(default_factory=list)
    task_priority: int | None = None
    task_energy_level: int | None = None
    is_completed: bool | None = None
    task_creation_date: str | None = None

    @field_validator("task_id", "task_list_id", "user_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("task_attendees", mode="before")
    @classmethod
    def normalize_attendees(cls, value: Any) -> Any:
        return _attendees_or_empty(value)

    @field_validator("is_event", "is_ai_generated", "task_reminder", mode="before")
    @classmethod
    def none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def start_date_key(self) -> str | None:
        """``YYYY-MM-DD`` of the start date, or ``None`` when unscheduled."""
        if not self.task_start_date:
            return None
        return to_date_key(self.task_start_date)


class TaskCreate(BaseModel):
    """Payload for ``POST /task``. Has no identity or server timestamps."""

    task_name: str
    task_description: str | None = None
    task_list_id: str | None = None
    task_start_date: str | None = None
    task_start_time: str | None = None
    task_end_date: str | None = None
    task_end_time: str | None = None
    task_reminder: bool | None = None
    task_location: str | None = None
    task_attendees: list[str] = Field(default_factory=list)
    task_priority: int | None = None
    task_energy_level: int | None = None
    is_ai_generated: bool | None = None
    is_event: bool | None = None
    is_completed: bool | None = None

    @field_validator("task_list_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("task_attendees", mode="before")
    @classmethod
    def normalize_attendees(cls, value: Any) -> Any:
        return _attendees_or_empty(value)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the create request, without unset optional fields."""
        return self.model_dump(exclude_none=True)


class TaskUpdate(BaseModel):
    """Partial update for ``PATCH /task/{task_id}``.

    Only fields explicitly given are sent. Passing ``None`` for a field clears
    it on the server; leaving it out keeps the server value.
    """

    task_id: str
    task_name: str | None = None
    task_description: str | None = None
    task_list_id: str | None = None
    task_start_date: str | None = None
    task_start_time: str | None = None
    task_end_date: str | None = None
    task_end_time: str | None = None
    task_reminder: bool | None = None
    task_location: str | None = None
    task_attendees: list[str] | None = None
    task_priority: int | None = None
    task_energy_level: int | None = None
    is_ai_generated: bool | None = None
    is_event: bool | None = None
    is_completed: bool | None = None

    @field_validator("task_id", "task_list_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)

    def changes(self) -> dict[str, Any]:
        """The fields present in this update, excluding ``task_id``."""
        return self.model_dump(exclude_unset=True, exclude={"task_id"})


class TaskList(BaseModel):
    """List of tasks as returned by the server.

    Older backend versions answered with either ``list_*`` or bare ``id`` /
    ``name`` / ``color`` / ``icon`` keys; both are accepted.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    list_id: str = Field(validation_alias=AliasChoices("list_id", "id"))
    list_name: str = Field(validation_alias=AliasChoices("list_name", "name"))
    list_icon: str | None = Field(
        default=None, validation_alias=AliasChoices("list_icon", "icon")
    )
    list_color: str | None = Field(
        default=None, validation_alias=AliasChoices("list_color", "color")
    )
    user_id: str | None = None
    list_creation_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("list_creation_date", "createdDate"),
    )

    @field_validator("list_id", "user_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)


class TaskListCreate(BaseModel):
    """Payload for ``POST /list``."""

    list_name: str
    list_icon: str
    list_color: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()


class UserHandle(BaseModel):
    """The signed-in user as known to the identity provider."""

    user_id: str | None = None
    email: str | None = None

"""Tests for the task and list models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from tempus_cli.exceptions import ParseError
from tempus_cli.models import Task, TaskList, TaskUpdate


def test_task_ids_are_normalized_to_strings():
    task = Task.model_validate({"task_id": 12, "task_name": "A", "task_list_id": 3, "user_id": 9})
    assert (task.task_id, task.task_list_id, task.user_id) == ("12", "3", "9")


def test_task_rejects_boolean_id():
    with pytest.raises(PydanticValidationError):
        Task.model_validate({"task_id": True, "task_name": "A"})


def test_task_null_flags_and_attendees_become_defaults():
    task = Task.model_validate(
        {"task_id": "1", "task_name": "A", "is_event": None, "task_reminder": None, "task_attendees": None}
    )
    assert task.is_event is False
    assert task.task_reminder is False
    assert task.task_attendees == []


def test_task_keeps_unknown_server_fields():
    task = Task.model_validate({"task_id": "1", "task_name": "A", "color_tag": "blue"})
    assert task.model_dump()["color_tag"] == "blue"


def test_start_date_key_truncates_datetime():
    assert Task(task_id="1", task_name="A", task_start_date="2025-04-14T22:00:00Z").start_date_key == "2025-04-14"
    assert Task(task_id="1", task_name="A").start_date_key is None


def test_start_date_key_raises_on_garbage():
    with pytest.raises(ParseError):
        Task(task_id="1", task_name="A", task_start_date="someday").start_date_key


def test_task_update_distinguishes_absent_from_none():
    update = TaskUpdate(task_id="1", task_location=None)
    assert update.changes() == {"task_location": None}
    assert TaskUpdate(task_id="1").changes() == {}


@pytest.mark.parametrize(
    "payload",
    [
        {"list_id": 4, "list_name": "Work", "list_color": "#000", "list_icon": "💼"},
        {"id": 4, "name": "Work", "color": "#000", "icon": "💼"},
    ],
)
def test_task_list_accepts_both_key_styles(payload):
    lst = TaskList.model_validate(payload)
    assert (lst.list_id, lst.list_name, lst.list_color, lst.list_icon) == ("4", "Work", "#000", "💼")

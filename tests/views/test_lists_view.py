"""Unit tests for the lists view."""

from __future__ import annotations

import pytest

from tempus_cli.exceptions import NetworkError, ServerError
from tempus_cli.models import LIST_PALETTE
from tempus_cli.services.task_store import TaskStore
from tempus_cli.views import ListsView
from tempus_cli.views.lists import OVERVIEW_TITLE


@pytest.fixture()
def store(gateway):
    return TaskStore(gateway)


@pytest.fixture()
def loaded_view(store, gateway, make_list):
    gateway.get_lists.return_value = [make_list("10", list_name="Work"), make_list("11")]
    return ListsView(store)


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


def test_overview_defaults(store):
    view = ListsView(store)

    assert view.title == OVERVIEW_TITLE == "My Lists"
    assert view.lists == []
    assert view.tasks == []
    assert view.loading is False
    assert view.error is None


@pytest.mark.asyncio
async def test_refresh_loads_lists(loaded_view):
    result = await loaded_view.refresh()

    assert result.ok
    assert [lst.list_name for lst in loaded_view.lists] == ["Work", "List 11"]


@pytest.mark.asyncio
async def test_refresh_failure_is_a_result(loaded_view, gateway):
    await loaded_view.refresh()
    gateway.get_lists.side_effect = NetworkError("Failed to fetch lists")

    result = await loaded_view.refresh()

    assert not result.ok
    assert loaded_view.last_error is result
    assert loaded_view.error == "Failed to fetch lists"
    assert len(loaded_view.lists) == 2


# ---------------------------------------------------------------------------
# Selecting a list
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_select_list_loads_its_tasks(loaded_view, gateway, make_task):
    await loaded_view.refresh()
    gateway.tasks_by_list.return_value = [make_task("1", task_list_id="10")]

    result = await loaded_view.select_list("10")

    assert result.ok
    assert loaded_view.title == "Work"
    assert [t.task_id for t in loaded_view.tasks] == ["1"]
    gateway.tasks_by_list.assert_awaited_once_with("10")


@pytest.mark.asyncio
async def test_select_unknown_list(loaded_view, gateway):
    await loaded_view.refresh()

    result = await loaded_view.select_list("99")

    assert not result.ok
    assert result.kind == "validation"
    assert result.message == "No list with id 99"
    assert loaded_view.title == OVERVIEW_TITLE
    gateway.tasks_by_list.assert_not_awaited()


@pytest.mark.asyncio
async def test_select_list_failure_reports_task_error(loaded_view, gateway):
    await loaded_view.refresh()
    gateway.tasks_by_list.side_effect = ServerError("Failed to fetch tasks by list ID", 500)

    result = await loaded_view.select_list("11")

    assert not result.ok
    assert loaded_view.error == "Failed to fetch tasks by list ID"
    assert loaded_view.tasks == []


@pytest.mark.asyncio
async def test_back_returns_to_overview(loaded_view, gateway):
    await loaded_view.refresh()
    gateway.tasks_by_list.return_value = []
    await loaded_view.select_list("10")

    loaded_view.back()

    assert loaded_view.title == OVERVIEW_TITLE
    assert loaded_view.tasks == []


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_add_list_appends_and_picks_palette_color(store, gateway, make_list):
    gateway.create_list.return_value = make_list("12", list_name="Errands")
    view = ListsView(store)

    result = await view.add_list({"list_name": "Errands"})

    assert result.ok
    payload = gateway.create_list.call_args.args[0]
    assert payload.list_name == "Errands"
    assert payload.list_color in LIST_PALETTE
    assert [lst.list_id for lst in view.lists] == ["12"]


@pytest.mark.asyncio
async def test_add_list_requires_name(store, gateway):
    result = await ListsView(store).add_list({"list_name": ""})

    assert not result.ok
    assert result.kind == "validation"
    gateway.create_list.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_task_files_under_selected_list(loaded_view, gateway, make_task):
    await loaded_view.refresh()
    gateway.tasks_by_list.return_value = []
    await loaded_view.select_list("10")
    gateway.create_task.return_value = make_task("5", task_list_id="10")

    result = await loaded_view.add_task({"task_name": "Report"})

    assert result.ok
    assert gateway.create_task.call_args.args[0].task_list_id == "10"
    assert [t.task_id for t in loaded_view.tasks] == ["5"]


@pytest.mark.asyncio
async def test_add_task_on_overview_has_no_list(store, gateway, make_task):
    gateway.create_task.return_value = make_task("5")

    await ListsView(store).add_task({"task_name": "Report"})

    assert gateway.create_task.call_args.args[0].task_list_id is None


@pytest.mark.asyncio
async def test_delete_and_toggle(loaded_view, gateway, make_task):
    await loaded_view.refresh()
    event = make_task("1", task_list_id="10", is_event=True, is_completed=False)
    gateway.tasks_by_list.return_value = [event, make_task("2", task_list_id="10")]
    await loaded_view.select_list("10")
    gateway.update_task.return_value = event.model_copy(update={"is_completed": True})

    confirmed = await loaded_view.toggle(event, True)
    result = await loaded_view.delete_task("2")

    assert confirmed.is_completed is True
    assert result.ok
    assert [(t.task_id, t.is_completed) for t in loaded_view.tasks] == [("1", True)]


@pytest.mark.asyncio
async def test_failed_toggle_sets_notice(loaded_view, gateway, make_task):
    await loaded_view.refresh()
    event = make_task("1", task_list_id="10", is_event=True, is_completed=False)
    gateway.tasks_by_list.return_value = [event]
    await loaded_view.select_list("10")
    gateway.update_task.side_effect = NetworkError("offline")

    with pytest.raises(NetworkError):
        await loaded_view.toggle(event, True)

    assert loaded_view.notice == "Could not update task: offline"
    assert loaded_view.tasks[0].is_completed is False

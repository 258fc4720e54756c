"""Task management commands."""

from datetime import date

import typer

from tempus_cli.exceptions import ValidationError
from tempus_cli.services.session import build_session
from tempus_cli.utils.dates import in_window, parse_date, sort_by_start_time
from tempus_cli.utils.typer_helpers import SuggestingGroup
from tempus_cli.utils.ui.console import get_console
from tempus_cli.utils.ui.formatters import (
    format_info,
    format_month_grid,
    format_output,
    format_success,
    format_tasks_pretty,
    format_warning,
)
from tempus_cli.views import CalendarView

from .decorators import command_wrapper
from .utils import collect, dump, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()

# Fields ``tasks update --clear`` may reset on the server
CLEARABLE_FIELDS = (
    "task_description",
    "task_list_id",
    "task_start_date",
    "task_start_time",
    "task_end_date",
    "task_end_time",
    "task_location",
    "task_attendees",
    "task_priority",
)


def _initial_selection(month: int | None, year: int | None, selected: str | None) -> date:
    if selected:
        return parse_date(selected)
    today = date.today()
    if month is None and year is None:
        return today
    month = month or today.month
    year = year or today.year
    if in_window(today, month, year):
        return today
    return date(year, month, 1)


@app.command("month")
@command_wrapper
async def month_view(
    month: int | None = typer.Argument(None, help="Month (1-12), default current"),
    year: int | None = typer.Argument(None, help="Year, default current"),
    selected: str | None = typer.Option(None, "--date", "-d", help="Day to show (YYYY-MM-DD)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show a month calendar with the tasks of the selected day."""
    output = resolve_output(output)
    day = _initial_selection(month, year, selected)

    async with build_session() as store:
        view = CalendarView(store, selected_date=day)
        if month is not None or year is not None:
            result = await view.change_month(month or day.month, year or day.year)
        else:
            result = await view.refresh()
        if not result.ok:
            raise result.error

        section = view.section()
        if output != "pretty":
            format_output(
                {
                    "window": view.window_key,
                    "selected_date": view.selected_date,
                    "marked_dates": view.marked_dates(),
                    "tasks": dump(section.tasks),
                },
                output,
            )
            return

        format_month_grid(view.month, view.year, view.marked_dates(), view.selected_date)
        console.print()
        if section.tasks:
            format_tasks_pretty(dump(section.tasks), title=section.label)
        else:
            format_info(f"No tasks for {section.label}")


@app.command("day")
@command_wrapper
async def day_tasks(
    day: str = typer.Argument(..., help="Day (YYYY-MM-DD)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List the tasks starting on one day, in time order."""
    output = resolve_output(output)
    async with build_session() as store:
        tasks = await store.fetch_tasks_for_day(day)
    format_output({"tasks": dump(sort_by_start_time(tasks))}, output)


@app.command("year")
@command_wrapper
async def year_tasks(
    year: int = typer.Argument(..., help="Year"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List every task of a year."""
    output = resolve_output(output)
    async with build_session() as store:
        tasks = await store.fetch_tasks_for_year(year)
    format_output({"tasks": dump(tasks)}, output, compact=True)


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show one task."""
    output = resolve_output(output)
    async with build_session() as store:
        task = await store.get_task(task_id)
    format_output(task.model_dump(), output)


@app.command("add")
@command_wrapper
async def add_task(
    name: str = typer.Argument(..., help="Task name"),
    description: str | None = typer.Option(None, "--description", help="Description"),
    list_id: str | None = typer.Option(None, "--list", help="List ID"),
    is_event: bool = typer.Option(False, "--event", help="Schedule as an event"),
    start_date: str | None = typer.Option(None, "--start-date", help="Start date (YYYY-MM-DD)"),
    start_time: str | None = typer.Option(None, "--start-time", help="Start time (HH:MM)"),
    end_date: str | None = typer.Option(None, "--end-date", help="End date (YYYY-MM-DD)"),
    end_time: str | None = typer.Option(None, "--end-time", help="End time (HH:MM)"),
    location: str | None = typer.Option(None, "--location", help="Location"),
    attendees: str | None = typer.Option(None, "--attendees", help="Comma-separated attendees"),
    priority: int | None = typer.Option(None, "--priority", help="Priority (1=High, 2=Medium, 3=Low)"),
    energy: int | None = typer.Option(None, "--energy", help="Energy level (0-100)"),
    reminder: bool = typer.Option(False, "--reminder", help="Set a reminder"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Create a new task."""
    output = resolve_output(output)
    data = collect(
        task_name=name,
        task_description=description,
        task_list_id=list_id,
        task_start_date=start_date,
        task_start_time=start_time,
        task_end_date=end_date,
        task_end_time=end_time,
        task_location=location,
        task_attendees=attendees,
        task_priority=priority,
        task_energy_level=energy,
    )
    data["is_event"] = is_event
    data["task_reminder"] = reminder

    async with build_session() as store:
        task = await store.create_task(data)
    format_success(f"Task created: {task.task_id}")
    format_output(task.model_dump(), output)


@app.command("update")
@command_wrapper
async def update_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    name: str | None = typer.Option(None, "--name", help="Task name"),
    description: str | None = typer.Option(None, "--description", help="Description"),
    list_id: str | None = typer.Option(None, "--list", help="List ID"),
    is_event: bool | None = typer.Option(None, "--event/--not-event", help="Event or plain task"),
    start_date: str | None = typer.Option(None, "--start-date", help="Start date (YYYY-MM-DD)"),
    start_time: str | None = typer.Option(None, "--start-time", help="Start time (HH:MM)"),
    end_date: str | None = typer.Option(None, "--end-date", help="End date (YYYY-MM-DD)"),
    end_time: str | None = typer.Option(None, "--end-time", help="End time (HH:MM)"),
    location: str | None = typer.Option(None, "--location", help="Location"),
    attendees: str | None = typer.Option(None, "--attendees", help="Comma-separated attendees"),
    priority: int | None = typer.Option(None, "--priority", help="Priority (1=High, 2=Medium, 3=Low)"),
    energy: int | None = typer.Option(None, "--energy", help="Energy level (0-100)"),
    reminder: bool | None = typer.Option(None, "--reminder/--no-reminder", help="Reminder"),
    clear: list[str] | None = typer.Option(None, "--clear", help="Field to clear, e.g. task_location"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Update a task. Only the given fields are sent."""
    output = resolve_output(output)
    changes = collect(
        task_name=name,
        task_description=description,
        task_list_id=list_id,
        is_event=is_event,
        task_start_date=start_date,
        task_start_time=start_time,
        task_end_date=end_date,
        task_end_time=end_time,
        task_location=location,
        task_attendees=attendees,
        task_priority=priority,
        task_energy_level=energy,
        task_reminder=reminder,
    )
    for field_name in clear or []:
        if field_name not in CLEARABLE_FIELDS:
            raise ValidationError(
                f"Cannot clear '{field_name}' (choose from {', '.join(CLEARABLE_FIELDS)})"
            )
        if field_name in changes:
            raise ValidationError(f"'{field_name}' is both set and cleared")
        changes[field_name] = None

    async with build_session() as store:
        task = await store.update_task({"task_id": task_id, **changes})
    format_success(f"Task updated: {task.task_id}")
    format_output(task.model_dump(), output)


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    if not yes and not typer.confirm(f"Delete task {task_id}?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    async with build_session() as store:
        await store.delete_task(task_id)
    format_success(f"Task deleted: {task_id}")


async def _set_completion(task_id: str, is_completed: bool) -> None:
    async with build_session() as store:
        task = await store.get_task(task_id)
        if not task.is_event:
            format_warning(f"Task {task_id} is not an event; completion does not apply")
            return
        updated = await store.toggle_task_completion(task, is_completed)
    state = "completed" if updated.is_completed else "reopened"
    format_success(f"Task {state}: {updated.task_name}")


@app.command("complete")
@command_wrapper
async def complete_task(
    task_id: str = typer.Argument(..., help="Task ID"),
) -> None:
    """Mark an event task as completed."""
    await _set_completion(task_id, True)


@app.command("reopen")
@command_wrapper
async def reopen_task(
    task_id: str = typer.Argument(..., help="Task ID"),
) -> None:
    """Mark an event task as not completed."""
    await _set_completion(task_id, False)

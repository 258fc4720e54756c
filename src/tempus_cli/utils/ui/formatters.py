"""Output formatters for different formats."""

import calendar
import json
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tempus_cli.exceptions import ParseError
from tempus_cli.models import PriorityBand, priority_band, priority_color
from tempus_cli.utils.dates import MONTH_ABBREVIATIONS, format_time_12h, parse_date

console = Console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")


def format_output(data: Any, output_format: str = "pretty", compact: bool = False) -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data, compact=compact)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        if "tasks" in data or "lists" in data:
            format_dict_table(data.get("tasks") or data.get("lists") or [])
        else:
            format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


# ============================================================================
# Pretty Format Implementation
# ============================================================================

PRIORITY_ORDER = (PriorityBand.HIGH, PriorityBand.MEDIUM, PriorityBand.LOW, PriorityBand.NONE)

PRIORITY_HEADERS = {
    PriorityBand.HIGH: "HIGH PRIORITY",
    PriorityBand.MEDIUM: "MEDIUM PRIORITY",
    PriorityBand.LOW: "LOW PRIORITY",
    PriorityBand.NONE: "NO PRIORITY",
}

# Status Icons
STATUS_ICONS = {
    "open": "⬜",
    "completed": "☑️",
    "task": "•",
}

METADATA_ICONS = {
    "date": "📅",
    "location": "📍",
    "attendees": "👥",
    "reminder": "🔔",
    "ai": "✨",
}


def format_pretty(data: Any, compact: bool = False) -> None:
    """Format data in pretty format with colors and icons."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        first_item = data[0]
        if isinstance(first_item, dict) and "task_name" in first_item:
            format_tasks_pretty(data, compact)
        elif isinstance(first_item, dict) and "list_name" in first_item:
            format_lists_pretty(data)
        else:
            for item in data:
                console.print(f"• {item}")
    elif isinstance(data, dict):
        if "tasks" in data:
            format_tasks_pretty(data["tasks"], compact)
        elif "lists" in data:
            format_lists_pretty(data["lists"])
        elif "task_name" in data:
            format_task_item(data, compact=False)
        else:
            for key, value in data.items():
                formatted_key = key.replace("_", " ").title()
                console.print(f"[cyan]{formatted_key}:[/cyan] {value}")
    else:
        console.print(data)


def format_tasks_pretty(tasks: list[dict], compact: bool = False, title: str = "Tasks") -> None:
    """Format tasks grouped by priority band."""
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    completed = [t for t in tasks if t.get("is_event") and t.get("is_completed")]

    header = Text()
    header.append(f"📋 {title} ", style="bold cyan")
    header.append(f"({len(tasks)} total", style="dim")
    if completed:
        header.append(f", {len(completed)} completed", style="dim green")
    header.append(")", style="dim")
    console.print(header)
    console.print()

    by_band: dict[PriorityBand, list[dict]] = {band: [] for band in PRIORITY_ORDER}
    for task in tasks:
        by_band[priority_band(task.get("task_priority"))].append(task)

    for band in PRIORITY_ORDER:
        band_tasks = by_band[band]
        if not band_tasks:
            continue
        console.print(PRIORITY_HEADERS[band], style=f"bold {priority_color(band)}")
        for task in band_tasks:
            format_task_item(task, compact, indent="  ")
        console.print()


def _status_icon(task: dict) -> str:
    if not task.get("is_event"):
        return STATUS_ICONS["task"]
    return STATUS_ICONS["completed"] if task.get("is_completed") else STATUS_ICONS["open"]


def format_schedule(task: dict) -> str:
    """``14 Apr 2:00 PM - 3:00 PM`` style summary of a task's dates."""
    start_date = task.get("task_start_date")
    if not start_date:
        return ""
    try:
        day = parse_date(start_date)
    except ParseError:
        return str(start_date)

    text = f"{day.day} {MONTH_ABBREVIATIONS[day.month - 1]}"
    start_time = task.get("task_start_time")
    end_time = task.get("task_end_time")
    try:
        if start_time:
            text += f" {format_time_12h(start_time)}"
        if end_time:
            text += f" - {format_time_12h(end_time)}"
    except ParseError:
        pass
    return text


def format_task_item(task: dict, compact: bool = False, indent: str = "") -> None:
    """Format a single task item."""
    is_completed = bool(task.get("is_event") and task.get("is_completed"))
    name = task.get("task_name", "Untitled")

    line = Text()
    line.append(f"{indent}{_status_icon(task)} ")
    line.append(name, style="dim" if is_completed else "bold")
    if task.get("is_event"):
        line.append("  event", style="magenta")
    if compact:
        schedule = format_schedule(task)
        if schedule:
            line.append(f" • {schedule}", style="cyan")
        console.print(line)
        return
    console.print(line)

    meta: list[tuple[str, str]] = []
    schedule = format_schedule(task)
    if schedule:
        meta.append((f"{METADATA_ICONS['date']} {schedule}", "cyan"))
    if task.get("task_location"):
        meta.append((f"{METADATA_ICONS['location']} {task['task_location']}", "yellow"))
    if task.get("task_attendees"):
        meta.append((f"{METADATA_ICONS['attendees']} {', '.join(task['task_attendees'])}", "blue"))
    if task.get("task_reminder"):
        meta.append((METADATA_ICONS["reminder"], ""))
    if task.get("is_ai_generated"):
        meta.append((METADATA_ICONS["ai"], ""))
    if task.get("task_energy_level") is not None:
        meta.append((f"⚡{task['task_energy_level']}", "dim"))
    if task.get("task_id"):
        meta.append((f"#{task['task_id']}", "dim"))

    if meta:
        meta_line = Text()
        meta_line.append(f"{indent}   └─ ", style="dim")
        for i, (text, style) in enumerate(meta):
            if i > 0:
                meta_line.append(" • ", style="dim")
            meta_line.append(text, style=style)
        console.print(meta_line)

    if task.get("task_description"):
        console.print(f"{indent}   [dim]{task['task_description']}[/dim]")


def format_lists_pretty(lists: list[dict]) -> None:
    """Format lists with their icon and colour."""
    if not lists:
        console.print("[yellow]No lists yet[/yellow]")
        return

    header = Text()
    header.append("🗂  Lists ", style="bold cyan")
    header.append(f"({len(lists)})", style="dim")
    console.print(header)
    console.print()

    for lst in lists:
        line = Text()
        line.append(f"  {lst.get('list_icon') or '📋'} ")
        color = lst.get("list_color")
        line.append(lst.get("list_name", "Untitled"), style=f"bold {color}" if color else "bold")
        line.append(f"  #{lst.get('list_id')}", style="dim")
        console.print(line)


def format_month_grid(
    month: int, year: int, marked: dict[str, dict[str, Any]], selected: str | None = None
) -> None:
    """Render a Monday-first month grid; days with tasks carry a dot."""
    table = Table(
        title=f"{calendar.month_name[month]} {year}",
        show_header=True,
        header_style="bold",
        box=None,
        padding=(0, 1),
    )
    for name in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"):
        table.add_column(name, justify="right")

    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        row = []
        for day in week:
            key = day.isoformat()
            if day.month != month:
                row.append(Text(str(day.day), style="dim"))
                continue
            marks = marked.get(key, {})
            cell = Text(str(day.day))
            if marks.get("marked"):
                cell.append("•", style=marks.get("dotColor", ""))
            if key == selected or marks.get("selected"):
                cell.stylize(f"reverse {marks.get('selectedColor', '')}".strip())
            row.append(cell)
        table.add_row(*row)

    console.print(table)

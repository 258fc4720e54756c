"""List management commands."""

import typer

from tempus_cli.services.session import build_session
from tempus_cli.utils.typer_helpers import SuggestingGroup
from tempus_cli.utils.ui.formatters import format_output, format_success, format_tasks_pretty
from tempus_cli.views import ListsView

from .decorators import command_wrapper
from .utils import collect, dump, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="List management commands")


@app.command("list")
@command_wrapper
async def list_lists(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show every list."""
    output = resolve_output(output)
    async with build_session() as store:
        view = ListsView(store)
        result = await view.refresh()
        if not result.ok:
            raise result.error
        format_output({"lists": dump(view.lists)}, output)


@app.command("add")
@command_wrapper
async def add_list(
    name: str = typer.Argument(..., help="List name"),
    color: str | None = typer.Option(None, "--color", help="Hex colour, random when omitted"),
    icon: str | None = typer.Option(None, "--icon", help="Single glyph icon"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Create a new list."""
    output = resolve_output(output)
    async with build_session() as store:
        created = await store.create_list(
            collect(list_name=name, list_color=color, list_icon=icon)
        )
    format_success(f"List created: {created.list_name} ({created.list_id})")
    if output != "pretty":
        format_output(created.model_dump(), output)


@app.command("tasks")
@command_wrapper
async def list_tasks(
    list_id: str = typer.Argument(..., help="List ID"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show the tasks of one list."""
    output = resolve_output(output)
    async with build_session() as store:
        view = ListsView(store)
        result = await view.refresh()
        if result.ok:
            result = await view.select_list(list_id)
        if not result.ok:
            raise result.error

        if output == "pretty":
            format_tasks_pretty(dump(view.tasks), title=view.title)
        else:
            format_output({"list": view.selected_list.model_dump(), "tasks": dump(view.tasks)}, output)

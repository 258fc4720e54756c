"""Main entry point for Tempus CLI."""

import typer

from tempus_cli import __version__
from tempus_cli.commands import auth, config, lists, tasks
from tempus_cli.services.config_service import get_config_service
from tempus_cli.utils.typer_helpers import SuggestingGroup
from tempus_cli.utils.ui.console import get_console

app = typer.Typer(
    name="tempus",
    cls=SuggestingGroup,
    help="Command-line client for Tempus tasks, events and lists",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(tasks.app, name="tasks", help="Task and calendar commands")
app.add_typer(lists.app, name="lists", help="List management commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information and the configured API endpoint."""
    console.print(f"[bold]Tempus CLI[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]API endpoint: {get_config_service().config.api.endpoint}[/dim]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()

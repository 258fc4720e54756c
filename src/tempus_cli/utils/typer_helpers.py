"""Typer helper utilities."""

from difflib import get_close_matches

import click
import typer
from typer.core import TyperGroup

from tempus_cli.utils.ui.console import get_console


def suggest_commands(attempted: str, commands) -> list[str]:
    """Up to three command names that look like ``attempted``."""
    return get_close_matches(attempted, list(commands), n=3, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Command group that answers a mistyped subcommand with near matches."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            suggestions = suggest_commands(args[0], self.commands) if args else []
            if not suggestions:
                raise
            console = get_console()
            console.print(f'[red]Error:[/red] unknown command "{args[0]}" for "{ctx.info_name}"')
            heading = "Did you mean this?" if len(suggestions) == 1 else "Did you mean one of these?"
            console.print(f"\n[yellow]{heading}[/yellow]")
            for name in suggestions:
                console.print(f"  {name}")
            raise typer.Exit(1) from e

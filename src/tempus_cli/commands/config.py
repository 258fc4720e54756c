"""Configuration management commands."""

from typing import Any

import typer

from tempus_cli.exceptions import ValidationError
from tempus_cli.services.config_service import get_config_service
from tempus_cli.utils.typer_helpers import SuggestingGroup
from tempus_cli.utils.ui.console import get_console
from tempus_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper
from .utils import resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def _parse_value(value: str) -> Any:
    """Best-effort typing of a command-line value; pydantic validates the rest."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.lower() in ("null", "none"):
        return None
    if value.lstrip("-").isdigit():
        return int(value)
    return value


def _lookup(key: str) -> Any:
    try:
        return get_config_service().get(key)
    except KeyError as e:
        raise ValidationError(f"Unknown configuration key '{key}'") from e


@app.command("view")
@command_wrapper(auth_required=False)
def view_config(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    output = resolve_output(output)
    format_output(get_config_service().config.model_dump(), "table" if output == "pretty" else output)


@app.command("get")
@command_wrapper(auth_required=False)
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
) -> None:
    """Get a configuration value."""
    value = _lookup(key)
    if hasattr(value, "model_dump"):
        format_output(value.model_dump(), "yaml")
    else:
        console.print(value)


@app.command("set")
@command_wrapper(auth_required=False)
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    _lookup(key)
    parsed_value = _parse_value(value)
    get_config_service().set(key, parsed_value)
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if key:
        _lookup(key)
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_info("Cancelled")
            raise typer.Exit(0)

    get_config_service().reset(key)
    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")

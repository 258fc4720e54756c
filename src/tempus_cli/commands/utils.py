"""Helpers shared by the command modules."""

from typing import Any

from tempus_cli.exceptions import ValidationError
from tempus_cli.models import Task, TaskList
from tempus_cli.services.config_service import get_config_service
from tempus_cli.utils.ui.formatters import OUTPUT_FORMATS


def resolve_output(output: str | None) -> str:
    """The ``--output`` option, falling back to ``output.format`` from the config."""
    fmt = output or get_config_service().config.output.format
    if fmt not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Unknown output format '{fmt}' (choose from {', '.join(OUTPUT_FORMATS)})"
        )
    return fmt


def dump(items: list[Task] | list[TaskList]) -> list[dict[str, Any]]:
    return [item.model_dump() for item in items]


def collect(**options: Any) -> dict[str, Any]:
    """Keep only the options the user actually passed."""
    return {key: value for key, value in options.items() if value is not None}

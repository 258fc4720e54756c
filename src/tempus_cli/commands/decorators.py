"""Decorators for command functions."""

import asyncio
import inspect
import functools
import os
import time
import traceback
from collections.abc import Callable

import typer

from tempus_cli.exceptions import AuthError, TempusError
from tempus_cli.services.auth_service import AuthService
from tempus_cli.services.session import TOKEN_ENV_VAR
from tempus_cli.utils.exit_codes import ERROR_GENERAL, exit_code_for, get_exit_code_name
from tempus_cli.utils.logger import get_logger
from tempus_cli.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a token, either stored by ``tempus auth login`` or in the environment."""
    if os.environ.get(TOKEN_ENV_VAR):
        return
    if not AuthService().is_authenticated():
        raise AuthError("Not logged in. Use 'tempus auth login' to authenticate.")


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except TempusError as e:
                elapsed = time.monotonic() - start
                code = exit_code_for(e)
                logger.error(
                    "command failed: %s (%.3fs) - %s: %s [%s]",
                    cmd,
                    elapsed,
                    e.kind,
                    str(e),
                    get_exit_code_name(code),
                )
                format_error(str(e))
                raise typer.Exit(code=code) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)

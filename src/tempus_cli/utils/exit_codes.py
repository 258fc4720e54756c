"""
Exit codes for Tempus CLI.

Semantic exit codes so that scripts can tell what went wrong without parsing
the error text.
"""

from tempus_cli.exceptions import AuthError, NetworkError, ServerError, TempusError, ValidationError

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (no token, token rejected)
ERROR_AUTH_FAILURE = 3

# Network or API error (server unreachable, timeout, etc.)
ERROR_NETWORK = 4

# Resource not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_AUTH_FAILURE: "ERROR_AUTH_FAILURE",
        ERROR_NETWORK: "ERROR_NETWORK",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: TempusError) -> int:
    """Map an error to the exit code the CLI terminates with."""
    if isinstance(error, ValidationError):
        return ERROR_INVALID_ARGS
    if isinstance(error, AuthError):
        return ERROR_AUTH_FAILURE
    if isinstance(error, NetworkError):
        return ERROR_NETWORK
    if isinstance(error, ServerError) and error.status_code == 404:
        return ERROR_NOT_FOUND
    return ERROR_GENERAL

"""Exception hierarchy for Tempus CLI.

Every error raised by the gateway or the task store derives from
``TempusError``. The ``kind`` attribute is the tag used when an error is
converted into an ``Err`` result.
"""


class TempusError(Exception):
    """Base exception for all Tempus errors."""

    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(TempusError):
    """Raised locally, before any network call, when input is invalid."""

    kind = "validation"


class ParseError(ValidationError):
    """Raised when a date or time string cannot be parsed."""

    kind = "parse"


class AuthError(TempusError):
    """Raised when no valid auth token is available or the server rejects it."""

    kind = "auth"


class NetworkError(TempusError):
    """Raised when the request never produced a response."""

    kind = "network"


class ServerError(TempusError):
    """Raised for a non-2xx response carrying a server message."""

    kind = "server"

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

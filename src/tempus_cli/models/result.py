"""Explicit success/failure values for callers that prefer them to exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying its value."""

    value: T
    ok = True


@dataclass(frozen=True)
class Err:
    """A failed outcome.

    Attributes:
        kind: Error tag (``validation``, ``auth``, ``network``, ``server``, ...)
        message: Text suitable for showing to the user
        error: The original exception, kept for logging
    """

    kind: str
    message: str
    error: Exception | None = field(default=None, compare=False, repr=False)
    ok = False


Result = Union[Ok[T], Err]

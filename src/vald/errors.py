"""Vald exception hierarchy.

Shared by checkers, validators, and sources so callers can catch a
single base type. Consumer (sink) exceptions are not part of this
hierarchy: they propagate exactly as the consumer raised them.

The dataclass exceptions are not frozen: the interpreter and tooling
set ``__notes__``, ``__context__`` and ``__cause__`` on them.
"""

import json
from dataclasses import dataclass


def quote(value: str) -> str:
    """Quote *value* for an error message (JSON string rules)."""
    return json.dumps(value, ensure_ascii=False)


class ValdError(Exception):
    """Base for all vald-specific errors."""


class ConfigurationError(ValdError):
    """Raised when a validator or checker is constructed with invalid arguments.

    Always raised at construction time, never during evaluation.
    """


@dataclass(slots=True, eq=False)
class CheckError(ValdError, ValueError):
    """A checker rejected a raw value.

    Carries the offending value and a short reason. Does not know the
    field name; the validator attaches that.
    """

    value: str
    reason: str = "invalid value"

    def __str__(self) -> str:
        return f"{self.reason}: {quote(self.value)}"


@dataclass(slots=True, eq=False)
class FieldError(ValdError):
    """A failure scoped to a single named field."""

    name: str

    @property
    def detail(self) -> str:
        return "invalid field"

    def __str__(self) -> str:
        return f"parameter {quote(self.name)}: {self.detail}"


@dataclass(slots=True, eq=False)
class MissingValueError(FieldError):
    """A required field is absent from the source."""

    @property
    def detail(self) -> str:
        return "missing value"


@dataclass(slots=True, eq=False)
class InvalidValueError(FieldError):
    """A field's value was rejected by its checker.

    ``cause`` is the checker's exception; its text becomes the detail::

        parameter "isOK": invalid syntax: "XXX"
    """

    cause: ValueError

    @property
    def detail(self) -> str:
        return str(self.cause)

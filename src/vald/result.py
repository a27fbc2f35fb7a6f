"""Validation result — immutable container for validated data or an error."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from vald._internal.types import Getter
from vald.errors import ValdError
from vald.validators import Validator

logger = logging.getLogger("vald")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of running a validator against a source.

    ``is_valid`` is True when there is no error.
    The result is falsy when invalid, so you can write::

        result = validate(validate_signup, form)
        if not result:
            return Template("signup.html", form=form, error=str(result.error))

    ``data`` holds the accepted values (empty when invalid).
    ``error`` is the first failure, or ``None``.
    """

    data: dict[str, str] = field(default_factory=dict)
    error: ValdError | None = None

    @property
    def is_valid(self) -> bool:
        """True if validation passed."""
        return self.error is None

    def __bool__(self) -> bool:
        """Falsy when invalid, so ``if not result:`` works."""
        return self.is_valid


def validate(validator: Validator, source: Getter | Mapping[str, str]) -> ValidationResult:
    """Run *validator* against *source* without raising on invalid input.

    Only vald errors are captured. An exception raised by a custom
    consumer or checker of another type still propagates.
    """
    try:
        data = validator.map(source)
    except ValdError as e:
        return ValidationResult(error=e)
    logger.debug("validation passed: %d fields", len(data))
    return ValidationResult(data=data)

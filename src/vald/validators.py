"""Field validators and the composer that chains them.

A validator is an immutable callable::

    validator(get, cons) -> None

``get`` returns the raw value for a field name (``""`` when absent).
``cons`` receives each accepted ``(name, value)`` pair. Failures are
raised: ``MissingValueError`` and ``InvalidValueError`` from the
validators themselves, and whatever the consumer raises, unchanged.

Build validators once, at import time, and reuse them for every
request. They hold no mutable state::

    from vald import Pack, Req, Opt, OptDef, boolean, one_of, regex

    validate_signup = Pack(
        Req("user", regex(r"^[a-z0-9_]{3,32}$")),
        Opt("plan", one_of("free", "pro")),
        OptDef("newsletter", boolean, "false"),
    )

    data = validate_signup.map(request_form)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from vald._internal.types import Checker, Consumer, Getter
from vald.errors import ConfigurationError, InvalidValueError, MissingValueError, ValdError
from vald.sources import as_getter

logger = logging.getLogger("vald")


class Validator:
    """Base for all validators.

    Subclasses implement ``__call__``. Evaluation stops at the first
    failure, which is raised to the caller.
    """

    __slots__ = ()

    def __call__(self, get: Getter, cons: Consumer) -> None:
        raise NotImplementedError

    def map(self, source: Getter | Mapping[str, str]) -> dict[str, str]:
        """Run the validator against *source* and collect the accepted values.

        *source* is a getter function or any string mapping. Repeated
        emissions of the same name overwrite earlier ones.

        Raises:
            FieldError: If a field is missing or invalid.
        """
        result: dict[str, str] = {}

        def cons(name: str, value: str) -> None:
            result[name] = value

        try:
            self(as_getter(source), cons)
        except ValdError as e:
            logger.debug("validation failed: %s", e)
            raise

        return result


def _check(name: str, raw: str, check: Checker, cons: Consumer) -> None:
    """Check a present value and hand the result to the consumer.

    Checker failures are scoped to the field; consumer failures are not.
    """
    try:
        value = check(raw)
    except ValueError as e:
        raise InvalidValueError(name, e) from e

    cons(name, value)


def _require_name(name: str, where: str) -> None:
    if not name:
        raise ConfigurationError(f"empty field name in {where}()")


@dataclass(frozen=True, slots=True)
class Req(Validator):
    """Required field: missing values are an error."""

    name: str
    check: Checker

    def __post_init__(self) -> None:
        _require_name(self.name, "Req")

    def __call__(self, get: Getter, cons: Consumer) -> None:
        raw = get(self.name)
        if not raw:
            raise MissingValueError(self.name)
        _check(self.name, raw, self.check, cons)


@dataclass(frozen=True, slots=True)
class Opt(Validator):
    """Optional field: missing values are skipped."""

    name: str
    check: Checker

    def __post_init__(self) -> None:
        _require_name(self.name, "Opt")

    def __call__(self, get: Getter, cons: Consumer) -> None:
        raw = get(self.name)
        if raw:
            _check(self.name, raw, self.check, cons)


@dataclass(frozen=True, slots=True)
class OptDef(Validator):
    """Optional field with a default.

    When the field is missing the default is emitted as is. It is not
    passed through the checker.
    """

    name: str
    check: Checker
    default: str

    def __post_init__(self) -> None:
        _require_name(self.name, "OptDef")

    def __call__(self, get: Getter, cons: Consumer) -> None:
        raw = get(self.name)
        if raw:
            _check(self.name, raw, self.check, cons)
        else:
            cons(self.name, self.default)


@dataclass(frozen=True, slots=True)
class Cond(Validator):
    """Branch on the presence of a field.

    If the field is present it is checked and emitted, then ``yes`` runs.
    If it is absent, ``no`` runs. A ``None`` branch does nothing, but at
    least one branch must be given.
    """

    name: str
    check: Checker
    yes: Validator | None = None
    no: Validator | None = None

    def __post_init__(self) -> None:
        _require_name(self.name, "Cond")
        if self.yes is None and self.no is None:
            raise ConfigurationError(f"both branches are None in Cond({self.name!r})")

    def __call__(self, get: Getter, cons: Consumer) -> None:
        raw = get(self.name)
        if raw:
            _check(self.name, raw, self.check, cons)
            if self.yes is not None:
                self.yes(get, cons)
        elif self.no is not None:
            self.no(get, cons)


@dataclass(frozen=True, slots=True, init=False)
class Pack(Validator):
    """Run validators one by one, in the order given.

    Stops at the first failure and raises it unchanged.
    """

    validators: tuple[Validator, ...]

    def __init__(self, *validators: Validator) -> None:
        if not validators:
            raise ConfigurationError("empty validator list in Pack()")
        object.__setattr__(self, "validators", validators)

    def __call__(self, get: Getter, cons: Consumer) -> None:
        for validate in self.validators:
            validate(get, cons)

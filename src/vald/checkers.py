"""Built-in checkers for vald validators.

A checker is a callable with the signature::

    def check(value: str) -> str:
        '''Return the normalized value, or raise CheckError.'''

Checkers never see the field name and are only called with a non-empty
value; emptiness means "absent" and is handled by the validator.

Parameterized checkers are factory functions that do all their setup
(compiling patterns, building lookup tables) once, at construction::

    def max_length(n: int) -> Checker:
        def check(value: str) -> str:
            if len(value) > n:
                raise CheckError(value, f"longer than {n} characters")
            return value
        return check

Custom checkers follow the same protocol. A plain ``ValueError`` raised
by a custom checker is reported the same way as a ``CheckError``.
"""

import math
import re

from vald._internal.types import Checker
from vald.errors import CheckError, ConfigurationError

# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*literals: str) -> Checker:
    """Value must be one of the given literals.

    Returns the stored literal, so every accepted value is the same
    string object as the one passed here.
    """
    if not literals:
        raise ConfigurationError("empty list of literals in one_of()")

    table: dict[str, str] = {}
    for i, lit in enumerate(literals):
        if not lit:
            raise ConfigurationError(f"empty literal in one_of() at index {i}")
        table[lit] = lit

    def check(value: str) -> str:
        try:
            return table[value]
        except KeyError:
            raise CheckError(value) from None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


# Inline multiline flag, global "(?m)" or scoped "(?m:...)"
_INLINE_MULTILINE_RE = re.compile(r"\(\?[a-zA-Z]*m")


def _end_of_text(pattern: str) -> str:
    """Rewrite each ``$`` anchor as ``\\Z``.

    Without MULTILINE, ``$`` in ``re`` also matches before a trailing
    newline, so ``^[a-z]{3}$`` would accept ``"abc\\n"``. ``\\Z`` only
    matches at the very end. Escaped ``\\$`` and ``$`` inside a
    character class are literals and left alone.
    """
    out: list[str] = []
    escaped = False
    class_start = -1  # index of the open "[", or -1 outside a class
    for i, ch in enumerate(pattern):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif class_start >= 0:
            # "]" right after "[" or "[^" is a literal member
            if ch == "]" and pattern[class_start + 1 : i] not in ("", "^"):
                class_start = -1
        elif ch == "[":
            class_start = i
        elif ch == "$":
            out.append(r"\Z")
            continue
        out.append(ch)
    return "".join(out)


def regex(pattern: str, flags: int = 0) -> Checker:
    """Value must contain a match for *pattern*.

    The search is unanchored; use ``^`` and ``$`` to match the whole value.
    Unless the pattern is multiline, ``$`` matches only at the end of the
    value, never before a trailing newline.
    """
    try:
        compiled = re.compile(pattern, flags)
    except re.error as e:
        raise ConfigurationError(f"invalid pattern {pattern!r} in regex(): {e}") from e

    if not compiled.flags & re.MULTILINE and not _INLINE_MULTILINE_RE.search(pattern):
        compiled = re.compile(_end_of_text(pattern), flags)

    def check(value: str) -> str:
        if compiled.search(value) is None:
            raise CheckError(value)
        return value

    return check


# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: str) -> str:
    """Value must be a valid email address (basic format check)."""
    if not _EMAIL_RE.fullmatch(value):
        raise CheckError(value, "invalid email address")
    return value


# http(s) scheme plus a host
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def url(value: str) -> str:
    """Value must be a valid URL (http/https)."""
    if not _URL_RE.fullmatch(value):
        raise CheckError(value, "invalid URL")
    return value


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def min_length(n: int) -> Checker:
    """String must be at least *n* characters."""
    if n < 0:
        raise ConfigurationError(f"negative bound in min_length(): {n}")

    def check(value: str) -> str:
        if len(value) < n:
            raise CheckError(value, f"shorter than {n} characters")
        return value

    return check


def max_length(n: int) -> Checker:
    """String must be at most *n* characters."""
    if n < 0:
        raise ConfigurationError(f"negative bound in max_length(): {n}")

    def check(value: str) -> str:
        if len(value) > n:
            raise CheckError(value, f"longer than {n} characters")
        return value

    return check


# ---------------------------------------------------------------------------
# Type conversion
# ---------------------------------------------------------------------------

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def boolean(value: str) -> str:
    """Value must be a boolean literal; normalized to ``"true"`` or ``"false"``.

    Accepted spellings are ``1 t T TRUE true True`` and
    ``0 f F FALSE false False``. Nothing else (``yes``, ``on``, ``tRuE``)
    is accepted.
    """
    if value in _TRUE:
        return "true"
    if value in _FALSE:
        return "false"
    raise CheckError(value, "invalid syntax")


_INT_RE = re.compile(r"^[+-]?[0-9]+$")


def integer(value: str) -> str:
    """Value must be a base-10 integer; normalized through ``int()``.

    Only ASCII digits with an optional sign are accepted, so ``"1_000"``
    and padded values are rejected even though ``int()`` takes them.
    Values with more digits than the interpreter converts are out of range.
    """
    if not _INT_RE.fullmatch(value):
        raise CheckError(value, "invalid syntax")
    try:
        return str(int(value))
    except ValueError:
        # longer than sys.get_int_max_str_digits()
        raise CheckError(value, "value out of range") from None


def number(value: str) -> str:
    """Value must be a finite number (int or float); returned unchanged."""
    if "_" in value or value != value.strip():
        raise CheckError(value, "invalid syntax")
    try:
        parsed = float(value)
    except ValueError:
        raise CheckError(value, "invalid syntax") from None
    if not math.isfinite(parsed):
        raise CheckError(value, "value out of range")
    return value


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def chain(*checkers: Checker) -> Checker:
    """Run *checkers* left to right, each receiving the previous result.

    The first failure wins::

        Req("code", chain(max_length(8), regex(r"^[A-Z]+$")))
    """
    if not checkers:
        raise ConfigurationError("empty checker list in chain()")

    steps = tuple(checkers)

    def check(value: str) -> str:
        for step in steps:
            value = step(value)
        return value

    return check

"""Test helpers for vald validators.

``Recorder`` is a consumer that remembers every pair it receives, in
order, so tests can check emission order as well as content::

    rec = Recorder()
    validate_signup(from_mapping(form), rec)
    assert rec.pairs == [("user", "alice"), ("newsletter", "false")]
"""

from collections.abc import Mapping, Sequence

from vald._internal.types import Getter
from vald.sources import as_getter
from vald.validators import Validator


class Recorder:
    """A consumer that records ``(name, value)`` pairs.

    With ``limit`` set, the consumer raises ``OverflowError`` once more
    than ``limit`` pairs arrive, which is handy for testing sink
    failures.
    """

    __slots__ = ("limit", "pairs")

    def __init__(self, limit: int | None = None) -> None:
        self.pairs: list[tuple[str, str]] = []
        self.limit = limit

    def __call__(self, name: str, value: str) -> None:
        if self.limit is not None and len(self.pairs) >= self.limit:
            msg = f"too many values: {name!r} after {self.limit}"
            raise OverflowError(msg)
        self.pairs.append((name, value))

    def __repr__(self) -> str:
        return f"Recorder({self.pairs!r})"


def assert_emits(
    validator: Validator,
    source: Getter | Mapping[str, str],
    expected: Sequence[tuple[str, str]],
) -> None:
    """Assert *validator* emits exactly *expected*, in order."""
    rec = Recorder()
    validator(as_getter(source), rec)
    assert rec.pairs == list(expected), (
        f"Expected emissions {list(expected)!r}, got {rec.pairs!r}"
    )

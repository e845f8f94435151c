"""Random integer generation from direct calls or a ``[randint]`` keyword.

Bounds are inclusive.  Without an explicit range the full signed 32-bit range
``[INT_MIN, INT_MAX]`` is used.  Even/odd requests first narrow the bounds
inward by at most one so they land on the requested parity and then sample
only from that parity's lattice, so the result never has the wrong parity.

Keyword form::

    [randint]                        any integer in the full range
    [randint{range=-20:347}]
    [randint{range=7:15}{even}]      one of 8, 10, 12, 14
    [randint{odd}]

``{range}`` may appear at most once; ``{even}`` and ``{odd}`` are mutually
exclusive.
"""

from __future__ import annotations

import re

from ..seed import RandomSource, default_rng
from ..utils.errors import InvalidArgumentError, InvalidFormatError
from ..utils.logging import get_logger
from .base import KeywordFamily, ModifierRule, is_keyword, parse_keyword

__all__ = [
    "INT_MIN",
    "INT_MAX",
    "INTEGER_RULES",
    "INTEGER_EXCLUSIVE",
    "IntegerBuilder",
    "generate",
    "generate_range",
    "generate_even",
    "generate_odd",
    "generate_from_keyword",
    "is_random_integer_keyword",
]

log = get_logger(__name__)

INT_MIN: int = -(2**31)
INT_MAX: int = 2**31 - 1

_RANGE_VALUE_RX: re.Pattern[str] = re.compile(r"\s*(-?[0-9]+)\s*:\s*(-?[0-9]+)\s*")


def _parse_range(match: re.Match[str]) -> tuple[int, int]:
    m = _RANGE_VALUE_RX.fullmatch(match.group("value"))
    if not m:
        raise InvalidFormatError(
            f"invalid range modifier '{match.group(0)}'; expected {{range=min:max}}"
        )
    return int(m.group(1)), int(m.group(2))


INTEGER_RULES: tuple[ModifierRule, ...] = (
    ModifierRule(
        "range",
        re.compile(r"\{\s*range\s*=(?P<value>[^{}]*)\}", re.IGNORECASE),
        max_count=1,
        parser=_parse_range,
    ),
    ModifierRule("even", re.compile(r"\{\s*even\s*\}", re.IGNORECASE)),
    ModifierRule("odd", re.compile(r"\{\s*odd\s*\}", re.IGNORECASE)),
)

INTEGER_EXCLUSIVE: tuple[tuple[str, ...], ...] = (("even", "odd"),)


def is_random_integer_keyword(text: str) -> bool:
    """Return ``True`` when ``text`` is a ``[randint ...]`` keyword."""

    return is_keyword(text, KeywordFamily.INTEGER)


# ---------------------------------------------------------------------------
# Direct generation
# ---------------------------------------------------------------------------


def generate(*, rng: RandomSource | None = None) -> int:
    """Return an integer from anywhere in ``[INT_MIN, INT_MAX]``."""

    return (rng or default_rng()).randint(INT_MIN, INT_MAX)


def generate_range(min_value: int, max_value: int, *, rng: RandomSource | None = None) -> int:
    """Return an integer in ``[min_value, max_value]``; ``max_value`` must exceed ``min_value``."""

    if max_value <= min_value:
        raise InvalidArgumentError(
            f"max value must be greater than min value, got range {min_value}:{max_value}"
        )
    return (rng or default_rng()).randint(min_value, max_value)


def _sample_lattice(low: int, high: int, rng: RandomSource | None) -> int:
    # low and high share the requested parity
    return low + 2 * (rng or default_rng()).randint(0, (high - low) // 2)


def _check_parity_bounds(kind: str, min_value: int, max_value: int, low: int, high: int) -> None:
    if max_value < min_value:
        raise InvalidArgumentError(
            f"max value must not be less than min value, got range {min_value}:{max_value}"
        )
    if low > high:
        raise InvalidArgumentError(f"range {min_value}:{max_value} contains no {kind} integer")


def generate_even(
    min_value: int = INT_MIN,
    max_value: int = INT_MAX,
    *,
    rng: RandomSource | None = None,
) -> int:
    """Return an even integer in ``[min_value, max_value]``.

    An odd ``min_value`` is raised by one and an odd ``max_value`` lowered by
    one before sampling.
    """

    low = min_value + min_value % 2
    high = max_value - max_value % 2
    _check_parity_bounds("even", min_value, max_value, low, high)
    return _sample_lattice(low, high, rng)


def generate_odd(
    min_value: int = INT_MIN,
    max_value: int = INT_MAX,
    *,
    rng: RandomSource | None = None,
) -> int:
    """Return an odd integer in ``[min_value, max_value]``.

    An even ``min_value`` is raised by one and an even ``max_value`` lowered
    by one before sampling.
    """

    low = min_value if min_value % 2 else min_value + 1
    high = max_value if max_value % 2 else max_value - 1
    _check_parity_bounds("odd", min_value, max_value, low, high)
    return _sample_lattice(low, high, rng)


def generate_from_keyword(parameter_string: str, *, rng: RandomSource | None = None) -> int:
    """Return a random integer described by a ``[randint ...]`` keyword."""

    parsed = parse_keyword(
        parameter_string,
        KeywordFamily.INTEGER,
        INTEGER_RULES,
        exclusive=INTEGER_EXCLUSIVE,
    )
    min_value, max_value = parsed.first("range", (INT_MIN, INT_MAX))
    log.debug(
        "randint: range=%d:%d even=%s odd=%s",
        min_value,
        max_value,
        parsed.has("even"),
        parsed.has("odd"),
    )
    if parsed.has("even"):
        return generate_even(min_value, max_value, rng=rng)
    if parsed.has("odd"):
        return generate_odd(min_value, max_value, rng=rng)
    return generate_range(min_value, max_value, rng=rng)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class IntegerBuilder:
    """Fluent counterpart of the ``[randint]`` keyword."""

    def __init__(self, *, rng: RandomSource | None = None) -> None:
        self._rng = rng
        self._range: tuple[int, int] | None = None
        self._parity: str | None = None

    def range(self, min_value: int, max_value: int) -> IntegerBuilder:
        if self._range is not None:
            raise InvalidArgumentError(
                f"range can only be specified once (already {self._range[0]}:{self._range[1]})"
            )
        if max_value <= min_value:
            raise InvalidArgumentError(
                f"max value must be greater than min value, got range {min_value}:{max_value}"
            )
        self._range = (min_value, max_value)
        return self

    def even(self) -> IntegerBuilder:
        return self._set_parity("even")

    def odd(self) -> IntegerBuilder:
        return self._set_parity("odd")

    def _set_parity(self, parity: str) -> IntegerBuilder:
        if self._parity is not None and self._parity != parity:
            raise InvalidArgumentError(f"cannot combine even() and odd(); already {self._parity}")
        self._parity = parity
        return self

    def build(self) -> int:
        min_value, max_value = self._range or (INT_MIN, INT_MAX)
        if self._parity == "even":
            return generate_even(min_value, max_value, rng=self._rng)
        if self._parity == "odd":
            return generate_odd(min_value, max_value, rng=self._rng)
        return generate_range(min_value, max_value, rng=self._rng)

    def clear(self) -> None:
        self._range = None
        self._parity = None

    def build_and_clear(self) -> int:
        value = self.build()
        self.clear()
        return value

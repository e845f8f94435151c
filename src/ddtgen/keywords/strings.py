"""Random string generation from a builder or a ``[randstring]`` keyword.

:class:`StringGenerator` accumulates a source character set and a length and
produces strings whose characters are drawn uniformly, with replacement, from
that set.  Nothing guarantees that every selected class actually appears in
the output.  Character classes are concatenated as they are selected, so a
character present in two selected sets (or included twice) is proportionally
more likely to be drawn.

Keyword form (names are case-insensitive, whitespace is tolerated)::

    [randstring]                         10 alphanumeric characters
    [randstring{uppercase}{length=27}]
    [randstring{numeric}{specialchars}{length=3-9}]
    [randstring{include=[abc123]}]

``{length}`` may appear at most once.  For the keyword form the source set is
assembled in a fixed order: uppercase, lowercase, numeric, spaces, special
characters, then included characters.
"""

from __future__ import annotations

import re
from typing import Any

from ..config import ConfigModel
from ..seed import RandomSource, default_rng
from ..utils.constants import (
    DEFAULT_LENGTH,
    DEFAULT_SOURCE,
    LOWERCASE,
    NUMBERS,
    SPACE,
    SPECIAL_CHARACTERS,
    UPPERCASE,
)
from ..utils.errors import InvalidArgumentError, InvalidFormatError
from ..utils.logging import get_logger
from .base import KeywordFamily, ModifierRule, is_keyword, parse_keyword

__all__ = [
    "StringGenerator",
    "STRING_RULES",
    "generate",
    "is_random_string_keyword",
]

log = get_logger(__name__)

# ---------------------------------------------------------------------------
# Modifier table
# ---------------------------------------------------------------------------

_LENGTH_VALUE_RX: re.Pattern[str] = re.compile(r"\s*([0-9]+)\s*(?:-\s*([0-9]+)\s*)?")


def _parse_include(match: re.Match[str]) -> str:
    chars = match.group("chars")
    if not chars:
        raise InvalidFormatError(
            f"modifier '{match.group(0)}' must contain at least one character between '[' and ']'"
        )
    return chars


def _parse_length(match: re.Match[str]) -> tuple[int, int]:
    fragment = match.group(0)
    m = _LENGTH_VALUE_RX.fullmatch(match.group("value"))
    if not m:
        raise InvalidFormatError(f"invalid length modifier '{fragment}'; expected N or N-M")
    low = int(m.group(1))
    high = int(m.group(2)) if m.group(2) is not None else low
    if low < 1:
        raise InvalidFormatError(f"length must be >= 1 in modifier '{fragment}'")
    if high < low:
        raise InvalidFormatError(f"maximum length must be >= minimum length in modifier '{fragment}'")
    return low, high


def _flag_rx(name: str) -> re.Pattern[str]:
    return re.compile(rf"\{{\s*{name}\s*\}}", re.IGNORECASE)


# ``include`` comes first: its payload may contain text resembling other
# modifiers.  The payload runs to the last ``]}`` before the next
# ``{include=`` (or the end of the keyword), so ``]}`` may appear inside it.
STRING_RULES: tuple[ModifierRule, ...] = (
    ModifierRule(
        "include",
        re.compile(
            r"\{\s*include\s*=\s*\[(?P<chars>(?:(?!\{\s*include\s*=).)*)\]\s*\}",
            re.IGNORECASE | re.DOTALL,
        ),
        parser=_parse_include,
    ),
    ModifierRule(
        "length",
        re.compile(r"\{\s*length\s*=(?P<value>[^{}]*)\}", re.IGNORECASE),
        max_count=1,
        parser=_parse_length,
    ),
    ModifierRule("uppercase", _flag_rx("uppercase")),
    ModifierRule("lowercase", _flag_rx("lowercase")),
    ModifierRule("numeric", _flag_rx("numeric")),
    ModifierRule("spaces", _flag_rx("spaces")),
    ModifierRule("specialchars", _flag_rx("specialchars")),
)

_CLASS_ORDER: tuple[tuple[str, str], ...] = (
    ("uppercase", UPPERCASE),
    ("lowercase", LOWERCASE),
    ("numeric", NUMBERS),
    ("spaces", SPACE),
    ("specialchars", SPECIAL_CHARACTERS),
)


def is_random_string_keyword(text: str) -> bool:
    """Return ``True`` when ``text`` is a ``[randstring ...]`` keyword."""

    return is_keyword(text, KeywordFamily.STRING)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class StringGenerator:
    """Build random strings of a configurable composition.

    Calling :meth:`build` without configuring anything yields an alphanumeric
    string of ``default_length`` characters.  Instances are mutable and meant
    for a single caller.
    """

    DEFAULT_LENGTH: int = DEFAULT_LENGTH

    def __init__(
        self,
        *,
        rng: RandomSource | None = None,
        default_length: int = DEFAULT_LENGTH,
    ) -> None:
        if default_length < 1:
            raise InvalidArgumentError(f"default_length must be >= 1, got {default_length}")
        self._rng: RandomSource = rng if rng is not None else default_rng()
        self._default_length = default_length
        self._length = default_length
        self._length_set = False
        self._source: list[str] = []

    # -- Character classes ---------------------------------------------------

    def uppercase(self) -> StringGenerator:
        self._source.append(UPPERCASE)
        return self

    def lowercase(self) -> StringGenerator:
        self._source.append(LOWERCASE)
        return self

    def numeric(self) -> StringGenerator:
        self._source.append(NUMBERS)
        return self

    def spaces(self) -> StringGenerator:
        """Allow spaces; generated strings may start or end with one."""

        self._source.append(SPACE)
        return self

    def special_chars(self) -> StringGenerator:
        self._source.append(SPECIAL_CHARACTERS)
        return self

    def include(self, chars: str) -> StringGenerator:
        """Add ``chars`` to the source set.

        Included characters only become possible; there is no guarantee any
        of them appears in the result.
        """

        if not isinstance(chars, str):
            raise InvalidArgumentError(f"include() expects a string, got {chars!r}")
        self._source.append(chars)
        return self

    # -- Length --------------------------------------------------------------

    def length(self, length: int, max_length: int | None = None) -> StringGenerator:
        """Set an exact length, or a ``[length, max_length]`` range.

        A ranged length is sampled once, here, not on every :meth:`build`.
        The length can only be set once until :meth:`clear` is called.
        """

        if self._length_set:
            raise InvalidArgumentError(
                f"length can only be specified once (already set to {self._length})"
            )
        if max_length is None:
            if length <= 0:
                raise InvalidArgumentError(f"length must be > 0, got {length}")
            self._length = length
        else:
            if length < 1:
                raise InvalidArgumentError(f"minimum length must be >= 1, got {length}")
            if max_length < length:
                raise InvalidArgumentError(
                    f"maximum length must be >= minimum length, got {length}-{max_length}"
                )
            self._length = self._rng.randint(length, max_length)
        self._length_set = True
        return self

    # -- Output --------------------------------------------------------------

    @property
    def source_chars(self) -> str:
        """Return the characters strings are drawn from."""

        return "".join(self._source) or DEFAULT_SOURCE

    def build(self) -> str:
        """Return a random string using the configured set and length."""

        source = self.source_chars
        log.debug("building string: length=%d source_size=%d", self._length, len(source))
        return "".join(self._rng.choice(source) for _ in range(self._length))

    def clear(self) -> None:
        """Restore the generator to its initial default state."""

        self._source.clear()
        self._length = self._default_length
        self._length_set = False

    def build_and_clear(self) -> str:
        """Build a string then reset all configured parameters."""

        value = self.build()
        self.clear()
        return value

    # -- Keyword form --------------------------------------------------------

    @classmethod
    def from_keyword(
        cls,
        parameter_string: str,
        *,
        rng: RandomSource | None = None,
        default_length: int = DEFAULT_LENGTH,
    ) -> StringGenerator:
        """Return a generator configured from a ``[randstring]`` keyword."""

        parsed = parse_keyword(parameter_string, KeywordFamily.STRING, STRING_RULES)
        gen = cls(rng=rng, default_length=default_length)
        for name, chars in _CLASS_ORDER:
            if parsed.has(name):
                gen._source.append(chars)
        for chars in parsed.all("include"):
            gen._source.append(chars)
        bounds = parsed.first("length")
        if bounds is not None:
            low, high = bounds
            gen.length(low, None if low == high else high)
        return gen

    @classmethod
    def generate(cls, parameter_string: str, **kwargs: Any) -> str:
        """Return a random string described by ``parameter_string``."""

        return cls.from_keyword(parameter_string, **kwargs).build()


def generate(
    parameter_string: str,
    *,
    rng: RandomSource | None = None,
    cfg: ConfigModel | None = None,
) -> str:
    """Return a random string for a ``[randstring ...]`` keyword.

    ``cfg`` supplies the default length used when the keyword has no
    ``{length}`` modifier.
    """

    default_length = cfg.strings.default_length if cfg is not None else DEFAULT_LENGTH
    return StringGenerator.generate(parameter_string, rng=rng, default_length=default_length)

"""Shared keyword grammar: envelope recognition and modifier extraction.

A keyword string has the shape ``[ <family> <modifier>* ]`` where each
modifier is a ``{name}`` or ``{name=value}`` fragment.  Each generator family
declares a table of :class:`ModifierRule` rows; :func:`parse_keyword` walks
that table in order and, for every rule, finds the rule's matches in the
text that is left, records the parsed payloads and blanks the matched
fragments out.  Whatever survives all rules must be the bare envelope
``[ <family> ]``; anything else is rejected with the residual text quoted in
the error.

Rules are applied in table order against the progressively reduced text, so a
rule whose payload may contain other modifiers (``{include=[{numeric}]}``)
must come first.  Keyword and modifier names are case-insensitive unless a
rule compiles its pattern without :data:`re.IGNORECASE`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..utils.errors import InvalidFormatError

__all__ = [
    "KeywordFamily",
    "ModifierRule",
    "ParsedKeyword",
    "is_keyword",
    "parse_keyword",
    "parse_signed_int",
]

_SIGNED_INT_RX: re.Pattern[str] = re.compile(r"[+-]?[0-9]+")


class KeywordFamily(Enum):
    """Supported keyword families and their envelope names."""

    STRING = "randstring"
    INTEGER = "randint"
    DATETIME = "datetime"

    @property
    def envelope_rx(self) -> re.Pattern[str]:
        return _ENVELOPE_RX[self]

    @property
    def residual_rx(self) -> re.Pattern[str]:
        return _RESIDUAL_RX[self]


_ENVELOPE_RX: dict[KeywordFamily, re.Pattern[str]] = {
    fam: re.compile(rf"^\[\s*{fam.value}.*\]$", re.IGNORECASE | re.DOTALL)
    for fam in KeywordFamily
}

_RESIDUAL_RX: dict[KeywordFamily, re.Pattern[str]] = {
    fam: re.compile(rf"^\[\s*{fam.value}\s*\]$", re.IGNORECASE) for fam in KeywordFamily
}


def _flag(_match: re.Match[str]) -> bool:
    return True


@dataclass(slots=True, frozen=True)
class ModifierRule:
    """One row of a family's modifier table.

    ``max_count`` of ``None`` allows any number of occurrences.  ``parser``
    turns a match into the modifier's value and raises
    :class:`InvalidFormatError` for a malformed payload; flag modifiers use
    the default parser which yields ``True``.
    """

    name: str
    pattern: re.Pattern[str]
    max_count: int | None = None
    parser: Callable[[re.Match[str]], Any] = _flag


@dataclass(slots=True)
class ParsedKeyword:
    """Modifier values extracted from one keyword string."""

    family: KeywordFamily
    text: str
    values: dict[str, list[Any]] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        """Return ``True`` when modifier ``name`` occurred at least once."""

        return bool(self.values.get(name))

    def all(self, name: str) -> list[Any]:
        """Return every parsed value of ``name`` in order of appearance."""

        return list(self.values.get(name, ()))

    def first(self, name: str, default: Any = None) -> Any:
        """Return the first parsed value of ``name`` or ``default``."""

        found = self.values.get(name)
        return found[0] if found else default


def is_keyword(text: str, family: KeywordFamily) -> bool:
    """Return ``True`` when ``text`` is enclosed in ``family``'s envelope.

    Leading and trailing whitespace is ignored but any other character
    outside the brackets makes the check fail: ``"  [ randint ]  "`` is a
    keyword, ``"foo[randint]bar"`` is not.  Modifiers are not inspected.
    """

    if not isinstance(text, str):
        return False
    return family.envelope_rx.match(text.strip()) is not None


def parse_signed_int(raw: str, fragment: str) -> int:
    """Parse ``raw`` as an optionally signed decimal integer.

    ``fragment`` is the whole modifier and is quoted in the error message.
    """

    value = raw.strip()
    if not _SIGNED_INT_RX.fullmatch(value):
        raise InvalidFormatError(f"'{value}' is not a valid integer in modifier '{fragment}'")
    return int(value)


def parse_keyword(
    text: str,
    family: KeywordFamily,
    rules: Iterable[ModifierRule],
    *,
    exclusive: Iterable[tuple[str, ...]] = (),
) -> ParsedKeyword:
    """Validate ``text`` against ``family`` and extract modifier values.

    Raises :class:`InvalidFormatError` when the envelope does not match, a
    single-occurrence modifier repeats, mutually ``exclusive`` modifiers
    appear together, a payload is malformed, or unrecognized text remains
    once every known modifier has been removed.
    """

    if not is_keyword(text, family):
        raise InvalidFormatError(f"'{text}' must contain the '[{family.value}]' keyword")

    stripped = text.strip()
    reduced = stripped
    parsed = ParsedKeyword(family=family, text=stripped)

    for rule in rules:
        matches = list(rule.pattern.finditer(reduced))
        if rule.max_count is not None and len(matches) > rule.max_count:
            raise InvalidFormatError(
                f"only one {{{rule.name}}} modifier is allowed per "
                f"[{family.value}]: '{stripped}'"
            )
        if matches:
            parsed.values[rule.name] = [rule.parser(m) for m in matches]
            reduced = rule.pattern.sub(" ", reduced)

    for group in exclusive:
        present = [name for name in group if parsed.has(name)]
        if len(present) > 1:
            names = " and ".join(f"{{{name}}}" for name in present)
            raise InvalidFormatError(f"cannot use both {names} in the same keyword: '{stripped}'")

    if not family.residual_rx.match(reduced):
        raise InvalidFormatError(
            "Invalid keyword string; the following remains with the valid "
            f"modifiers removed: '{reduced}'"
        )
    return parsed

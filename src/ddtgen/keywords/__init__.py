"""Keyword generators for random strings, integers and relative datetimes.

:func:`generate_value` accepts a single keyword string, picks the family
whose envelope encloses it and returns the generated value.  It does not
search for keywords inside a larger text.
"""

from __future__ import annotations

from datetime import datetime

from ..config import ConfigModel
from ..seed import RandomSource, rng_from_config
from ..utils.errors import InvalidFormatError
from . import datetimes, integers, strings
from .base import KeywordFamily, ModifierRule, ParsedKeyword, is_keyword, parse_keyword
from .datetimes import DateTimeBuilder, is_datetime_keyword
from .integers import IntegerBuilder, is_random_integer_keyword
from .strings import StringGenerator, is_random_string_keyword

__all__ = [
    "KeywordFamily",
    "ModifierRule",
    "ParsedKeyword",
    "StringGenerator",
    "IntegerBuilder",
    "DateTimeBuilder",
    "is_keyword",
    "is_random_string_keyword",
    "is_random_integer_keyword",
    "is_datetime_keyword",
    "keyword_family",
    "parse_keyword",
    "validate_keyword",
    "generate_value",
]

_GRAMMAR: dict[KeywordFamily, tuple[tuple[ModifierRule, ...], tuple[tuple[str, ...], ...]]] = {
    KeywordFamily.STRING: (strings.STRING_RULES, ()),
    KeywordFamily.INTEGER: (integers.INTEGER_RULES, integers.INTEGER_EXCLUSIVE),
    KeywordFamily.DATETIME: (datetimes.DATETIME_RULES, ()),
}


def keyword_family(text: str) -> KeywordFamily | None:
    """Return the family whose envelope encloses ``text``, if any."""

    for family in KeywordFamily:
        if is_keyword(text, family):
            return family
    return None


def validate_keyword(text: str) -> ParsedKeyword:
    """Fully parse ``text`` without generating a value.

    Raises :class:`InvalidFormatError` when no family matches or the
    modifiers are invalid.
    """

    family = _require_family(text)
    rules, exclusive = _GRAMMAR[family]
    return parse_keyword(text, family, rules, exclusive=exclusive)


def _require_family(text: str) -> KeywordFamily:
    family = keyword_family(text)
    if family is None:
        names = ", ".join(f"[{fam.value}]" for fam in KeywordFamily)
        raise InvalidFormatError(f"'{text}' is not one of the supported keywords ({names})")
    return family


def generate_value(
    text: str,
    *,
    rng: RandomSource | None = None,
    cfg: ConfigModel | None = None,
) -> str | int | datetime:
    """Generate the value requested by keyword ``text``.

    ``rng`` takes precedence over the seed configured in ``cfg``.
    """

    family = _require_family(text)
    if rng is None and cfg is not None:
        rng = rng_from_config(cfg)
    if family is KeywordFamily.STRING:
        return strings.generate(text, rng=rng, cfg=cfg)
    if family is KeywordFamily.INTEGER:
        return integers.generate_from_keyword(text, rng=rng)
    return datetimes.generate_from_keyword(text, cfg=cfg)

from __future__ import annotations

import re

import pytest

from ddtgen.keywords.base import (
    KeywordFamily,
    ModifierRule,
    is_keyword,
    parse_keyword,
    parse_signed_int,
)
from ddtgen.utils.errors import InvalidFormatError

RULES = (
    ModifierRule(
        "size",
        re.compile(r"\{\s*size\s*=(?P<value>[^{}]*)\}", re.IGNORECASE),
        max_count=1,
        parser=lambda m: parse_signed_int(m.group("value"), m.group(0)),
    ),
    ModifierRule("even", re.compile(r"\{\s*even\s*\}", re.IGNORECASE)),
    ModifierRule("odd", re.compile(r"\{\s*odd\s*\}", re.IGNORECASE)),
)


# ---------------------------------------------------------------------------
# Envelope recognition
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    ["[randint]", "  [ randint ]  ", "[RANDINT{range=1:2}]", "\t[randint{even}]\n"],
)
def test_is_keyword_accepts_enclosed_text(text: str) -> None:
    assert is_keyword(text, KeywordFamily.INTEGER)


@pytest.mark.parametrize(
    "text",
    ["foo[randint]bar", "[randint]bar", "x [randint]", "[randint", "randint]", "[ rand int ]", ""],
)
def test_is_keyword_rejects_surrounding_text(text: str) -> None:
    assert not is_keyword(text, KeywordFamily.INTEGER)


def test_is_keyword_checks_family() -> None:
    assert not is_keyword("[randstring]", KeywordFamily.INTEGER)
    assert is_keyword("[randstring]", KeywordFamily.STRING)
    assert is_keyword("[datetime{+1d}]", KeywordFamily.DATETIME)


def test_is_keyword_non_string() -> None:
    assert not is_keyword(None, KeywordFamily.STRING)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Validation by elimination
# ---------------------------------------------------------------------------


def test_parse_extracts_values_in_order() -> None:
    parsed = parse_keyword("[randint{ SIZE = -4 }{even}]", KeywordFamily.INTEGER, RULES)
    assert parsed.family is KeywordFamily.INTEGER
    assert parsed.first("size") == -4
    assert parsed.has("even")
    assert not parsed.has("odd")
    assert parsed.all("even") == [True]
    assert parsed.first("odd", "missing") == "missing"


def test_parse_bare_envelope() -> None:
    parsed = parse_keyword("  [ randint ]  ", KeywordFamily.INTEGER, RULES)
    assert parsed.values == {}
    assert parsed.text == "[ randint ]"


def test_parse_rejects_envelope_mismatch() -> None:
    with pytest.raises(InvalidFormatError, match=r"\[randint\]"):
        parse_keyword("foo[randint]", KeywordFamily.INTEGER, RULES)


def test_parse_rejects_residual_text() -> None:
    with pytest.raises(InvalidFormatError) as info:
        parse_keyword("[randint{even}junk]", KeywordFamily.INTEGER, RULES)
    assert "junk" in str(info.value)


def test_parse_rejects_unknown_modifier() -> None:
    with pytest.raises(InvalidFormatError, match="colour"):
        parse_keyword("[randint{colour}]", KeywordFamily.INTEGER, RULES)


def test_parse_rejects_family_suffix() -> None:
    with pytest.raises(InvalidFormatError):
        parse_keyword("[randintx]", KeywordFamily.INTEGER, RULES)


def test_parse_single_occurrence() -> None:
    with pytest.raises(InvalidFormatError, match="only one"):
        parse_keyword("[randint{size=1}{size=2}]", KeywordFamily.INTEGER, RULES)


def test_parse_repeatable_modifier() -> None:
    parsed = parse_keyword("[randint{even}{even}]", KeywordFamily.INTEGER, RULES)
    assert parsed.all("even") == [True, True]


def test_parse_exclusive_modifiers() -> None:
    with pytest.raises(InvalidFormatError, match="even"):
        parse_keyword(
            "[randint{even}{odd}]",
            KeywordFamily.INTEGER,
            RULES,
            exclusive=(("even", "odd"),),
        )


def test_parse_malformed_payload_quotes_fragment() -> None:
    with pytest.raises(InvalidFormatError, match=r"\{size=abc\}"):
        parse_keyword("[randint{size=abc}]", KeywordFamily.INTEGER, RULES)


@pytest.mark.parametrize(("raw", "expected"), [("5", 5), (" -12 ", -12), ("+3", 3)])
def test_parse_signed_int(raw: str, expected: int) -> None:
    assert parse_signed_int(raw, "{x}") == expected


@pytest.mark.parametrize("raw", ["", "1.5", "1_000", "--1", "one"])
def test_parse_signed_int_rejects(raw: str) -> None:
    with pytest.raises(InvalidFormatError):
        parse_signed_int(raw, "{x}")

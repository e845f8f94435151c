"""Smoke tests for package import, version and public surface."""

import ddtgen
from ddtgen import keywords
from ddtgen.keywords import KeywordFamily


def test_version() -> None:
    assert ddtgen.__version__ == "0.1.0"


def test_keyword_families() -> None:
    assert {family.value for family in KeywordFamily} == {"randstring", "randint", "datetime"}


def test_keywords_export_each_family() -> None:
    for name in (
        "StringGenerator",
        "IntegerBuilder",
        "DateTimeBuilder",
        "is_random_string_keyword",
        "is_random_integer_keyword",
        "is_datetime_keyword",
        "generate_value",
    ):
        assert name in keywords.__all__
        assert getattr(ddtgen, name, getattr(keywords, name)) is getattr(keywords, name)


def test_errors_exported_from_root() -> None:
    assert issubclass(ddtgen.InvalidFormatError, ddtgen.KeywordError)
    assert issubclass(ddtgen.InvalidArgumentError, ValueError)

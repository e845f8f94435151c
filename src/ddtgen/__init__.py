"""Keyword-driven random value generators for data-driven test fixtures.

Test fixtures stored in spreadsheets or databases embed small bracketed
keywords such as ``[randstring{uppercase}{length=5-10}]``,
``[randint{range=-5:10}{even}]`` or ``[datetime{+1y}{-3d}{zoneid=UTC}]``.
The generators in :mod:`ddtgen.keywords` parse one such keyword and return a
freshly generated value.
"""

from .keywords import (
    DateTimeBuilder,
    IntegerBuilder,
    StringGenerator,
    generate_value,
    keyword_family,
)
from .utils.errors import InvalidArgumentError, InvalidFormatError, KeywordError

__version__ = "0.1.0"

__all__ = [
    "DateTimeBuilder",
    "IntegerBuilder",
    "StringGenerator",
    "generate_value",
    "keyword_family",
    "KeywordError",
    "InvalidFormatError",
    "InvalidArgumentError",
    "__version__",
]

"""Shared character tables used by the string generator."""

from __future__ import annotations

__all__ = [
    "UPPERCASE",
    "LOWERCASE",
    "NUMBERS",
    "SPACE",
    "SPECIAL_CHARACTERS",
    "DEFAULT_SOURCE",
    "DEFAULT_LENGTH",
]

UPPERCASE: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE: str = "abcdefghijklmnopqrstuvwxyz"
NUMBERS: str = "0123456789"
SPACE: str = " "
SPECIAL_CHARACTERS: str = "~!@#$%^&*()_+`-={}|[]\\:\";'<>?,./"

# Used when no character class has been selected.
DEFAULT_SOURCE: str = LOWERCASE + UPPERCASE + NUMBERS

DEFAULT_LENGTH: int = 10

"""Randomness sources for the keyword generators.

Every generator draws from a :class:`RandomSource`.  By default this is one
process-wide :class:`random.Random` instance; no ordering or reproducibility
guarantee is made across calls.  Tests and reproducible runs inject their own
source, either a plain ``random.Random(seed)`` or one derived with
:func:`rng_for` from an integer or string seed.

String seeds are canonicalized (trimmed, whitespace collapsed, lowercased)
before hashing so ``" Sprint 12 "`` and ``"sprint 12"`` yield the same stream.
"""

from __future__ import annotations

import hashlib
import random
import re
import unicodedata
from collections.abc import Sequence
from typing import Final, Protocol, TypeVar, runtime_checkable

from ddtgen.config import ConfigModel

_T = TypeVar("_T")

_NS_RNG: Final = b"ddtgen/v1/rng"

_shared: random.Random = random.Random()


@runtime_checkable
class RandomSource(Protocol):
    """The subset of :class:`random.Random` the generators rely on."""

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[_T]) -> _T: ...


# ---------------------------------------------------------------------------
# Canonicalization
# ---------------------------------------------------------------------------


def canonicalize_seed(seed: str) -> str:
    """Normalize a textual seed for hashing.

    The normalization steps are:

    - strip leading/trailing whitespace
    - collapse internal whitespace runs to a single space
    - lowercase
    - NFC normalize
    """

    normalized = unicodedata.normalize("NFC", seed.strip())
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized.lower()


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def default_rng() -> random.Random:
    """Return the shared process-wide random source."""

    return _shared


def rng_for(seed: int | str | None) -> random.Random:
    """Return a reproducible RNG for ``seed``.

    ``None`` returns the shared source.  Integers seed ``random.Random``
    directly; strings are canonicalized and hashed with SHA-256.
    """

    if seed is None:
        return _shared
    if isinstance(seed, int):
        return random.Random(seed)
    data = _NS_RNG + canonicalize_seed(seed).encode("utf-8")
    digest = hashlib.sha256(data).digest()
    return random.Random(int.from_bytes(digest, "big"))


def rng_from_config(cfg: ConfigModel) -> random.Random:
    """Return the RNG configured by ``cfg.random.seed``."""

    return rng_for(cfg.random.seed)


__all__ = [
    "RandomSource",
    "canonicalize_seed",
    "default_rng",
    "rng_for",
    "rng_from_config",
]

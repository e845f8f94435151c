"""Typed configuration schema and loader for the ddtgen package."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, conint

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class RandomSettings(BaseModel):
    """Settings for the randomness source shared by all generators."""

    seed: int | str | None = None
    seed_env: str

    model_config = ConfigDict(extra="forbid")


class StringSettings(BaseModel):
    """Defaults applied by the random string generator."""

    default_length: conint(ge=1) = 10

    model_config = ConfigDict(extra="forbid")


class DateTimeSettings(BaseModel):
    """Defaults applied by the datetime generator."""

    default_zone: Literal["start", "system"]
    output_format: str = "iso"

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    random: RandomSettings
    strings: StringSettings
    datetimes: DateTimeSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------

_INT_SEED_RX = re.compile(r"-?[0-9]+")


def parse_seed_text(raw: str) -> int | str:
    """Return ``raw`` as an ``int`` when it is a plain decimal integer."""

    value = raw.strip()
    return int(value) if _INT_SEED_RX.fullmatch(value) else value


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    environment variable named by ``random.seed_env``.  A purely numeric
    environment seed is converted to ``int``.
    """

    with (
        importlib_resources.files("ddtgen.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    cfg = ConfigModel.model_validate(merged)

    environ = env if env is not None else os.environ
    seed_env = cfg.random.seed_env
    raw = environ.get(seed_env, "").strip()
    if raw:
        cfg.random.seed = parse_seed_text(raw)

    return cfg


__all__ = [
    "ConfigModel",
    "RandomSettings",
    "StringSettings",
    "DateTimeSettings",
    "deep_merge_dicts",
    "parse_seed_text",
    "load_config",
]

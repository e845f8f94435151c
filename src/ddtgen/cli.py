"""Typer-based command line interface for the keyword generators.

``ddtgen generate`` prints values for one keyword string, which is handy
when checking the contents of a fixture spreadsheet by hand; ``ddtgen
check`` validates a keyword without printing a value.

Exit codes
----------
0 success
2 invalid keyword format
3 invalid argument (bad bounds, unknown zone, unparseable start)
4 configuration error
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .config.schema import parse_seed_text
from .keywords import generate_value, validate_keyword
from .seed import rng_for
from .utils.errors import InvalidArgumentError, InvalidFormatError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

app = typer.Typer(
    name="ddtgen",
    help="Generate values from data-driven test keywords. Use 'ddtgen generate' to print values.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _load(config_path: Path | None) -> ConfigModel:
    try:
        return load_config(config_path)
    except (ValidationError, OSError, ValueError) as exc:
        _safe_exit(4, str(exc).splitlines()[0])
        raise  # pragma: no cover - _safe_exit always raises


def _format(value: str | int | datetime, cfg: ConfigModel) -> str:
    if isinstance(value, datetime):
        fmt = cfg.datetimes.output_format
        return value.isoformat() if fmt == "iso" else value.strftime(fmt)
    return str(value)


@app.callback()
def main() -> None:
    """Entry point for the ddtgen command group."""
    pass


@app.command()
def generate(
    keyword: str = typer.Argument(..., help="Keyword string, e.g. '[randint{range=1:6}]'"),
    count: int = typer.Option(1, "--count", "-n", min=1, help="Number of values to print"),
    seed: Optional[str] = typer.Option(  # noqa: B008
        None, "--seed", help="Seed for reproducible output (overrides configuration)"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Log resolved generator settings to stderr"
    ),
) -> None:
    """Print ``count`` values generated from ``keyword``."""

    configure_logging(verbose)
    cfg = _load(config_path)
    if seed is not None:
        cfg.random.seed = parse_seed_text(seed)
    rng = rng_for(cfg.random.seed)

    try:
        for _ in range(count):
            typer.echo(_format(generate_value(keyword, rng=rng, cfg=cfg), cfg))
    except InvalidFormatError as exc:
        _safe_exit(2, str(exc))
    except InvalidArgumentError as exc:
        _safe_exit(3, str(exc))


@app.command()
def check(
    keyword: str = typer.Argument(..., help="Keyword string to validate"),
) -> None:
    """Validate ``keyword`` and print its family."""

    try:
        parsed = validate_keyword(keyword)
    except InvalidFormatError as exc:
        _safe_exit(2, str(exc))
    except InvalidArgumentError as exc:
        _safe_exit(3, str(exc))
    else:
        typer.echo(parsed.family.value)

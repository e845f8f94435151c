"""Tests for packaging metadata and optional dependencies."""

from __future__ import annotations

import importlib
import tomllib
from pathlib import Path
from typing import Any, cast


def _load_pyproject() -> dict[str, Any]:
    path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _extras(pyproject: dict[str, Any]) -> dict[str, list[str]]:
    return cast(dict[str, list[str]], pyproject.get("project", {}).get("optional-dependencies", {}))


def test_dev_extra_has_pytest() -> None:
    extras = _extras(_load_pyproject())
    assert "dev" in extras
    assert any(req.startswith("pytest") for req in extras["dev"])


def test_runtime_dependencies() -> None:
    deps = _load_pyproject()["project"]["dependencies"]
    names = {req.split(">")[0].split("=")[0].lower() for req in deps}
    assert {"pydantic", "pyyaml", "typer", "python-dateutil", "tzdata"} <= names


def test_console_script_entrypoint() -> None:
    pyproject = _load_pyproject()
    scripts = pyproject.get("project", {}).get("scripts", {})
    assert scripts.get("ddtgen") == "ddtgen.cli:app"


def test_import_smoke() -> None:
    importlib.import_module("ddtgen")
    importlib.import_module("ddtgen.cli")

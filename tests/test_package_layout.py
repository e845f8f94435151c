# Tests for verifying the package layout is importable, documented and ships its data.

import importlib
import pkgutil
from importlib import resources

import yaml

import ddtgen


def test_all_modules_have_docstrings() -> None:
    """Ensure every submodule can be imported and has a docstring."""
    assert ddtgen.__doc__ and ddtgen.__doc__.strip()
    for module_info in pkgutil.walk_packages(ddtgen.__path__, ddtgen.__name__ + "."):
        module = importlib.import_module(module_info.name)
        assert module.__doc__ and module.__doc__.strip(), f"Missing docstring in {module_info.name}"


def test_expected_modules_present() -> None:
    names = {info.name for info in pkgutil.walk_packages(ddtgen.__path__, "ddtgen.")}
    expected = {
        "ddtgen.cli",
        "ddtgen.process",
        "ddtgen.seed",
        "ddtgen.config.schema",
        "ddtgen.keywords.base",
        "ddtgen.keywords.strings",
        "ddtgen.keywords.integers",
        "ddtgen.keywords.datetimes",
    }
    assert expected <= names


def test_defaults_shipped_as_package_data() -> None:
    text = resources.files("ddtgen.config").joinpath("defaults.yml").read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    assert set(data) == {"schema_version", "random", "strings", "datetimes"}

"""Logging utilities.

Purpose:
    Centralize logging configuration for the package.

Key responsibilities:
    - Provide helper to obtain package loggers.
    - Allow an optional verbose/debug mode for the command line.

Inputs/Outputs:
    - Inputs: module name and verbosity settings.
    - Outputs: configured `logging.Logger` instances.

Public contracts:
    - `get_logger(name)`: Return a logger below the ``ddtgen`` namespace.
    - `configure_logging(verbose)`: Attach a stderr handler once.

Notes/Edge cases:
    - Logging configuration is idempotent.
    - Library code never configures handlers on import; only a
      `NullHandler` is attached to the package logger.

Dependencies:
    - Python `logging` module.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["PACKAGE_LOGGER", "get_logger", "configure_logging"]

PACKAGE_LOGGER = "ddtgen"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "ddtgen-stderr"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` placed under the package namespace."""

    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling this repeatedly only adjusts the level and rebinds the stream
    to the current ``sys.stderr``; handlers are never duplicated.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.DEBUG if verbose else logging.WARNING
    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            if isinstance(handler, logging.StreamHandler):
                handler.stream = sys.stderr
    return logger

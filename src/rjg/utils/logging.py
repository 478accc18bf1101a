"""Logging utilities.

Purpose:
    Centralize logging configuration for the package.

Key responsibilities:
    - Provide helper to obtain loggers under the ``rjg`` namespace.
    - Allow an optional verbose/debug mode for the CLI.

Notes/Edge cases:
    - Configuration is idempotent; repeated calls only adjust the level.
    - Library code never configures handlers itself, only the CLI does.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "rjg"
_HANDLER_FLAG = "_rjg_handler"
_FORMAT = "%(levelname)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package root logger."""

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the root package logger."""

    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.DEBUG if verbose else logging.WARNING
    ours = [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]
    for existing in ours:
        # stderr may have been swapped since the handler was installed
        if isinstance(existing, logging.StreamHandler):
            existing.setStream(sys.stderr)
    if not ours:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = ["get_logger", "configure_logging"]

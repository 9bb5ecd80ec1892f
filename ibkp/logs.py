"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def level_for_verbosity(verbose: int) -> int:
    """Map a ``-v`` count to a logging level."""
    return _LEVELS[min(max(verbose, 0), len(_LEVELS) - 1)]


def setup_logging(verbose: int = 0) -> logging.Logger:
    """Route the ``ibkp`` package logger to stderr through rich.

    Existing handlers are closed first so repeated CLI invocations
    in one process do not stack handlers.
    """
    logger = logging.getLogger("ibkp")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=verbose >= 2,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_for_verbosity(verbose))
    return logger

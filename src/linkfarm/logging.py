"""
Logging for linkfarm.

Every component logs to a child of the ``linkfarm`` logger. Console output
for the user goes through rich in the CLI; the log is for diagnostics.
"""

from __future__ import annotations

import logging
import sys

_root_logger = logging.getLogger("linkfarm")

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | int = "WARNING", log_file: str | None = None) -> None:
    """
    Configure the ``linkfarm`` logger.

    Args:
        level: Console log level name or number
        log_file: Optional path that receives a DEBUG-level copy of the log,
            whatever the console level is
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    for handler in list(_root_logger.handlers):
        _root_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.setLevel(level)
    _root_logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        _root_logger.addHandler(file_handler)
        _root_logger.setLevel(logging.DEBUG)
    else:
        _root_logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Child logger, e.g. ``get_logger("backends.manual")``."""
    if name.startswith("linkfarm."):
        return logging.getLogger(name)
    return logging.getLogger(f"linkfarm.{name}")

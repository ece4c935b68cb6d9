"""Centralized logging configuration for grua.

The dashboard owns the terminal, so log records go to stderr only when a
level is requested (``--log-level`` or ``GRUA_LOG_LEVEL``); redirect stderr to
keep them. Without a level a ``NullHandler`` keeps the screen clean.
"""

from __future__ import annotations

import logging
import os
import sys

SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"

LOG_LEVEL_ENV = "GRUA_LOG_LEVEL"
ROOT_LOGGER_NAME = "grua"


def setup_logging(level: str | None = None) -> None:
    """Configure the ``grua`` logger hierarchy.

    Args:
        level: Log level name override. If not provided, uses the
            ``GRUA_LOG_LEVEL`` environment variable; if that is unset too,
            records are discarded.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    level_name = (level or os.environ.get(LOG_LEVEL_ENV, "")).strip().upper()
    if not level_name:
        root.addHandler(logging.NullHandler())
        root.propagate = False
        return

    log_level = getattr(logging, level_name, logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Use simple format for INFO+, detailed format with line numbers for DEBUG
    fmt = DETAILED_FORMAT if log_level == logging.DEBUG else SIMPLE_FORMAT
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(log_level)
    root.propagate = False


__all__ = ["LOG_LEVEL_ENV", "setup_logging"]

"""
greedy_feature_select._logging
==============================
Package logger setup.

Every module logs through ``logging.getLogger(__name__)``; records end up
on the package logger, which owns a single stream handler.  The handler
lock serialises records, so lines emitted from worker threads never
interleave.
"""

import logging


PACKAGE_LOGGER = "greedy_feature_select"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger below the package logger, configuring it once."""
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        root.propagate = False
    return logging.getLogger(name)


def set_log_level(level) -> None:
    """Set the level of the package logger (name or ``logging`` constant)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    get_logger().setLevel(level)

"""Logging helpers for shikiview.

All catalog and imaging code logs through the ``shikiview`` logger via
:func:`debug` and :func:`warn`. Debug records are emitted only while the
``SHIKIVIEW_DEBUG`` environment variable is ``1``; warnings always are.
"""

import logging
import os

LOGGER_NAME = "shikiview"
DEBUG_ENV_VAR = "SHIKIVIEW_DEBUG"


def debug_enabled() -> bool:
    return os.getenv(DEBUG_ENV_VAR, "0") == "1"


def get_logger() -> logging.Logger:
    """Return the package logger, attaching a stderr handler on first use."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(asctime)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger


def debug(msg: str) -> None:
    """Log a debug message if ``SHIKIVIEW_DEBUG=1``."""
    if debug_enabled():
        get_logger().debug(msg)


def warn(msg: str) -> None:
    """Log a warning message."""
    get_logger().warning(msg)

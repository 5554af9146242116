"""Shared logging utilities."""

import logging
from typing import Optional

from rich.logging import RichHandler

PACKAGE_LOGGER = "office_drills"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return a logger under the package namespace.

    The package root logger gets a single RichHandler the first time any
    module asks for a logger; child loggers propagate to it.

    Args:
        name: Logger name (usually ``__name__``)
        level: Optional level for this logger (default: inherit)

    Returns:
        logging.Logger instance
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = RichHandler(show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root.setLevel(logging.WARNING)

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the package logger between DEBUG and WARNING."""
    get_logger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)

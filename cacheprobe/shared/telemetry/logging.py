"""Logging configuration for the harness."""

import logging
import sys
from typing import TextIO

from cacheprobe.core.config import get_settings


def setup_logging(debug: bool | None = None, stream: TextIO | None = None) -> None:
    """Configure process-wide logging.

    Level is DEBUG when debug (or settings.debug when debug is None) is
    True, otherwise INFO. Output goes to stdout alongside the report.

    Args:
        debug: Optional override for settings.debug (e.g. from --debug).
        stream: Log destination; stdout when None.
    """
    if debug is None:
        debug = get_settings().debug
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(stream or sys.stdout)],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)

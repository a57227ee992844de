"""Logging setup shared by the terminal client and the HTTP service."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING", *, stream: TextIO | None = None) -> None:
    """Configure the ``storypath`` logger hierarchy.

    Calling this repeatedly replaces the previously installed handler rather
    than stacking duplicates.
    """

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    package_logger = logging.getLogger("storypath")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)


__all__ = ["setup_logging", "LOG_FORMAT", "DATE_FORMAT"]

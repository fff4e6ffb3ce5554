"""
Package-wide logger for Repoget.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "Repoget"


def _build_logger() -> logging.Logger:
    _logger = logging.getLogger(LOGGER_NAME)
    if not _logger.handlers:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    return _logger


logger = _build_logger()


__all__ = [
    "LOGGER_NAME",
    "logger",
]

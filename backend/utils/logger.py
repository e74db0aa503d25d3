"""Structured logging utilities."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from backend.domain.constraints import ConfigurationError
from backend.utils.config import Settings, get_settings


_LOGGER_INITIALIZED = False
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process-wide logging once.

    Modules call this implicitly through ``get_logger`` at import time, so an
    explicit level passed later (e.g. from the command line) only adjusts the
    root level of the existing configuration.
    """

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        if level:
            logging.getLogger().setLevel(level.upper())
        return

    try:
        default_level = get_settings().log_level
    except ConfigurationError:
        # Reported by the entry point when it loads settings itself.
        default_level = Settings.log_level
    resolved_level = (level or default_level).upper()
    logging.basicConfig(
        level=resolved_level,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger for the requested module."""
    configure_logging()
    return logging.getLogger(name)

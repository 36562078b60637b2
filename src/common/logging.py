"""
Logging configuration helpers.
It centralizes process-wide logging setup shared by the API app and the maintenance scripts.
Modules only call `logging.getLogger(__name__)`; handlers and format are decided here once.
"""

from __future__ import annotations

import logging

_LOGGING_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level_name: str = "INFO") -> None:
    """Configure process-wide logging once."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True

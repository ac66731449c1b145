"""
SimpleValidator Utils Package
=============================

Logging and environment helpers.
"""

from __future__ import annotations

from simplevalidator.utils.env import Env
from simplevalidator.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    # Environment
    "Env",
    # Logging
    "Logger",
    "LogLevel",
    "StreamHandler",
    "TextFormatter",
    "JsonFormatter",
    "get_logger",
    "configure_logging",
]

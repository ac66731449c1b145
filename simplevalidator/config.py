"""
SimpleValidator Configuration
=============================

Library defaults for the filter facade.

Configuration Loading Priority (highest to lowest):
1. Explicit ``FilterSettings(...)`` arguments
2. Environment variables (SIMPLEVALIDATOR_*)
3. .env file passed to ``from_env``
4. Default values

Example:
    settings = FilterSettings.from_env(".env")
    settings.configure_logging()

    input_filter = InputFilter(settings=settings)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from simplevalidator.exceptions import ConfigurationError
from simplevalidator.security.sanitizer import DEFAULT_FILTER
from simplevalidator.utils.env import Env
from simplevalidator.utils.logger import LogLevel, Logger, configure_logging

ENV_PREFIX = "SIMPLEVALIDATOR_"

LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class FilterSettings:
    """
    Filter facade settings.

    Attributes:
        default_filter: Sanitize tag applied when no tags are declared
        trim: Strip surrounding whitespace after sanitizing
        strict: Unknown rule names raise instead of being skipped
        log_level: Library log level name
        log_format: "text" or "json"
    """

    default_filter: str = DEFAULT_FILTER
    trim: bool = True
    strict: bool = False
    log_level: str = "WARNING"
    log_format: str = "text"

    def __post_init__(self) -> None:
        if not self.default_filter:
            raise ConfigurationError("default_filter must not be empty")

        try:
            LogLevel.parse(self.log_level)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from None

        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}, "
                f"got '{self.log_format}'"
            )

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
    ) -> "FilterSettings":
        """
        Build settings from SIMPLEVALIDATOR_* variables.

        Args:
            env_file: Optional .env file consulted for unset variables

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = Env(prefix=ENV_PREFIX).load(env_file)
        defaults = cls()

        try:
            return cls(
                default_filter=env.str("DEFAULT_FILTER", defaults.default_filter),
                trim=env.bool("TRIM", defaults.trim),
                strict=env.bool("STRICT", defaults.strict),
                log_level=env.str("LOG_LEVEL", defaults.log_level),
                log_format=env.str("LOG_FORMAT", defaults.log_format),
            )
        except ValueError as exc:
            if isinstance(exc, ConfigurationError):
                raise
            raise ConfigurationError(str(exc)) from None

    def configure_logging(self) -> Logger:
        """Apply the log level and format to the library loggers."""
        return configure_logging(level=self.log_level, format=self.log_format)

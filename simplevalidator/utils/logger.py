"""
SimpleValidator Logger
======================

Structured logging for the sanitizer and the rule interpreter.

Every library module logs through ``get_logger("simplevalidator.<module>")``.
Loggers are quiet (WARNING) until ``configure_logging`` lowers the level.
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

import orjson


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel"]) -> "LogLevel":
        """Resolve a level from its name ("debug") or numeric value."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown log level '{value}'") from None
        return cls(value)


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional key/value context (field, rule, tag...)
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "simplevalidator"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
            }

        return data


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record."""
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [DEBUG] simplevalidator.validation: Skipping unknown rule field=name rule=unique
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        self.format_string = format_string or "{timestamp} [{level}] {logger}: {message}"
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        message = record.message

        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=record.level.name,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp":"2024-01-15T10:30:45","level":"WARNING","message":"Rejected value"}
    """

    def __init__(self, pretty: bool = False):
        self.pretty = pretty

    def format(self, record: LogRecord) -> str:
        option = orjson.OPT_INDENT_2 if self.pretty else 0
        # default=str keeps arbitrary context values (dates, Decimals) serializable
        return orjson.dumps(record.to_dict(), default=str, option=option).decode("utf-8")


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        """Handle log record."""
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        """Emit formatted record."""
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Stream output handler (stderr by default)."""

    def __init__(
        self,
        stream: Any = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        # Looked up per record so a swapped sys.stderr is honored
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(self.formatter.format(record) + "\n")
        stream.flush()


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger("simplevalidator.validation")
        logger.debug("Rule failed", field="email", rule="email")

        # With context
        field_logger = logger.with_context(field="email")
        field_logger.warning("Rejected value")
    """

    def __init__(
        self,
        name: str = "simplevalidator",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[LogHandler]] = None,
    ):
        """
        Initialize logger.

        Args:
            name: Logger name
            level: Minimum log level
            handlers: Log handlers
        """
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[LogHandler]:
        return list(self._handlers)

    def add_handler(self, handler: LogHandler) -> "Logger":
        """Add log handler."""
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> "Logger":
        """Remove log handler."""
        self._handlers.remove(handler)
        return self

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def with_context(self, **context: Any) -> "Logger":
        """Create a logger sharing handlers, with additional context."""
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception as exc:
                # A broken handler must not change validation results
                sys.stderr.write(f"simplevalidator: log handler failed: {exc!r}\n")

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, exception, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}
_default_level: LogLevel = LogLevel.WARNING
_default_formatter: LogFormatter = TextFormatter()
_default_stream: Any = None


def get_logger(
    name: str = "simplevalidator",
    level: Optional[Union[str, int, LogLevel]] = None,
) -> Logger:
    """
    Get or create logger.

    Args:
        name: Logger name
        level: Log level (defaults to the configured library level)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        logger = Logger(
            name=name,
            level=LogLevel.parse(level) if level is not None else _default_level,
        )
        logger.add_handler(
            StreamHandler(stream=_default_stream, formatter=_default_formatter)
        )
        _loggers[name] = logger
    elif level is not None:
        _loggers[name].level = LogLevel.parse(level)

    return _loggers[name]


def configure_logging(
    level: Union[str, int, LogLevel] = LogLevel.INFO,
    format: str = "text",
    stream: Any = None,
) -> Logger:
    """
    Configure library logging.

    Applies level and output format to every ``simplevalidator`` logger,
    including the ones created later.

    Args:
        level: Log level or its name
        format: Output format ("text" or "json")
        stream: Output stream (stderr by default)

    Returns:
        The root library logger
    """
    global _default_level, _default_formatter, _default_stream

    if format not in ("text", "json"):
        raise ValueError(f"Unknown log format '{format}'")

    _default_level = LogLevel.parse(level)
    _default_formatter = JsonFormatter() if format == "json" else TextFormatter()
    _default_stream = stream

    for logger in _loggers.values():
        logger.level = _default_level
        logger._handlers[:] = [
            StreamHandler(stream=stream, formatter=_default_formatter)
        ]

    return get_logger("simplevalidator")

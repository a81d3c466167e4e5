# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Logger implementation for conduit.

This module provides the default logger implementation based on Python's
standard logging module, enhanced with structured logging capabilities.
"""

from __future__ import annotations

import contextlib
import datetime
import enum
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from conduit.logging.config import LoggingSettings, LogLevel

if TYPE_CHECKING:
    from collections.abc import Iterator

    from conduit.logging.protocols import LoggerProtocol

ROOT_LOGGER_NAME = "conduit"
CONTEXT_ATTR = "conduit_context"

# Context variable for storing log context data
_log_context: ContextVar[dict[str, Any]] = ContextVar("conduit_log_context", default={})


class ConduitJsonEncoder(json.JSONEncoder):
    """JSON encoder that falls back to strings for unserializable values."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime.datetime | datetime.date):
            return obj.isoformat()
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, type):
            return obj.__qualname__
        if hasattr(obj, "model_dump"):  # Pydantic v2 models
            return obj.model_dump()
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formatter that renders the structured context attached to a record."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data.

        Args:
            record: The log record to format

        Returns:
            Formatted log string
        """
        extra = dict(getattr(record, CONTEXT_ATTR, None) or {})

        if self.json_format:
            return self._format_json(record, extra)
        message = super().format(record)
        return self._format_text(message, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "logger": record.name,
            **extra,
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, cls=ConduitJsonEncoder, ensure_ascii=False)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message
        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        # Keep the traceback (if any) after the context
        head, sep, tail = message.partition("\n")
        return f"{head} {ctx_str}{sep}{tail}"

    def _format_value(self, value: Any) -> str:
        """Format a value for text output.

        Args:
            value: Value to format

        Returns:
            Formatted value string
        """
        if isinstance(value, str):
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, type):
            return value.__qualname__
        if isinstance(value, enum.Enum):
            return str(value.value)
        if isinstance(value, BaseException):
            return f'"{type(value).__name__}: {value}"'
        try:
            return json.dumps(value, cls=ConduitJsonEncoder)
        except (TypeError, ValueError):
            return str(value)


class StructuredLogger:
    """Default logger implementation for conduit.

    Keyword arguments given to the logging methods are attached to the record
    as structured context; ``exc_info`` and ``stack_info`` keep their stdlib
    meaning.
    """

    def __init__(self, name: str, bound_context: dict[str, Any] | None = None) -> None:
        """
        Initialize a new logger.

        Args:
            name: Logger name
            bound_context: Context values added to every record
        """
        self.name = name
        self._logger = logging.getLogger(name)
        self._bound_context: dict[str, Any] = dict(bound_context or {})

    @property
    def stdlib_logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return

        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)

        combined_context = {**self._bound_context, **_log_context.get(), **kwargs}
        self._logger.log(
            level,
            msg,
            exc_info=exc_info,
            stack_info=stack_info,
            extra={CONTEXT_ATTR: combined_context},
            stacklevel=3,
        )

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, **kwargs)

    def set_level(self, level: LogLevel | str | int) -> None:
        self._logger.setLevel(LogLevel(level))

    def bind(self, **kwargs: Any) -> StructuredLogger:
        """Create a new logger with bound context values.

        Args:
            **kwargs: Context values to bind

        Returns:
            New logger instance with bound context
        """
        return StructuredLogger(self.name, {**self._bound_context, **kwargs})

    @staticmethod
    @contextlib.contextmanager
    def context(**kwargs: Any) -> Iterator[None]:
        """Add context to every record logged within the block.

        The context lives in a context variable, so it follows the current
        asyncio task.
        """
        token = _log_context.set({**_log_context.get(), **kwargs})
        try:
            yield
        finally:
            _log_context.reset(token)


def configure_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """Attach handlers to the ``conduit`` logger according to ``settings``.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        settings: Logging settings (loads from environment if None)

    Returns:
        The configured root ``conduit`` logger
    """
    settings = settings or LoggingSettings.load()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(settings.level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter(
        json_format=settings.json_format,
        include_timestamp=settings.include_timestamp,
        include_level=settings.include_level,
    )

    if settings.console_enabled:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

    if settings.file_enabled and settings.file_path:
        file_handler = logging.FileHandler(settings.file_path)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = not root.handlers
    return root


def get_logger(name: str, level: LogLevel | str | None = None) -> LoggerProtocol:
    """Get a logger for the specified name.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Logger instance
    """
    logger = StructuredLogger(name)
    if level is not None:
        logger.set_level(level)
    return logger

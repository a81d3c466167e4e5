# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Logging interface definitions for conduit.

Every component that logs accepts any object satisfying ``LoggerProtocol``;
keyword arguments are structured context, not format arguments.
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """
    Protocol defining the interface for loggers in conduit.

    This protocol is NOT runtime_checkable and should be used
    for static type checking only.
    """

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a debug message."""
        ...

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an info message."""
        ...

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a warning message."""
        ...

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an error message."""
        ...

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log a critical message."""
        ...

    def bind(self, **kwargs: Any) -> LoggerProtocol:
        """Return a logger that adds ``kwargs`` to every record."""
        ...

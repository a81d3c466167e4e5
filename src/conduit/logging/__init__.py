# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
Public API for the conduit logging system.

Structured logging on top of the standard library: keyword arguments passed to
a logger become context rendered by ``StructuredFormatter``.
"""

from __future__ import annotations

from conduit.logging.config import LoggingSettings, LogLevel
from conduit.logging.logger import (
    CONTEXT_ATTR,
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)
from conduit.logging.protocols import LoggerProtocol

__all__ = [
    "CONTEXT_ATTR",
    "LogLevel",
    "LoggerProtocol",
    "LoggingSettings",
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

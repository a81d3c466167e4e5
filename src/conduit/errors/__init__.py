# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
Error handling for conduit.
"""

from __future__ import annotations

from conduit.errors.base import (
    INTERNAL,
    INTERNAL_ERROR,
    ConduitError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
)
from conduit.errors.registry import ErrorRegistry, registry

__all__ = [
    "ConduitError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorRegistry",
    "ErrorSeverity",
    "INTERNAL",
    "INTERNAL_ERROR",
    "registry",
]

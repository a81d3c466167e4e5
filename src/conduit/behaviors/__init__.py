# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
Stock pipeline behaviors.

Register them open to apply them to every request:

    await container.register_open(PipelineBehavior, LoggingBehavior)
"""

from __future__ import annotations

from conduit.behaviors.logging import LoggingBehavior
from conduit.behaviors.retry import RetryBehavior, RetryOptions
from conduit.behaviors.validation import ValidationBehavior

__all__ = [
    "LoggingBehavior",
    "RetryBehavior",
    "RetryOptions",
    "ValidationBehavior",
]

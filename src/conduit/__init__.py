# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
conduit: an in-process mediator.

Requests are routed by runtime type to a single handler through ordered
pipeline behaviors; notifications fan out to every interested handler.
"""

from __future__ import annotations

from conduit.di import Container, ServiceLifetime
from conduit.mediator import (
    AmbiguousHandlerError,
    CancellationRequestedError,
    CancellationToken,
    CancellationTokenSource,
    Command,
    Event,
    HandlerNotFoundError,
    InvalidArgumentError,
    Mediator,
    MediatorOptionsBuilder,
    MediatorProtocol,
    MediatorSettings,
    NextHandler,
    Notification,
    NotificationHandler,
    NotificationPublishError,
    PipelineBehavior,
    PublishStrategy,
    Query,
    Request,
    RequestHandler,
    RequestValidationError,
    add_mediator,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousHandlerError",
    "CancellationRequestedError",
    "CancellationToken",
    "CancellationTokenSource",
    "Command",
    "Container",
    "Event",
    "HandlerNotFoundError",
    "InvalidArgumentError",
    "Mediator",
    "MediatorOptionsBuilder",
    "MediatorProtocol",
    "MediatorSettings",
    "NextHandler",
    "Notification",
    "NotificationHandler",
    "NotificationPublishError",
    "PipelineBehavior",
    "PublishStrategy",
    "Query",
    "Request",
    "RequestHandler",
    "RequestValidationError",
    "ServiceLifetime",
    "add_mediator",
]

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
Public API for the conduit mediator.

Requests go to exactly one handler through an ordered pipeline of behaviors;
notifications fan out to every handler registered for their type.
"""

from __future__ import annotations

from conduit.mediator.builder import MediatorOptionsBuilder, add_mediator
from conduit.mediator.cancellation import CancellationToken, CancellationTokenSource
from conduit.mediator.config import MediatorSettings
from conduit.mediator.contracts import (
    Command,
    Event,
    NextHandler,
    Notification,
    NotificationHandler,
    PipelineBehavior,
    Query,
    Request,
    RequestHandler,
)
from conduit.mediator.descriptors import (
    DescriptorCache,
    NotificationDescriptor,
    RequestDescriptor,
    descriptor_cache,
)
from conduit.mediator.discovery import (
    discover_handler_types,
    discover_handler_types_in_package,
    handler_contracts,
)
from conduit.mediator.dispatcher import Mediator
from conduit.mediator.errors import (
    AmbiguousHandlerError,
    CancellationRequestedError,
    HandlerNotFoundError,
    InvalidArgumentError,
    MediatorError,
    MediatorErrorCode,
    NotificationPublishError,
    RequestValidationError,
)
from conduit.mediator.pipeline import PipelineComposer
from conduit.mediator.protocols import MediatorProtocol, ServiceProviderProtocol
from conduit.mediator.publisher import (
    ConcurrentPublisher,
    NotificationPublisher,
    PublishStrategy,
    SequentialPublisher,
    create_publisher,
)
from conduit.mediator.resolver import HandlerResolver

__all__ = [
    "AmbiguousHandlerError",
    "CancellationRequestedError",
    "CancellationToken",
    "CancellationTokenSource",
    "Command",
    "ConcurrentPublisher",
    "DescriptorCache",
    "Event",
    "HandlerNotFoundError",
    "HandlerResolver",
    "InvalidArgumentError",
    "Mediator",
    "MediatorError",
    "MediatorErrorCode",
    "MediatorOptionsBuilder",
    "MediatorProtocol",
    "MediatorSettings",
    "NextHandler",
    "Notification",
    "NotificationDescriptor",
    "NotificationHandler",
    "NotificationPublishError",
    "NotificationPublisher",
    "PipelineBehavior",
    "PipelineComposer",
    "PublishStrategy",
    "Query",
    "Request",
    "RequestDescriptor",
    "RequestHandler",
    "RequestValidationError",
    "SequentialPublisher",
    "ServiceProviderProtocol",
    "add_mediator",
    "create_publisher",
    "descriptor_cache",
    "discover_handler_types",
    "discover_handler_types_in_package",
    "handler_contracts",
]

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
The mediator: routes requests to their handler and notifications to theirs.

Routing uses the runtime type of the value, so a request held through a base
class reference still reaches the handler registered for its concrete class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from conduit.logging import get_logger
from conduit.mediator.cancellation import CancellationToken
from conduit.mediator.config import MediatorSettings
from conduit.mediator.contracts import Notification, Request
from conduit.mediator.descriptors import DescriptorCache, descriptor_cache
from conduit.mediator.errors import InvalidArgumentError
from conduit.mediator.pipeline import PipelineComposer
from conduit.mediator.publisher import PublishStrategy, create_publisher
from conduit.mediator.resolver import HandlerResolver

if TYPE_CHECKING:
    from conduit.logging import LoggerProtocol
    from conduit.mediator.protocols import ServiceProviderProtocol

TResponse = TypeVar("TResponse")


class Mediator:
    """
    Default ``MediatorProtocol`` implementation.

    The publish strategy is fixed at construction. The mediator keeps no
    per-call state and may be shared by concurrent callers.

    Example:
        ```python
        mediator = Mediator(container, PublishStrategy.CONCURRENT)
        order_id = await mediator.send(PlaceOrder(customer_id=7))
        await mediator.publish(OrderPlaced(order_id=order_id))
        ```
    """

    def __init__(
        self,
        provider: ServiceProviderProtocol,
        publish_strategy: PublishStrategy | str | None = None,
        *,
        logger: LoggerProtocol | None = None,
        descriptors: DescriptorCache | None = None,
    ) -> None:
        """
        Initialize the mediator.

        Args:
            provider: Container or scope used to resolve handlers and behaviors
            publish_strategy: Fan-out strategy; defaults to ``MediatorSettings``
            logger: Optional logger
            descriptors: Descriptor table; defaults to the process-wide one
        """
        if publish_strategy is None:
            publish_strategy = MediatorSettings.load().publish_strategy
        self._resolver = HandlerResolver(provider)
        self._publisher = create_publisher(publish_strategy)
        self._descriptors = descriptors or descriptor_cache
        self._logger = logger or get_logger(__name__)

    @property
    def publish_strategy(self) -> PublishStrategy:
        return self._publisher.strategy

    async def send(
        self,
        request: Request[TResponse],
        cancellation: CancellationToken | None = None,
    ) -> TResponse:
        """
        Send a request through its behaviors to its handler.

        Args:
            request: The request; routed by its runtime type
            cancellation: Token passed to behaviors and the handler

        Returns:
            The response, ``None`` for void requests

        Raises:
            InvalidArgumentError: If ``request`` is None or not a Request
            HandlerNotFoundError: If no handler is registered
            AmbiguousHandlerError: If several handlers are registered
        """
        if request is None or not isinstance(request, Request):
            raise InvalidArgumentError("request", Request, request)
        token = cancellation or CancellationToken.none()

        descriptor = self._descriptors.describe_request(type(request))
        handler = await self._resolver.resolve_request_handler(descriptor)
        behaviors = await self._resolver.resolve_behaviors(descriptor)
        self._logger.debug(
            "Sending request",
            request_type=descriptor.request_type.__qualname__,
            handler=type(handler).__qualname__,
            behaviors=[type(b).__qualname__ for b in behaviors],
        )
        pipeline = PipelineComposer.compose(request, token, handler, behaviors)
        return await pipeline()

    async def publish(
        self,
        notification: Notification,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """
        Publish a notification to every handler registered for its runtime type.

        Args:
            notification: The notification to publish
            cancellation: Token checked before each handler starts

        Raises:
            InvalidArgumentError: If ``notification`` is None or not a Notification
            CancellationRequestedError: If cancellation stopped the publish
            NotificationPublishError: Concurrent strategy only, on handler failure
        """
        if notification is None or not isinstance(notification, Notification):
            raise InvalidArgumentError("notification", Notification, notification)
        token = cancellation or CancellationToken.none()

        descriptor = self._descriptors.describe_notification(type(notification))
        handlers = await self._resolver.resolve_notification_handlers(descriptor)
        if not handlers:
            self._logger.debug(
                "No handlers for notification",
                notification_type=descriptor.notification_type.__qualname__,
            )
            return
        self._logger.debug(
            "Publishing notification",
            notification_type=descriptor.notification_type.__qualname__,
            handler_count=len(handlers),
            strategy=self.publish_strategy.value,
        )
        await self._publisher.publish(handlers, notification, token)

    def __repr__(self) -> str:
        return f"Mediator(publish_strategy={self.publish_strategy.value!r})"

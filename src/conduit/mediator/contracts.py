# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Message and handler contracts for the mediator.

Requests are routed to exactly one ``RequestHandler``; notifications fan out
to any number of ``NotificationHandler`` instances. ``PipelineBehavior``
instances wrap request handling.

Handlers, behaviors and the mediator resolve contracts as parameterized
generics, e.g. ``RequestHandler[PlaceOrder, OrderId]``; parameterizations with
equal arguments compare and hash equal, so they serve as registry keys.

Example:
    @dataclass(frozen=True)
    class GetUser(Query[User]):
        user_id: int

    class GetUserHandler(RequestHandler[GetUser, User]):
        async def handle(self, request: GetUser, cancellation: CancellationToken) -> User:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, TypeAlias, TypeVar

if TYPE_CHECKING:
    from conduit.mediator.cancellation import CancellationToken

TResponse = TypeVar("TResponse")
TRequest = TypeVar("TRequest", bound="Request[Any]")
TNotification = TypeVar("TNotification", bound="Notification")

NextHandler: TypeAlias = Callable[[], Awaitable[TResponse]]
"""The rest of the pipeline, including the handler."""


class Request(Generic[TResponse]):
    """
    Base class for all requests.

    The type parameter is the response type. ``Request[None]``, or a request
    that leaves the parameter unbound, is a void request: its handler returns
    nothing.
    """


class Command(Request[TResponse]):
    """A request that changes state."""


class Query(Request[TResponse]):
    """A request that reads state."""


class Notification:
    """Base class for notifications broadcast to zero or more handlers."""


class Event(Notification):
    """A notification describing something that happened."""


class RequestHandler(ABC, Generic[TRequest, TResponse]):
    """
    Handles one request type and produces its response.

    Exactly one handler may be registered per request/response pair.
    """

    @abstractmethod
    async def handle(self, request: TRequest, cancellation: CancellationToken) -> TResponse:
        """
        Handle the request and return a response.

        Args:
            request: The request to handle
            cancellation: Token to observe for cooperative cancellation

        Returns:
            The response of type TResponse
        """


class NotificationHandler(ABC, Generic[TNotification]):
    """Reacts to one notification type."""

    @abstractmethod
    async def handle(
        self, notification: TNotification, cancellation: CancellationToken
    ) -> None:
        """
        Handle the notification.

        Args:
            notification: The notification to handle
            cancellation: Token to observe for cooperative cancellation
        """


class PipelineBehavior(ABC, Generic[TRequest, TResponse]):
    """
    Intercepts a request on its way to the handler.

    A behavior may call ``next_handler`` zero times (short-circuit), once
    (pass-through) or several times (retry); the pipeline does not police it.
    Behaviors run in registration order: the first registered is outermost.
    """

    @abstractmethod
    async def handle(
        self,
        request: TRequest,
        cancellation: CancellationToken,
        next_handler: NextHandler[TResponse],
    ) -> TResponse:
        """
        Handle the request and call next in pipeline.

        Args:
            request: The request being processed
            cancellation: Token to observe for cooperative cancellation
            next_handler: Async callable invoking the next behavior/handler

        Returns:
            The response from the pipeline
        """

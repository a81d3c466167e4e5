# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Protocols for the mediator and the service provider it consumes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import Notification, Request

T = TypeVar("T")
TResponse = TypeVar("TResponse")


@runtime_checkable
class ServiceProviderProtocol(Protocol):
    """
    What the mediator needs from a container.

    ``conduit.di.Container`` and ``conduit.di.Scope`` both satisfy it.
    """

    async def resolve(self, interface: type[T]) -> T:
        """Resolve exactly one instance, raising if zero or several are registered."""
        ...

    async def resolve_all(self, interface: type[T]) -> list[T]:
        """Resolve every registered instance, in registration order."""
        ...


@runtime_checkable
class MediatorProtocol(Protocol):
    """Protocol for dispatching requests and publishing notifications."""

    async def send(
        self,
        request: Request[TResponse],
        cancellation: CancellationToken | None = None,
    ) -> TResponse:
        """
        Send a request to its single handler through the pipeline.

        Args:
            request: The request to send
            cancellation: Optional token observed by behaviors and the handler

        Returns:
            The handler's response, ``None`` for void requests
        """
        ...

    async def publish(
        self,
        notification: Notification,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """
        Publish a notification to every handler registered for its type.

        Args:
            notification: The notification to publish
            cancellation: Optional token observed before each handler starts
        """
        ...

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Notification publishing strategies.

A publisher receives the resolved handlers for one notification and decides
how they run: one after another, stopping at the first failure, or all at
once with every failure reported together.
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

from conduit.mediator.errors import CancellationRequestedError, NotificationPublishError

if TYPE_CHECKING:
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import Notification, NotificationHandler


class PublishStrategy(str, Enum):
    """How notification handlers are run."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


async def _invoke(
    handler: NotificationHandler[Any],
    notification: Notification,
    cancellation: CancellationToken,
) -> None:
    cancellation.raise_if_cancellation_requested()
    result = handler.handle(notification, cancellation)
    if inspect.isawaitable(result):
        await result


class NotificationPublisher(ABC):
    """Base class for publishing strategies."""

    strategy: PublishStrategy

    @abstractmethod
    async def publish(
        self,
        handlers: Sequence[NotificationHandler[Any]],
        notification: Notification,
        cancellation: CancellationToken,
    ) -> None:
        """
        Run ``handlers`` for ``notification``.

        Args:
            handlers: Handlers in registration order
            notification: The notification being published
            cancellation: Token checked before each handler starts
        """


class SequentialPublisher(NotificationPublisher):
    """Runs handlers one at a time in registration order; the first failure stops the rest."""

    strategy = PublishStrategy.SEQUENTIAL

    async def publish(
        self,
        handlers: Sequence[NotificationHandler[Any]],
        notification: Notification,
        cancellation: CancellationToken,
    ) -> None:
        for handler in handlers:
            await _invoke(handler, notification, cancellation)


class ConcurrentPublisher(NotificationPublisher):
    """
    Starts every handler at once and waits for all of them.

    Raises:
        CancellationRequestedError: If every failure was a cancellation
        NotificationPublishError: Carrying every failure otherwise, even if
            only one handler failed
    """

    strategy = PublishStrategy.CONCURRENT

    async def publish(
        self,
        handlers: Sequence[NotificationHandler[Any]],
        notification: Notification,
        cancellation: CancellationToken,
    ) -> None:
        results = await asyncio.gather(
            *(_invoke(handler, notification, cancellation) for handler in handlers),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if not failures:
            return
        if all(isinstance(failure, CancellationRequestedError) for failure in failures):
            raise failures[0]
        raise NotificationPublishError(type(notification), failures)


_PUBLISHERS: dict[PublishStrategy, type[NotificationPublisher]] = {
    PublishStrategy.SEQUENTIAL: SequentialPublisher,
    PublishStrategy.CONCURRENT: ConcurrentPublisher,
}


def create_publisher(strategy: PublishStrategy | str) -> NotificationPublisher:
    """Create the publisher for ``strategy``."""
    return _PUBLISHERS[PublishStrategy(strategy)]()

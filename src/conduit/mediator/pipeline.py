# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Pipeline composition for request handling.

Behaviors wrap the handler like an onion: the first registered behavior is
the outermost layer and sees the request first and the response last.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import NextHandler, PipelineBehavior, RequestHandler

TResponse = TypeVar("TResponse")


async def _await_if_needed(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


def _invoke_handler(
    handler: RequestHandler[Any, Any], request: Any, cancellation: CancellationToken
) -> NextHandler[Any]:
    async def invoke() -> Any:
        return await _await_if_needed(handler.handle(request, cancellation))

    return invoke


def _wrap(
    behavior: PipelineBehavior[Any, Any],
    request: Any,
    cancellation: CancellationToken,
    next_handler: NextHandler[Any],
) -> NextHandler[Any]:
    async def invoke() -> Any:
        return await _await_if_needed(
            behavior.handle(request, cancellation, next_handler)
        )

    return invoke


class PipelineComposer:
    """Builds the continuation that runs behaviors around a handler."""

    @staticmethod
    def compose(
        request: Any,
        cancellation: CancellationToken,
        handler: RequestHandler[Any, TResponse],
        behaviors: Sequence[PipelineBehavior[Any, TResponse]] = (),
    ) -> NextHandler[TResponse]:
        """
        Compose behaviors around a handler.

        Nothing runs until the returned continuation is awaited.

        Args:
            request: The request flowing through the pipeline
            cancellation: The token passed unchanged to every stage
            handler: The request handler at the centre of the pipeline
            behaviors: Behaviors in registration order

        Returns:
            A zero-argument async callable running the whole pipeline
        """
        pipeline = _invoke_handler(handler, request, cancellation)
        for behavior in reversed(behaviors):
            pipeline = _wrap(behavior, request, cancellation, pipeline)
        return pipeline

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
LoggingBehavior: logs each request as it passes through the pipeline.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from conduit.logging import get_logger
from conduit.mediator.contracts import PipelineBehavior, TRequest, TResponse

if TYPE_CHECKING:
    from conduit.logging import LoggerProtocol
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import NextHandler


class LoggingBehavior(PipelineBehavior[TRequest, TResponse]):
    """
    Logs request start and completion at INFO and failures at ERROR.

    Exceptions are re-raised unchanged.
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self.logger = logger or get_logger(__name__)

    async def handle(
        self,
        request: TRequest,
        cancellation: CancellationToken,
        next_handler: NextHandler[TResponse],
    ) -> TResponse:
        request_name = type(request).__qualname__
        self.logger.info("Handling request", request_type=request_name)
        started = time.perf_counter()
        try:
            response = await next_handler()
        except Exception as e:
            self.logger.error(
                f"Failed handling {request_name}",
                request_type=request_name,
                error=str(e),
                elapsed_ms=_elapsed_ms(started),
                exc_info=e,
            )
            raise
        self.logger.info(
            "Handled request",
            request_type=request_name,
            elapsed_ms=_elapsed_ms(started),
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
RetryBehavior: re-runs the rest of the pipeline when it fails transiently.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from conduit.logging import get_logger
from conduit.mediator.contracts import PipelineBehavior, TRequest, TResponse
from conduit.mediator.errors import MediatorError

if TYPE_CHECKING:
    from conduit.logging import LoggerProtocol
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import NextHandler


@dataclass
class RetryOptions:
    max_retries: int = 3
    base_delay_ms: int = 100
    max_delay_ms: int = 5000
    backoff_factor: float = 2.0
    retryable_exceptions: list[type[Exception]] = field(default_factory=list)

    def should_retry(self, error: Exception) -> bool:
        # mediator failures (cancellation, validation, missing handler) are final
        if isinstance(error, MediatorError):
            return False
        if not self.retryable_exceptions:
            return True
        return any(
            isinstance(error, exc_type) for exc_type in self.retryable_exceptions
        )

    def get_delay_ms(self, attempt: int) -> int:
        delay = self.base_delay_ms * (self.backoff_factor**attempt)
        return min(int(delay), self.max_delay_ms)


class RetryBehavior(PipelineBehavior[TRequest, TResponse]):
    """
    Retries the rest of the pipeline with exponential backoff.

    The cancellation token is checked before every retry, so a cancelled
    request stops retrying with ``CancellationRequestedError``.
    """

    def __init__(
        self, options: RetryOptions | None = None, logger: LoggerProtocol | None = None
    ) -> None:
        self.options = options or RetryOptions()
        self.logger = logger or get_logger(__name__)

    async def handle(
        self,
        request: TRequest,
        cancellation: CancellationToken,
        next_handler: NextHandler[TResponse],
    ) -> TResponse:
        request_name = type(request).__qualname__
        attempt = 0
        while True:
            try:
                response = await next_handler()
            except Exception as err:
                if not self.options.should_retry(err) or attempt >= self.options.max_retries:
                    self.logger.error(
                        f"Request {request_name} failed after {attempt + 1} attempts",
                        request_type=request_name,
                        error=str(err),
                    )
                    raise
                delay_ms = self.options.get_delay_ms(attempt)
                self.logger.warning(
                    f"Retrying request {request_name} (attempt {attempt + 1}) after {delay_ms}ms",
                    request_type=request_name,
                    attempt=attempt + 1,
                    delay_ms=delay_ms,
                )
                await asyncio.sleep(delay_ms / 1000)
                cancellation.raise_if_cancellation_requested()
                attempt += 1
                continue
            if attempt > 0:
                self.logger.info(
                    f"Request {request_name} succeeded after {attempt + 1} attempts",
                    request_type=request_name,
                )
            return response

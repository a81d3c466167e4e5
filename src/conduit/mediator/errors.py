# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Error types raised by the mediator.

Failures raised by handlers and behaviors are never wrapped: they reach the
caller as raised. The classes below describe failures of the mediator itself.
"""

from __future__ import annotations

from typing import Any, Final

from conduit.errors.base import ConduitError, ErrorCategory, ErrorCode, ErrorSeverity

__all__ = [
    "AmbiguousHandlerError",
    "CancellationRequestedError",
    "HandlerNotFoundError",
    "InvalidArgumentError",
    "MediatorError",
    "MediatorErrorCode",
    "NotificationPublishError",
    "RequestValidationError",
]

MEDIATOR: Final = ErrorCategory.get_or_create("MEDIATOR")


def _type_name(value: Any) -> str:
    if value is type(None):
        return "None"
    if isinstance(value, type):
        return value.__qualname__
    return repr(value)


class MediatorErrorCode:
    """Error codes for the mediator."""

    INVALID_ARGUMENT: Final = ErrorCode.get_or_create(
        "MEDIATOR_INVALID_ARGUMENT", MEDIATOR
    )
    HANDLER_NOT_FOUND: Final = ErrorCode.get_or_create(
        "MEDIATOR_HANDLER_NOT_FOUND", MEDIATOR
    )
    AMBIGUOUS_HANDLER: Final = ErrorCode.get_or_create(
        "MEDIATOR_AMBIGUOUS_HANDLER", MEDIATOR
    )
    CANCELLATION_REQUESTED: Final = ErrorCode.get_or_create(
        "MEDIATOR_CANCELLATION_REQUESTED", MEDIATOR
    )
    PUBLISH_FAILED: Final = ErrorCode.get_or_create("MEDIATOR_PUBLISH_FAILED", MEDIATOR)
    VALIDATION_FAILED: Final = ErrorCode.get_or_create(
        "MEDIATOR_VALIDATION_FAILED", MEDIATOR
    )


class MediatorError(ConduitError):
    """Base class for all mediator errors."""


class InvalidArgumentError(MediatorError, ValueError):
    """Raised when ``send``/``publish`` receive ``None`` or a value of the wrong kind."""

    def __init__(self, argument: str, expected: type, value: Any) -> None:
        self.argument = argument
        super().__init__(
            message=(
                f"{argument} must be a {expected.__qualname__} instance, "
                f"got {_type_name(type(value)) if value is not None else 'None'}"
            ),
            code=MediatorErrorCode.INVALID_ARGUMENT,
            argument=argument,
        )


class HandlerNotFoundError(MediatorError, LookupError):
    """Raised when no handler is registered for a request's runtime type."""

    def __init__(self, request_type: type, response_type: Any) -> None:
        self.request_type = request_type
        self.response_type = response_type
        super().__init__(
            message=(
                f"No handler registered for {_type_name(request_type)} "
                f"returning {_type_name(response_type)}"
            ),
            code=MediatorErrorCode.HANDLER_NOT_FOUND,
            request_type=_type_name(request_type),
            response_type=_type_name(response_type),
        )


class AmbiguousHandlerError(MediatorError):
    """Raised when several handlers are registered for one request/response pair."""

    def __init__(self, request_type: type, response_type: Any, candidates: int) -> None:
        self.request_type = request_type
        self.response_type = response_type
        self.candidates = candidates
        super().__init__(
            message=(
                f"{candidates} handlers registered for {_type_name(request_type)} "
                f"returning {_type_name(response_type)}; exactly one is required"
            ),
            code=MediatorErrorCode.AMBIGUOUS_HANDLER,
            request_type=_type_name(request_type),
            response_type=_type_name(response_type),
            candidates=candidates,
        )


class CancellationRequestedError(MediatorError):
    """Raised at a cancellation checkpoint once cancellation has been requested."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(
            message=f"Cancellation requested{f': {reason}' if reason else ''}",
            code=MediatorErrorCode.CANCELLATION_REQUESTED,
            severity=ErrorSeverity.WARNING,
            reason=reason,
        )


class NotificationPublishError(MediatorError):
    """Raised by concurrent publishing; carries every handler failure."""

    def __init__(
        self, notification_type: type, exceptions: list[BaseException] | tuple[BaseException, ...]
    ) -> None:
        self.notification_type = notification_type
        self.exceptions: tuple[BaseException, ...] = tuple(exceptions)
        super().__init__(
            message=(
                f"{len(self.exceptions)} handler(s) failed for "
                f"{_type_name(notification_type)}: "
                + "; ".join(f"{type(e).__name__}: {e}" for e in self.exceptions)
            ),
            code=MediatorErrorCode.PUBLISH_FAILED,
            notification_type=_type_name(notification_type),
            failure_count=len(self.exceptions),
            failure_types=[type(e).__name__ for e in self.exceptions],
        )


class RequestValidationError(MediatorError, ValueError):
    """Raised by ``ValidationBehavior`` when a request fails validation."""

    def __init__(self, request_type: type, errors: list[str]) -> None:
        self.request_type = request_type
        self.errors = errors
        super().__init__(
            message=f"{_type_name(request_type)} is invalid: {'; '.join(errors)}",
            code=MediatorErrorCode.VALIDATION_FAILED,
            severity=ErrorSeverity.WARNING,
            request_type=_type_name(request_type),
            errors=errors,
        )

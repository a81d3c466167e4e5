# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Handler resolution for the mediator.

Translates descriptors into container lookups and container failures into
mediator errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from conduit.di.errors import AmbiguousServiceError, ServiceNotRegisteredError
from conduit.mediator.errors import AmbiguousHandlerError, HandlerNotFoundError

if TYPE_CHECKING:
    from conduit.mediator.contracts import (
        NotificationHandler,
        PipelineBehavior,
        RequestHandler,
    )
    from conduit.mediator.descriptors import NotificationDescriptor, RequestDescriptor
    from conduit.mediator.protocols import ServiceProviderProtocol


class HandlerResolver:
    """Finds the handler, behaviors and notification handlers for a descriptor."""

    def __init__(self, provider: ServiceProviderProtocol) -> None:
        self._provider = provider

    async def resolve_request_handler(
        self, descriptor: RequestDescriptor
    ) -> RequestHandler[Any, Any]:
        """
        Resolve the single handler for a request type.

        Raises:
            HandlerNotFoundError: If no handler is registered
            AmbiguousHandlerError: If more than one handler is registered
        """
        contract = descriptor.handler_contract
        try:
            return await self._provider.resolve(contract)
        except ServiceNotRegisteredError as exc:
            # a missing dependency of the handler is not a missing handler
            if exc.service_type != contract:
                raise
            raise HandlerNotFoundError(
                descriptor.request_type, descriptor.response_type
            ) from exc
        except AmbiguousServiceError as exc:
            if exc.service_type != contract:
                raise
            raise AmbiguousHandlerError(
                descriptor.request_type, descriptor.response_type, exc.count
            ) from exc

    async def resolve_behaviors(
        self, descriptor: RequestDescriptor
    ) -> list[PipelineBehavior[Any, Any]]:
        """Resolve the behaviors for a request type, in registration order."""
        return await self._provider.resolve_all(descriptor.behavior_contract)

    async def resolve_notification_handlers(
        self, descriptor: NotificationDescriptor
    ) -> list[NotificationHandler[Any]]:
        """Resolve every handler for a notification type, in registration order."""
        return await self._provider.resolve_all(descriptor.handler_contract)

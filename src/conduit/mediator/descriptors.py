# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Runtime type descriptors for dispatch.

A request's routing key is its runtime class. From that class the mediator
needs the response type it declared through ``Request[...]`` (possibly via
``Command``/``Query`` or further subclasses) and the closed contracts to look
up. Working that out walks ``__orig_bases__``, so the result is computed once
per class and kept in a process-wide table.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import NoneType
from typing import Any, TypeVar, get_args, get_origin

from conduit.mediator.contracts import (
    Notification,
    NotificationHandler,
    PipelineBehavior,
    Request,
    RequestHandler,
)


def resolve_generic_arguments(cls: type, generic_base: type) -> tuple[Any, ...] | None:
    """Return the type arguments ``cls`` supplies to ``generic_base``.

    Type variables bound further down the hierarchy are substituted, so for
    ``class PlaceOrder(Command[OrderId])`` and ``generic_base=Request`` the
    result is ``(OrderId,)``. Parameters nobody bound stay as ``TypeVar``
    objects; ``None`` means ``cls`` does not derive from ``generic_base``.
    """
    if not isinstance(cls, type) or not issubclass(cls, generic_base):
        return None
    return _resolve(cls, generic_base, {})


def _resolve(
    cls: type, target: type, substitutions: dict[Any, Any]
) -> tuple[Any, ...] | None:
    # __orig_bases__ is looked up in the class dict; the attribute is inherited
    bases = cls.__dict__.get("__orig_bases__", cls.__bases__)
    for base in bases:
        origin = get_origin(base) or base
        args = tuple(substitutions.get(arg, arg) for arg in get_args(base))
        if origin is target:
            if not args:
                args = tuple(getattr(target, "__parameters__", ()))
            return args
        if isinstance(origin, type) and issubclass(origin, target):
            parameters = origin.__dict__.get("__parameters__", ())
            found = _resolve(origin, target, dict(zip(parameters, args)))
            if found is not None:
                return found
    return None


def normalize_response_type(response_type: Any) -> Any:
    """Map ``None`` and unbound type variables to ``NoneType`` (a void response)."""
    if response_type is None or isinstance(response_type, TypeVar):
        return NoneType
    return response_type


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """What the mediator needs to route one request type."""

    request_type: type[Request[Any]]
    response_type: Any
    handler_contract: Any
    behavior_contract: Any

    @property
    def is_void(self) -> bool:
        return self.response_type is NoneType

    @classmethod
    def for_type(cls, request_type: type[Request[Any]]) -> RequestDescriptor:
        args = resolve_generic_arguments(request_type, Request)
        if args is None:
            raise TypeError(f"{request_type.__qualname__} is not a Request type")
        response_type = normalize_response_type(args[0] if args else None)
        return cls(
            request_type=request_type,
            response_type=response_type,
            handler_contract=RequestHandler[request_type, response_type],
            behavior_contract=PipelineBehavior[request_type, response_type],
        )


@dataclass(frozen=True, slots=True)
class NotificationDescriptor:
    """What the mediator needs to route one notification type."""

    notification_type: type[Notification]
    handler_contract: Any

    @classmethod
    def for_type(cls, notification_type: type[Notification]) -> NotificationDescriptor:
        if not issubclass(notification_type, Notification):
            raise TypeError(f"{notification_type.__qualname__} is not a Notification type")
        return cls(
            notification_type=notification_type,
            handler_contract=NotificationHandler[notification_type],
        )


class DescriptorCache:
    """Lazily populated, thread-safe table of descriptors keyed by runtime type.

    Lookups of a known type take no lock; a miss builds the descriptor under
    the lock and re-checks before inserting.
    """

    def __init__(self) -> None:
        self._requests: dict[type, RequestDescriptor] = {}
        self._notifications: dict[type, NotificationDescriptor] = {}
        self._lock = threading.Lock()

    def describe_request(self, request_type: type[Request[Any]]) -> RequestDescriptor:
        descriptor = self._requests.get(request_type)
        if descriptor is None:
            with self._lock:
                descriptor = self._requests.get(request_type)
                if descriptor is None:
                    descriptor = RequestDescriptor.for_type(request_type)
                    self._requests[request_type] = descriptor
        return descriptor

    def describe_notification(
        self, notification_type: type[Notification]
    ) -> NotificationDescriptor:
        descriptor = self._notifications.get(notification_type)
        if descriptor is None:
            with self._lock:
                descriptor = self._notifications.get(notification_type)
                if descriptor is None:
                    descriptor = NotificationDescriptor.for_type(notification_type)
                    self._notifications[notification_type] = descriptor
        return descriptor

    def __len__(self) -> int:
        return len(self._requests) + len(self._notifications)

    def clear(self) -> None:
        with self._lock:
            self._requests.clear()
            self._notifications.clear()


# Shared by every mediator in the process
descriptor_cache = DescriptorCache()

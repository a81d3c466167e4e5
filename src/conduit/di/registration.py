# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Service registration module for the conduit DI container.

This module defines the ServiceRegistration class used to track service
registrations in the DI container.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, get_origin


class ServiceLifetime(str, Enum):
    """Lifetime of the instances a registration produces."""

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


class ServiceRegistration:
    """Represents a service registration in the DI container.

    A registration contains the interface key, its implementation or factory,
    and the lifetime for the service. Several registrations may share one
    interface; their order is the registration order.

    An *open* registration is keyed on an unparameterized generic class and
    matches every parameterization of it, so ``PipelineBehavior`` registered
    open also answers ``PipelineBehavior[PlaceOrder, OrderId]``.
    """

    __slots__ = ("implementation", "interface", "is_open", "lifetime")

    def __init__(
        self,
        interface: Any,
        implementation: Any,
        lifetime: ServiceLifetime,
        is_open: bool = False,
    ) -> None:
        """Initialize a service registration.

        Args:
            interface: The key used to resolve the service
            implementation: A concrete type, a factory function or an instance
            lifetime: The lifetime of the service
            is_open: Whether the registration matches all parameterizations
                of a generic ``interface``
        """
        self.interface = interface
        self.implementation = implementation
        self.lifetime = ServiceLifetime(lifetime)
        self.is_open = is_open

    def matches(self, interface: Any) -> bool:
        """Whether this registration answers a request for ``interface``."""
        if self.interface == interface:
            return True
        return self.is_open and get_origin(interface) is self.interface

    @property
    def is_factory(self) -> bool:
        """True if the implementation is a factory rather than a type or instance."""
        return not isinstance(self.implementation, type) and callable(
            self.implementation
        )

    @property
    def owns_instances(self) -> bool:
        """True if instances are created by the container and disposed by it."""
        return isinstance(self.implementation, type) or self.is_factory

    def __repr__(self) -> str:
        impl = getattr(self.implementation, "__qualname__", repr(self.implementation))
        return (
            f"ServiceRegistration({self.interface!r}, {impl}, "
            f"{self.lifetime.value}{', open' if self.is_open else ''})"
        )

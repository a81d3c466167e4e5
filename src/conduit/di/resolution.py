# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Service resolution implementation for the conduit DI system.
"""

from __future__ import annotations

import asyncio
import contextvars
import inspect
from typing import TYPE_CHECKING, Any, TypeVar, cast

from conduit.di.errors import (
    AmbiguousServiceError,
    CircularDependencyError,
    ContainerDisposedError,
    DIError,
    ScopeError,
    ServiceCreationError,
    ServiceNotRegisteredError,
    service_name,
)
from conduit.di.registration import ServiceLifetime, ServiceRegistration

if TYPE_CHECKING:
    from types import TracebackType

    from conduit.di.container import Container

T = TypeVar("T")

# Registrations currently being created in this task, for cycle detection
_RESOLUTION_CHAIN: contextvars.ContextVar[tuple[ServiceRegistration, ...]] = (
    contextvars.ContextVar("conduit_resolution_chain", default=())
)


class Scope:
    """Resolution scope for service lifetime management.

    The container owns a root scope that caches singletons. Child scopes
    cache scoped services; transient services are never cached.
    """

    def __init__(self, container: Container, parent: Scope | None = None) -> None:
        self.container = container
        self.parent = parent
        self._instances: dict[ServiceRegistration, Any] = {}
        self._creation_order: list[Any] = []
        self._locks: dict[ServiceRegistration, asyncio.Lock] = {}
        self._children: list[Scope] = []
        self._disposed = False

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def root(self) -> Scope:
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    async def __aenter__(self) -> Scope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    def _check_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise ContainerDisposedError(operation, scope_id=id(self))

    async def resolve(self, interface: type[T]) -> T:
        """Resolve the single service registered for ``interface``.

        Raises:
            ServiceNotRegisteredError: If nothing is registered for the interface
            AmbiguousServiceError: If more than one registration matches
            ScopeError: If a scoped service is resolved from the root scope
        """
        self._check_not_disposed("resolve")
        candidates = self.container.registrations_for(interface)
        if not candidates:
            raise ServiceNotRegisteredError(interface)
        if len(candidates) > 1:
            raise AmbiguousServiceError(interface, len(candidates))
        return cast("T", await self._get_instance(interface, candidates[0]))

    async def resolve_optional(self, interface: type[T]) -> T | None:
        """Resolve a service instance or return None if not registered."""
        self._check_not_disposed("resolve_optional")
        if not self.container.registrations_for(interface):
            return None
        return await self.resolve(interface)

    async def resolve_all(self, interface: type[T]) -> list[T]:
        """Resolve every service registered for ``interface``, in registration order."""
        self._check_not_disposed("resolve_all")
        return [
            await self._get_instance(interface, registration)
            for registration in self.container.registrations_for(interface)
        ]

    async def _get_instance(
        self, interface: Any, registration: ServiceRegistration
    ) -> Any:
        match registration.lifetime:
            case ServiceLifetime.TRANSIENT:
                return await self._create(interface, registration)
            case ServiceLifetime.SINGLETON:
                return await self.root._get_cached(interface, registration)
            case ServiceLifetime.SCOPED:
                if self.is_root:
                    raise ScopeError.outside_scope(interface)
                return await self._get_cached(interface, registration)

    async def _get_cached(
        self, interface: Any, registration: ServiceRegistration
    ) -> Any:
        if registration in self._instances:
            return self._instances[registration]
        self._check_for_cycle(registration)
        lock = self._locks.setdefault(registration, asyncio.Lock())
        async with lock:
            if registration not in self._instances:
                instance = await self._create(interface, registration)
                self._instances[registration] = instance
                if registration.owns_instances:
                    self._creation_order.append(instance)
            return self._instances[registration]

    def _check_for_cycle(self, registration: ServiceRegistration) -> None:
        chain = _RESOLUTION_CHAIN.get()
        if registration in chain:
            names = [service_name(r.interface) for r in (*chain, registration)]
            raise CircularDependencyError(names)

    async def _create(self, interface: Any, registration: ServiceRegistration) -> Any:
        self._check_for_cycle(registration)
        token = _RESOLUTION_CHAIN.set((*_RESOLUTION_CHAIN.get(), registration))
        try:
            implementation = registration.implementation
            if isinstance(implementation, type):
                return implementation()
            if callable(implementation):
                result = implementation(self)
                if inspect.isawaitable(result):
                    result = await result
                return result
            return implementation
        except DIError:
            raise
        except Exception as exc:
            raise ServiceCreationError(interface, exc) from exc
        finally:
            _RESOLUTION_CHAIN.reset(token)

    def create_scope(self) -> Scope:
        """Create a nested scope."""
        self._check_not_disposed("create_scope")
        scope = type(self)(self.container, parent=self)
        self._children.append(scope)
        return scope

    async def dispose(self) -> None:
        """Dispose of all services in this scope and its children (idempotent).

        Instances are disposed in reverse creation order. Ready-made instances
        registered directly are not owned by the scope and are left alone.
        """
        if self._disposed:
            return
        self._disposed = True
        for child in list(reversed(self._children)):
            await child.dispose()
        self._children.clear()
        if self.parent is not None and self in self.parent._children:
            self.parent._children.remove(self)
        for instance in reversed(self._creation_order):
            await _dispose_instance(instance)
        self._creation_order.clear()
        self._instances.clear()


async def _dispose_instance(service: Any) -> None:
    """Safely dispose a service if it supports disposal."""
    dispose = getattr(service, "dispose", None)
    if dispose is None or not callable(dispose):
        return
    result = dispose()
    if inspect.isawaitable(result):
        await result

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
DI container implementation for conduit.

This module implements the DI container that provides service registration
and resolution. Unlike a one-implementation-per-interface container, several
registrations may share an interface: ``resolve`` insists on exactly one,
``resolve_all`` returns them all in registration order.
"""

from __future__ import annotations

import contextlib
import threading
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeVar

from conduit.di.errors import ContainerDisposedError, service_name
from conduit.di.registration import ServiceLifetime, ServiceRegistration
from conduit.di.resolution import Scope
from conduit.logging import get_logger

T = TypeVar("T")


class Container:
    """Dependency Injection container for managing service lifetimes.

    This container supports three service lifetimes:
    - Singleton: One instance per container
    - Scoped: One instance per scope
    - Transient: New instance per resolution

    Registration appends to an ordered list. Readers take a snapshot of that
    list, so registering while other tasks or threads resolve is safe.
    """

    def __init__(self) -> None:
        """Initialize a new DI container.

        Creates the root (singleton) scope and initializes internal structures.
        """
        self._registrations: tuple[ServiceRegistration, ...] = ()
        self._write_lock = threading.Lock()
        self._root = Scope(self)
        self._disposed = False
        self._logger = get_logger(__name__)

    @classmethod
    async def create(
        cls, configurator: Callable[[Container], Awaitable[None]]
    ) -> Container:
        """Create and configure a new container.

        Example:
            ```python
            async def configure(c: Container) -> None:
                await c.register_singleton(Clock, SystemClock)
                await c.register_transient(RequestHandler[GetTime, datetime], GetTimeHandler)

            container = await Container.create(configure)
            ```
        """
        container = cls()
        await configurator(container)
        return container

    def _check_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise ContainerDisposedError(operation)

    async def register_singleton(
        self, interface: Any, implementation: Any, replace: bool = False
    ) -> None:
        await self.register(interface, implementation, ServiceLifetime.SINGLETON, replace)

    async def register_scoped(
        self, interface: Any, implementation: Any, replace: bool = False
    ) -> None:
        await self.register(interface, implementation, ServiceLifetime.SCOPED, replace)

    async def register_transient(
        self, interface: Any, implementation: Any, replace: bool = False
    ) -> None:
        await self.register(interface, implementation, ServiceLifetime.TRANSIENT, replace)

    async def register(
        self,
        interface: Any,
        implementation: Any,
        lifetime: ServiceLifetime,
        replace: bool = False,
    ) -> None:
        """Register ``implementation`` for ``interface``.

        Args:
            interface: The key used to resolve the service, a class or a
                parameterized generic such as ``RequestHandler[Ping, None]``
            implementation: A class (instantiated without arguments), a factory
                receiving the resolving scope (sync or async), or an instance
            lifetime: The lifetime of produced instances
            replace: Drop existing registrations for ``interface`` first
        """
        self._add(ServiceRegistration(interface, implementation, lifetime), replace)

    async def register_open(
        self,
        interface: type[Any],
        implementation: Any,
        lifetime: ServiceLifetime = ServiceLifetime.TRANSIENT,
    ) -> None:
        """Register ``implementation`` for every parameterization of ``interface``.

        Args:
            interface: An unparameterized generic class, e.g. ``PipelineBehavior``
            implementation: As for ``register``
            lifetime: The lifetime of produced instances
        """
        if not getattr(interface, "__parameters__", ()):
            raise TypeError(f"{service_name(interface)} is not a generic class")
        self._add(
            ServiceRegistration(interface, implementation, lifetime, is_open=True),
            replace=False,
        )

    def _add(self, registration: ServiceRegistration, replace: bool) -> None:
        self._check_not_disposed("register")
        with self._write_lock:
            registrations = self._registrations
            if replace:
                registrations = tuple(
                    r
                    for r in registrations
                    if r.interface != registration.interface or r.is_open
                )
            self._registrations = (*registrations, registration)
        self._logger.debug(
            "Registered service",
            interface=service_name(registration.interface),
            lifetime=registration.lifetime.value,
            open=registration.is_open,
        )

    def registrations_for(self, interface: Any) -> list[ServiceRegistration]:
        """Registrations answering ``interface``, in registration order."""
        return [r for r in self._registrations if r.matches(interface)]

    async def has_registration(self, interface: Any) -> bool:
        """Check whether at least one registration answers ``interface``."""
        return bool(self.registrations_for(interface))

    async def resolve(self, interface: type[T]) -> T:
        """Resolve the single service registered for ``interface``.

        Raises:
            ServiceNotRegisteredError: If the service is not registered
            AmbiguousServiceError: If more than one registration matches
            ScopeError: If the service is scoped
            CircularDependencyError: If a circular dependency is detected
        """
        self._check_not_disposed("resolve")
        return await self._root.resolve(interface)

    async def resolve_optional(self, interface: type[T]) -> T | None:
        """Resolve a service instance or return None if not registered."""
        self._check_not_disposed("resolve_optional")
        return await self._root.resolve_optional(interface)

    async def resolve_all(self, interface: type[T]) -> list[T]:
        """Resolve every service registered for ``interface``, in registration order."""
        self._check_not_disposed("resolve_all")
        return await self._root.resolve_all(interface)

    @contextlib.asynccontextmanager
    async def create_scope(self) -> AsyncGenerator[Scope, None]:
        """Create a new scope for scoped services.

        The scope is disposed when the context exits.

        Example:
            ```python
            async with container.create_scope() as scope:
                service = await scope.resolve(UnitOfWork)
            ```
        """
        self._check_not_disposed("create_scope")
        scope = self._root.create_scope()
        try:
            yield scope
        finally:
            await scope.dispose()

    async def dispose(self) -> None:
        """Dispose the container, its scopes and the singletons it created.

        After disposal the container raises ContainerDisposedError when used.
        """
        if self._disposed:
            return
        self._disposed = True
        await self._root.dispose()

    @contextlib.asynccontextmanager
    async def use(self) -> AsyncGenerator[Container, None]:
        """Dispose the container when the block exits."""
        try:
            yield self
        finally:
            await self.dispose()

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Registration of handlers, behaviors and the mediator in a container.

Example:
    ```python
    container = Container()
    await add_mediator(
        container,
        lambda options: options.add_handlers_from_package("shop.handlers")
        .with_notifications(PublishStrategy.CONCURRENT)
        .add_open_behavior(LoggingBehavior),
    )
    mediator = await container.resolve(MediatorProtocol)
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from types import ModuleType
from typing import TYPE_CHECKING, Any, TypeVar

from conduit.di.registration import ServiceLifetime
from conduit.logging import get_logger
from conduit.mediator.config import MediatorSettings
from conduit.mediator.contracts import PipelineBehavior
from conduit.mediator.descriptors import (
    descriptor_cache,
    normalize_response_type,
    resolve_generic_arguments,
)
from conduit.mediator.discovery import (
    discover_handler_types,
    discover_handler_types_in_package,
    handler_contracts,
)
from conduit.mediator.dispatcher import Mediator
from conduit.mediator.protocols import MediatorProtocol
from conduit.mediator.publisher import PublishStrategy

if TYPE_CHECKING:
    from conduit.di.container import Container


class MediatorOptionsBuilder:
    """
    Collects mediator options and applies them to a container.

    Every ``add_*``/``with_*`` method returns the builder, so calls chain.
    Nothing touches the container until ``build``.
    """

    def __init__(
        self, container: Container, settings: MediatorSettings | None = None
    ) -> None:
        settings = settings or MediatorSettings.load()
        self.container = container
        self.publish_strategy: PublishStrategy = settings.publish_strategy
        self.handler_lifetime: ServiceLifetime = settings.handler_lifetime
        self._modules: list[ModuleType | str] = []
        self._packages: list[ModuleType | str] = []
        self._handlers: list[type] = []
        self._open_behaviors: list[tuple[type, ServiceLifetime]] = []
        self._behaviors: list[tuple[Any, type, ServiceLifetime]] = []
        self._logger = get_logger(__name__)

    def add_handlers_from_module(self, module: ModuleType | str) -> MediatorOptionsBuilder:
        """Register every handler defined in ``module``."""
        if module not in self._modules:
            self._modules.append(module)
        return self

    def add_handlers_from_modules(
        self, *modules: ModuleType | str | Iterable[ModuleType | str]
    ) -> MediatorOptionsBuilder:
        """Register every handler defined in each of ``modules``."""
        for module in modules:
            if isinstance(module, ModuleType | str):
                self.add_handlers_from_module(module)
            else:
                for item in module:
                    self.add_handlers_from_module(item)
        return self

    def add_handlers_from_package(self, package: ModuleType | str) -> MediatorOptionsBuilder:
        """Register every handler found in ``package`` and its subpackages."""
        if package not in self._packages:
            self._packages.append(package)
        return self

    def add_handler(self, handler_type: type) -> MediatorOptionsBuilder:
        """Register a single handler class."""
        if not handler_contracts(handler_type):
            raise TypeError(
                f"{handler_type.__qualname__} does not implement a closed "
                "RequestHandler or NotificationHandler contract"
            )
        if handler_type not in self._handlers:
            self._handlers.append(handler_type)
        return self

    def with_handler_lifetime(self, lifetime: ServiceLifetime | str) -> MediatorOptionsBuilder:
        """Set the lifetime used for every registered handler."""
        self.handler_lifetime = ServiceLifetime(lifetime)
        return self

    def with_notifications(self, strategy: PublishStrategy | str) -> MediatorOptionsBuilder:
        """Set the publish strategy of the mediator."""
        self.publish_strategy = PublishStrategy(strategy)
        return self

    def add_open_behavior(
        self,
        behavior_type: type,
        lifetime: ServiceLifetime = ServiceLifetime.TRANSIENT,
    ) -> MediatorOptionsBuilder:
        """
        Apply ``behavior_type`` to every request.

        Open behaviors wrap requests in the order they are added, first added
        outermost. Adding the same class again has no effect.
        """
        if all(added is not behavior_type for added, _ in self._open_behaviors):
            self._open_behaviors.append((behavior_type, ServiceLifetime(lifetime)))
        return self

    def add_behavior(
        self,
        behavior_type: type,
        lifetime: ServiceLifetime = ServiceLifetime.TRANSIENT,
    ) -> MediatorOptionsBuilder:
        """
        Apply ``behavior_type`` to the request type it is parameterized with.

        A response type left unbound is taken from the request type.

        Raises:
            TypeError: If the class does not bind a request type
        """
        args = resolve_generic_arguments(behavior_type, PipelineBehavior)
        if not args or not isinstance(args[0], type):
            raise TypeError(
                f"{behavior_type.__qualname__} does not bind a request type; "
                "use add_open_behavior for behaviors that apply to every request"
            )
        if len(args) > 1 and not isinstance(args[1], TypeVar):
            response_type = normalize_response_type(args[1])
        else:
            response_type = descriptor_cache.describe_request(args[0]).response_type
        contract = PipelineBehavior[args[0], response_type]
        if all(
            (added_contract, added) != (contract, behavior_type)
            for added_contract, added, _ in self._behaviors
        ):
            self._behaviors.append((contract, behavior_type, ServiceLifetime(lifetime)))
        return self

    def _collect_handlers(self) -> list[type]:
        handlers: list[type] = []
        for module in self._modules:
            handlers.extend(discover_handler_types(module))
        for package in self._packages:
            handlers.extend(discover_handler_types_in_package(package))
        handlers.extend(self._handlers)
        return list(dict.fromkeys(handlers))

    async def build(self) -> PublishStrategy:
        """
        Register behaviors and handlers with the container.

        Returns:
            The publish strategy the mediator should use
        """
        for behavior_type, lifetime in self._open_behaviors:
            await self.container.register_open(PipelineBehavior, behavior_type, lifetime)
        for contract, behavior_type, lifetime in self._behaviors:
            await self.container.register(contract, behavior_type, lifetime)

        handlers = self._collect_handlers()
        for handler_type in handlers:
            for contract in handler_contracts(handler_type):
                await self.container.register(contract, handler_type, self.handler_lifetime)

        self._logger.info(
            "Mediator configured",
            handlers=len(handlers),
            behaviors=len(self._open_behaviors) + len(self._behaviors),
            publish_strategy=self.publish_strategy.value,
            handler_lifetime=self.handler_lifetime.value,
        )
        return self.publish_strategy


async def add_mediator(
    container: Container,
    configure: Callable[[MediatorOptionsBuilder], Any] | None = None,
    settings: MediatorSettings | None = None,
) -> Container:
    """
    Configure handlers and behaviors and register the mediator.

    ``MediatorProtocol`` and ``Mediator`` are registered as transient
    factories, so a mediator resolved from a scope resolves handlers from
    that scope.

    Args:
        container: The container to configure
        configure: Optional callback receiving the builder
        settings: Defaults for the builder; loaded from the environment if None

    Returns:
        The container
    """
    builder = MediatorOptionsBuilder(container, settings)
    if configure is not None:
        configure(builder)
    strategy = await builder.build()

    def factory(provider: Any) -> Mediator:
        return Mediator(provider, strategy)

    await container.register_transient(MediatorProtocol, factory)
    await container.register_transient(Mediator, factory)
    return container

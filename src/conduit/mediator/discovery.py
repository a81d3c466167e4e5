# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Handler discovery.

Scans modules and packages for concrete request and notification handler
classes and works out the closed contracts each one implements.
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Any

from conduit.logging import get_logger
from conduit.mediator.contracts import NotificationHandler, RequestHandler
from conduit.mediator.descriptors import normalize_response_type, resolve_generic_arguments

logger = get_logger(__name__)


def is_handler_type(obj: Any) -> bool:
    """Whether ``obj`` is a concrete, fully parameterized handler class."""
    return (
        inspect.isclass(obj)
        and issubclass(obj, (RequestHandler, NotificationHandler))
        and not inspect.isabstract(obj)
        and not getattr(obj, "__parameters__", ())
    )


def handler_contracts(handler_type: type) -> list[Any]:
    """
    Return the closed contracts a handler class implements.

    Args:
        handler_type: A concrete handler class

    Returns:
        ``RequestHandler[Req, Resp]`` and/or ``NotificationHandler[N]``
        aliases usable as registration keys; empty if the class binds no
        request or notification type
    """
    contracts: list[Any] = []
    request_args = resolve_generic_arguments(handler_type, RequestHandler)
    if request_args and isinstance(request_args[0], type):
        response_type = normalize_response_type(
            request_args[1] if len(request_args) > 1 else None
        )
        contracts.append(RequestHandler[request_args[0], response_type])
    notification_args = resolve_generic_arguments(handler_type, NotificationHandler)
    if notification_args and isinstance(notification_args[0], type):
        contracts.append(NotificationHandler[notification_args[0]])
    return contracts


def discover_handler_types(module: ModuleType | str) -> list[type]:
    """
    Find handler classes defined in a module.

    Classes imported into the module from elsewhere are ignored, so a handler
    is only discovered in the module that defines it.

    Args:
        module: The module, or its dotted name

    Returns:
        Handler classes in definition order
    """
    if isinstance(module, str):
        module = importlib.import_module(module)
    found = [
        obj
        for _, obj in inspect.getmembers(module, inspect.isclass)
        if obj.__module__ == module.__name__ and is_handler_type(obj)
    ]
    found.sort(key=_definition_line)
    logger.debug(
        "Scanned module for handlers",
        module=module.__name__,
        handlers=[cls.__qualname__ for cls in found],
    )
    return found


def discover_handler_types_in_package(package: ModuleType | str) -> list[type]:
    """
    Find handler classes in a package and all of its subpackages.

    Args:
        package: The package, or its dotted name; a plain module is scanned
            on its own

    Returns:
        Handler classes, module by module

    Raises:
        ImportError: If a submodule cannot be imported
    """
    if isinstance(package, str):
        package = importlib.import_module(package)
    found = discover_handler_types(package)
    package_path = getattr(package, "__path__", None)
    if not package_path:
        return found

    for _, name, is_pkg in pkgutil.iter_modules(package_path):
        full_name = f"{package.__name__}.{name}"
        try:
            module = importlib.import_module(full_name)
        except ImportError as e:
            logger.error("Error importing module", module=full_name, error=str(e))
            raise
        if is_pkg:
            found.extend(discover_handler_types_in_package(module))
        else:
            found.extend(discover_handler_types(module))

    if found:
        logger.info(
            "Discovered handlers in package",
            package=package.__name__,
            handlers_found=len(found),
        )
    return found


def _definition_line(cls: type) -> int:
    try:
        return inspect.getsourcelines(cls)[1]
    except (OSError, TypeError):
        return 0

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit

"""
Public API for the conduit DI system.
"""

from __future__ import annotations

from conduit.di.container import Container
from conduit.di.errors import (
    AmbiguousServiceError,
    CircularDependencyError,
    ContainerDisposedError,
    DIError,
    ScopeError,
    ServiceCreationError,
    ServiceNotRegisteredError,
)
from conduit.di.registration import ServiceLifetime, ServiceRegistration
from conduit.di.resolution import Scope

__all__ = [
    "AmbiguousServiceError",
    "CircularDependencyError",
    "Container",
    "ContainerDisposedError",
    "DIError",
    "Scope",
    "ScopeError",
    "ServiceCreationError",
    "ServiceLifetime",
    "ServiceNotRegisteredError",
    "ServiceRegistration",
]

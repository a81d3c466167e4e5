# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
Error classes for the conduit DI system.

This module contains specialized error classes for the dependency injection
system, providing detailed error messages and context for DI-related failures.
"""

from __future__ import annotations

from typing import Any, Final

from conduit.errors.base import ConduitError, ErrorCategory, ErrorCode, ErrorSeverity

# Prefix for all DI error codes
ERROR_CODE_PREFIX: Final[str] = "DI"

DI: Final = ErrorCategory.get_or_create("DI")


def service_name(service_type: Any) -> str:
    """Readable name for a service key, including generic aliases."""
    if isinstance(service_type, type):
        return service_type.__qualname__
    return repr(service_type)


class DIError(ConduitError):
    """Base class for all DI-related errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        **context: Any,
    ) -> None:
        """Initialize a DI error.

        Args:
            message: Human-readable error message
            code: Error code without prefix (will be prefixed with DI_)
            severity: How severe this error is
            **context: Additional context information
        """
        full_code = f"{ERROR_CODE_PREFIX}_{code}" if code else f"{ERROR_CODE_PREFIX}_ERROR"
        super().__init__(
            message=message,
            code=ErrorCode.get_or_create(full_code, DI),
            severity=severity,
            context=context,
        )


class ServiceNotRegisteredError(DIError, LookupError):
    """Raised when a requested service has no registration."""

    def __init__(self, service_type: Any, **context: Any) -> None:
        self.service_type = service_type
        super().__init__(
            message=f"Service not found: {service_name(service_type)}",
            code="SERVICE_NOT_FOUND",
            service_type_name=service_name(service_type),
            **context,
        )


class AmbiguousServiceError(DIError):
    """Raised when a single instance is requested but several are registered."""

    def __init__(self, service_type: Any, count: int, **context: Any) -> None:
        self.service_type = service_type
        self.count = count
        super().__init__(
            message=(
                f"Expected exactly one registration for {service_name(service_type)}, "
                f"found {count}"
            ),
            code="AMBIGUOUS_SERVICE",
            service_type_name=service_name(service_type),
            registration_count=count,
            **context,
        )


class ServiceCreationError(DIError):
    """Raised when the container cannot create a service instance."""

    def __init__(
        self, service_type: Any, original_error: BaseException, **context: Any
    ) -> None:
        self.service_type = service_type
        self.original_error = original_error
        super().__init__(
            message=f"Failed to create service {service_name(service_type)}: {original_error}",
            code="SERVICE_CREATION",
            service_type_name=service_name(service_type),
            error_type=type(original_error).__name__,
            **context,
        )


class CircularDependencyError(DIError):
    """Raised when resolving a service re-enters its own resolution."""

    def __init__(self, dependency_chain: list[str], **context: Any) -> None:
        self.dependency_chain = dependency_chain
        super().__init__(
            message=f"Circular dependency detected: {' -> '.join(dependency_chain)}",
            code="CIRCULAR_DEPENDENCY",
            dependency_chain=dependency_chain,
            **context,
        )


class ScopeError(DIError):
    """Raised for invalid scope operations."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message=message, code="SCOPE_ERROR", **context)

    @classmethod
    def outside_scope(cls, service_type: Any) -> ScopeError:
        """Create an error for a scoped service resolved outside of a scope."""
        return cls(
            f"Cannot resolve scoped service {service_name(service_type)} outside of a scope",
            service_type_name=service_name(service_type),
        )


class ContainerDisposedError(DIError):
    """Raised when a disposed container or scope is used."""

    def __init__(self, operation: str, **context: Any) -> None:
        super().__init__(
            message=f"Cannot perform '{operation}': container is disposed",
            code="CONTAINER_DISPOSED",
            operation=operation,
            **context,
        )

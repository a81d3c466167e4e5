from conduit.di import (
    AmbiguousServiceError,
    CircularDependencyError,
    ContainerDisposedError,
    DIError,
    ScopeError,
    ServiceCreationError,
    ServiceNotRegisteredError,
)
from conduit.mediator import RequestHandler, Request


class Widget:
    pass


class Fetch(Request[int]):
    pass


def test_codes_are_prefixed_and_categorized():
    error = ServiceNotRegisteredError(Widget)
    assert isinstance(error, DIError)
    assert isinstance(error, LookupError)
    assert error.code == "DI_SERVICE_NOT_FOUND"
    assert error.category.name == "DI"
    assert error.context["service_type_name"] == "Widget"


def test_generic_alias_names_are_readable():
    error = AmbiguousServiceError(RequestHandler[Fetch, int], 2)
    assert "RequestHandler" in error.message
    assert "Fetch" in error.message
    assert error.context["registration_count"] == 2


def test_creation_error_keeps_original():
    original = RuntimeError("boom")
    error = ServiceCreationError(Widget, original)
    assert error.original_error is original
    assert error.context["error_type"] == "RuntimeError"
    assert "boom" in error.message


def test_circular_dependency_message_shows_chain():
    error = CircularDependencyError(["A", "B", "A"])
    assert error.message == "Circular dependency detected: A -> B -> A"
    assert error.code == "DI_CIRCULAR_DEPENDENCY"


def test_scope_and_disposal_errors():
    assert ScopeError.outside_scope(Widget).code == "DI_SCOPE_ERROR"
    error = ContainerDisposedError("resolve")
    assert error.context["operation"] == "resolve"
    assert "resolve" in error.message

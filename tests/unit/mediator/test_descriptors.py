import threading
from dataclasses import dataclass
from types import NoneType
from typing import Generic, TypeVar

import pytest

from conduit.mediator import (
    Command,
    DescriptorCache,
    Notification,
    NotificationHandler,
    PipelineBehavior,
    Query,
    Request,
    RequestHandler,
)
from conduit.mediator.descriptors import resolve_generic_arguments

T = TypeVar("T")


@dataclass(frozen=True)
class User:
    name: str


class GetUser(Query[User]):
    pass


class GetAdmin(GetUser):
    pass


class Ping(Request[None]):
    pass


class BarePing(Request):
    pass


class Wrapped(Request[T], Generic[T]):
    pass


class WrappedInt(Wrapped[int]):
    pass


class Tick(Notification):
    pass


def test_resolves_response_type_through_intermediate_generic():
    assert resolve_generic_arguments(GetUser, Request) == (User,)


def test_resolves_response_type_through_plain_subclass():
    assert resolve_generic_arguments(GetAdmin, Request) == (User,)


def test_resolves_substituted_type_variable():
    assert resolve_generic_arguments(WrappedInt, Request) == (int,)


def test_unrelated_class_has_no_arguments():
    assert resolve_generic_arguments(User, Request) is None


def test_request_descriptor_builds_closed_contracts():
    descriptor = DescriptorCache().describe_request(GetUser)
    assert descriptor.request_type is GetUser
    assert descriptor.response_type is User
    assert descriptor.handler_contract == RequestHandler[GetUser, User]
    assert descriptor.behavior_contract == PipelineBehavior[GetUser, User]
    assert not descriptor.is_void


@pytest.mark.parametrize("request_type", [Ping, BarePing])
def test_void_requests_respond_with_none_type(request_type):
    descriptor = DescriptorCache().describe_request(request_type)
    assert descriptor.response_type is NoneType
    assert descriptor.is_void
    assert descriptor.handler_contract == RequestHandler[request_type, None]


def test_subclass_keeps_its_own_routing_key():
    descriptor = DescriptorCache().describe_request(GetAdmin)
    assert descriptor.handler_contract == RequestHandler[GetAdmin, User]
    assert descriptor.handler_contract != RequestHandler[GetUser, User]


def test_notification_descriptor():
    descriptor = DescriptorCache().describe_notification(Tick)
    assert descriptor.notification_type is Tick
    assert descriptor.handler_contract == NotificationHandler[Tick]


def test_non_request_type_is_rejected():
    with pytest.raises(TypeError):
        DescriptorCache().describe_request(User)
    with pytest.raises(TypeError):
        DescriptorCache().describe_notification(User)


def test_descriptors_are_cached():
    cache = DescriptorCache()
    first = cache.describe_request(GetUser)
    assert cache.describe_request(GetUser) is first
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0
    assert cache.describe_request(GetUser) == first


def test_concurrent_lookups_share_one_descriptor():
    cache = DescriptorCache()
    seen = []
    barrier = threading.Barrier(8)

    def lookup():
        barrier.wait()
        seen.append(cache.describe_request(Ping))

    threads = [threading.Thread(target=lookup) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 8
    assert all(descriptor is seen[0] for descriptor in seen)


def test_command_and_query_are_requests():
    assert issubclass(Command, Request)
    assert issubclass(Query, Request)

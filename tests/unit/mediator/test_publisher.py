import asyncio

import pytest

from conduit.mediator import (
    CancellationRequestedError,
    CancellationToken,
    ConcurrentPublisher,
    Notification,
    NotificationHandler,
    NotificationPublishError,
    PublishStrategy,
    SequentialPublisher,
    create_publisher,
)


class Tick(Notification):
    pass


class Record(NotificationHandler[Tick]):
    def __init__(self, name, trail):
        self.name = name
        self.trail = trail

    async def handle(self, notification, cancellation):
        self.trail.append(self.name)


class Fail(NotificationHandler[Tick]):
    def __init__(self, error):
        self.error = error

    async def handle(self, notification, cancellation):
        raise self.error


def test_create_publisher_by_strategy():
    assert isinstance(create_publisher(PublishStrategy.SEQUENTIAL), SequentialPublisher)
    assert isinstance(create_publisher("concurrent"), ConcurrentPublisher)
    with pytest.raises(ValueError):
        create_publisher("broadcast")


@pytest.mark.asyncio
async def test_sequential_runs_in_registration_order():
    trail = []
    handlers = [Record("a", trail), Record("b", trail), Record("c", trail)]
    await SequentialPublisher().publish(handlers, Tick(), CancellationToken.none())
    assert trail == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_sequential_stops_at_first_failure():
    trail = []
    handlers = [Record("a", trail), Fail(RuntimeError("boom")), Record("c", trail)]
    with pytest.raises(RuntimeError, match="boom"):
        await SequentialPublisher().publish(handlers, Tick(), CancellationToken.none())
    assert trail == ["a"]


@pytest.mark.asyncio
async def test_sequential_checks_cancellation_before_each_handler(token_source):
    trail = []

    class CancelAfter(NotificationHandler[Tick]):
        async def handle(self, notification, cancellation):
            trail.append("cancel")
            token_source.cancel("shutting down")

    handlers = [Record("a", trail), CancelAfter(), Record("c", trail)]
    with pytest.raises(CancellationRequestedError) as exc:
        await SequentialPublisher().publish(handlers, Tick(), token_source.token)
    assert trail == ["a", "cancel"]
    assert exc.value.reason == "shutting down"


@pytest.mark.asyncio
async def test_concurrent_starts_all_handlers_before_any_finishes():
    started = []
    release = asyncio.Event()

    class Waiter(NotificationHandler[Tick]):
        def __init__(self, name):
            self.name = name

        async def handle(self, notification, cancellation):
            started.append(self.name)
            if len(started) == 3:
                release.set()
            await release.wait()

    handlers = [Waiter("a"), Waiter("b"), Waiter("c")]
    await asyncio.wait_for(
        ConcurrentPublisher().publish(handlers, Tick(), CancellationToken.none()),
        timeout=2,
    )
    assert sorted(started) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_concurrent_aggregates_every_failure():
    trail = []
    first, second = RuntimeError("one"), KeyError("two")
    handlers = [Fail(first), Record("ok", trail), Fail(second)]

    with pytest.raises(NotificationPublishError) as exc:
        await ConcurrentPublisher().publish(handlers, Tick(), CancellationToken.none())

    assert exc.value.exceptions == (first, second)
    assert exc.value.notification_type is Tick
    assert trail == ["ok"]


@pytest.mark.asyncio
async def test_concurrent_wraps_a_single_failure():
    error = RuntimeError("only")
    with pytest.raises(NotificationPublishError) as exc:
        await ConcurrentPublisher().publish(
            [Fail(error), Record("ok", [])], Tick(), CancellationToken.none()
        )
    assert exc.value.exceptions == (error,)


@pytest.mark.asyncio
async def test_concurrent_cancelled_before_start_raises_cancellation(token_source):
    trail = []
    token_source.cancel()
    with pytest.raises(CancellationRequestedError):
        await ConcurrentPublisher().publish(
            [Record("a", trail), Record("b", trail)], Tick(), token_source.token
        )
    assert trail == []


@pytest.mark.asyncio
async def test_concurrent_checks_token_before_each_handler(token_source):
    token_source.cancel()

    class Unchecked(NotificationHandler[Tick]):
        async def handle(self, notification, cancellation):
            raise RuntimeError("never reached")

    with pytest.raises(CancellationRequestedError):
        await ConcurrentPublisher().publish([Unchecked()], Tick(), token_source.token)


@pytest.mark.asyncio
async def test_concurrent_cancellation_mixed_with_failure_is_aggregated():
    cancelled = CancellationRequestedError("handler gave up")
    error = RuntimeError("boom")
    with pytest.raises(NotificationPublishError) as exc:
        await ConcurrentPublisher().publish(
            [Fail(cancelled), Fail(error)], Tick(), CancellationToken.none()
        )
    assert exc.value.exceptions == (cancelled, error)


@pytest.mark.asyncio
async def test_empty_handler_list_is_a_no_op():
    await SequentialPublisher().publish([], Tick(), CancellationToken.none())
    await ConcurrentPublisher().publish([], Tick(), CancellationToken.none())

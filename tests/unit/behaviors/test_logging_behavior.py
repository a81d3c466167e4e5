import logging

import pytest

from conduit.behaviors import LoggingBehavior
from conduit.logging import CONTEXT_ATTR
from conduit.mediator import CancellationToken, Query


class GetStock(Query[int]):
    pass


@pytest.mark.asyncio
async def test_logs_start_and_finish(caplog):
    caplog.set_level(logging.INFO, logger="conduit")

    async def next_handler():
        return 12

    assert await LoggingBehavior().handle(GetStock(), CancellationToken.none(), next_handler) == 12

    start, finish = caplog.records
    assert start.getMessage() == "Handling request"
    assert getattr(start, CONTEXT_ATTR) == {"request_type": "GetStock"}
    assert finish.getMessage() == "Handled request"
    assert "elapsed_ms" in getattr(finish, CONTEXT_ATTR)


@pytest.mark.asyncio
async def test_logs_and_reraises_failures(caplog):
    caplog.set_level(logging.INFO, logger="conduit")
    error = TimeoutError("warehouse offline")

    async def next_handler():
        raise error

    with pytest.raises(TimeoutError) as exc:
        await LoggingBehavior().handle(GetStock(), CancellationToken.none(), next_handler)

    assert exc.value is error
    failure = caplog.records[-1]
    assert failure.levelno == logging.ERROR
    assert failure.getMessage() == "Failed handling GetStock"
    assert failure.exc_info[1] is error


@pytest.mark.asyncio
async def test_uses_injected_logger():
    calls = []

    class FakeLogger:
        def info(self, msg, **kwargs):
            calls.append(msg)

        def error(self, msg, **kwargs):
            calls.append(msg)

    async def next_handler():
        return 1

    await LoggingBehavior(FakeLogger()).handle(GetStock(), CancellationToken.none(), next_handler)
    assert calls == ["Handling request", "Handled request"]

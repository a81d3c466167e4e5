import pytest

from conduit.mediator import CancellationToken, PipelineBehavior, PipelineComposer, Request, RequestHandler


class Echo(Request[str]):
    def __init__(self, text: str) -> None:
        self.text = text


class EchoHandler(RequestHandler[Echo, str]):
    def __init__(self, trail: list[str]) -> None:
        self.trail = trail

    async def handle(self, request, cancellation):
        self.trail.append("handler")
        return request.text


class SyncEchoHandler(RequestHandler[Echo, str]):
    def handle(self, request, cancellation):
        return request.text.upper()


class Recording(PipelineBehavior[Echo, str]):
    def __init__(self, name: str, trail: list[str]) -> None:
        self.name = name
        self.trail = trail

    async def handle(self, request, cancellation, next_handler):
        self.trail.append(f"{self.name}:before")
        response = await next_handler()
        self.trail.append(f"{self.name}:after")
        return f"{self.name}({response})"


class ShortCircuit(PipelineBehavior[Echo, str]):
    async def handle(self, request, cancellation, next_handler):
        return "cached"


class CallTwice(PipelineBehavior[Echo, str]):
    async def handle(self, request, cancellation, next_handler):
        first = await next_handler()
        second = await next_handler()
        return first + second


@pytest.mark.asyncio
async def test_no_behaviors_invokes_handler_directly():
    trail: list[str] = []
    pipeline = PipelineComposer.compose(Echo("hi"), CancellationToken.none(), EchoHandler(trail))
    assert await pipeline() == "hi"
    assert trail == ["handler"]


@pytest.mark.asyncio
async def test_first_behavior_is_outermost():
    trail: list[str] = []
    behaviors = [Recording("b1", trail), Recording("b2", trail)]
    pipeline = PipelineComposer.compose(
        Echo("x"), CancellationToken.none(), EchoHandler(trail), behaviors
    )

    assert await pipeline() == "b1(b2(x))"
    assert trail == ["b1:before", "b2:before", "handler", "b2:after", "b1:after"]


@pytest.mark.asyncio
async def test_nothing_runs_until_awaited():
    trail: list[str] = []
    PipelineComposer.compose(
        Echo("x"), CancellationToken.none(), EchoHandler(trail), [Recording("b1", trail)]
    )
    assert trail == []


@pytest.mark.asyncio
async def test_short_circuit_skips_handler_and_inner_behaviors():
    trail: list[str] = []
    behaviors = [Recording("outer", trail), ShortCircuit(), Recording("inner", trail)]
    pipeline = PipelineComposer.compose(
        Echo("x"), CancellationToken.none(), EchoHandler(trail), behaviors
    )

    assert await pipeline() == "outer(cached)"
    assert trail == ["outer:before", "outer:after"]


@pytest.mark.asyncio
async def test_behavior_may_call_next_more_than_once():
    trail: list[str] = []
    pipeline = PipelineComposer.compose(
        Echo("ab"), CancellationToken.none(), EchoHandler(trail), [CallTwice()]
    )
    assert await pipeline() == "abab"
    assert trail == ["handler", "handler"]


@pytest.mark.asyncio
async def test_composing_twice_is_equivalent():
    first_trail: list[str] = []
    second_trail: list[str] = []

    def run(trail):
        return PipelineComposer.compose(
            Echo("x"),
            CancellationToken.none(),
            EchoHandler(trail),
            [Recording("b1", trail), Recording("b2", trail)],
        )

    assert await run(first_trail)() == await run(second_trail)()
    assert first_trail == second_trail


@pytest.mark.asyncio
async def test_sync_handler_result_is_accepted():
    pipeline = PipelineComposer.compose(Echo("hi"), CancellationToken.none(), SyncEchoHandler())
    assert await pipeline() == "HI"


@pytest.mark.asyncio
async def test_same_token_reaches_every_stage(token_source):
    seen = []

    class Spy(PipelineBehavior[Echo, str]):
        async def handle(self, request, cancellation, next_handler):
            seen.append(cancellation)
            return await next_handler()

    class SpyHandler(RequestHandler[Echo, str]):
        async def handle(self, request, cancellation):
            seen.append(cancellation)
            return ""

    token = token_source.token
    await PipelineComposer.compose(Echo(""), token, SpyHandler(), [Spy(), Spy()])()
    assert seen == [token, token, token]
    assert all(t is token for t in seen)


@pytest.mark.asyncio
async def test_handler_exception_propagates_through_behaviors():
    trail: list[str] = []

    class Boom(RequestHandler[Echo, str]):
        async def handle(self, request, cancellation):
            raise KeyError("missing")

    pipeline = PipelineComposer.compose(
        Echo("x"), CancellationToken.none(), Boom(), [Recording("b1", trail)]
    )
    with pytest.raises(KeyError):
        await pipeline()
    assert trail == ["b1:before"]

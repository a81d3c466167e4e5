"""End-to-end order placement through the container, behaviors and handlers."""

import logging
from dataclasses import dataclass

import pytest

from conduit.behaviors import LoggingBehavior, ValidationBehavior
from conduit.mediator import (
    Command,
    Event,
    Mediator,
    NotificationHandler,
    PipelineBehavior,
    PublishStrategy,
    RequestHandler,
    RequestValidationError,
)


@dataclass(frozen=True)
class OrderId:
    value: int


@dataclass(frozen=True)
class PlaceOrder(Command[OrderId]):
    customer_id: int | None
    sku: str | None

    def validate(self) -> None:
        missing = [name for name in ("customer_id", "sku") if getattr(self, name) is None]
        if missing:
            raise ValueError(f"missing required field(s): {', '.join(missing)}")


@dataclass(frozen=True)
class OrderPlaced(Event):
    order_id: OrderId


class PlaceOrderHandler(RequestHandler[PlaceOrder, OrderId]):
    calls = 0

    async def handle(self, request, cancellation):
        type(self).calls += 1
        return OrderId(100 + type(self).calls)


@pytest.fixture(autouse=True)
def _reset_handler_calls():
    PlaceOrderHandler.calls = 0


async def _register_order_pipeline(container):
    await container.register_transient(
        PipelineBehavior[PlaceOrder, OrderId], ValidationBehavior
    )
    await container.register_transient(PipelineBehavior[PlaceOrder, OrderId], LoggingBehavior)
    await container.register_transient(RequestHandler[PlaceOrder, OrderId], PlaceOrderHandler)


@pytest.mark.asyncio
async def test_valid_order_returns_order_id(container, caplog):
    caplog.set_level(logging.INFO, logger="conduit")
    await _register_order_pipeline(container)

    order_id = await Mediator(container).send(PlaceOrder(customer_id=7, sku="BOOK-1"))

    assert order_id == OrderId(101)
    assert PlaceOrderHandler.calls == 1
    messages = [r.getMessage() for r in caplog.records if r.name == "conduit.behaviors.logging"]
    assert messages == ["Handling request", "Handled request"]


@pytest.mark.asyncio
async def test_invalid_order_short_circuits_before_logging_and_handler(container, caplog):
    caplog.set_level(logging.INFO, logger="conduit")
    await _register_order_pipeline(container)

    with pytest.raises(RequestValidationError) as exc:
        await Mediator(container).send(PlaceOrder(customer_id=7, sku=None))

    assert exc.value.errors == ["missing required field(s): sku"]
    assert PlaceOrderHandler.calls == 0
    assert not [r for r in caplog.records if r.name == "conduit.behaviors.logging"]


@pytest.mark.asyncio
async def test_order_placed_stops_after_failed_email(container):
    trail = []
    email_error = ConnectionError("smtp unavailable")

    class SendEmail(NotificationHandler[OrderPlaced]):
        async def handle(self, notification, cancellation):
            trail.append("email")
            raise email_error

    class UpdateInventory(NotificationHandler[OrderPlaced]):
        async def handle(self, notification, cancellation):
            trail.append("inventory")

    await container.register_transient(NotificationHandler[OrderPlaced], SendEmail)
    await container.register_transient(NotificationHandler[OrderPlaced], UpdateInventory)

    with pytest.raises(ConnectionError) as exc:
        await Mediator(container, PublishStrategy.SEQUENTIAL).publish(OrderPlaced(OrderId(1)))

    assert exc.value is email_error
    assert trail == ["email"]

from conduit.mediator import NotificationHandler

from conduit_samples.messages import OrderPlaced
from conduit_samples.orders import PlaceOrderHandler  # noqa: F401  re-exported, not defined here

SENT: list[str] = []


class SendConfirmationEmail(NotificationHandler[OrderPlaced]):
    async def handle(self, notification, cancellation):
        SENT.append(f"email:{notification.order_id.value}")


class NotifyWarehouse(NotificationHandler[OrderPlaced]):
    async def handle(self, notification, cancellation):
        SENT.append(f"warehouse:{notification.order_id.value}")


class NotAHandler:
    async def handle(self, notification, cancellation):
        raise AssertionError("never registered")

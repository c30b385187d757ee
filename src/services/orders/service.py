import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from src.services.orders.broadcaster import OrderBroadcaster
from src.shared.errors import InternalError, NotFoundError, ServiceError
from src.services.orders.notifier import NotificationDispatcher
from src.services.orders.repository import OrderRepository
from src.services.orders.state_machine import OrderStateMachine
from src.shared.events.order_events import OrderCreatedEvent, OrderStatusEvent, OrderStreamEvent
from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import CreateOrderRequest, OrderDTO, OrderWithItemsDTO
from src.common.logger import log_error, log_info
from src.common.constants import TypeMsg


class OrderService:
    """
    Order lifecycle: every mutation is committed first, then published to live
    streams and handed to the notifier without waiting for it.
    """

    def __init__(
        self,
        repository: OrderRepository,
        broadcaster: OrderBroadcaster,
        notifier: NotificationDispatcher,
        list_limit: int = 50,
    ):
        self.repository = repository
        self.broadcaster = broadcaster
        self.notifier = notifier
        self.list_limit = list_limit

    @asynccontextmanager
    async def _store_errors(self, message: str) -> AsyncIterator[None]:
        # Domain errors pass through, anything else is hidden behind a generic message
        try:
            yield
        except ServiceError:
            raise
        except Exception as e:
            await log_error(f"{message}: {e}", exc_info=True)
            raise InternalError(message) from e

    async def place_order(self, owner: Optional[str], request: CreateOrderRequest) -> OrderDTO:
        async with self._store_errors("Error creating order"):
            order = await self.repository.create_order(request.restaurant_id, owner, request.items)

        await log_info(
            f"Order {order.id} created for restaurant {order.restaurant_id}, total {order.total_cents}",
            type_msg=TypeMsg.INFO,
        )
        await self._publish(order.id, OrderCreatedEvent(order=order))
        return order

    async def list_my_orders(self, owner: Optional[str]) -> List[OrderDTO]:
        async with self._store_errors("Error listing orders"):
            return await self.repository.list_orders_by_owner(owner, limit=self.list_limit)

    async def list_partner_orders(self) -> List[OrderDTO]:
        async with self._store_errors("Error listing orders"):
            return await self.repository.list_recent_orders(limit=self.list_limit)

    async def get_order_with_items(self, order_id: int) -> OrderWithItemsDTO:
        async with self._store_errors("Error fetching order"):
            order = await self.repository.get_order(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            items = await self.repository.list_order_items(order_id)
        return OrderWithItemsDTO(**order.model_dump(), items=items)

    async def reorder(self, order_id: int, owner: Optional[str]) -> OrderDTO:
        async with self._store_errors("Error reordering"):
            order = await self.repository.duplicate_order(order_id, owner)

        await log_info(f"Order {order_id} reordered as {order.id}", type_msg=TypeMsg.INFO)
        await self._publish(order.id, OrderCreatedEvent(order=order))
        return order

    async def cancel_order(self, order_id: int) -> OrderStatus:
        async with self._store_errors("Error cancelling order"):
            order = await self.repository.get_order(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            new_status = OrderStateMachine.ensure_can_cancel(order.status)
            await self.repository.update_status(order_id, new_status)

        await self._after_status_change(
            order_id, new_status, "Order cancelled", f"Order #{order_id} was cancelled"
        )
        return new_status

    async def pay_order(self, order_id: int) -> OrderStatus:
        async with self._store_errors("Error paying order"):
            order = await self.repository.get_order(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            new_status = OrderStateMachine.ensure_can_pay(order.status)
            await self.repository.update_status(order_id, new_status)

        await self._after_status_change(
            order_id, new_status, "Payment received", f"Order #{order_id} is paid"
        )
        return new_status

    async def set_status(self, order_id: int, status: OrderStatus) -> OrderStatus:
        """Partner override: any known status, no transition guard."""
        status = OrderStatus(status)
        async with self._store_errors("Error updating status"):
            await self.repository.update_status(order_id, status)

        await self._after_status_change(
            order_id, status, "Order update", f"Order #{order_id} is {status.value}"
        )
        return status

    async def open_stream(self, order_id: int) -> asyncio.Queue:
        return await self.broadcaster.subscribe(order_id)

    async def close_stream(self, order_id: int, channel: asyncio.Queue) -> None:
        await self.broadcaster.unsubscribe(order_id, channel)

    async def _after_status_change(
        self, order_id: int, status: OrderStatus, title: str, body: str
    ) -> None:
        await log_info(f"Order {order_id} -> {status.value}", type_msg=TypeMsg.INFO)
        await self._publish(order_id, OrderStatusEvent(status=status))
        self.notifier.dispatch(title, body)

    async def _publish(self, order_id: int, event: OrderStreamEvent) -> None:
        delivered = await self.broadcaster.publish(order_id, event)
        if delivered:
            await log_info(
                f"Event {event.type} for order {order_id} sent to {delivered} stream(s)",
                type_msg=TypeMsg.DEBUG,
            )

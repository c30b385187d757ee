"""
Тесты для OrderBroadcaster.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from src.shared.events.order_events import OrderCreatedEvent, OrderStatusEvent
from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import OrderDTO
from src.services.orders.broadcaster import OrderBroadcaster


def status_event(status: OrderStatus = OrderStatus.PAID) -> OrderStatusEvent:
    return OrderStatusEvent(status=status)


class TestOrderBroadcaster:

    @pytest.mark.asyncio
    async def test_subscriber_receives_events_for_its_order_only(self):
        broadcaster = OrderBroadcaster()
        watching_x = await broadcaster.subscribe(1)
        watching_y = await broadcaster.subscribe(2)

        delivered = await broadcaster.publish(1, status_event())

        assert delivered == 1
        assert watching_x.get_nowait().status == OrderStatus.PAID
        assert watching_y.empty()

    @pytest.mark.asyncio
    async def test_publish_fans_out_to_all_subscribers(self):
        broadcaster = OrderBroadcaster()
        queues = [await broadcaster.subscribe(5) for _ in range(3)]

        assert await broadcaster.publish(5, status_event(OrderStatus.READY)) == 3
        assert all(q.get_nowait().status == OrderStatus.READY for q in queues)

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        broadcaster = OrderBroadcaster()
        assert await broadcaster.publish(77, status_event()) == 0

    @pytest.mark.asyncio
    async def test_int_and_str_ids_share_a_channel(self):
        broadcaster = OrderBroadcaster()
        queue = await broadcaster.subscribe("9")

        assert await broadcaster.publish(9, status_event()) == 1
        assert not queue.empty()

    @pytest.mark.asyncio
    async def test_no_replay_for_late_subscribers(self):
        broadcaster = OrderBroadcaster()
        await broadcaster.publish(1, status_event())

        late = await broadcaster.subscribe(1)

        assert late.empty()

    @pytest.mark.asyncio
    async def test_unsubscribe_is_idempotent_and_drops_empty_sets(self):
        broadcaster = OrderBroadcaster()
        queue = await broadcaster.subscribe(1)

        await broadcaster.unsubscribe(1, queue)
        await broadcaster.unsubscribe(1, queue)

        assert broadcaster.subscriber_count(1) == 0
        assert broadcaster.get_stats()["orders_watched"] == 0
        assert await broadcaster.publish(1, status_event()) == 0

    @pytest.mark.asyncio
    async def test_full_queue_is_skipped_without_blocking_others(self):
        broadcaster = OrderBroadcaster(queue_size=1)
        slow = await broadcaster.subscribe(1)
        fast = await broadcaster.subscribe(1)

        await broadcaster.publish(1, status_event(OrderStatus.ACCEPTED))
        fast.get_nowait()

        delivered = await broadcaster.publish(1, status_event(OrderStatus.PREPARING))

        assert delivered == 1
        assert fast.get_nowait().status == OrderStatus.PREPARING
        assert slow.get_nowait().status == OrderStatus.ACCEPTED
        assert broadcaster.get_stats()["total_dropped"] == 1

    @pytest.mark.asyncio
    async def test_concurrent_subscribe_unsubscribe_publish(self):
        broadcaster = OrderBroadcaster()

        async def churn(order_id: int) -> None:
            for _ in range(50):
                queue = await broadcaster.subscribe(order_id)
                await broadcaster.publish(order_id, status_event())
                await broadcaster.unsubscribe(order_id, queue)

        await asyncio.gather(*(churn(i % 3) for i in range(10)))

        stats = broadcaster.get_stats()
        assert stats["active_streams"] == 0
        assert stats["orders_watched"] == 0
        assert stats["total_subscriptions"] == 500

    @pytest.mark.asyncio
    async def test_created_event_wire_format(self):
        order = OrderDTO(
            id=3,
            restaurant_id=7,
            user_email="alice@example.com",
            status=OrderStatus.NEW,
            total_cents=3000,
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        frame = OrderCreatedEvent(order=order).to_sse()

        assert frame.startswith('data: {"type":"created","order":{"id":3')
        assert frame.endswith("\n\n")

    def test_status_event_wire_format(self):
        assert status_event().to_json() == '{"type":"status","status":"PAID"}'

"""
Тесты SSE-генератора live-стрима заказа.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.shared.events.order_events import OrderStatusEvent
from src.shared.models.enums import OrderStatus
from src.services.orders.broadcaster import OrderBroadcaster
from src.services.orders.routes import order_event_stream
from src.services.orders.service import OrderService


@pytest.fixture
def broadcaster():
    return OrderBroadcaster()


@pytest.fixture
def service(broadcaster, mock_notifier):
    return OrderService(AsyncMock(), broadcaster, mock_notifier)


def fake_request(disconnected_after: int = 1000) -> MagicMock:
    """Запрос, который «отключается» после N проверок."""
    request = MagicMock()
    request.is_disconnected = AsyncMock(
        side_effect=[False] * disconnected_after + [True] * 1000
    )
    return request


class TestOrderEventStream:

    @pytest.mark.asyncio
    async def test_first_frame_is_retry_hint(self, service):
        stream = order_event_stream(fake_request(), service, 42, retry_ms=5000, keepalive_seconds=1)

        assert await stream.__anext__() == "retry: 5000\n\n"
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_published_event_becomes_data_frame(self, service, broadcaster):
        stream = order_event_stream(fake_request(), service, 42, retry_ms=5000, keepalive_seconds=1)
        await stream.__anext__()

        await broadcaster.publish(42, OrderStatusEvent(status=OrderStatus.PAID))
        frame = await asyncio.wait_for(stream.__anext__(), timeout=1)

        assert frame == 'data: {"type":"status","status":"PAID"}\n\n'
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_other_orders_are_not_streamed(self, service, broadcaster):
        stream = order_event_stream(fake_request(), service, 42, retry_ms=5000, keepalive_seconds=0.05)
        await stream.__anext__()

        await broadcaster.publish(43, OrderStatusEvent(status=OrderStatus.PAID))

        assert await asyncio.wait_for(stream.__anext__(), timeout=1) == ": keep-alive\n\n"
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_keepalive_when_idle(self, service):
        stream = order_event_stream(fake_request(), service, 42, retry_ms=5000, keepalive_seconds=0.01)
        await stream.__anext__()

        assert await stream.__anext__() == ": keep-alive\n\n"
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_disconnect_unsubscribes(self, service, broadcaster):
        stream = order_event_stream(
            fake_request(disconnected_after=0), service, 42, retry_ms=5000, keepalive_seconds=1
        )
        await stream.__anext__()
        assert broadcaster.subscriber_count(42) == 1

        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

        assert broadcaster.subscriber_count(42) == 0

    @pytest.mark.asyncio
    async def test_closing_generator_unsubscribes(self, service, broadcaster):
        stream = order_event_stream(fake_request(), service, 42, retry_ms=5000, keepalive_seconds=1)
        await stream.__anext__()

        await stream.aclose()

        assert broadcaster.subscriber_count(42) == 0

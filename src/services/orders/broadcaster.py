# src/services/orders/broadcaster.py
"""
Рассылка событий заказа подписчикам live-стрима.
Каждый подписчик получает свою очередь; рассылка не блокируется медленными клиентами.
"""

from __future__ import annotations

import asyncio
from typing import Any

from src.common.logger import log_warning
from src.shared.events.order_events import OrderStreamEvent


class OrderBroadcaster:
    """
    Реестр подписчиков по идентификатору заказа (in-process).

    Поддерживает:
    - Подписку/отписку на события заказа
    - Рассылку события всем текущим подписчикам заказа
    - Статистику доставленных и пропущенных сообщений
    """

    def __init__(self, queue_size: int = 100) -> None:
        # order_id -> set of subscriber queues
        self._subscribers: dict[str, set[asyncio.Queue[OrderStreamEvent]]] = {}
        self._lock = asyncio.Lock()
        self._queue_size = queue_size

        # Для статистики
        self._total_subscriptions: int = 0
        self._total_delivered: int = 0
        self._total_dropped: int = 0

    @staticmethod
    def _key(order_id: int | str) -> str:
        return str(order_id)

    async def subscribe(self, order_id: int | str) -> asyncio.Queue[OrderStreamEvent]:
        """Регистрирует нового подписчика и возвращает его очередь событий."""
        queue: asyncio.Queue[OrderStreamEvent] = asyncio.Queue(maxsize=self._queue_size)
        async with self._lock:
            self._subscribers.setdefault(self._key(order_id), set()).add(queue)
            self._total_subscriptions += 1
        return queue

    async def unsubscribe(
        self,
        order_id: int | str,
        queue: asyncio.Queue[OrderStreamEvent],
    ) -> None:
        """Удаляет подписчика. Повторный вызов безопасен."""
        key = self._key(order_id)
        async with self._lock:
            queues = self._subscribers.get(key)
            if queues is None:
                return
            queues.discard(queue)
            if not queues:
                del self._subscribers[key]

    async def publish(self, order_id: int | str, event: OrderStreamEvent) -> int:
        """
        Отправляет событие всем подписчикам заказа.

        Returns:
            Количество подписчиков, получивших событие
        """
        key = self._key(order_id)
        async with self._lock:
            # Снимок: подписка/отписка во время рассылки не влияет на неё
            targets = list(self._subscribers.get(key, ()))

        delivered = 0
        for queue in targets:
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                self._total_dropped += 1
                await log_warning(
                    f"Очередь подписчика заказа {key} переполнена, событие {event.type} пропущено"
                )

        self._total_delivered += delivered
        return delivered

    def subscriber_count(self, order_id: int | str) -> int:
        return len(self._subscribers.get(self._key(order_id), ()))

    def get_stats(self) -> dict[str, Any]:
        """Статистика рассылки."""
        return {
            "active_streams": sum(len(q) for q in self._subscribers.values()),
            "orders_watched": len(self._subscribers),
            "total_subscriptions": self._total_subscriptions,
            "total_delivered": self._total_delivered,
            "total_dropped": self._total_dropped,
        }

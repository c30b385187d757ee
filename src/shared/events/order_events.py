# src/shared/events/order_events.py
"""
События live-стрима заказа.
Формат на проводе: {"type": "created", "order": {...}} или {"type": "status", "status": "PAID"}.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel

from src.shared.models.enums import OrderStatus
from src.shared.models.order_dto import OrderDTO


class OrderStreamEvent(BaseModel):
    """Базовый класс событий, рассылаемых подписчикам заказа."""

    type: str

    def to_json(self) -> str:
        """Сериализует событие в JSON."""
        return self.model_dump_json()

    def to_sse(self) -> str:
        """Кадр Server-Sent Events."""
        return f"data: {self.to_json()}\n\n"


class OrderCreatedEvent(OrderStreamEvent):
    """Событие: заказ создан (в т.ч. повтором заказа)."""

    type: Literal["created"] = "created"
    order: OrderDTO


class OrderStatusEvent(OrderStreamEvent):
    """Событие: статус заказа изменён."""

    type: Literal["status"] = "status"
    status: OrderStatus


OrderEvent = Union[OrderCreatedEvent, OrderStatusEvent]

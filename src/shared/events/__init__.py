# src/shared/events/__init__.py
"""
События, передаваемые подписчикам live-стрима заказов.
"""

from src.shared.events.order_events import (
    OrderStreamEvent,
    OrderCreatedEvent,
    OrderStatusEvent,
    OrderEvent,
)

__all__ = [
    "OrderStreamEvent",
    "OrderCreatedEvent",
    "OrderStatusEvent",
    "OrderEvent",
]

"""
Orders Service.

Заказы ресторанов: создание, повтор, оплата, отмена, смена статуса партнёром
и live-обновления через Server-Sent Events.
"""

__all__: list[str] = []

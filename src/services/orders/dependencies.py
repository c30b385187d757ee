# src/services/orders/dependencies.py
"""
Dependency Injection для Orders Service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infra.database import DatabaseManager
    from src.services.orders.broadcaster import OrderBroadcaster
    from src.services.orders.notifier import NotificationDispatcher
    from src.services.orders.payments import PaymentGateway
    from src.services.orders.service import OrderService


# Синглтоны для инфраструктуры
_db: "DatabaseManager | None" = None
_broadcaster: "OrderBroadcaster | None" = None
_notifier: "NotificationDispatcher | None" = None

# Синглтоны для сервисов
_order_service: "OrderService | None" = None
_payment_gateway: "PaymentGateway | None" = None


async def init_dependencies(db: "DatabaseManager") -> None:
    """Инициализировать зависимости при старте приложения."""
    global _db, _broadcaster, _notifier
    from src.config import settings
    from src.services.orders.broadcaster import OrderBroadcaster
    from src.services.orders.notifier import NotificationDispatcher

    _db = db
    _broadcaster = OrderBroadcaster(queue_size=settings.orders.STREAM_QUEUE_SIZE)
    _notifier = NotificationDispatcher(
        base_url=settings.notifications.NOTIFICATIONS_BASE,
        timeout=settings.notifications.NOTIFY_TIMEOUT_SECONDS,
    )


def get_db() -> "DatabaseManager":
    """Получить менеджер базы данных."""
    if _db is None:
        raise RuntimeError("База данных не инициализирована. Вызовите init_dependencies()")
    return _db


def get_broadcaster() -> "OrderBroadcaster":
    """Получить реестр подписчиков live-стрима."""
    if _broadcaster is None:
        raise RuntimeError("Broadcaster не инициализирован. Вызовите init_dependencies()")
    return _broadcaster


def get_notifier() -> "NotificationDispatcher":
    """Получить клиент сервиса уведомлений."""
    if _notifier is None:
        raise RuntimeError("Notifier не инициализирован. Вызовите init_dependencies()")
    return _notifier


def get_order_service() -> "OrderService":
    """Получить сервис заказов."""
    global _order_service

    if _order_service is None:
        from src.config import settings
        from src.services.orders.repository import OrderRepository
        from src.services.orders.service import OrderService
        _order_service = OrderService(
            repository=OrderRepository(get_db()),
            broadcaster=get_broadcaster(),
            notifier=get_notifier(),
            list_limit=settings.orders.ORDERS_LIST_LIMIT,
        )

    return _order_service


def get_payment_gateway() -> "PaymentGateway":
    """Получить шлюз инициации платежей."""
    global _payment_gateway

    if _payment_gateway is None:
        from src.config import settings
        from src.services.orders.payments import PaymentGateway
        _payment_gateway = PaymentGateway(
            enabled=settings.payments.ENABLE_PAYMENTS,
            redirect_base=settings.payments.PAYMENTS_REDIRECT_BASE,
            providers=settings.payments.SUPPORTED_PROVIDERS,
        )

    return _payment_gateway


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _db, _broadcaster, _notifier, _order_service, _payment_gateway
    if _notifier is not None:
        await _notifier.aclose()
    _order_service = None
    _payment_gateway = None
    _notifier = None
    _broadcaster = None
    _db = None

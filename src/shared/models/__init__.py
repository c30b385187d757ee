# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели для межсервисного взаимодействия.
"""

from src.shared.models.enums import OrderStatus, PaymentProvider
from src.shared.models.order_dto import (
    OrderItemIn,
    CreateOrderRequest,
    OrderDTO,
    OrderItemDTO,
    OrderWithItemsDTO,
    UpdateStatusRequest,
    PaymentInitiateRequest,
    PaymentRedirectDTO,
    PushNotificationRequest,
    PushTokenRegisterRequest,
)
from src.shared.models.common import ApiResponse, HealthStatus

__all__ = [
    # Enums
    "OrderStatus",
    "PaymentProvider",
    # Orders
    "OrderItemIn",
    "CreateOrderRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderWithItemsDTO",
    "UpdateStatusRequest",
    # Payments
    "PaymentInitiateRequest",
    "PaymentRedirectDTO",
    # Notifications
    "PushNotificationRequest",
    "PushTokenRegisterRequest",
    # Common
    "ApiResponse",
    "HealthStatus",
]

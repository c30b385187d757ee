from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.shared.models.enums import OrderStatus


class OrderItemIn(BaseModel):
    """Позиция заказа во входящем запросе."""
    name: str = Field(..., min_length=1)
    price_cents: int = Field(..., ge=0)
    qty: int = Field(1, ge=1)


class CreateOrderRequest(BaseModel):
    restaurant_id: int = Field(..., gt=0)
    items: List[OrderItemIn] = Field(..., min_length=1)


class OrderDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    user_email: Optional[str] = None
    status: OrderStatus = OrderStatus.NEW
    total_cents: int = 0
    created_at: datetime


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    name: str
    price_cents: int
    qty: int

    @property
    def line_total(self) -> int:
        return self.price_cents * self.qty


class OrderWithItemsDTO(OrderDTO):
    items: List[OrderItemDTO] = Field(default_factory=list)


class UpdateStatusRequest(BaseModel):
    """Запрос партнёра на смену статуса. Неизвестные статусы отклоняются."""
    status: OrderStatus


class PaymentInitiateRequest(BaseModel):
    # Оба поля опциональны на уровне схемы: отсутствие проверяет сервис (400 с понятным текстом)
    provider: Optional[str] = None
    order_id: Optional[int] = None


class PaymentRedirectDTO(BaseModel):
    provider: str
    order_id: int
    redirectUrl: str


class PushNotificationRequest(BaseModel):
    title: str = ""
    body: str = ""


class PushTokenRegisterRequest(BaseModel):
    token: Optional[str] = None
    platform: Optional[str] = None

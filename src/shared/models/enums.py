from enum import Enum


class OrderStatus(str, Enum):
    """Статусы заказа (значения совпадают с хранимыми в БД)."""
    NEW = "NEW"
    ACCEPTED = "ACCEPTED"
    PREPARING = "PREPARING"
    READY = "READY"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        return self.value


class PaymentProvider(str, Enum):
    """Поддерживаемые платёжные провайдеры."""
    STRIPE = "stripe"
    PAYPAL = "paypal"
    TELR = "telr"
    PAYTABS = "paytabs"
    APS = "aps"
    UPI = "upi"
    PHONEPE = "phonepe"
    PAYTM = "paytm"

    def __str__(self) -> str:
        return self.value

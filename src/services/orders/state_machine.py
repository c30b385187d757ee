from src.shared.models.enums import OrderStatus
from src.shared.errors import InvalidTransitionError


class OrderStateMachine:
    """
    Guarded transitions of the order lifecycle.

    Only pay and cancel are guarded. Partner status updates bypass these rules
    and may overwrite any status, including PAID and CANCELLED.
    """

    INITIAL_STATUS = OrderStatus.NEW

    PAYABLE_FROM = frozenset({OrderStatus.NEW})
    CANCELLABLE_FROM = frozenset({OrderStatus.NEW, OrderStatus.ACCEPTED})

    @staticmethod
    def _coerce(status) -> OrderStatus | None:
        try:
            return OrderStatus(status)
        except ValueError:
            return None

    @classmethod
    def can_pay(cls, current_status) -> bool:
        return cls._coerce(current_status) in cls.PAYABLE_FROM

    @classmethod
    def can_cancel(cls, current_status) -> bool:
        return cls._coerce(current_status) in cls.CANCELLABLE_FROM

    @classmethod
    def ensure_can_pay(cls, current_status) -> OrderStatus:
        if not cls.can_pay(current_status):
            raise InvalidTransitionError("Only NEW orders can be paid")
        return OrderStatus.PAID

    @classmethod
    def ensure_can_cancel(cls, current_status) -> OrderStatus:
        if not cls.can_cancel(current_status):
            raise InvalidTransitionError("Cannot cancel at current status")
        return OrderStatus.CANCELLED

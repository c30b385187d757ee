# src/shared/errors.py
"""
Исключения сервисов.
Каждое несёт HTTP-код и короткое сообщение, которое безопасно показывать клиенту.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Отсутствующие или некорректные входные данные."""
    status_code = 400
    default_message = "Invalid payload"


class AuthError(ServiceError):
    """Нет токена или токен невалиден."""
    status_code = 401
    default_message = "Invalid token"


class ForbiddenError(ServiceError):
    """Недостаточно прав (роль/владение)."""
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    """Ресурс не найден."""
    status_code = 404
    default_message = "Not found"


class InvalidTransitionError(ServiceError):
    """Переход статуса запрещён правилами жизненного цикла."""
    status_code = 400
    default_message = "Invalid status transition"


class ServiceUnavailableError(ServiceError):
    """Функция отключена администратором."""
    status_code = 503
    default_message = "Service unavailable"


class InternalError(ServiceError):
    """Ошибка хранилища или непредвиденный сбой (детали скрыты)."""
    status_code = 500

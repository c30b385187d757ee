# src/services/notifications/app.py
"""
FastAPI приложение для сервиса уведомлений.
Хранит push-токены устройств и принимает запросы на рассылку от сервиса заказов.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.infra.database import DatabaseManager, close_db, get_db, init_db
from src.services.notifications.repository import PushTokenRepository
from src.shared.auth import UserClaims, get_current_user
from src.shared.errors import InternalError, ValidationError
from src.shared.handlers import register_exception_handlers
from src.shared.models.common import ApiResponse, HealthStatus
from src.shared.models.order_dto import PushNotificationRequest, PushTokenRegisterRequest


SERVICE_NAME = "notifications"


def get_push_repository() -> PushTokenRepository:
    """Репозиторий push-токенов поверх общего пула БД."""
    return PushTokenRepository(get_db())


PushRepository = Annotated[PushTokenRepository, Depends(get_push_repository)]


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()
    await init_db()
    await log_info(
        f"Notifications сервис запущен на порту {settings.deployment.NOTIFICATIONS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    yield

    await close_db()
    await log_info("Notifications сервис остановлен", type_msg=TypeMsg.INFO)


app = FastAPI(
    title="Notifications Service",
    description="Реестр push-токенов и рассылка push-уведомлений",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)


# =============================================================================
# ЭНДПОИНТЫ
# =============================================================================

@app.get("/health")
async def health_check() -> dict:
    """Проверка здоровья сервиса."""
    db: DatabaseManager = get_db()
    db_ok = db.is_connected and await db.health_check()

    return HealthStatus(
        service=SERVICE_NAME,
        status="healthy",
        version=settings.system.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        dependencies={"database": "ok" if db_ok else "unavailable"},
    ).model_dump()


@app.post("/notifications/push/register", status_code=201)
async def register_push_token(
    request: PushTokenRegisterRequest,
    user: Annotated[UserClaims, Depends(get_current_user)],
    repository: PushRepository,
) -> dict:
    """
    Регистрирует push-токен устройства текущего пользователя.

    Returns:
        {"success": true}
    """
    if not request.token:
        raise ValidationError("token required")

    try:
        await repository.register_token(user.email, request.token, request.platform)
    except Exception as e:
        await log_error(f"Ошибка регистрации push-токена: {e}", exc_info=True)
        raise InternalError("Error registering token") from e

    await log_info(
        f"Push-токен зарегистрирован ({request.platform or 'unknown'})",
        type_msg=TypeMsg.DEBUG,
    )
    return ApiResponse.ok()


@app.post("/notifications/push/send")
async def send_push_notification(
    notification: PushNotificationRequest,
    repository: PushRepository,
) -> dict:
    """
    Рассылает push-уведомление последним зарегистрированным устройствам.
    Доставка провайдеру не реализована: отправка только логируется.

    Returns:
        {"success": true, "sent": <количество устройств>}
    """
    try:
        tokens = await repository.latest_tokens(limit=settings.notifications.PUSH_SEND_LIMIT)
    except Exception as e:
        await log_error(f"Ошибка рассылки push: {e}", exc_info=True)
        raise InternalError("Error sending push") from e

    await log_info(
        f"Отправка push на {len(tokens)} устройств: {notification.title!r} / {notification.body!r}",
        type_msg=TypeMsg.INFO,
    )
    return {"success": True, "sent": len(tokens)}

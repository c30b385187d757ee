# src/services/orders/app.py
"""
Orders Service: жизненный цикл заказа, live-стрим статусов (SSE), инициация платежей.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI

from src.common.constants import TypeMsg
from src.common.logger import log_info, setup_logging
from src.config import settings
from src.services.orders.broadcaster import OrderBroadcaster
from src.services.orders.dependencies import (
    cleanup_dependencies,
    get_broadcaster,
    init_dependencies,
)
from src.shared.handlers import register_exception_handlers
from src.services.orders.routes import partner_router, payments_router, router
from src.shared.models.common import HealthStatus


SERVICE_NAME = "orders"


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    from src.infra.database import close_db, init_db

    setup_logging()
    db = await init_db()
    await init_dependencies(db)
    await log_info(
        f"Orders сервис запущен на порту {settings.deployment.ORDERS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    yield

    await cleanup_dependencies()
    await close_db()
    await log_info("Orders сервис остановлен", type_msg=TypeMsg.INFO)


# === APP ===

app = FastAPI(
    title="Orders Service",
    description="Заказы, live-обновления статуса и инициация платежей.",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


register_exception_handlers(app)

app.include_router(router)
app.include_router(partner_router)
app.include_router(payments_router)


# === HEALTH CHECK ===

@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Проверка здоровья сервиса."""
    from src.infra.database import get_db

    db = get_db()
    db_ok = db.is_connected and await db.health_check()

    return HealthStatus(
        service=SERVICE_NAME,
        status="healthy",
        version=settings.system.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        dependencies={"database": "ok" if db_ok else "unavailable"},
    ).model_dump()


@app.get("/stats", tags=["Health"])
async def get_stats(
    broadcaster: Annotated[OrderBroadcaster, Depends(get_broadcaster)],
) -> dict:
    """Статистика live-стримов."""
    return broadcaster.get_stats()

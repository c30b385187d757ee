#!/usr/bin/env python3
# entrypoint_orders_service.py
"""
Точка входа для Orders Service.
Порт: 3006
"""

import asyncio
import os
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

# Имя сервиса попадает в имя файла логов
os.environ.setdefault("SERVICE_NAME", "orders")

import uvicorn

from src.config import settings
from src.common.logger import log_info
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Orders Service."""
    await log_info(
        f"Запуск Orders Service на порту {settings.deployment.ORDERS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.orders.app:app",
        host="0.0.0.0",
        port=settings.deployment.ORDERS_SERVICE_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
# entrypoint_notifications_service.py
"""
Точка входа для Notifications Service.
Порт: 3007
"""

import asyncio
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

os.environ.setdefault("SERVICE_NAME", "notifications")

import uvicorn

from src.config import settings
from src.common.logger import log_info
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Notifications Service."""
    await log_info(
        f"Запуск Notifications Service на порту {settings.deployment.NOTIFICATIONS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.notifications.app:app",
        host="0.0.0.0",
        port=settings.deployment.NOTIFICATIONS_SERVICE_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())

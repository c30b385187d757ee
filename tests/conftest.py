# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-orders-service-0123456789")
os.environ.setdefault("ENABLE_PAYMENTS", "true")

import jwt


TEST_JWT_SECRET = os.environ["JWT_SECRET"]


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "orders_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "colored",
        "ORDERS_SERVICE_PORT": 4006,
        "NOTIFICATIONS_SERVICE_PORT": 4007,
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "orders_test",
        "DB_USER": "postgres",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "ORDERS_LIST_LIMIT": 20,
        "STREAM_RETRY_MS": 3000,
        "STREAM_KEEPALIVE_SECONDS": 5.0,
        "STREAM_QUEUE_SIZE": 10,
        "NOTIFICATIONS_BASE": "http://notifications.test:3007",
        "NOTIFY_TIMEOUT_SECONDS": 1.0,
        "PUSH_SEND_LIMIT": 100,
        "ENABLE_PAYMENTS": True,
        "PAYMENTS_REDIRECT_BASE": "https://pay.test",
        "SUPPORTED_PROVIDERS": ["stripe", "paypal"],
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_connection() -> AsyncMock:
    """Мок соединения asyncpg внутри транзакции."""
    connection = AsyncMock()
    connection.fetchrow = AsyncMock(return_value=None)
    connection.fetch = AsyncMock(return_value=[])
    connection.execute = AsyncMock(return_value="INSERT 0 1")
    connection.executemany = AsyncMock(return_value=None)
    return connection


@pytest.fixture
def mock_db(mock_connection: AsyncMock) -> MagicMock:
    """Мок менеджера базы данных. transaction() отдаёт mock_connection."""
    db = MagicMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="UPDATE 1")
    db.fetchval = AsyncMock(return_value=None)
    db.is_connected = True
    db.health_check = AsyncMock(return_value=True)
    db.transactions = []

    @asynccontextmanager
    async def transaction():
        db.transactions.append("begin")
        try:
            yield mock_connection
        except Exception:
            db.transactions.append("rollback")
            raise
        db.transactions.append("commit")

    db.transaction = transaction
    return db


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Мок диспетчера уведомлений."""
    notifier = MagicMock()
    notifier.dispatch = MagicMock(return_value=None)
    notifier.aclose = AsyncMock(return_value=None)
    return notifier


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def sample_order_row() -> dict[str, Any]:
    """Пример строки заказа из БД."""
    return {
        "id": 42,
        "restaurant_id": 7,
        "user_email": "alice@example.com",
        "status": "NEW",
        "total_cents": 3000,
        "created_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_item_rows() -> list[dict[str, Any]]:
    """Пример позиций заказа из БД."""
    return [
        {"id": 1, "order_id": 42, "name": "Pizza", "price_cents": 1000, "qty": 2},
        {"id": 2, "order_id": 42, "name": "Soda", "price_cents": 500, "qty": 2},
    ]


# =============================================================================
# ТОКЕНЫ
# =============================================================================

@pytest.fixture
def make_token() -> Callable[..., str]:
    """Фабрика подписанных JWT для тестов."""
    def _make(
        email: str | None = "alice@example.com",
        role: str | None = "customer",
        secret: str = TEST_JWT_SECRET,
        **claims: Any,
    ) -> str:
        payload: dict[str, Any] = {"sub": "user-1", **claims}
        if email is not None:
            payload["email"] = email
        if role is not None:
            payload["role"] = role
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    """Заголовки покупателя."""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def partner_headers(make_token: Callable[..., str]) -> dict[str, str]:
    """Заголовки партнёра (ресторана)."""
    return {"Authorization": f"Bearer {make_token(email='kitchen@example.com', role='partner')}"}

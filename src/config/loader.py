# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины: config/config.json.
Секретные данные переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации (можно переопределить через CONFIG_PATH)."""
    env_path = os.getenv("CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return get_project_root() / "config" / "config.json"


def load_config_json(path: Path | None = None) -> dict[str, Any]:
    """Загружает config.json и возвращает словарь без ключей-комментариев."""
    config_path = path or get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    # Ключи _comment_* служат документацией внутри JSON
    return {k: v for k, v in data.items() if not k.startswith("_comment_")}


def _env_bool(name: str, default: bool) -> bool:
    """Читает булев флаг из окружения ("true"/"1"/"yes")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "food_delivery_orders"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"


class DeploymentSettings(BaseModel):
    """Хосты и порты сервисов."""
    ORDERS_SERVICE_HOST: str = "orders-service"
    ORDERS_SERVICE_PORT: int = 3006
    NOTIFICATIONS_SERVICE_HOST: str = "notifications-service"
    NOTIFICATIONS_SERVICE_PORT: int = 3007


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/orders.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "food_delivery"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 5
    DB_MAX_POOL_SIZE: int = 20
    DB_COMMAND_TIMEOUT: int = 60
    DB_RETRY_ATTEMPTS: int = 3
    DB_RETRY_DELAY: float = 1.0

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class AuthSettings(BaseModel):
    """Проверка bearer-токенов."""
    JWT_SECRET: str = "dev_secret"
    JWT_ALGORITHM: str = "HS256"

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Секрет из окружения имеет приоритет."""
        return os.getenv("JWT_SECRET", "") or v or "dev_secret"


class OrdersSettings(BaseModel):
    """Настройки сервиса заказов и live-стрима."""
    ORDERS_LIST_LIMIT: int = 50
    STREAM_RETRY_MS: int = 5000
    STREAM_KEEPALIVE_SECONDS: float = 15.0
    STREAM_QUEUE_SIZE: int = 100


class NotificationsSettings(BaseModel):
    """Настройки push-уведомлений."""
    NOTIFICATIONS_BASE: str = "http://notifications-service:3007"
    NOTIFY_TIMEOUT_SECONDS: float = 5.0
    PUSH_SEND_LIMIT: int = 1000


class PaymentsSettings(BaseModel):
    """Настройки инициации платежей."""
    ENABLE_PAYMENTS: bool = True
    PAYMENTS_REDIRECT_BASE: str = "https://payments.example"
    SUPPORTED_PROVIDERS: list[str] = Field(
        default_factory=lambda: [
            "stripe", "paypal", "telr", "paytabs", "aps", "upi", "phonepe", "paytm",
        ]
    )


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    orders: OrdersSettings = Field(default_factory=OrdersSettings)
    notifications: NotificationsSettings = Field(default_factory=NotificationsSettings)
    payments: PaymentsSettings = Field(default_factory=PaymentsSettings)

    @classmethod
    def from_config_json(cls, path: Path | None = None) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Секреты и адреса сервисов переопределяются из переменных окружения.
        """
        data = load_config_json(path)

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "food_delivery_orders"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
            ),
            deployment=DeploymentSettings(
                ORDERS_SERVICE_HOST=os.getenv("ORDERS_SERVICE_HOST", data.get("ORDERS_SERVICE_HOST", "orders-service")),
                ORDERS_SERVICE_PORT=int(os.getenv("ORDERS_SERVICE_PORT", data.get("ORDERS_SERVICE_PORT", 3006))),
                NOTIFICATIONS_SERVICE_HOST=os.getenv("NOTIFICATIONS_SERVICE_HOST", data.get("NOTIFICATIONS_SERVICE_HOST", "notifications-service")),
                NOTIFICATIONS_SERVICE_PORT=int(os.getenv("NOTIFICATIONS_SERVICE_PORT", data.get("NOTIFICATIONS_SERVICE_PORT", 3007))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "DEBUG"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/orders.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "food_delivery")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 5),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 20),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
                DB_RETRY_ATTEMPTS=data.get("DB_RETRY_ATTEMPTS", 3),
                DB_RETRY_DELAY=data.get("DB_RETRY_DELAY", 1.0),
            ),
            auth=AuthSettings(
                JWT_SECRET=data.get("JWT_SECRET", ""),
                JWT_ALGORITHM=data.get("JWT_ALGORITHM", "HS256"),
            ),
            orders=OrdersSettings(
                ORDERS_LIST_LIMIT=data.get("ORDERS_LIST_LIMIT", 50),
                STREAM_RETRY_MS=data.get("STREAM_RETRY_MS", 5000),
                STREAM_KEEPALIVE_SECONDS=data.get("STREAM_KEEPALIVE_SECONDS", 15.0),
                STREAM_QUEUE_SIZE=data.get("STREAM_QUEUE_SIZE", 100),
            ),
            notifications=NotificationsSettings(
                NOTIFICATIONS_BASE=os.getenv("NOTIFICATIONS_BASE", data.get("NOTIFICATIONS_BASE", "http://notifications-service:3007")),
                NOTIFY_TIMEOUT_SECONDS=data.get("NOTIFY_TIMEOUT_SECONDS", 5.0),
                PUSH_SEND_LIMIT=data.get("PUSH_SEND_LIMIT", 1000),
            ),
            payments=PaymentsSettings(
                ENABLE_PAYMENTS=_env_bool("ENABLE_PAYMENTS", data.get("ENABLE_PAYMENTS", True)),
                PAYMENTS_REDIRECT_BASE=data.get("PAYMENTS_REDIRECT_BASE", "https://payments.example"),
                SUPPORTED_PROVIDERS=data.get(
                    "SUPPORTED_PROVIDERS",
                    ["stripe", "paypal", "telr", "paytabs", "aps", "upi", "phonepe", "paytm"],
                ),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()

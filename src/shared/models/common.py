# src/shared/models/common.py
"""
Общие модели для всех сервисов.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Единый конверт ответа: {"success": true, "data": ...}
    или {"success": false, "error": "..."}.
    """

    success: bool = True
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> dict[str, Any]:
        """Успешный ответ (поле error не выводится)."""
        if data is None:
            return {"success": True}
        return {"success": True, "data": data}

    @classmethod
    def fail(cls, error: str) -> dict[str, Any]:
        """Ответ с ошибкой, без внутренних деталей."""
        return {"success": False, "error": error}


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded, unhealthy
    version: str | None = None
    timestamp: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)

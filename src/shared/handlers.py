# src/shared/handlers.py
"""
Обработчики ошибок FastAPI, общие для всех сервисов.
Клиент всегда получает {"success": false, "error": "..."} без внутренних деталей.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.shared.errors import ServiceError
from src.shared.models.common import ApiResponse


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=ApiResponse.fail(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    await log_info(
        f"Некорректный запрос {request.method} {request.url.path}: {exc.errors()}",
        type_msg=TypeMsg.DEBUG,
    )
    return JSONResponse(status_code=400, content=ApiResponse.fail("Invalid payload"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    await log_error(
        f"Необработанная ошибка {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return JSONResponse(status_code=500, content=ApiResponse.fail("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Подключает обработчики ошибок к приложению."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

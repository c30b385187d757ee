# src/services/__init__.py
"""
Микросервисы приложения.

Архитектура:
- Каждый сервис: независимое FastAPI-приложение
- Общая PostgreSQL (asyncpg пул)
- Коммуникация по HTTP, уведомления отправляются fire-and-forget

Сервисы:
- orders: заказы, state machine статусов, live-стрим (SSE), инициация платежей
- notifications: push-токены и рассылка push-уведомлений
"""

__all__: list[str] = []

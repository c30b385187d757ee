# src/services/orders/notifier.py
"""
Fire-and-forget push-уведомления через сервис уведомлений.
Ошибки доставки логируются и никогда не влияют на ответ клиенту.
"""

from __future__ import annotations

import asyncio

import httpx

from src.common.logger import log_debug, log_warning


class NotificationDispatcher:
    """HTTP-клиент сервиса уведомлений с фоновыми задачами отправки."""

    SEND_PATH = "/notifications/push/send"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{self.SEND_PATH}"
        self._http = client or httpx.AsyncClient(timeout=timeout)
        # Ссылки на задачи, иначе их может собрать GC до завершения
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, title: str, body: str) -> asyncio.Task[None]:
        """Планирует отправку уведомления и сразу возвращает управление."""
        task = asyncio.create_task(self._send(title, body))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send(self, title: str, body: str) -> None:
        try:
            response = await self._http.post(self._url, json={"title": title, "body": body})
        except Exception as e:
            await log_warning(f"Не удалось отправить уведомление '{title}': {e}")
            return

        if response.status_code >= 400:
            await log_warning(
                f"Сервис уведомлений ответил {response.status_code} на '{title}'"
            )
            return

        await log_debug(f"Уведомление '{title}' отправлено")

    async def aclose(self, timeout: float = 2.0) -> None:
        """Ждёт незавершённые отправки (не дольше timeout) и закрывает клиент."""
        if self._tasks:
            _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
            for task in pending:
                task.cancel()
        await self._http.aclose()

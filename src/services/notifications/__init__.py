"""
Notifications Service.

Реестр push-токенов устройств и рассылка push-уведомлений.
"""

__all__: list[str] = []

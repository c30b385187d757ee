# src/shared/auth.py
"""
Проверка bearer-токенов (JWT HS256), общая для всех сервисов.
Сервисы не выпускают токены, только проверяют подпись и читают claims.
"""

from __future__ import annotations

from typing import Annotated, Any

import jwt
from fastapi import Depends, Header
from pydantic import BaseModel, ConfigDict

from src.common.constants import UserRole
from src.shared.errors import AuthError, ForbiddenError

BEARER_PREFIX = "Bearer "


class UserClaims(BaseModel):
    """Claims проверенного токена. Владелец заказа определяется по email."""
    model_config = ConfigDict(extra="allow")

    sub: str | None = None
    email: str | None = None
    role: str | None = None

    @property
    def is_partner(self) -> bool:
        return self.role == UserRole.PARTNER.value


def extract_bearer_token(authorization: str | None) -> str:
    """
    Достаёт токен из заголовка Authorization вида "Bearer <token>".

    Raises:
        AuthError: Заголовок отсутствует, схема не Bearer или токен пуст
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError("Missing token")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError("Missing token")
    return token


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> UserClaims:
    """
    Проверяет подпись и срок действия токена.

    Raises:
        AuthError: Токен невалиден, просрочен или подписан другим ключом
    """
    try:
        payload: dict[str, Any] = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        raise AuthError("Invalid token") from e

    if not isinstance(payload, dict):
        raise AuthError("Invalid token")
    return UserClaims(**payload)


def ensure_partner(user: UserClaims) -> UserClaims:
    """Raises ForbiddenError, если у пользователя нет роли partner."""
    if not user.is_partner:
        raise ForbiddenError("Forbidden")
    return user


# === FASTAPI DEPENDENCIES ===

async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserClaims:
    """Проверить bearer-токен из заголовка Authorization."""
    from src.config import settings

    token = extract_bearer_token(authorization)
    return verify_token(token, settings.auth.JWT_SECRET, settings.auth.JWT_ALGORITHM)


async def require_partner(
    user: Annotated[UserClaims, Depends(get_current_user)],
) -> UserClaims:
    """Пропускает только пользователей с ролью partner."""
    return ensure_partner(user)

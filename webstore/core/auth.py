from typing import Optional, Protocol

from fastapi import Request

from webstore.core.config import Settings
from webstore.core.security import extract_token_from_header, verify_token


class AuthProvider(Protocol):
    """Определяет пользователя запроса; None, если он неизвестен"""

    def current_user(self, request: Request) -> Optional[str]:
        ...


class AnonymousAuthProvider:
    """Провайдер без аутентификации"""

    def current_user(self, request: Request) -> Optional[str]:
        return None


class JWTAuthProvider:
    """Пользователь из Bearer-токена: claim username, иначе sub"""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def current_user(self, request: Request) -> Optional[str]:
        token = extract_token_from_header(request.headers.get("authorization"))
        if not token:
            return None

        payload = verify_token(token, self.secret, self.algorithm)
        if not payload:
            return None

        user = payload.get("username") or payload.get("sub")
        return str(user) if user else None


def build_auth_provider(settings: Settings) -> AuthProvider:
    """JWT, если задан секрет, иначе анонимный режим"""
    if settings.jwt_secret:
        return JWTAuthProvider(settings.jwt_secret, settings.jwt_algorithm)
    return AnonymousAuthProvider()

"""Фильтрация клиентских метаданных и сбор серверных.

Неизвестные ключи и значения неверного типа молча отбрасываются; строгий
режим вместо этого поднимает InvalidMetadataError.
"""
from typing import Any, Callable, Optional

from fastapi import Request

from webstore.core.auth import AuthProvider
from webstore.core.errors import InvalidMetadataError
from webstore.domains.storage.entities import Authenticity


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


META_ALLOWED: dict[str, Callable[[Any], bool]] = {
    "public": lambda value: isinstance(value, bool),
    "author": lambda value: isinstance(value, str),
    "email": lambda value: isinstance(value, str),
    "title": lambda value: isinstance(value, str),
    "tags": _is_string_list,
    "description": lambda value: isinstance(value, str),
}

# Управляющие ключи запроса, не являются метаданными
CONTROL_KEYS = frozenset({"name"})


def filter_meta(raw: Any, strict: bool = False) -> dict[str, Any]:
    """Оставляет только разрешённые ключи со значениями нужного типа"""
    if not isinstance(raw, dict):
        return {}

    filtered = {}
    rejected = []
    for key, value in raw.items():
        check = META_ALLOWED.get(key)
        if check is not None and check(value):
            filtered[key] = value
        elif key not in CONTROL_KEYS:
            rejected.append(key)

    if strict and rejected:
        raise InvalidMetadataError(sorted(map(str, rejected)))
    return filtered


def request_peer(request: Request, trust_forwarded_for: bool = True) -> Optional[str]:
    """Адрес клиента; X-Forwarded-For имеет приоритет, если ему доверяем"""
    forwarded = request.headers.get("x-forwarded-for") if trust_forwarded_for else None
    if forwarded:
        peer = forwarded.split(",")[0].strip()
        if peer:
            return peer
    if request.client:
        return request.client.host
    return None


def collect_authenticity(
    request: Request,
    auth_provider: AuthProvider,
    trust_forwarded_for: bool = True
) -> Authenticity:
    """Серверные метаданные запроса; отсутствие данных не ошибка"""
    try:
        user = auth_provider.current_user(request)
    except Exception:
        # Сбой провайдера означает "пользователь неизвестен"
        user = None

    return Authenticity(user=user or None, peer=request_peer(request, trust_forwarded_for))

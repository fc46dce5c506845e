from dataclasses import dataclass, fields
from typing import Any, Literal, Optional


@dataclass(frozen=True)
class Authenticity:
    """Метаданные, которые сервер определяет сам: пользователь и адрес"""
    user: Optional[str] = None
    peer: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class MetadataRecord:
    """Метаданные версии документа.

    Поля клиента проходят через filter_meta, user и peer берутся только
    из Authenticity.
    """
    public: Optional[bool] = None
    author: Optional[str] = None
    email: Optional[str] = None
    title: Optional[str] = None
    tags: Optional[list[str]] = None
    description: Optional[str] = None
    user: Optional[str] = None
    peer: Optional[str] = None

    @classmethod
    def compose(cls, authenticity: Authenticity, filtered: dict[str, Any]) -> "MetadataRecord":
        """Authenticity как основа, отфильтрованные поля клиента поверх"""
        return cls(
            public=filtered.get("public"),
            author=filtered.get("author"),
            email=filtered.get("email"),
            title=filtered.get("title"),
            tags=filtered.get("tags"),
            description=filtered.get("description"),
            user=authenticity.user,
            peer=authenticity.peer,
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class Resolution:
    """Результат разбора идентификатора из URL"""
    kind: Literal["file", "hash"]
    identifier: str


@dataclass(frozen=True)
class StoredDocument:
    """Содержимое и метаданные одной версии"""
    identifier: str
    kind: Literal["file", "hash"]
    data: str
    meta: dict[str, Any]

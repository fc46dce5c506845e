import random
import re
import string
from typing import Any, AsyncIterator, Optional, Union

from fastapi import Request
from fastapi.responses import Response

from webstore.core.auth import AuthProvider
from webstore.core.config import Settings
from webstore.core.errors import DocumentExistsError, NameAllocationError, NotFoundError
from webstore.core.logging import get_logger
from webstore.domains.storage.entities import Authenticity, MetadataRecord, Resolution, StoredDocument
from webstore.domains.storage.interfaces import VersionedStore
from webstore.domains.storage.metadata import collect_authenticity, filter_meta
from webstore.domains.storage.rendering import DocumentRenderer, HTMLDocumentRenderer, file_mime_type
from webstore.domains.storage.schemas import (
    CreateRequest, UpdateRequest, StorageResponse, FileExistsResponse, FileInfo
)

logger = get_logger(__name__)

SHA1_RE = re.compile(r"[0-9a-f]{40}")
NAME_ALPHABET = string.ascii_letters
NAME_LENGTH = 8


def is_sha1(candidate: str) -> bool:
    """40 строчных шестнадцатеричных символов"""
    return SHA1_RE.fullmatch(candidate) is not None


async def resolve_identity(segment: str, store: VersionedStore) -> Resolution:
    """Имя существующего документа или хеш версии; иначе NotFoundError.

    Существующее имя выигрывает, даже если оно похоже на хеш.
    """
    candidate = segment[1:] if segment.startswith("/") else segment

    if candidate and await store.exists(candidate):
        return Resolution(kind="file", identifier=candidate)
    if is_sha1(candidate):
        return Resolution(kind="hash", identifier=candidate)
    raise NotFoundError(candidate)


async def resolve_file(segment: str, store: VersionedStore) -> str:
    """Только изменяемый документ; хеши версий не принимаются"""
    resolution = await resolve_identity(segment, store)
    if resolution.kind != "file":
        raise NotFoundError(resolution.identifier)
    return resolution.identifier


def random_filename(rng: random.Random) -> str:
    """Случайное имя из 8 латинских букв"""
    return "".join(rng.choice(NAME_ALPHABET) for _ in range(NAME_LENGTH))


class NameAllocator:
    """Подбор свободного случайного имени для анонимной загрузки"""

    def __init__(self, store: VersionedStore, max_attempts: int = 100, rng: Optional[random.Random] = None):
        self.store = store
        self.max_attempts = max_attempts
        self.rng = rng or random.SystemRandom()

    async def allocate(self, extension: str, data: str, meta: dict[str, Any]) -> tuple[str, str]:
        """Создаёт документ под первым свободным именем, возвращает (файл, commit)"""
        for attempt in range(1, self.max_attempts + 1):
            file = f"{random_filename(self.rng)}.{extension}"
            try:
                commit = await self.store.create(file, data, meta)
            except DocumentExistsError:
                logger.debug("name_collision", file=file, attempt=attempt)
                continue
            return file, commit

        raise NameAllocationError(
            f"No free name for .{extension} after {self.max_attempts} attempts"
        )


class StorageGateway:
    """Сервис операций над хранилищем файлов"""

    def __init__(
        self,
        store: VersionedStore,
        settings: Settings,
        auth_provider: AuthProvider,
        renderer: Optional[DocumentRenderer] = None,
        rng: Optional[random.Random] = None
    ):
        self.store = store
        self.settings = settings
        self.auth_provider = auth_provider
        self.renderer = renderer or HTMLDocumentRenderer()
        self.allocator = NameAllocator(store, settings.max_name_attempts, rng)

    def storage_url(self, file: str) -> str:
        """URL документа относительно корня сайта"""
        return f"{self.settings.url_prefix.rstrip('/')}/{file}"

    def authenticity(self, request: Request) -> Authenticity:
        return collect_authenticity(request, self.auth_provider, self.settings.trust_forwarded_for)

    def metadata(self, request: Request, raw_meta: Any) -> dict[str, Any]:
        """Серверные поля + отфильтрованные поля клиента"""
        filtered = filter_meta(raw_meta, strict=self.settings.strict_metadata)
        return MetadataRecord.compose(self.authenticity(request), filtered).to_dict()

    async def create(
        self,
        request: Request,
        payload: CreateRequest
    ) -> Union[StorageResponse, FileExistsResponse]:
        """Создание документа с явным или случайным именем"""
        extension = payload.type or self.settings.default_type
        meta = self.metadata(request, payload.meta)
        base = payload.base_name()

        if base is not None:
            # Явное имя не переименовывается при конфликте
            file = f"{base}.{extension}"
            try:
                commit = await self.store.create(file, payload.data, meta)
            except DocumentExistsError:
                return FileExistsResponse(file=file)
        else:
            file, commit = await self.allocator.allocate(extension, payload.data, meta)

        logger.info("document_created", file=file, commit=commit)
        return StorageResponse(url=self.storage_url(file), file=file, meta=meta)

    async def replace(self, request: Request, identifier: str, payload: UpdateRequest) -> StorageResponse:
        """Новая версия: новое содержимое или только новые метаданные"""
        file = await resolve_file(identifier, self.store)

        if payload.metadata_only:
            data, _ = await self.store.read(file)
        else:
            data = payload.data or ""

        meta = self.metadata(request, payload.meta)
        commit = await self.store.update(file, data, meta)
        logger.info("document_updated", file=file, commit=commit, metadata_only=payload.metadata_only)
        return StorageResponse(url=self.storage_url(file), file=file, meta=meta)

    async def delete(self, request: Request, identifier: str) -> bool:
        """Логическое удаление: пустая версия, история сохраняется"""
        file = await resolve_file(identifier, self.store)
        meta = self.authenticity(request).to_dict()
        commit = await self.store.update(file, "", meta)
        logger.info("document_deleted", file=file, commit=commit)
        return True

    async def read(self, identifier: str) -> StoredDocument:
        """Содержимое и метаданные по имени или хешу"""
        resolution = await resolve_identity(identifier, self.store)
        data, meta = await self.store.read(resolution.identifier)
        return StoredDocument(
            identifier=resolution.identifier,
            kind=resolution.kind,
            data=data,
            meta=meta,
        )

    async def read_raw(self, identifier: str) -> tuple[bytes, str]:
        """Байты документа и MIME-тип по сохранённому имени"""
        document = await self.read(identifier)
        mime = file_mime_type(document.meta.get("name", document.identifier))
        return document.data.encode(), mime

    async def render(self, identifier: str) -> Response:
        document = await self.read(identifier)
        return self.renderer.render(document.identifier, document.data, document.meta)

    async def history(self, identifier: str, depth: Optional[int] = None) -> list[dict[str, Any]]:
        """История версий документа; для хешей не поддерживается"""
        file = await resolve_file(identifier, self.store)
        return await self.store.history(file, depth or self.settings.history_depth)

    async def typeahead(self, query: str) -> AsyncIterator[FileInfo]:
        """Документы, у которых имя или один из тегов начинается с query"""
        async for file in self.store.iter_files():
            meta = await self.store.latest_metadata(file)
            if file.startswith(query) or _tags_match(query, meta):
                yield FileInfo(**dict(meta, url=self.storage_url(file), name=file))


def _tags_match(query: str, meta: dict[str, Any]) -> bool:
    tags = meta.get("tags")
    if not isinstance(tags, list):
        return False
    return any(isinstance(tag, str) and tag.startswith(query) for tag in tags)

import hashlib
import json
import time
from typing import Any, AsyncIterator, Optional

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from webstore.core.errors import DocumentExistsError, NotFoundError, StoreConflictError
from webstore.db.models.storage import ObjectModel, HeadModel


def object_hash(kind: str, payload: bytes) -> str:
    """SHA-1 объекта в формате git: "<kind> <size>\\0<payload>" """
    header = f"{kind} {len(payload)}\0".encode()
    return hashlib.sha1(header + payload).hexdigest()


_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _encode_commit(commit: dict[str, Any]) -> bytes:
    return json.dumps(commit, sort_keys=True, separators=(",", ":")).encode()


class ObjectRepository:
    """Версионное хранилище документов поверх таблиц objects и heads.

    Каждая версия документа - commit с метаданными, ссылкой на blob
    содержимого и на предыдущий commit. heads хранит последний commit
    для каждого имени файла.
    """

    def __init__(self, sessions: async_sessionmaker):
        self.sessions = sessions

    async def create(self, name: str, data: str, meta: dict[str, Any]) -> str:
        """Создание документа; DocumentExistsError, если имя занято"""
        async with self.sessions() as session:
            try:
                async with session.begin():
                    if await session.get(HeadModel, name) is not None:
                        raise DocumentExistsError(name)
                    commit = await self._save_commit(session, name, data, meta, previous=None)
                    session.add(HeadModel(name=name, commit=commit))
            except IntegrityError:
                # Параллельное создание того же имени
                if await self.exists(name):
                    raise DocumentExistsError(name)
                raise
        return commit

    async def update(self, name: str, data: str, meta: dict[str, Any]) -> str:
        """Новая версия существующего документа"""
        async with self.sessions() as session:
            async with session.begin():
                head = await session.get(HeadModel, name)
                if head is None:
                    raise NotFoundError(name)
                previous = head.commit
                commit = await self._save_commit(session, name, data, meta, previous=previous)
                result = await session.execute(
                    update(HeadModel)
                    .where(HeadModel.name == name, HeadModel.commit == previous)
                    .values(commit=commit)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise StoreConflictError(f"Concurrent update of {name}")
        return commit

    async def read(self, name_or_hash: str) -> tuple[str, dict[str, Any]]:
        """Содержимое и метаданные по имени файла или хешу commit"""
        async with self.sessions() as session:
            commit_hash = await self._head_commit(session, name_or_hash) or name_or_hash
            meta = await self._load_commit(session, commit_hash)
            blob = await session.get(ObjectModel, meta["data"])
            if blob is None:
                raise NotFoundError(meta["data"])
            return blob.payload.decode(), meta

    async def history(self, name: str, depth: int) -> list[dict[str, Any]]:
        """Последние depth версий документа, от новых к старым"""
        async with self.sessions() as session:
            commit_hash = await self._head_commit(session, name)
            if commit_hash is None:
                raise NotFoundError(name)

            entries = []
            while commit_hash and len(entries) < depth:
                meta = await self._load_commit(session, commit_hash)
                entries.append(meta)
                commit_hash = meta.get("previous")
            return entries

    async def exists(self, name: str) -> bool:
        async with self.sessions() as session:
            return await self._head_commit(session, name) is not None

    async def latest_metadata(self, name: str) -> dict[str, Any]:
        """Метаданные последней версии без загрузки содержимого"""
        async with self.sessions() as session:
            commit_hash = await self._head_commit(session, name)
            if commit_hash is None:
                raise NotFoundError(name)
            return await self._load_commit(session, commit_hash)

    async def iter_files(self) -> AsyncIterator[str]:
        """Имена всех документов в алфавитном порядке"""
        async with self.sessions() as session:
            result = await session.execute(select(HeadModel.name).order_by(HeadModel.name))
            names = result.scalars().all()
        for name in names:
            yield name

    async def _head_commit(self, session: AsyncSession, name: str) -> Optional[str]:
        result = await session.execute(select(HeadModel.commit).where(HeadModel.name == name))
        return result.scalar_one_or_none()

    async def _load_commit(self, session: AsyncSession, commit_hash: str) -> dict[str, Any]:
        obj = await session.get(ObjectModel, commit_hash)
        if obj is None or obj.kind != "commit":
            raise NotFoundError(commit_hash)
        meta = json.loads(obj.payload)
        meta["commit"] = commit_hash
        return meta

    async def _save_commit(
        self,
        session: AsyncSession,
        name: str,
        data: str,
        meta: dict[str, Any],
        previous: Optional[str]
    ) -> str:
        blob_hash = await self._save_object(session, "blob", data.encode())
        commit = dict(meta, name=name, time=time.time(), data=blob_hash)
        if previous:
            commit["previous"] = previous
        return await self._save_object(session, "commit", _encode_commit(commit))

    async def _save_object(self, session: AsyncSession, kind: str, payload: bytes) -> str:
        obj_hash = object_hash(kind, payload)
        # Один и тот же объект может записываться параллельно
        insert = _INSERT_BY_DIALECT[session.bind.dialect.name]
        await session.execute(
            insert(ObjectModel)
            .values(hash=obj_hash, kind=kind, payload=payload)
            .on_conflict_do_nothing(index_elements=[ObjectModel.hash])
        )
        return obj_hash

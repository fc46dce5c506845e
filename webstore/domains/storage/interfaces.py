from typing import Any, AsyncIterator, Protocol


class VersionedStore(Protocol):
    """Контракт версионного хранилища, которым пользуется шлюз"""

    async def create(self, name: str, data: str, meta: dict[str, Any]) -> str:
        ...

    async def update(self, name: str, data: str, meta: dict[str, Any]) -> str:
        ...

    async def read(self, name_or_hash: str) -> tuple[str, dict[str, Any]]:
        ...

    async def history(self, name: str, depth: int) -> list[dict[str, Any]]:
        ...

    async def exists(self, name: str) -> bool:
        ...

    async def latest_metadata(self, name: str) -> dict[str, Any]:
        ...

    def iter_files(self) -> AsyncIterator[str]:
        ...

"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import pytest

from webstore.core.config import Settings
from webstore.core.db import create_engine, create_session_factory, init_models
from webstore.db.repositories import ObjectRepository


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway storage root."""
    return Settings(storage_root=tmp_path / "storage", jwt_secret=None)


@pytest.fixture
def run_store(settings: Settings) -> Callable[[Callable[[ObjectRepository], Awaitable[Any]]], Any]:
    """Run a coroutine against a fresh SQLite-backed store.

    Engine setup, the scenario and disposal share one event loop.
    """

    def runner(scenario: Callable[[ObjectRepository], Awaitable[Any]]) -> Any:
        async def main() -> Any:
            settings.storage_root.mkdir(parents=True, exist_ok=True)
            engine = create_engine(settings)
            await init_models(engine)
            try:
                return await scenario(ObjectRepository(create_session_factory(engine)))
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner

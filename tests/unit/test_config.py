"""Unit tests for settings parsing."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from webstore.core.config import Settings


def test_defaults() -> None:
    """Defaults match the documented storage layout."""
    settings = Settings(_env_file=None)

    assert settings.url_prefix == "/p"
    assert settings.default_type == "pl"
    assert settings.history_depth == 5
    assert settings.strict_metadata is False
    assert settings.trust_forwarded_for is True


def test_database_url_defaults_to_sqlite_in_storage_root(tmp_path) -> None:
    """Without an explicit URL the store lives under storage_root."""
    settings = Settings(_env_file=None, storage_root=tmp_path)

    assert settings.resolved_database_url == f"sqlite+aiosqlite:///{tmp_path / 'store.db'}"


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings come from WEBSTORE_* variables."""
    monkeypatch.setenv("WEBSTORE_STORAGE_ROOT", "/srv/store")
    monkeypatch.setenv("WEBSTORE_MAX_NAME_ATTEMPTS", "7")
    monkeypatch.setenv("WEBSTORE_DATABASE_URL", "postgresql+asyncpg://db/store")

    settings = Settings(_env_file=None)

    assert settings.storage_root == Path("/srv/store")
    assert settings.max_name_attempts == 7
    assert settings.resolved_database_url == "postgresql+asyncpg://db/store"


def test_rejects_non_positive_attempt_cap() -> None:
    """The allocator cap must allow at least one attempt."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_name_attempts=0)

"""Unit tests for random name allocation."""

from __future__ import annotations

import asyncio
import random
import string

import pytest

from tests.fakes import FakeStore
from webstore.core.errors import NameAllocationError
from webstore.domains.storage.services import NameAllocator, random_filename


def test_random_filename_uses_eight_ascii_letters() -> None:
    """Names are 8 characters drawn from a-zA-Z."""
    name = random_filename(random.Random(1))

    assert len(name) == 8
    assert set(name) <= set(string.ascii_letters)


def test_allocate_returns_created_name() -> None:
    """The returned name carries the extension and exists afterwards."""
    store = FakeStore()
    allocator = NameAllocator(store, rng=random.Random(7))

    file, commit = asyncio.run(allocator.allocate("pl", "foo.", {"title": "t"}))

    assert file.endswith(".pl")
    assert store.heads[file] == commit


def test_allocate_retries_after_collision() -> None:
    """Collisions trigger a fresh name until create succeeds."""
    store = FakeStore(collisions=3)
    allocator = NameAllocator(store, rng=random.Random(7))

    file, _ = asyncio.run(allocator.allocate("pl", "foo.", {}))

    assert len(store.create_attempts) == 4
    assert store.create_attempts[-1] == file


def test_allocate_never_returns_existing_name() -> None:
    """A name already in the store is skipped."""
    taken = f"{random_filename(random.Random(3))}.pl"
    store = FakeStore()
    asyncio.run(store.create(taken, "old", {}))
    allocator = NameAllocator(store, rng=random.Random(3))

    file, _ = asyncio.run(allocator.allocate("pl", "new", {}))

    assert file != taken
    assert store.create_attempts[1] == taken


def test_allocate_fails_after_attempt_cap() -> None:
    """Exhausting the cap raises instead of looping forever."""
    store = FakeStore(collisions=10)
    allocator = NameAllocator(store, max_attempts=5, rng=random.Random(7))

    with pytest.raises(NameAllocationError):
        asyncio.run(allocator.allocate("pl", "foo.", {}))

    assert len(store.create_attempts) == 5

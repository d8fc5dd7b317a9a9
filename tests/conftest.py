"""Shared fixtures for kvtables tests."""

from __future__ import annotations

import pytest

from kvtables.storage import MemoryTableStore


@pytest.fixture
def users_rows():
    return [
        {"id": "1", "name": "A"},
        {"id": "2", "name": "B"},
    ]


@pytest.fixture
def store(users_rows):
    """A memory store holding a two-row Users table."""
    return MemoryTableStore({"Users": users_rows})


@pytest.fixture
def users(store):
    """Users destination freshly loaded from the store."""
    return store.load("Users")


@pytest.fixture
def orders():
    return [
        {"id": "10", "user_id": "1", "total": 5},
        {"id": "11", "user_id": "2", "total": 7.5},
        {"id": "12", "user_id": "1", "total": 3},
        {"id": "13", "user_id": "9", "total": 1},
    ]

"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from kvtables.cli import app
from kvtables.storage import SqliteTableStore

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def store_uri(tmp_path):
    return f"sqlite:///{tmp_path}/cli_test.db"


@pytest.fixture
def seeded_store(tmp_path, store_uri):
    """A store URI whose database holds a small Users table."""
    store = SqliteTableStore(f"{tmp_path}/cli_test.db")
    store.persist(
        "Users",
        {
            "Users": [
                {"id": "1", "name": "Alice"},
                {"id": "2", "name": "Bob"},
                {"id": "nw3", "name": "Cleo"},
            ]
        },
    )
    store.close()
    return store_uri


def invoke(runner: CliRunner, args: list[str], store_uri: str | None = None) -> "Result":
    """Invoke the CLI against a store."""
    if store_uri:
        args = ["--store", store_uri] + args
    return runner.invoke(app, args, catch_exceptions=False)

"""Table Store backends: named JSON documents in a flat key-value facility."""

from __future__ import annotations

import json
import logging
import os
import re
import sqlite3
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from kvtables.config import KvTablesConfig
from kvtables.errors import MalformedTableError, StorageBackendError, TableNotFoundError
from kvtables.types import Destination

logger = logging.getLogger(__name__)

_DOCUMENT_ADAPTER: TypeAdapter[dict[str, list[dict[str, Any]]]] = TypeAdapter(
    dict[str, list[dict[str, Any]]]
)

_KEY_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")
_SQL_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def encode_table(table_name: str, destination: Destination, *, indent: int | None = None) -> str:
    """Serialize the document stored under ``table_name``.

    Only ``destination[table_name]`` is written; other tables a caller keeps
    in the same mapping are left to their own keys.
    """
    if table_name not in destination:
        raise TableNotFoundError(table_name)
    return json.dumps({table_name: destination[table_name]}, indent=indent)


def decode_table(table_name: str, text: str) -> Destination:
    """Parse and shape-check a stored document."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedTableError(table_name, f"invalid JSON: {e}") from e
    try:
        document = _DOCUMENT_ADAPTER.validate_python(raw)
    except PydanticValidationError as e:
        raise MalformedTableError(table_name, f"expected {{name: [object, ...]}}: {e}") from e
    if table_name not in document:
        raise MalformedTableError(table_name, f"document has no '{table_name}' entry")
    return document


def _check_key(table_name: str) -> None:
    if not _KEY_RE.match(table_name):
        raise StorageBackendError(
            "validate_key", f"Invalid table name '{table_name}': must match {_KEY_RE.pattern}"
        )


@runtime_checkable
class TableStore(Protocol):
    """Backend-agnostic key-value contract used by the query and mutation layers."""

    def load(self, table_name: str) -> Destination: ...

    def persist(self, table_name: str, destination: Destination) -> None: ...

    def keys(self) -> list[str]: ...

    def close(self) -> None: ...


class MemoryTableStore:
    """Process-local store holding serialized documents, like browser local storage.

    Documents are kept as JSON text so every :meth:`load` hands out a fresh
    copy, never a reference to what an earlier caller is still mutating.
    """

    def __init__(
        self, initial: dict[str, Any] | None = None, *, indent: int | None = None
    ) -> None:
        self._indent = indent
        self._data: dict[str, str] = {}
        for name, rows in (initial or {}).items():
            self.persist(name, {name: rows})

    def load(self, table_name: str) -> Destination:
        text = self._data.get(table_name)
        if text is None:
            raise TableNotFoundError(table_name)
        return decode_table(table_name, text)

    def persist(self, table_name: str, destination: Destination) -> None:
        self._data[table_name] = encode_table(table_name, destination, indent=self._indent)
        logger.debug("persisted table %s (%d rows)", table_name, len(destination[table_name]))

    def keys(self) -> list[str]:
        return sorted(self._data)

    def raw(self, table_name: str) -> str | None:
        """Return the stored text for a key, or None."""
        return self._data.get(table_name)

    def close(self) -> None:
        pass


class DirectoryTableStore:
    """One ``<table_name>.json`` file per key under a root directory."""

    def __init__(self, root: str, *, indent: int | None = None) -> None:
        self.root = root
        self._indent = indent
        try:
            os.makedirs(root, exist_ok=True)
        except OSError as e:
            raise StorageBackendError("open_directory", str(e)) from e

    def _path(self, table_name: str) -> str:
        _check_key(table_name)
        return os.path.join(self.root, f"{table_name}.json")

    def load(self, table_name: str) -> Destination:
        path = self._path(table_name)
        if not os.path.exists(path):
            raise TableNotFoundError(table_name)
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise StorageBackendError("load", f"{path}: {e}") from e
        return decode_table(table_name, text)

    def persist(self, table_name: str, destination: Destination) -> None:
        path = self._path(table_name)
        text = encode_table(table_name, destination, indent=self._indent)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageBackendError("persist", f"{path}: {e}") from e
        logger.debug("persisted table %s to %s", table_name, path)

    def keys(self) -> list[str]:
        names = os.listdir(self.root)
        return sorted(n[: -len(".json")] for n in names if n.endswith(".json"))

    def close(self) -> None:
        pass


class SqliteTableStore:
    """SQLite-backed key-value table holding one JSON document per key."""

    def __init__(self, db_path: str, *, table: str = "kv", indent: int | None = None) -> None:
        if not _SQL_IDENT_RE.match(table):
            raise StorageBackendError("open_sqlite", f"Invalid sqlite table name '{table}'")
        self.db_path = db_path
        self._table = table
        self._indent = indent
        try:
            self._conn = sqlite3.connect(db_path)
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {table} ("
                "key TEXT PRIMARY KEY, "
                "value TEXT NOT NULL)"
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageBackendError("open_sqlite", f"{db_path}: {e}") from e

    def load(self, table_name: str) -> Destination:
        try:
            row = self._conn.execute(
                f"SELECT value FROM {self._table} WHERE key = ?", (table_name,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageBackendError("load", str(e)) from e
        if row is None:
            raise TableNotFoundError(table_name)
        return decode_table(table_name, row[0])

    def persist(self, table_name: str, destination: Destination) -> None:
        text = encode_table(table_name, destination, indent=self._indent)
        try:
            self._conn.execute(
                f"INSERT INTO {self._table} (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (table_name, text),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageBackendError("persist", str(e)) from e
        logger.debug("persisted table %s to %s", table_name, self.db_path)

    def keys(self) -> list[str]:
        rows = self._conn.execute(f"SELECT key FROM {self._table} ORDER BY key").fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        self._conn.close()


@dataclass(frozen=True)
class StorageTarget:
    """Resolved backend selection for a store URI."""

    backend: str
    uri: str
    path: str | None = None


def parse_storage_target(storage_uri: str) -> StorageTarget:
    """Resolve a backend from ``memory://``, ``file:///dir`` or ``sqlite:///path``."""
    parsed = urlparse(storage_uri)

    if parsed.scheme == "memory":
        return StorageTarget(backend="memory", uri=storage_uri)

    if parsed.scheme in ("sqlite", "file"):
        path = parsed.path
        if parsed.netloc:
            path = f"{parsed.netloc}{path}"
        elif path.startswith("//"):
            # sqlite:////abs/path -> /abs/path
            path = path[1:]
        if path == "/:memory:":
            path = ":memory:"
        if not path or path == "/":
            raise StorageBackendError(
                "parse_storage_uri", f"Invalid {parsed.scheme} URI: {storage_uri}"
            )
        backend = "sqlite" if parsed.scheme == "sqlite" else "directory"
        return StorageTarget(backend=backend, uri=storage_uri, path=path)

    raise StorageBackendError(
        "parse_storage_uri",
        f"Unsupported storage URI scheme '{parsed.scheme}' for '{storage_uri}'",
    )


def open_store(
    storage_uri: str | None = None, *, config: KvTablesConfig | None = None
) -> TableStore:
    """Open a Table Store from a URI, falling back to ``config.store_uri``."""
    cfg = config or KvTablesConfig()
    target = parse_storage_target(storage_uri or cfg.store_uri)
    if target.backend == "memory":
        return MemoryTableStore(indent=cfg.json_indent)
    assert target.path is not None
    if target.backend == "sqlite":
        return SqliteTableStore(target.path, table=cfg.sqlite_table, indent=cfg.json_indent)
    if target.backend == "directory":
        return DirectoryTableStore(target.path, indent=cfg.json_indent)
    raise StorageBackendError("open_store", f"Unsupported backend '{target.backend}'")


__all__ = [
    "TableStore",
    "MemoryTableStore",
    "DirectoryTableStore",
    "SqliteTableStore",
    "StorageTarget",
    "parse_storage_target",
    "open_store",
    "encode_table",
    "decode_table",
]

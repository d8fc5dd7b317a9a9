"""Configuration for kvtables stores and sessions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class KvTablesConfig:
    """Configuration for a table session."""

    id_field: str = "id"
    store_uri: str = "memory://"
    json_indent: int | None = None
    sqlite_table: str = "kv"

"""Structured error types for kvtables.

Query and mutation operations report recoverable failures with ``False`` /
``None`` sentinels. These exceptions are reserved for the Table Store
boundary, where a missing key or a corrupt document cannot be recovered by
the caller retrying the same call.
"""

from __future__ import annotations


class KvTablesError(Exception):
    """Base error for all kvtables errors."""


class TableNotFoundError(KvTablesError):
    """Raised when a table key is absent from the backing store."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' not found in store")


class MalformedTableError(KvTablesError):
    """Raised when a stored document is not a ``{name: [record, ...]}`` mapping."""

    def __init__(self, table_name: str, detail: str) -> None:
        self.table_name = table_name
        self.detail = detail
        super().__init__(f"Stored table '{table_name}' is malformed: {detail}")


class StorageBackendError(KvTablesError):
    """Raised when backend storage operations fail."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage backend error during {operation}: {detail}")

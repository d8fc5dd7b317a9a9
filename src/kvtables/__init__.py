"""kvtables: relational-style tables over a flat key-value store, with deferred sync."""

__version__ = "0.1.0"

from kvtables.config import KvTablesConfig
from kvtables.errors import (
    KvTablesError,
    MalformedTableError,
    StorageBackendError,
    TableNotFoundError,
)
from kvtables.identifiers import get_latest_identifier, next_pending_identifier
from kvtables.mutation import delete_json_object, insert_json_object, update_json_object
from kvtables.query import (
    copy_json_object,
    select_active,
    select_by_state,
    select_cond_eq,
    select_cond_in,
    select_cond_in_join,
)
from kvtables.session import TableSession
from kvtables.storage import (
    DirectoryTableStore,
    MemoryTableStore,
    SqliteTableStore,
    TableStore,
    open_store,
)
from kvtables.sync import PendingChanges, confirm_created, pending_changes, purge_deleted
from kvtables.types import SyncState, TaggedIdentifier

__all__ = [
    "__version__",
    "KvTablesConfig",
    "KvTablesError",
    "MalformedTableError",
    "StorageBackendError",
    "TableNotFoundError",
    "TableStore",
    "MemoryTableStore",
    "DirectoryTableStore",
    "SqliteTableStore",
    "open_store",
    "select_cond_eq",
    "select_cond_in",
    "select_cond_in_join",
    "copy_json_object",
    "select_active",
    "select_by_state",
    "insert_json_object",
    "update_json_object",
    "delete_json_object",
    "get_latest_identifier",
    "next_pending_identifier",
    "PendingChanges",
    "pending_changes",
    "confirm_created",
    "purge_deleted",
    "SyncState",
    "TaggedIdentifier",
    "TableSession",
]

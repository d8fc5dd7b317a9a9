"""Store-bound facade over the query, mutation and sync functions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from kvtables.config import KvTablesConfig
from kvtables.identifiers import get_latest_identifier, next_pending_identifier
from kvtables.mutation import delete_json_object, insert_json_object, update_json_object
from kvtables.query import (
    copy_json_object,
    select_active,
    select_cond_eq,
    select_cond_in,
    select_cond_in_join,
)
from kvtables.storage import TableStore, open_store
from kvtables.sync import PendingChanges, confirm_created, pending_changes, purge_deleted
from kvtables.types import Destination, Record, Table


class TableSession:
    """Bind a Table Store and a default identifier field.

    Usage::

        with TableSession.open("sqlite:///app.db") as tables:
            users = tables.load("Users")
            new_id = tables.next_identifier(users, "Users")
            tables.insert(users, {"id": new_id, "name": "C"}, "Users")

    Mutations take the destination returned by :meth:`load` and write back
    through the bound store. Reload after a mutation before issuing another
    one against the same table.
    """

    def __init__(self, store: TableStore, config: KvTablesConfig | None = None) -> None:
        self.store = store
        self.config = config or KvTablesConfig()

    @classmethod
    def open(
        cls, storage_uri: str | None = None, *, config: KvTablesConfig | None = None
    ) -> TableSession:
        cfg = config or KvTablesConfig()
        return cls(open_store(storage_uri, config=cfg), cfg)

    def _id_field(self, id_field: str | None) -> str:
        return id_field or self.config.id_field

    # --- loading ---

    def load(self, table_name: str) -> Destination:
        return self.store.load(table_name)

    def rows(self, table_name: str, *, active_only: bool = False) -> Table:
        table = self.store.load(table_name)[table_name]
        if active_only:
            return select_active(table, self.config.id_field)
        return table

    def tables(self) -> list[str]:
        return self.store.keys()

    def create_table(self, table_name: str, rows: Iterable[Record] = ()) -> Destination:
        """Write a table key, replacing any existing document under that name."""
        destination: Destination = {table_name: list(rows)}
        self.store.persist(table_name, destination)
        return destination

    # --- queries ---

    def select_eq(self, table_name: str, field: str, value: Any) -> list[Record]:
        return select_cond_eq(self.rows(table_name), field, value)

    def select_in(self, table_name: str, field: str, values: Iterable[Any]) -> list[Record]:
        return select_cond_in(self.rows(table_name), field, values)

    def select_in_join(
        self, table_name: str, field: str, other_table: str, values_field: str
    ) -> list[Record]:
        return select_cond_in_join(
            self.rows(table_name), field, self.rows(other_table), values_field
        )

    def copy(self, table_name: str, id_value: Any, id_field: str | None = None) -> Record | None:
        return copy_json_object(self.rows(table_name), self._id_field(id_field), id_value)

    # --- mutations ---

    def insert(self, destination: Destination, record: Record, table_name: str) -> bool:
        return insert_json_object(self.store, destination, record, table_name)

    def update(
        self,
        destination: Destination,
        id_value: Any,
        table_name: str,
        updated_record: Record,
        id_field: str | None = None,
    ) -> bool:
        return update_json_object(
            self.store,
            destination,
            self._id_field(id_field),
            id_value,
            table_name,
            updated_record,
        )

    def delete(
        self,
        destination: Destination,
        id_value: Any,
        table_name: str,
        id_field: str | None = None,
    ) -> bool:
        return delete_json_object(
            self.store, destination, self._id_field(id_field), id_value, table_name
        )

    # --- identifiers ---

    def latest_identifier(self, table_name: str, id_field: str | None = None) -> str:
        return get_latest_identifier(self.rows(table_name), self._id_field(id_field))

    def next_identifier(
        self, destination: Destination, table_name: str, id_field: str | None = None
    ) -> str:
        return next_pending_identifier(destination[table_name], self._id_field(id_field))

    # --- sync bookkeeping ---

    def pending(self, table_name: str, id_field: str | None = None) -> PendingChanges:
        return pending_changes(self.rows(table_name), self._id_field(id_field))

    def confirm(
        self,
        destination: Destination,
        table_name: str,
        local_id: str,
        server_id: Any,
        id_field: str | None = None,
    ) -> bool:
        return confirm_created(
            self.store, destination, table_name, self._id_field(id_field), local_id, server_id
        )

    def purge(
        self,
        destination: Destination,
        table_name: str,
        id_value: Any,
        id_field: str | None = None,
    ) -> bool:
        return purge_deleted(
            self.store, destination, table_name, self._id_field(id_field), id_value
        )

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> TableSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

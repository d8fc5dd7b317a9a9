"""kvt insert / update / delete — write commands against one table."""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from kvtables.cli import _exitcodes as ec
from kvtables.cli._output import print_error
from kvtables.cli._storage import open_session
from kvtables.errors import KvTablesError


def _parse_record(record_json: str) -> dict[str, Any]:
    try:
        record = json.loads(record_json)
    except json.JSONDecodeError as e:
        print_error(f"Invalid record JSON: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    if not isinstance(record, dict):
        print_error("Record must be a JSON object")
        raise typer.Exit(ec.USAGE_ERROR)
    return record


def insert_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    record_json: str = typer.Argument(..., help="Record as a JSON object"),
    new_id: bool = typer.Option(
        False, "--new-id", help="Assign a fresh pending-create identifier to the record"
    ),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Append a record; its fields must match the table's existing rows."""
    record = _parse_record(record_json)
    session = open_session()
    try:
        destination = session.load(table_name)
        if new_id:
            field = id_field or session.config.id_field
            record[field] = session.next_identifier(destination, table_name, field)
        ok = session.insert(destination, record, table_name)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if not ok:
        print_error(f"Record fields do not match table '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print(json.dumps(record))


def update_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_value: str = typer.Argument(..., help="Identifier value as currently stored"),
    record_json: str = typer.Argument(..., help="Field values as a JSON object"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Overwrite fields of the record with the given identifier."""
    values = _parse_record(record_json)
    session = open_session()
    try:
        destination = session.load(table_name)
        ok = session.update(destination, id_value, table_name, values, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if not ok:
        print_error(f"No record '{id_value}' in '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print(f"Updated '{id_value}' in '{table_name}'")


def delete_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_value: str = typer.Argument(..., help="Identifier value"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Delete a record: unsynced records go at once, others are marked for the next sync."""
    session = open_session()
    try:
        destination = session.load(table_name)
        ok = session.delete(destination, id_value, table_name, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if not ok:
        print_error(f"No record '{id_value}' in '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print(f"Deleted '{id_value}' from '{table_name}'")

"""kvt tables / init / show / get — read access to stored tables."""

from __future__ import annotations

import json
from typing import Optional

import typer

from kvtables.cli import _exitcodes as ec
from kvtables.cli._output import print_error, print_object, print_records, print_table
from kvtables.cli._storage import open_session, parse_value
from kvtables.errors import KvTablesError
from kvtables.query import select_active, select_cond_eq


def tables_cmd() -> None:
    """List table keys with row counts."""
    from kvtables.cli import state

    session = open_session()
    try:
        rows = [[name, len(session.rows(name))] for name in session.tables()]
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()
    print_table(["table", "rows"], rows, json_mode=state.json_output)


def init_cmd(
    table_name: str = typer.Argument(..., help="Table name (store key)"),
    rows_json: str = typer.Argument("[]", help="Initial rows as a JSON array of objects"),
    force: bool = typer.Option(False, "--force", help="Replace an existing table"),
) -> None:
    """Create a table key, optionally seeded with rows."""
    try:
        rows = json.loads(rows_json)
    except json.JSONDecodeError as e:
        print_error(f"Invalid rows JSON: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        print_error("Rows must be a JSON array of objects")
        raise typer.Exit(ec.USAGE_ERROR)

    session = open_session()
    try:
        if table_name in session.tables() and not force:
            print_error(f"Table '{table_name}' already exists (use --force to replace)")
            raise typer.Exit(ec.REFUSED)
        session.create_table(table_name, rows)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()
    print(f"Created table '{table_name}' with {len(rows)} row(s)")


def show_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    where: Optional[list[str]] = typer.Option(
        None, "--where", help="FIELD VALUE pair; VALUE is JSON, bare words are strings"
    ),
    active: bool = typer.Option(False, "--active", help="Hide records marked for deletion"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Print the rows of a table."""
    from kvtables.cli import state

    if where and len(where) != 2:
        print_error("--where takes a FIELD and a VALUE (pass the option twice)")
        raise typer.Exit(ec.USAGE_ERROR)

    session = open_session()
    try:
        records = session.rows(table_name)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if where:
        records = select_cond_eq(records, where[0], parse_value(where[1]))
    if active:
        records = select_active(records, id_field or session.config.id_field)
    print_records(records, json_mode=state.json_output)


def get_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_value: str = typer.Argument(..., help="Identifier value"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
    fmt: str = typer.Option("text", "--format", help="Output format: text, json or yaml"),
) -> None:
    """Print the single record with the given identifier."""
    from kvtables.cli import state

    session = open_session()
    try:
        record = session.copy(table_name, id_value, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if record is None:
        print_error(f"No unique record '{id_value}' in '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print_object(record, json_mode=state.json_output, fmt=fmt)

"""kvt latest-id / sync — identifier allocation and pending sync work."""

from __future__ import annotations

from typing import Optional

import typer

from kvtables.cli import _exitcodes as ec
from kvtables.cli._output import print_error, print_records, print_table
from kvtables.cli._storage import open_session
from kvtables.errors import KvTablesError

app = typer.Typer(no_args_is_help=True)


def latest_id_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Print the largest confirmed numeric identifier, or -1."""
    session = open_session()
    try:
        print(session.latest_identifier(table_name, id_field))
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()


@app.command(name="pending")
def pending_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """List records created or deleted locally since the last sync."""
    from kvtables.cli import state

    session = open_session()
    try:
        changes = session.pending(table_name, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    field = id_field or session.config.id_field
    if state.json_output:
        print_records(
            [{"change": "create", **r} for r in changes.created]
            + [{"change": "delete", **r} for r in changes.deleted],
            json_mode=True,
        )
        return
    rows = [["create", r.get(field)] for r in changes.created]
    rows += [["delete", r.get(field)] for r in changes.deleted]
    print_table(["change", field], rows)


@app.command(name="confirm")
def confirm_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    local_id: str = typer.Argument(..., help="Pending-create identifier, e.g. nw4"),
    server_id: str = typer.Argument(..., help="Identifier assigned by the remote store"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Record that the remote store accepted a locally created record."""
    session = open_session()
    try:
        destination = session.load(table_name)
        ok = session.confirm(destination, table_name, local_id, server_id, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if not ok:
        print_error(f"No pending-create record '{local_id}' in '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print(f"Confirmed '{local_id}' as '{server_id}'")


@app.command(name="purge")
def purge_cmd(
    table_name: str = typer.Argument(..., help="Table name"),
    id_value: str = typer.Argument(..., help="Identifier, tagged (rm-4) or not (4)"),
    id_field: Optional[str] = typer.Option(None, "--id-field", help="Identifier field"),
) -> None:
    """Drop a record whose remote delete has completed."""
    session = open_session()
    try:
        destination = session.load(table_name)
        ok = session.purge(destination, table_name, id_value, id_field)
    except KvTablesError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORAGE_ERROR)
    finally:
        session.close()

    if not ok:
        print_error(f"No record marked for deletion as '{id_value}' in '{table_name}'")
        raise typer.Exit(ec.REFUSED)
    print(f"Purged '{id_value}' from '{table_name}'")

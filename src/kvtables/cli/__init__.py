"""kvt CLI: operator console for inspecting and editing stored tables."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from kvtables.cli import mutate, sync_cmd, tables_cmd

app = typer.Typer(
    name="kvt",
    help="kvt — inspect and edit JSON tables held in a key-value store.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    store: str = "sqlite://kvtables.db"
    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from kvtables import __version__

        print(f"kvt {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    store: Optional[str] = typer.Option(
        None,
        "--store",
        envvar="KVTABLES_STORE",
        help="Store URI (sqlite://kvtables.db, file:///dir or memory://)",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all kvt commands."""
    from kvtables.errors import StorageBackendError
    from kvtables.storage import parse_storage_target

    resolved = store or "sqlite://kvtables.db"
    try:
        parse_storage_target(resolved)
    except StorageBackendError as e:
        raise typer.BadParameter(str(e))

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    state.store = resolved
    state.json_output = json_output
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


app.add_typer(sync_cmd.app, name="sync", help="Inspect and settle records pending sync")

app.command(name="tables")(tables_cmd.tables_cmd)
app.command(name="init")(tables_cmd.init_cmd)
app.command(name="show")(tables_cmd.show_cmd)
app.command(name="get")(tables_cmd.get_cmd)
app.command(name="insert")(mutate.insert_cmd)
app.command(name="update")(mutate.update_cmd)
app.command(name="delete")(mutate.delete_cmd)
app.command(name="latest-id")(sync_cmd.latest_id_cmd)


def main() -> None:
    """Entry point for the kvt CLI."""
    app()

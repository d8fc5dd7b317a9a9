"""CLI helpers for building a session from global options and the environment."""

from __future__ import annotations

import json
import os
from typing import Any

from kvtables.config import KvTablesConfig
from kvtables.session import TableSession


def _config_from_env() -> KvTablesConfig:
    indent = os.getenv("KVTABLES_JSON_INDENT")
    return KvTablesConfig(
        id_field=os.getenv("KVTABLES_ID_FIELD", "id"),
        json_indent=int(indent) if indent else None,
    )


def open_session() -> TableSession:
    """Open a session on the store selected by ``--store`` / ``KVTABLES_STORE``."""
    from kvtables.cli import state

    config = _config_from_env()
    config.store_uri = state.store
    return TableSession.open(state.store, config=config)


def parse_value(text: str) -> Any:
    """Decode a command-line value as JSON; bare words are taken as strings."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text

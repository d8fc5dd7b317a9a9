"""Output formatting helpers for the CLI."""

from __future__ import annotations

import json
import sys
from typing import Any

import yaml


def record_headers(records: list[dict[str, Any]]) -> list[str]:
    """Field names across ``records`` in order of first appearance."""
    headers: list[str] = []
    for record in records:
        for name in record:
            if name not in headers:
                headers.append(name)
    return headers


def print_records(records: list[dict[str, Any]], *, json_mode: bool = False) -> None:
    """Print records as an aligned table (text) or a JSON array."""
    if json_mode:
        print(json.dumps(records, indent=2, default=str))
        return
    headers = record_headers(records)
    rows = [[_cell(r.get(h)) for h in headers] for r in records]
    print_table(headers, rows)


def print_table(headers: list[str], rows: list[list[Any]], *, json_mode: bool = False) -> None:
    """Print data as a table (text) or JSON array."""
    if json_mode:
        data = [dict(zip(headers, row)) for row in rows]
        print(json.dumps(data, indent=2, default=str))
        return

    if not rows:
        return

    widths = [len(h) for h in headers]
    str_rows = [[str(v) for v in row] for row in rows]
    for row in str_rows:
        for i, val in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(val))

    print("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    print("  ".join("-" * w for w in widths))
    for row in str_rows:
        print(
            "  ".join(val.ljust(widths[i]) if i < len(widths) else val for i, val in enumerate(row))
        )


def print_object(data: dict[str, Any], *, json_mode: bool = False, fmt: str = "text") -> None:
    """Print a single record as JSON, YAML or key-value pairs."""
    if json_mode or fmt == "json":
        print(json.dumps(data, indent=2, default=str))
        return
    if fmt == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
        return
    for k, v in data.items():
        print(f"{k}: {_cell(v)}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)

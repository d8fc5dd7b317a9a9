"""Predicate selection over in-memory tables.

Everything here is read-only and stateless: functions take a table (a list of
records) and return a new list holding references to the matching records, in
their original order. Soft-deleted records are *not* filtered out
automatically; callers that want only live data use :func:`select_active`.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

from kvtables.types import Record, SyncState, sync_state_of

logger = logging.getLogger(__name__)

_MISSING = object()


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without coercion between JSON value kinds.

    ``1 == 1.0`` holds (JSON has a single number kind) but ``True`` never
    equals ``1`` and ``"1"`` never equals ``1``, at any nesting depth.
    """
    if left is _MISSING or right is _MISSING:
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, list):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            strict_equals(v, right[k]) for k, v in left.items()
        )
    return bool(left == right)


def _membership_key(value: Any) -> tuple[Any, ...] | None:
    """Hashable key under which strictly equal scalars collide; None for containers."""
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return ("num", value)
    if isinstance(value, str):
        return ("str", value)
    if value is None:
        return ("null",)
    return None


class _ValueSet:
    """Membership under :func:`strict_equals`, hashed for scalar values."""

    def __init__(self, values: Iterable[Any]) -> None:
        self._keys: set[tuple[Any, ...]] = set()
        self._others: list[Any] = []
        for v in values:
            key = _membership_key(v)
            if key is not None:
                self._keys.add(key)
            elif v not in self:
                self._others.append(v)

    def __contains__(self, value: Any) -> bool:
        if value is _MISSING:
            return False
        key = _membership_key(value)
        if key is not None:
            return key in self._keys
        return any(strict_equals(value, other) for other in self._others)


def _field(record: Record, field: str) -> Any:
    return record.get(field, _MISSING)


def select_cond_eq(source: Sequence[Record], field: str, value: Any) -> list[Record]:
    """Return every record whose ``field`` strictly equals ``value``."""
    return [r for r in source if strict_equals(_field(r, field), value)]


def select_cond_in(source: Sequence[Record], field: str, values: Iterable[Any]) -> list[Record]:
    """Return every record whose ``field`` is a member of ``values``."""
    candidates = _ValueSet(values)
    return [r for r in source if _field(r, field) in candidates]


def select_cond_in_join(
    source1: Sequence[Record],
    field: str,
    source2: Sequence[Record],
    values_field: str,
) -> list[Record]:
    """Semi-join: rows of ``source1`` whose ``field`` appears in ``source2[*][values_field]``.

    No fields are merged; each matching ``source1`` row appears once no matter
    how many ``source2`` rows carry its value.
    """
    values = [r[values_field] for r in source2 if values_field in r]
    return select_cond_in(source1, field, values)


def copy_json_object(source: Sequence[Record], id_field: str, id_value: Any) -> Record | None:
    """Return a copy of the single record keyed by ``id_value``.

    Returns None when no record or more than one record matches, meaning the
    value is not a usable unique key under the current data.
    """
    matches = select_cond_eq(source, id_field, id_value)
    if len(matches) != 1:
        logger.debug(
            "unique lookup %s=%r matched %d records", id_field, id_value, len(matches)
        )
        return None
    return copy.deepcopy(matches[0])


def select_by_state(source: Sequence[Record], id_field: str, state: SyncState) -> list[Record]:
    """Return records whose identifier carries the given sync state."""
    return [r for r in source if id_field in r and sync_state_of(r[id_field]) is state]


def select_active(source: Sequence[Record], id_field: str) -> list[Record]:
    """Return records that are not marked for deletion."""
    return [
        r
        for r in source
        if id_field not in r or sync_state_of(r[id_field]) is not SyncState.PENDING_DELETE
    ]

"""Client-side identifier allocation ahead of a sync pass."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from kvtables.types import Record, SyncState, TaggedIdentifier, pending_create

_FLOAT_PREFIX_RE = re.compile(
    r"^[\s\ufeff]*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


def parse_float(value: Any) -> float:
    """Parse the longest numeric prefix of ``value``; NaN when there is none.

    ``"12abc"`` gives 12.0, ``" 3.5"`` gives 3.5 and ``"nw7"`` or ``"rm-7"``
    give NaN, which is what keeps tagged identifiers out of any maximum.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    m = _FLOAT_PREFIX_RE.match(str(value))
    if m is None:
        return math.nan
    token = m.group(1)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def format_number(value: float) -> str:
    """Render a number the way identifiers are written: ``7.0`` becomes ``"7"``.

    Follows the JavaScript number-to-string rules: plain decimals between
    ``1e-7`` and ``1e21``, otherwise exponent form without zero padding
    (``"1e-7"``, ``"1.5e+21"``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Infinity" if value < 0 else "Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, _, exp_text = text.partition("e")
    exponent = int(exp_text)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def get_latest_identifier(source: Sequence[Record], id_field: str) -> str:
    """Return the largest numeric identifier in ``source`` as a string.

    Returns ``"-1"`` for an empty table or one where nothing parses above -1.
    NaN never compares greater, so pending records are skipped without an
    explicit check.
    """
    latest = -1.0
    for record in source:
        candidate = parse_float(record.get(id_field))
        if candidate > latest:
            latest = candidate
    return format_number(latest)


def next_pending_identifier(source: Sequence[Record], id_field: str) -> str:
    """Allocate a locally created identifier that collides with nothing in ``source``.

    The number is one above both the latest confirmed identifier and every
    numeric tail already used by a pending-create identifier. Infinite
    identifiers have no successor and are left out of the maximum.
    """
    highest = -1.0
    for record in source:
        if id_field not in record:
            continue
        value = record[id_field]
        tagged = TaggedIdentifier.parse(value)
        if tagged.state is SyncState.PENDING_CREATE:
            candidate = parse_float(tagged.raw.lstrip("-"))
        elif tagged.state is SyncState.ACTIVE:
            candidate = parse_float(value)
        else:
            continue
        if math.isfinite(candidate) and candidate > highest:
            highest = candidate
    return pending_create(str(math.floor(highest) + 1))


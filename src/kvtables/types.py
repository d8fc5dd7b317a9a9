"""Record types and the sync-state tagging carried by identifiers.

Identifiers are stored as plain strings so that an external synchronization
process can find pending work by scanning prefixes:

- ``"12"``     a record the remote store already knows about
- ``"nw12"``   a record created locally, not pushed yet
- ``"rm-12"``  a record marked for deletion, waiting for the sync sweep

Inside the library the prefix is decoded once into a :class:`SyncState` and
no other module looks at the string form.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

Record = dict[str, Any]
Table = list[Record]
Destination = dict[str, Table]

PENDING_CREATE_PREFIX = "nw"
PENDING_DELETE_PREFIX = "rm-"


class SyncState(str, Enum):
    """Where a record stands relative to the remote store."""

    ACTIVE = "active"
    PENDING_CREATE = "pending_create"
    PENDING_DELETE = "pending_delete"


_PREFIXES: dict[SyncState, str] = {
    SyncState.ACTIVE: "",
    SyncState.PENDING_CREATE: PENDING_CREATE_PREFIX,
    SyncState.PENDING_DELETE: PENDING_DELETE_PREFIX,
}


@dataclass(frozen=True)
class TaggedIdentifier:
    """An identifier split into its sync state and the untagged remainder.

    ``TaggedIdentifier.parse("rm-7")`` gives ``state=PENDING_DELETE`` and
    ``raw="7"``; :meth:`encode` turns it back into ``"rm-7"``.
    """

    state: SyncState
    raw: str

    @classmethod
    def parse(cls, value: Any) -> TaggedIdentifier:
        text = value if isinstance(value, str) else str(value)
        if text.startswith(PENDING_DELETE_PREFIX):
            return cls(SyncState.PENDING_DELETE, text[len(PENDING_DELETE_PREFIX) :])
        if text.startswith(PENDING_CREATE_PREFIX):
            return cls(SyncState.PENDING_CREATE, text[len(PENDING_CREATE_PREFIX) :])
        return cls(SyncState.ACTIVE, text)

    def encode(self) -> str:
        return _PREFIXES[self.state] + self.raw

    def mark_deleted(self) -> TaggedIdentifier:
        """Tag for deletion, keeping the full current identifier as the remainder."""
        if self.state is SyncState.PENDING_DELETE:
            return self
        return TaggedIdentifier(SyncState.PENDING_DELETE, self.encode())

    def __str__(self) -> str:
        return self.encode()


def sync_state_of(value: Any) -> SyncState:
    """Return the sync state encoded in an identifier value."""
    return TaggedIdentifier.parse(value).state


def pending_create(raw: str) -> str:
    """Encode ``raw`` as a locally created identifier."""
    return TaggedIdentifier(SyncState.PENDING_CREATE, raw).encode()


def pending_delete(value: Any) -> str:
    """Encode an existing identifier as marked for deletion."""
    return TaggedIdentifier.parse(value).mark_deleted().encode()

"""Local bookkeeping consumed by a synchronization pass.

The remote protocol lives elsewhere. This module lists what is pending and
applies the local half of each outcome once the remote side has acknowledged
it: a created record gets its server identifier, a deleted record is finally
dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from kvtables.query import select_by_state, select_cond_eq
from kvtables.storage import TableStore
from kvtables.types import Destination, Record, SyncState, TaggedIdentifier, pending_delete

logger = logging.getLogger(__name__)


@dataclass
class PendingChanges:
    """Records waiting for a sync pass."""

    created: list[Record] = field(default_factory=list)
    deleted: list[Record] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.created and not self.deleted


def pending_changes(source: list[Record], id_field: str) -> PendingChanges:
    return PendingChanges(
        created=select_by_state(source, id_field, SyncState.PENDING_CREATE),
        deleted=select_by_state(source, id_field, SyncState.PENDING_DELETE),
    )


def confirm_created(
    store: TableStore,
    destination: Destination,
    table_name: str,
    id_field: str,
    local_id: str,
    server_id: Any,
) -> bool:
    """Replace a pending-create identifier with the one the server assigned."""
    table = destination.get(table_name)
    if table is None:
        return False
    matches = select_cond_eq(table, id_field, local_id)
    if len(matches) != 1:
        logger.debug("confirm skipped: %d records for %s=%r", len(matches), id_field, local_id)
        return False
    target = matches[0]
    if TaggedIdentifier.parse(target[id_field]).state is not SyncState.PENDING_CREATE:
        logger.debug("confirm skipped: %r is not pending creation", local_id)
        return False
    target[id_field] = server_id
    store.persist(table_name, destination)
    logger.info("confirmed %s in %s as %r", local_id, table_name, server_id)
    return True


def purge_deleted(
    store: TableStore,
    destination: Destination,
    table_name: str,
    id_field: str,
    id_value: Any,
) -> bool:
    """Physically remove a record once its remote delete has gone through.

    ``id_value`` may be the tagged identifier (``"rm-4"``) or the one it
    replaced (``"4"``).
    """
    table = destination.get(table_name)
    if table is None:
        return False
    tagged = TaggedIdentifier.parse(id_value)
    key = id_value if tagged.state is SyncState.PENDING_DELETE else pending_delete(id_value)
    matches = select_cond_eq(table, id_field, key)
    if not matches:
        logger.debug("purge skipped: no %s=%r in %s", id_field, key, table_name)
        return False
    target = matches[0]
    index = next(i for i, row in enumerate(table) if row is target)
    del table[index]
    store.persist(table_name, destination)
    logger.info("purged %s from %s", key, table_name)
    return True

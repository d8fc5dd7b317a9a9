"""Insert, update and delete against a destination, persisted through a Table Store.

Each operation returns True on success and False when the request cannot be
applied to the current data (unknown table, shape mismatch, identifier not
found). A False return never leaves a partial write behind. Storage failures
propagate as :mod:`kvtables.errors` exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

from kvtables.query import select_cond_eq
from kvtables.storage import TableStore
from kvtables.types import Destination, Record, SyncState, TaggedIdentifier

logger = logging.getLogger(__name__)


def shape_matches(reference: Record, record: Record) -> bool:
    """True when ``record`` has as many fields as ``reference`` and no unknown names."""
    if len(record) != len(reference):
        return False
    return all(name in reference for name in record)


def insert_json_object(
    store: TableStore,
    destination: Destination,
    record: Record,
    table_name: str,
) -> bool:
    """Append ``record`` to ``destination[table_name]`` and persist the table.

    The first existing row is the shape reference. An existing but empty
    table accepts any record, which then becomes the reference for later
    inserts.
    """
    table = destination.get(table_name)
    if table is None:
        logger.warning("insert refused: table %s not in destination", table_name)
        return False

    if table and not shape_matches(table[0], record):
        logger.warning(
            "insert refused: record fields %s do not match table %s fields %s",
            sorted(record),
            table_name,
            sorted(table[0]),
        )
        return False

    table.append(record)
    store.persist(table_name, destination)
    logger.debug("inserted record into %s (%d rows)", table_name, len(table))
    return True


def update_json_object(
    store: TableStore,
    destination: Destination,
    id_field: str,
    id_value: Any,
    table_name: str,
    updated_record: Record,
) -> bool:
    """Overwrite the first record keyed by ``id_value`` with ``updated_record``'s values.

    Only the matched record's existing fields are written. Names that exist
    only in ``updated_record`` are ignored, and fields the update omits keep
    their current value. ``id_value`` is compared against the identifier as
    currently stored, tag included.
    """
    table = destination.get(table_name)
    if table is None:
        logger.debug("update skipped: table %s not in destination", table_name)
        return False

    matches = select_cond_eq(table, id_field, id_value)
    if not matches:
        logger.debug("update skipped: no %s=%r in %s", id_field, id_value, table_name)
        return False

    target = matches[0]
    for name in list(target):
        if name in updated_record:
            target[name] = updated_record[name]
    store.persist(table_name, destination)
    logger.debug("updated %s=%r in %s", id_field, id_value, table_name)
    return True


def delete_json_object(
    store: TableStore,
    destination: Destination,
    id_field: str,
    id_value: Any,
    table_name: str,
) -> bool:
    """Delete the record keyed by ``id_value``, deferring it when the remote store has it.

    - pending-create records never reached the remote store and are removed
      outright;
    - records already marked for deletion are left as they are;
    - anything else is relabeled ``rm-<id>``. The relabel is written by
      reloading the table from ``store`` and updating that fresh copy, so the
      marker lands even when ``destination`` is older than what is stored.
    """
    table = destination.get(table_name)
    if table is None:
        logger.debug("delete skipped: table %s not in destination", table_name)
        return False

    matches = select_cond_eq(table, id_field, id_value)
    if not matches:
        logger.debug("delete skipped: no %s=%r in %s", id_field, id_value, table_name)
        return False

    target = matches[0]
    tagged = TaggedIdentifier.parse(target[id_field])

    if tagged.state is SyncState.PENDING_CREATE:
        index = next(i for i, row in enumerate(table) if row is target)
        del table[index]
        store.persist(table_name, destination)
        logger.debug("removed unsynced record %s from %s", tagged, table_name)
        return True

    if tagged.state is SyncState.PENDING_DELETE:
        logger.debug("record %s in %s already marked for deletion", tagged, table_name)
        return True

    marked_record = dict(target)
    marked_record[id_field] = tagged.mark_deleted().encode()
    fresh = store.load(table_name)
    marked = update_json_object(store, fresh, id_field, id_value, table_name, marked_record)
    if marked:
        target[id_field] = marked_record[id_field]
        logger.info("marked %s=%r in %s for deletion", id_field, id_value, table_name)
    else:
        logger.warning(
            "could not mark %s=%r for deletion: not present in stored %s",
            id_field,
            id_value,
            table_name,
        )
    return marked

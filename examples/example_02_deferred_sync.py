"""Example 02: Deferred Sync - pending creates and deletes.

This example demonstrates the sync-state tagging:
- Allocating pending-create identifiers on the client
- Deleting unsynced records (removed at once) and synced ones (marked rm-)
- Listing pending work and settling it after a remote round-trip
"""

from kvtables import TableSession


def main():
    """Run the deferred sync example."""
    print("=" * 80)
    print("KVTABLES DEFERRED SYNC EXAMPLE")
    print("=" * 80)

    with TableSession.open("memory://") as tables:
        tables.create_table("Notes", [{"id": "1", "text": "first"}, {"id": "2", "text": "second"}])

        # Step 1: Create locally
        notes = tables.load("Notes")
        new_id = tables.next_identifier(notes, "Notes")
        tables.insert(notes, {"id": new_id, "text": "draft"}, "Notes")
        print(f"\nCreated {new_id}; latest confirmed id is {tables.latest_identifier('Notes')}")

        # Step 2: Delete a synced record; it stays until the sync sweep
        notes = tables.load("Notes")
        tables.delete(notes, "1", "Notes")
        print(f"All ids:    {[n['id'] for n in tables.rows('Notes')]}")
        print(f"Active ids: {[n['id'] for n in tables.rows('Notes', active_only=True)]}")

        # Step 3: A sync pass pushes pending work, then settles it locally
        pending = tables.pending("Notes")
        print(f"\nPending creates: {[n['id'] for n in pending.created]}")
        print(f"Pending deletes: {[n['id'] for n in pending.deleted]}")

        notes = tables.load("Notes")
        for note in pending.created:
            server_id = str(int(tables.latest_identifier("Notes")) + 1)
            tables.confirm(notes, "Notes", note["id"], server_id)
        for note in pending.deleted:
            tables.purge(notes, "Notes", note["id"])

        print(f"\nAfter sync: {tables.rows('Notes')}")


if __name__ == "__main__":
    main()

"""Example 01: Basic Usage - tables over a key-value store.

This example demonstrates the fundamental operations:
- Seeding a table in a store
- Equality, membership and semi-join selection
- Unique lookup with copy_json_object
- Inserting records with a shape check
"""

from kvtables import (
    MemoryTableStore,
    copy_json_object,
    insert_json_object,
    select_cond_eq,
    select_cond_in,
    select_cond_in_join,
)


def main():
    """Run the basic usage example."""
    print("=" * 80)
    print("KVTABLES BASIC USAGE EXAMPLE")
    print("=" * 80)

    # Step 1: Seed the store
    # Each key holds one table as a JSON document {name: [record, ...]}.
    store = MemoryTableStore(
        {
            "Users": [
                {"id": "1", "name": "Alice", "city": "Oslo"},
                {"id": "2", "name": "Bob", "city": "Rome"},
                {"id": "3", "name": "Cleo", "city": "Oslo"},
            ],
            "Orders": [
                {"id": "10", "user_id": "1", "total": 12.5},
                {"id": "11", "user_id": "3", "total": 4},
            ],
        }
    )
    users = store.load("Users")
    orders = store.load("Orders")

    # Step 2: Query
    print("\nUsers in Oslo:")
    for user in select_cond_eq(users["Users"], "city", "Oslo"):
        print(f"  {user['id']}: {user['name']}")

    print("\nUsers 2 and 3:")
    for user in select_cond_in(users["Users"], "id", ["2", "3"]):
        print(f"  {user['id']}: {user['name']}")

    print("\nUsers with at least one order:")
    for user in select_cond_in_join(users["Users"], "id", orders["Orders"], "user_id"):
        print(f"  {user['id']}: {user['name']}")

    # Step 3: Unique lookup
    bob = copy_json_object(users["Users"], "id", "2")
    print(f"\nLookup id=2: {bob}")
    print(f"Lookup id=9: {copy_json_object(users['Users'], 'id', '9')}")

    # Step 4: Insert
    # The first row is the shape reference; mismatched records are refused.
    ok = insert_json_object(store, users, {"id": "nw4", "name": "Dan", "city": "Kyiv"}, "Users")
    print(f"\nInsert matching record: {ok}")
    ok = insert_json_object(store, users, {"id": "nw5", "name": "Eve"}, "Users")
    print(f"Insert record missing 'city': {ok}")
    print(f"Stored rows: {len(store.load('Users')['Users'])}")


if __name__ == "__main__":
    main()

"""Tests for insert, update and delete, including the deferred-delete convention."""

from __future__ import annotations

import pytest

from kvtables.errors import TableNotFoundError
from kvtables.mutation import (
    delete_json_object,
    insert_json_object,
    shape_matches,
    update_json_object,
)
from kvtables.storage import MemoryTableStore


def _stored_ids(store, table_name="Users"):
    return [r["id"] for r in store.load(table_name)[table_name]]


class TestShapeMatches:
    def test_same_fields(self):
        assert shape_matches({"id": "1", "name": "A"}, {"name": "B", "id": "2"})

    def test_extra_field(self):
        assert not shape_matches({"id": "1"}, {"id": "2", "name": "B"})

    def test_missing_field(self):
        assert not shape_matches({"id": "1", "name": "A"}, {"id": "2"})

    def test_renamed_field(self):
        assert not shape_matches({"id": "1", "name": "A"}, {"id": "2", "title": "B"})


class TestInsert:
    def test_appends_and_persists(self, store, users):
        assert insert_json_object(store, users, {"id": "3", "name": "C"}, "Users")
        assert [r["id"] for r in users["Users"]] == ["1", "2", "3"]
        assert _stored_ids(store) == ["1", "2", "3"]

    def test_field_order_does_not_matter(self, store, users):
        assert insert_json_object(store, users, {"name": "C", "id": "3"}, "Users")

    @pytest.mark.parametrize(
        "record",
        [
            {"id": "3"},
            {"id": "3", "name": "C", "age": 4},
            {"id": "3", "title": "C"},
        ],
    )
    def test_shape_mismatch_leaves_table_untouched(self, store, users, record):
        before = store.raw("Users")
        assert not insert_json_object(store, users, record, "Users")
        assert len(users["Users"]) == 2
        assert store.raw("Users") == before

    def test_missing_table(self, store, users):
        assert not insert_json_object(store, users, {"id": "1", "name": "A"}, "Orders")
        assert "Orders" not in store.keys()

    def test_empty_table_accepts_first_record(self):
        store = MemoryTableStore({"Tags": []})
        tags = store.load("Tags")
        assert insert_json_object(store, tags, {"id": "1", "label": "x"}, "Tags")
        # The first row now fixes the shape
        assert not insert_json_object(store, tags, {"id": "2"}, "Tags")
        assert store.load("Tags") == {"Tags": [{"id": "1", "label": "x"}]}

    def test_only_target_table_is_written(self, store):
        destination = {"Users": store.load("Users")["Users"], "Other": [{"x": 1}]}
        assert insert_json_object(store, destination, {"id": "3", "name": "C"}, "Users")
        assert store.keys() == ["Users"]


class TestUpdate:
    def test_overwrites_existing_fields(self, store, users):
        assert update_json_object(store, users, "id", "2", "Users", {"id": "2", "name": "Bee"})
        assert users["Users"][1] == {"id": "2", "name": "Bee"}
        assert store.load("Users")["Users"][1]["name"] == "Bee"

    def test_unknown_fields_are_ignored(self, store, users):
        assert update_json_object(store, users, "id", "1", "Users", {"name": "Z", "age": 3})
        assert users["Users"][0] == {"id": "1", "name": "Z"}

    def test_omitted_fields_keep_their_value(self, store, users):
        assert update_json_object(store, users, "id", "1", "Users", {"name": "Z"})
        assert users["Users"][0] == {"id": "1", "name": "Z"}

    def test_no_match(self, store, users):
        before = store.raw("Users")
        assert not update_json_object(store, users, "id", "9", "Users", {"name": "Z"})
        assert store.raw("Users") == before

    def test_missing_table(self, store, users):
        assert not update_json_object(store, users, "id", "1", "Orders", {"name": "Z"})

    def test_only_first_match_updated(self):
        store = MemoryTableStore({"T": [{"id": "1", "v": 1}, {"id": "1", "v": 2}]})
        t = store.load("T")
        assert update_json_object(store, t, "id", "1", "T", {"v": 9})
        assert [r["v"] for r in t["T"]] == [9, 2]

    def test_matches_current_identifier(self, store, users):
        assert delete_json_object(store, users, "id", "1", "Users")
        fresh = store.load("Users")
        assert not update_json_object(store, fresh, "id", "1", "Users", {"name": "Z"})
        assert update_json_object(store, fresh, "id", "rm-1", "Users", {"name": "Z"})


class TestDelete:
    def test_pending_create_is_removed(self, store, users):
        assert insert_json_object(store, users, {"id": "nw-4", "name": "D"}, "Users")
        assert delete_json_object(store, users, "id", "nw-4", "Users")
        assert len(users["Users"]) == 2
        assert _stored_ids(store) == ["1", "2"]

    def test_confirmed_record_is_marked(self, store, users):
        assert delete_json_object(store, users, "id", "1", "Users")
        assert len(users["Users"]) == 2
        assert users["Users"][0]["id"] == "rm-1"
        assert _stored_ids(store) == ["rm-1", "2"]

    def test_marker_survives_stale_destination(self, store):
        stale = store.load("Users")
        other = store.load("Users")
        assert insert_json_object(store, other, {"id": "nw5", "name": "E"}, "Users")

        assert delete_json_object(store, stale, "id", "2", "Users")
        assert _stored_ids(store) == ["1", "rm-2", "nw5"]

    def test_record_absent_from_store(self, store):
        destination = {"Users": [{"id": "9", "name": "Z"}]}
        assert not delete_json_object(store, destination, "id", "9", "Users")
        assert destination["Users"][0]["id"] == "9"
        assert _stored_ids(store) == ["1", "2"]

    def test_already_marked_is_left_alone(self, store, users):
        assert delete_json_object(store, users, "id", "1", "Users")
        fresh = store.load("Users")
        assert delete_json_object(store, fresh, "id", "rm-1", "Users")
        assert _stored_ids(store) == ["rm-1", "2"]

    def test_not_found(self, store, users):
        before = store.raw("Users")
        assert not delete_json_object(store, users, "id", "7", "Users")
        assert store.raw("Users") == before

    def test_missing_table_in_destination(self, store, users):
        assert not delete_json_object(store, users, "id", "1", "Orders")

    def test_missing_table_in_store(self):
        store = MemoryTableStore()
        destination = {"Users": [{"id": "1", "name": "A"}]}
        with pytest.raises(TableNotFoundError):
            delete_json_object(store, destination, "id", "1", "Users")


class TestUsersScenario:
    def test_insert_delete_lifecycle(self, store, users):
        assert insert_json_object(store, users, {"id": "3", "name": "C"}, "Users")
        assert len(users["Users"]) == 3

        assert delete_json_object(store, users, "id", "1", "Users")
        assert len(users["Users"]) == 3
        assert users["Users"][0]["id"] == "rm-1"

        users = store.load("Users")
        assert insert_json_object(store, users, {"id": "nw-4", "name": "D"}, "Users")
        assert len(users["Users"]) == 4
        assert delete_json_object(store, users, "id", "nw-4", "Users")
        assert len(users["Users"]) == 3
        assert _stored_ids(store) == ["rm-1", "2", "3"]

"""Tests for kvt tables / init / show / get."""

import json

from kvtables.cli import app
from tests.cli.conftest import invoke


def test_tables(runner, seeded_store):
    result = invoke(runner, ["--json", "tables"], seeded_store)
    assert result.exit_code == 0
    assert json.loads(result.output) == [{"table": "Users", "rows": 3}]


def test_init_creates_table(runner, store_uri):
    result = invoke(runner, ["init", "Tags", '[{"id": "1", "label": "x"}]'], store_uri)
    assert result.exit_code == 0
    result = invoke(runner, ["--json", "show", "Tags"], store_uri)
    assert json.loads(result.output) == [{"id": "1", "label": "x"}]


def test_init_refuses_existing(runner, seeded_store):
    result = invoke(runner, ["init", "Users"], seeded_store)
    assert result.exit_code == 1


def test_init_force_replaces(runner, seeded_store):
    result = invoke(runner, ["init", "Users", "[]", "--force"], seeded_store)
    assert result.exit_code == 0
    result = invoke(runner, ["--json", "show", "Users"], seeded_store)
    assert json.loads(result.output) == []


def test_init_rejects_bad_rows(runner, store_uri):
    result = invoke(runner, ["init", "Tags", "[1, 2]"], store_uri)
    assert result.exit_code == 2


def test_show_text(runner, seeded_store):
    result = invoke(runner, ["show", "Users"], seeded_store)
    assert result.exit_code == 0
    assert "Alice" in result.output
    assert "name" in result.output


def test_show_where(runner, seeded_store):
    result = invoke(
        runner, ["--json", "show", "Users", "--where", "name", "--where", "Bob"], seeded_store
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == [{"id": "2", "name": "Bob"}]


def test_show_active_hides_marked(runner, seeded_store):
    invoke(runner, ["delete", "Users", "1"], seeded_store)
    result = invoke(runner, ["--json", "show", "Users", "--active"], seeded_store)
    ids = [r["id"] for r in json.loads(result.output)]
    assert ids == ["2", "nw3"]


def test_show_missing_table(runner, seeded_store):
    result = invoke(runner, ["show", "Nope"], seeded_store)
    assert result.exit_code == 3


def test_get(runner, seeded_store):
    result = invoke(runner, ["--json", "get", "Users", "2"], seeded_store)
    assert result.exit_code == 0
    assert json.loads(result.output) == {"id": "2", "name": "Bob"}


def test_get_yaml(runner, seeded_store):
    result = invoke(runner, ["get", "Users", "2", "--format", "yaml"], seeded_store)
    assert result.exit_code == 0
    assert "name: Bob" in result.output


def test_get_missing(runner, seeded_store):
    result = invoke(runner, ["get", "Users", "9"], seeded_store)
    assert result.exit_code == 1


def test_bad_store_uri(runner):
    result = runner.invoke(app, ["--store", "redis://x", "tables"])
    assert result.exit_code != 0

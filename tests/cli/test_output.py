"""Tests for CLI output helpers."""

import json

from kvtables.cli._output import (
    print_error,
    print_object,
    print_records,
    print_table,
    record_headers,
)


def test_record_headers_first_appearance_order():
    assert record_headers([{"id": 1, "a": 2}, {"b": 3, "id": 4}]) == ["id", "a", "b"]


def test_print_records_json(capsys):
    print_records([{"id": "1"}], json_mode=True)
    assert json.loads(capsys.readouterr().out) == [{"id": "1"}]


def test_print_records_text_fills_missing(capsys):
    print_records([{"id": "1", "tags": ["x"]}, {"id": "2"}])
    out = capsys.readouterr().out
    assert '["x"]' in out
    assert out.splitlines()[0].split() == ["id", "tags"]


def test_print_table_empty(capsys):
    print_table(["id"], [], json_mode=False)
    assert capsys.readouterr().out == ""


def test_print_object_text(capsys):
    print_object({"key": "val"})
    assert "key: val" in capsys.readouterr().out


def test_print_object_yaml(capsys):
    print_object({"key": "val", "n": 2}, fmt="yaml")
    assert capsys.readouterr().out == "key: val\nn: 2\n"


def test_print_error(capsys):
    print_error("boom")
    assert capsys.readouterr().err == "Error: boom\n"

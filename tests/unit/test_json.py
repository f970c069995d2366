"""Tests for JSON helpers."""

import pytest

from catalyst.core.json import (
    JSONParseError,
    canonical_dumps,
    loads,
    read_json_file,
    safe_json_dumps,
    write_json_file,
)


@pytest.mark.unit
def test_canonical_dumps_sorts_keys():
    assert canonical_dumps({"b": 1, "a": {"d": 2, "c": 3}}) == b'{"a":{"c":3,"d":2},"b":1}'


@pytest.mark.unit
def test_safe_json_dumps_indent():
    assert safe_json_dumps({"a": 1}) == '{"a":1}'
    assert "\n" in safe_json_dumps({"a": 1}, indent=2)


@pytest.mark.unit
def test_loads_invalid():
    with pytest.raises(JSONParseError):
        loads("{not json")


@pytest.mark.unit
def test_file_round_trip(tmp_path):
    path = tmp_path / "nested" / "doc.json"
    write_json_file(path, {"schemaVersion": "1.0.0", "items": [1, 2]})

    assert read_json_file(path) == {"schemaVersion": "1.0.0", "items": [1, 2]}


@pytest.mark.unit
def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_json_file(tmp_path / "missing.json")

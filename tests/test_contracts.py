"""Tests for the bundled audit result schema."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from sql_inspect.contracts.load import load_schema, validate_file, validate_instance

SCHEMA = "audit_result.schema.json"

GOOD = {
    "query": "DROP TABLE t1",
    "type": "DropTable",
    "level": "WARN",
    "affected_rows": 0,
    "messages": ["禁止执行DROP TABLE操作[`t1`]"],
    "summary": ["禁止执行DROP TABLE操作[`t1`]"],
    "fix_suggestion": "",
}


def test_schema_loads() -> None:
    schema = load_schema(SCHEMA)
    assert schema["type"] == "array"
    assert "ERROR" in schema["items"]["properties"]["type"]["enum"]


def test_valid_instance() -> None:
    validate_instance([GOOD], SCHEMA)
    validate_instance([], SCHEMA)


@pytest.mark.parametrize(
    "patch",
    [
        {"messages": []},
        {"affected_rows": -1},
        {"type": "CreateIndex"},
        {"finger_id": "ABC"},
    ],
)
def test_invalid_instance(patch: dict) -> None:
    with pytest.raises(jsonschema.ValidationError):
        validate_instance([{**GOOD, **patch}], SCHEMA)


def test_missing_field() -> None:
    bad = dict(GOOD)
    del bad["summary"]
    with pytest.raises(jsonschema.ValidationError):
        validate_instance([bad], SCHEMA)


def test_validate_file(tmp_path: Path) -> None:
    path = tmp_path / "results.json"
    path.write_text(json.dumps([GOOD], ensure_ascii=False), encoding="utf-8")
    validate_file(path, SCHEMA)


def test_unknown_schema() -> None:
    with pytest.raises(FileNotFoundError):
        load_schema("nope.schema.json")

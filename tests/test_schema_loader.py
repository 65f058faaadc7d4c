"""Tests for schema loading and working-root normalization."""

from __future__ import annotations

from pathlib import Path

import pytest

from json_schema_bridge.errors import InvalidReferenceError, SchemaLoadError
from json_schema_bridge.schema_loader import load_schema_file, normalize_schema
from tests.helpers import _write_schema


def test_object_schema_is_returned_unchanged() -> None:
    """An object schema should be used as the working root as is."""
    document = {"type": "object", "properties": {"a": {"type": "string"}}}
    assert normalize_schema(document) is document


def test_top_level_reference_is_merged_with_siblings() -> None:
    """The target wins on conflicts; original keys survive elsewhere."""
    document = {
        "$ref": "#/definitions/Root",
        "title": "Outer",
        "default": {"a": "x"},
        "definitions": {
            "Root": {
                "type": "object",
                "title": "Inner",
                "properties": {"a": {"type": "string"}},
            },
        },
    }

    root = normalize_schema(document)

    assert root["type"] == "object"
    assert root["title"] == "Inner"
    assert root["default"] == {"a": "x"}
    assert root["properties"] == {"a": {"type": "string"}}
    assert root["definitions"] is document["definitions"]


def test_scalar_top_level_is_returned_unchanged() -> None:
    document = {"type": "string"}
    assert normalize_schema(document) is document


def test_object_schema_with_reference_is_not_dereferenced() -> None:
    document = {"type": "object", "$ref": "./elsewhere.json"}
    assert normalize_schema(document) is document


def test_external_top_level_reference_raises() -> None:
    with pytest.raises(InvalidReferenceError):
        normalize_schema({"$ref": "http://example.com/schema.json"})


def test_load_schema_file_reads_json_object(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, {"type": "object", "properties": {}})
    assert load_schema_file(schema_path) == {"type": "object", "properties": {}}


def test_load_schema_file_accepts_string_path(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, {"type": "string"})
    assert load_schema_file(str(schema_path)) == {"type": "string"}


def test_missing_schema_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SchemaLoadError, match="Schema file not found"):
        load_schema_file(tmp_path / "absent.json")


def test_invalid_json_raises(tmp_path: Path) -> None:
    schema_path = tmp_path / "schema.json"
    schema_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SchemaLoadError, match="Failed to parse JSON schema") as exc_info:
        load_schema_file(schema_path)
    assert exc_info.value.__cause__ is not None


def test_non_object_top_level_raises(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, ["not", "an", "object"])

    with pytest.raises(SchemaLoadError, match="Top-level schema must be a JSON object"):
        load_schema_file(schema_path)


def test_unreadable_schema_file_raises(tmp_path: Path) -> None:
    """A directory in place of the file should be reported as a read failure."""
    schema_dir = tmp_path / "schema.json"
    schema_dir.mkdir()

    with pytest.raises(SchemaLoadError, match="Failed to read schema file"):
        load_schema_file(schema_dir)

"""Schema loading and normalization for json_schema_bridge.

The root document is either handed over as an already parsed mapping or
read from a local JSON file. It is normalized exactly once, when a compiler
is constructed, into the *working root* that field paths are walked from.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import SchemaLoadError
from .schema_reference import resolve_reference


def load_schema_file(schema_path: str | Path) -> dict[str, Any]:
    """Load a root JSON schema document from a local file.

    Only the root document is read. ``$ref`` targets are always resolved
    inside this document and never fetched from disk or network.

    Args:
        schema_path: Path to the schema file.

    Raises:
        SchemaLoadError: If the file does not exist or cannot be read,
            contains invalid JSON, or the top-level value is not a JSON
            object.

    Returns:
        Parsed schema document.
    """
    path = Path(schema_path)
    if not path.exists():
        raise SchemaLoadError(f"Schema file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise SchemaLoadError(f"Failed to read schema file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SchemaLoadError(f"Failed to parse JSON schema: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaLoadError("Top-level schema must be a JSON object")

    return data


def normalize_schema(document: Mapping[str, Any]) -> Mapping[str, Any]:
    """Produce the working root for a schema document.

    - An object schema (``"type": "object"``) is returned unchanged.
    - A top-level ``$ref`` is resolved against the document itself and the
      target is merged over the original keys: target keys win, keys only
      present in the original survive.
    - Anything else (a scalar or array top level) is returned unchanged.

    Args:
        document: The raw root schema document.

    Raises:
        InvalidReferenceError: If the top-level ``$ref`` is not internal.
        ReferenceNotFoundError: If the top-level ``$ref`` target is missing.

    Returns:
        The working root.
    """
    if document.get("type") == "object":
        return document

    reference = document.get("$ref")
    if reference:
        return {**document, **resolve_reference(reference, document)}

    return document

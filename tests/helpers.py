"""Helper functions for tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def _write_schema(tmp_path: Path, data: Any, name: str = "schema.json") -> Path:
    """Write schema file to temporary directory.

    Args:
        tmp_path: Temporary directory path.
        data: Schema data to write as JSON.
        name: File name inside ``tmp_path``.

    Returns:
        Path of the written file.
    """
    schema_path = tmp_path / name
    schema_path.write_text(json.dumps(data), encoding="utf-8")
    return schema_path

"""Top-level package for json_schema_bridge.

This package resolves dotted, bracketed or pointer field paths against a
JSON schema document and caches a flattened, reference-resolved definition
for every path it visits, so that form layers can derive props, initial
values and types without re-walking the schema.
"""

from __future__ import annotations

from .errors import (
    FieldNotFoundError,
    InvalidFieldPathError,
    InvalidReferenceError,
    NoPropertiesError,
    NotAnArrayError,
    ReferenceNotFoundError,
    SchemaBridgeError,
    SchemaLoadError,
    UnrepresentableTypeError,
)
from .field_cache import CompiledFieldCache, CompiledFieldEntry
from .field_compiler import FieldCompiler
from .field_path import WILDCARD, join_name, to_canonical_key, to_segments
from .schema_bridge import JSONSchemaBridge
from .schema_loader import load_schema_file, normalize_schema
from .schema_reference import resolve_reference

__all__ = [
    "JSONSchemaBridge",
    "FieldCompiler",
    "CompiledFieldCache",
    "CompiledFieldEntry",
    "WILDCARD",
    "join_name",
    "to_canonical_key",
    "to_segments",
    "load_schema_file",
    "normalize_schema",
    "resolve_reference",
    "SchemaBridgeError",
    "InvalidReferenceError",
    "ReferenceNotFoundError",
    "NotAnArrayError",
    "NoPropertiesError",
    "FieldNotFoundError",
    "UnrepresentableTypeError",
    "InvalidFieldPathError",
    "SchemaLoadError",
]

"""Shared fixtures for tests."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def person_schema() -> dict[str, Any]:
    """Object schema exercising references, arrays and combinators."""

    return {
        "type": "object",
        "definitions": {
            "Address": {
                "type": "object",
                "properties": {
                    "street": {"type": "string"},
                    "city": {"type": "string", "default": "Berlin"},
                },
                "required": ["street"],
            },
            "Named": {
                "properties": {"nickname": {"type": "string"}},
                "required": ["nickname"],
            },
        },
        "properties": {
            "firstName": {"type": "string", "title": "Given name"},
            "age": {"type": "integer"},
            "height": {"type": "number"},
            "birthday": {"type": "string", "format": "date-time"},
            "nothing": {"type": "null"},
            "address": {"$ref": "#/definitions/Address"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "point": {
                "type": "array",
                "items": [{"type": "number"}, {"type": "string"}],
            },
            "friends": {
                "type": "array",
                "items": {"$ref": "#/definitions/Address"},
            },
            "alias": {
                "allOf": [
                    {"$ref": "#/definitions/Named"},
                    {
                        "type": "object",
                        "properties": {"nickname": {"type": "integer"}},
                    },
                ],
            },
        },
        "required": ["firstName", "address"],
    }

"""Tests for errors module exception classes."""

from __future__ import annotations

import pytest

from json_schema_bridge.errors import (
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


def test_error_keeps_message_path_and_reference() -> None:
    """SchemaBridgeError should expose message, path and reference."""
    error = SchemaBridgeError("Broken", path="a.b", reference="#/x")
    assert error.message == "Broken"
    assert error.path == "a.b"
    assert error.reference == "#/x"
    assert str(error) == "Broken"


def test_error_path_and_reference_default_to_none() -> None:
    """Optional attributes should default to None."""
    error = SchemaBridgeError("Broken")
    assert error.path is None
    assert error.reference is None


@pytest.mark.parametrize(
    "error_class",
    [
        InvalidReferenceError,
        ReferenceNotFoundError,
        NotAnArrayError,
        NoPropertiesError,
        FieldNotFoundError,
        UnrepresentableTypeError,
        InvalidFieldPathError,
        SchemaLoadError,
    ],
)
def test_every_error_derives_from_base(error_class: type[SchemaBridgeError]) -> None:
    """All error kinds should be catchable through SchemaBridgeError."""
    with pytest.raises(SchemaBridgeError):
        raise error_class("problem", path="p")


def test_error_kinds_are_distinct() -> None:
    """Catching one kind should not catch another."""
    with pytest.raises(FieldNotFoundError):
        try:
            raise FieldNotFoundError("missing")
        except NotAnArrayError:  # pragma: no cover
            pytest.fail("FieldNotFoundError caught as NotAnArrayError")

"""Custom exception types used by json_schema_bridge."""

from __future__ import annotations


class SchemaBridgeError(Exception):
    """Base class for every error raised while resolving a field.

    All errors are precondition violations on the schema document or on the
    requested path. They are never transient: resolution aborts immediately
    and no partial result is produced.

    Attributes:
        message: Human-readable description of the problem. Examples include:
            - 'Field not found in schema: "profile.age"'
            - 'Reference not found in schema: "#/definitions/Missing"'
        path: Canonical key of the path being resolved, if any.
        reference: The offending ``$ref`` string, if the error is about one.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        reference: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.reference = reference


class InvalidReferenceError(SchemaBridgeError):
    """A reference does not start with ``#``.

    Only in-document references are supported.
    """


class ReferenceNotFoundError(SchemaBridgeError):
    """A reference points at a location absent from the document."""


class NotAnArrayError(SchemaBridgeError):
    """An index or wildcard segment was applied to a non-array definition."""


class NoPropertiesError(SchemaBridgeError):
    """A property name was applied to an object definition without properties."""


class FieldNotFoundError(SchemaBridgeError):
    """No descent step yielded a definition for a path segment."""


class UnrepresentableTypeError(SchemaBridgeError):
    """A field resolved to the ``null`` type, which has no Python type."""


class InvalidFieldPathError(SchemaBridgeError):
    """A literal field path could not be parsed."""


class SchemaLoadError(SchemaBridgeError):
    """The root schema document could not be read from disk."""

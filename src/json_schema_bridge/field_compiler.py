"""Path-walking field compiler for json_schema_bridge.

The compiler walks a field path from the working root of a schema, one
segment at a time, dereferencing ``$ref`` nodes and descending into object,
array and combinator (``allOf``/``anyOf``/``oneOf``) structure. Every prefix
it visits leaves a :class:`CompiledFieldEntry` in the compiler's
:class:`CompiledFieldCache`.
"""

from __future__ import annotations

import datetime
import enum
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .errors import (
    FieldNotFoundError,
    NoPropertiesError,
    NotAnArrayError,
    UnrepresentableTypeError,
)
from .field_cache import CompiledFieldCache, CompiledFieldEntry
from .field_path import (
    WILDCARD,
    FieldName,
    is_index_segment,
    to_canonical_key,
    to_segments,
)
from .schema_loader import normalize_schema
from .schema_reference import dereference

logger = logging.getLogger(__name__)

# Search order for a property hidden behind combinators. A property defined
# in several branches resolves to the allOf branch first.
COMBINATOR_KEYS = ("allOf", "anyOf", "oneOf")

_TYPE_MAP: Mapping[str, type] = {
    "string": str,
    "number": float,
    "integer": int,
    "object": dict,
    "array": list,
    "boolean": bool,
}


class NodeShape(enum.Enum):
    """Structural shape of a schema node, as seen by the path walk."""

    OBJECT = "object"
    ARRAY = "array"
    COMBINATOR = "combinator"
    SCALAR = "scalar"


def node_shape(node: Mapping[str, Any]) -> NodeShape:
    """Classify a schema node by its declared type and combinator keys."""

    declared = node.get("type")
    if declared == "object":
        return NodeShape.OBJECT
    if declared == "array":
        return NodeShape.ARRAY
    if any(node.get(key) is not None for key in COMBINATOR_KEYS):
        return NodeShape.COMBINATOR
    return NodeShape.SCALAR


def _required_names(
    definition: Mapping[str, Any],
    previous: CompiledFieldEntry | None,
) -> Sequence[str]:
    """Return the required names applying to children of ``definition``.

    A node without its own ``required`` list falls back to the list merged
    from combinators when its prefix was compiled.
    """
    required = definition.get("required")
    if required is None and previous is not None:
        required = previous.required
    if isinstance(required, (list, tuple)):
        return required
    return ()


def _find_in_combinators(
    definition: Mapping[str, Any],
    segment: str,
    document: Mapping[str, Any],
    path: str,
) -> Any:
    for key in COMBINATOR_KEYS:
        for member in definition.get(key) or ():
            member = dereference(member, document, path)
            if not isinstance(member, Mapping):
                continue
            properties = member.get("properties")
            if isinstance(properties, Mapping) and properties.get(segment) is not None:
                return properties[segment]
    return None


def _descend(
    definition: Mapping[str, Any],
    segment: str,
    document: Mapping[str, Any],
    path: str,
) -> Any:
    """Take one step from ``definition`` towards ``segment``.

    Raises:
        NotAnArrayError: If an index or wildcard meets a non-array node.
        NoPropertiesError: If a name meets an object node without properties.
    """
    shape = node_shape(definition)

    if segment == WILDCARD or is_index_segment(segment):
        if shape is not NodeShape.ARRAY:
            raise NotAnArrayError(
                f'Field is not an array in schema: "{path}" '
                f'(segment "{segment}" requires an array)',
                path=path,
            )
        items = definition.get("items")
        if isinstance(items, list):
            # Tuple-typed array: one schema per position, no wildcard.
            if segment == WILDCARD or int(segment) >= len(items):
                return None
            return items[int(segment)]
        return items

    if shape is NodeShape.OBJECT:
        properties = definition.get("properties")
        if properties is None:
            raise NoPropertiesError(
                f'Field properties not found in schema: "{path}"',
                path=path,
            )
        return properties.get(segment)

    return _find_in_combinators(definition, segment, document, path)


def _compile_entry(
    definition: Mapping[str, Any],
    document: Mapping[str, Any],
    is_required: bool,
    path: str,
) -> CompiledFieldEntry:
    """Build the compiled entry for an already dereferenced definition.

    Combinator members are reference-resolved, then naively flattened:
    properties merge with later members winning, required lists are
    concatenated, and the first declared member type is used when the
    definition has none. Branch compatibility is not checked.
    """
    combinators: dict[str, tuple[Any, ...]] = {}
    for key in COMBINATOR_KEYS:
        members = definition.get(key)
        if members is not None:
            combinators[key] = tuple(
                dereference(member, document, path) for member in members
            )

    partials = [
        member
        for members in combinators.values()
        for member in members
        if isinstance(member, Mapping)
    ]

    if not partials:
        return CompiledFieldEntry(
            properties=definition.get("properties"),
            all_of=combinators.get("allOf"),
            any_of=combinators.get("anyOf"),
            one_of=combinators.get("oneOf"),
            is_required=is_required,
        )

    properties: dict[str, Any] = {}
    required: list[str] = []
    declared_types: list[Any] = []
    for member in partials:
        if member.get("properties"):
            properties.update(member["properties"])
        if isinstance(member.get("required"), list):
            required.extend(member["required"])
        if member.get("type") is not None:
            declared_types.append(member["type"])

    own_type = definition.get("type")
    merged_type = declared_types[0] if declared_types and own_type is None else None
    winner = own_type if own_type is not None else merged_type
    conflicting = [declared for declared in declared_types if declared != winner]
    if conflicting:
        logger.warning(
            "Combinator members of %r declare conflicting types %r; using %r",
            path,
            conflicting,
            winner,
        )

    return CompiledFieldEntry(
        type=merged_type,
        properties=properties,
        required=tuple(required),
        all_of=combinators.get("allOf"),
        any_of=combinators.get("anyOf"),
        one_of=combinators.get("oneOf"),
        is_required=is_required,
    )


def compile_path(
    segments: Sequence[str],
    document: Mapping[str, Any],
    working_root: Mapping[str, Any],
    cache: CompiledFieldCache,
) -> Any:
    """Resolve a segment list into its schema node.

    The walk starts at ``working_root``. References are always resolved
    against the full ``document``, since they may point anywhere in it. As a
    side effect ``cache`` receives an entry for every prefix visited; a
    prefix that already has one is not recompiled.

    Args:
        segments: Canonical segments, as produced by ``to_segments``.
        document: The raw root schema document.
        working_root: The normalized root the walk starts from.
        cache: Cache that receives one entry per visited prefix.

    Raises:
        InvalidReferenceError: If a reference is not internal.
        ReferenceNotFoundError: If a reference target is missing.
        NotAnArrayError: If an index or wildcard meets a non-array node.
        NoPropertiesError: If a name meets an object node without properties.
        FieldNotFoundError: If no definition exists for a segment.

    Returns:
        The (dereferenced) schema node for the full path.
    """
    path = to_canonical_key(segments)
    definition: Mapping[str, Any] = working_root
    previous_key = ""

    for index, segment in enumerate(segments):
        current_key = to_canonical_key(segments[: index + 1])
        is_required = segment in _required_names(definition, cache.get(previous_key))

        child = _descend(definition, segment, document, path)
        if child is None:
            raise FieldNotFoundError(f'Field not found in schema: "{path}"', path=path)

        child = dereference(child, document, path)
        if not isinstance(child, Mapping):
            raise FieldNotFoundError(f'Field not found in schema: "{path}"', path=path)

        if current_key not in cache:
            cache.setdefault(
                current_key,
                _compile_entry(child, document, is_required, path),
            )
            logger.debug("Compiled field entry for %r", current_key)

        definition = child
        previous_key = current_key

    return definition


class FieldCompiler:
    """Resolve field paths against one JSON schema document.

    The document is normalized once, at construction, and must not change
    afterwards. Each instance owns its :class:`CompiledFieldCache`.

    :meth:`get_field`, :meth:`get_subfields` and :meth:`get_type` are
    memoized per canonical path key: equivalent paths, in whatever literal
    form, return the very same object for the lifetime of the instance.

    Example:
        >>> compiler = FieldCompiler({
        ...     "type": "object",
        ...     "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
        ... })
        >>> compiler.get_field("tags.$")
        {'type': 'string'}
        >>> compiler.get_type("/tags/0")
        <class 'str'>
    """

    def __init__(self, schema: Mapping[str, Any]) -> None:
        self.document = schema
        self.schema = normalize_schema(schema)
        self.compiled = CompiledFieldCache()
        self._root_entry = CompiledFieldEntry()
        self._memo: dict[tuple[str, str], Any] = {}
        self._memo_lock = threading.RLock()

    def _memoize(self, entry_point: str, key: str, compute: Callable[[], Any]) -> Any:
        """Return the stored result for ``(entry_point, key)``, computing it once.

        Double-checked locking: the result is computed outside the lock and
        only stored if no other thread stored one first, so every caller gets
        the same object back.
        """
        memo_key = (entry_point, key)
        with self._memo_lock:
            if memo_key in self._memo:
                return self._memo[memo_key]

        result = compute()

        with self._memo_lock:
            if memo_key not in self._memo:
                logger.debug("Memoized %s for %r", entry_point, key)
            return self._memo.setdefault(memo_key, result)

    def get_field(self, name: FieldName) -> Any:
        """Return the resolved schema node for ``name``."""

        segments = to_segments(name)
        key = to_canonical_key(segments)
        return self._memoize(
            "field",
            key,
            lambda: compile_path(segments, self.document, self.schema, self.compiled),
        )

    def get_entry(self, name: FieldName) -> CompiledFieldEntry:
        """Return the compiled entry for ``name``, compiling the path if needed.

        The root path has no parent and therefore no entry; an empty entry is
        returned for it.
        """
        segments = to_segments(name)
        if not segments:
            return self._root_entry
        self.get_field(segments)
        return self.compiled[to_canonical_key(segments)]

    def get_subfields(self, name: FieldName = None) -> list[str]:
        """Return the property names directly below ``name``."""

        segments = to_segments(name)

        def compute() -> list[str]:
            if not segments:
                properties = self.schema.get("properties")
                return list(properties) if properties else []

            field = self.get_field(segments)
            entry = self.get_entry(segments)
            field_type = entry.type if entry.type is not None else field.get("type")
            properties = (
                entry.properties
                if entry.properties is not None
                else field.get("properties")
            )
            if field_type == "object":
                return list(properties or ())
            return []

        subfields: list[str] = self._memoize(
            "subfields", to_canonical_key(segments), compute
        )
        return subfields

    def get_type(self, name: FieldName) -> Any:
        """Return the Python type values of ``name`` are represented with.

        ``format: date-time`` maps to :class:`datetime.datetime`; JSON types
        map to their Python counterparts. Unknown types are returned as
        declared.

        Raises:
            UnrepresentableTypeError: If the field type is ``"null"``.
        """
        segments = to_segments(name)
        key = to_canonical_key(segments)

        def compute() -> Any:
            field = self.get_field(segments)
            entry = self.get_entry(segments)
            if field.get("format") == "date-time":
                return datetime.datetime

            field_type = entry.type if entry.type is not None else field.get("type")
            if isinstance(field_type, str) and field_type in _TYPE_MAP:
                return _TYPE_MAP[field_type]
            if field_type == "null":
                raise UnrepresentableTypeError(
                    f'Field "{key}" can not be represented as a type null',
                    path=key,
                )
            return field_type

        return self._memoize("type", key, compute)

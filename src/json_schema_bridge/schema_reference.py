"""In-document ``$ref`` resolution for json_schema_bridge.

Only references anchored at the current document (``#...``) are supported.
Anything else is rejected outright rather than fetched.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .errors import InvalidReferenceError, ReferenceNotFoundError
from .field_path import is_index_segment

_MISSING = object()


def _step(node: Any, part: str) -> Any:
    """Descend one pointer step into a mapping or a sequence."""

    if isinstance(node, Mapping):
        return node.get(part, _MISSING)
    if isinstance(node, Sequence) and not isinstance(node, str):
        if is_index_segment(part) and int(part) < len(node):
            return node[int(part)]
    return _MISSING


def resolve_reference(
    reference: str,
    document: Mapping[str, Any],
    path: str | None = None,
) -> Any:
    """Return the node a ``#``-rooted reference points at.

    The reference is split on ``/``; empty and ``#`` parts are dropped and
    ``~1``/``~0`` escapes are undone before each descent step. The node
    returned is the document's own object, never a copy.

    Args:
        reference: Reference string, e.g. ``"#/definitions/Address"``.
        document: Root schema document to resolve against.
        path: Canonical key of the field being resolved, for error reporting.

    Raises:
        InvalidReferenceError: If ``reference`` does not start with ``#``.
        ReferenceNotFoundError: If any descent step finds nothing.
    """
    if not isinstance(reference, str) or not reference.startswith("#"):
        raise InvalidReferenceError(
            "Reference is not an internal reference, and only such are "
            f'allowed: "{reference}"',
            path=path,
            reference=str(reference),
        )

    node: Any = document
    for part in reference.split("/"):
        if not part or part == "#":
            continue
        node = _step(node, part.replace("~1", "/").replace("~0", "~"))
        if node is _MISSING or node is None:
            raise ReferenceNotFoundError(
                f'Reference not found in schema: "{reference}"',
                path=path,
                reference=reference,
            )
    return node


def dereference(
    node: Any,
    document: Mapping[str, Any],
    path: str | None = None,
) -> Any:
    """Replace a ``$ref`` node by its target.

    Keys present next to ``$ref`` survive where the target lacks them. A node
    carrying nothing but ``$ref`` resolves to the target object itself, so
    repeated dereferencing yields the same object.
    """
    if not isinstance(node, Mapping) or "$ref" not in node:
        return node

    target = resolve_reference(node["$ref"], document, path)
    siblings = {key: value for key, value in node.items() if key != "$ref"}
    if not siblings or not isinstance(target, Mapping):
        return target
    return {**siblings, **target}

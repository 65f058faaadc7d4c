"""Field path grammar for json_schema_bridge.

A field path is an ordered sequence of segments. Each segment is a property
name, a non-negative array index or the ``$`` wildcard standing for "any
array item". Three external forms are accepted:

- a sequence of segments, e.g. ``["address", 0, "street"]``;
- dot/bracket syntax starting with ``.``, e.g. ``.address[0]['street']``;
- pointer syntax starting with ``/``, e.g. ``/address/0/street``.

A string in neither literal form is read as a plain dotted name such as
``address.0.street``. Every form collapses into one canonical key, used for
cache lookups and error reporting.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Union

from .errors import InvalidFieldPathError

WILDCARD = "$"

FieldName = Union[str, int, Sequence[Union[str, int]], None]

# One token of dot/bracket syntax: ``.name``, ``['quoted']`` or ``[index]``.
_DOT_TOKEN = re.compile(
    r"\.(?P<name>[^.\[\]]*)"
    r"|\['(?P<quoted>(?:[^'\\]|\\.)*)'\]"
    r"|\[(?P<index>[^\]'\[]+)\]"
)
_QUOTE_ESCAPE = re.compile(r"\\(.)")
_PLAIN_SEGMENT = re.compile(r"[^./\[\]'\\][^.\[\]'\\]*")
_INDEX_SEGMENT = re.compile(r"0|[1-9][0-9]*")


def is_index_segment(segment: str) -> bool:
    """Return True if ``segment`` is a canonical non-negative integer."""

    return _INDEX_SEGMENT.fullmatch(segment) is not None


def _parse_dotted(raw: str) -> list[str]:
    """Split dot/bracket syntax (with its leading ``.``) into segments.

    Raises:
        InvalidFieldPathError: If part of ``raw`` is not a valid token.
    """
    segments: list[str] = []
    position = 0
    while position < len(raw):
        match = _DOT_TOKEN.match(raw, position)
        if match is None or match.end() == position:
            raise InvalidFieldPathError(
                f'Invalid field path: "{raw}" (unexpected text at {position})',
                path=raw,
            )
        if match.group("quoted") is not None:
            segments.append(_QUOTE_ESCAPE.sub(r"\1", match.group("quoted")))
        elif match.group("index") is not None:
            segments.append(match.group("index").strip())
        elif match.group("name"):
            segments.append(match.group("name"))
        position = match.end()
    return segments


def _parse_pointer(raw: str) -> list[str]:
    """Split pointer syntax (with its leading ``/``) into segments."""

    return [
        part.replace("~1", "/").replace("~0", "~")
        for part in raw.split("/")[1:]
        if part
    ]


def to_segments(raw: FieldName) -> list[str]:
    """Convert any accepted field path form into an ordered segment list.

    Args:
        raw: A segment sequence, a literal path string or ``None``.

    Returns:
        List of segments; the empty list denotes the schema root.

    Raises:
        InvalidFieldPathError: If a dot/bracket literal is malformed.
    """
    if raw is None:
        return []
    if isinstance(raw, int):
        return [str(raw)]
    if isinstance(raw, str):
        if not raw:
            return []
        if raw[0] == "/":
            return _parse_pointer(raw)
        if raw[0] == ".":
            return _parse_dotted(raw)
        return _parse_dotted("." + raw)
    return [str(segment) for segment in raw]


def _format_segment(segment: str) -> str:
    if _PLAIN_SEGMENT.fullmatch(segment):
        return segment
    escaped = segment.replace("\\", "\\\\").replace("'", "\\'")
    return f"['{escaped}']"


def to_canonical_key(segments: Iterable[str]) -> str:
    """Build the canonical key for a segment list.

    Plain segments are joined with ``.``; segments that would be ambiguous in
    dotted form are written in quoted bracket form, so the key parses back
    into the same segments.
    """
    key = ""
    for segment in segments:
        formatted = _format_segment(segment)
        if key and not formatted.startswith("["):
            key += "."
        key += formatted
    return key


def join_name(*parts: FieldName) -> str:
    """Concatenate several field paths into one canonical key."""

    segments: list[str] = []
    for part in parts:
        segments.extend(to_segments(part))
    return to_canonical_key(segments)

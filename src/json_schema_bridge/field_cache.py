"""Compiled field cache for json_schema_bridge.

Every path prefix visited while resolving a field leaves a
:class:`CompiledFieldEntry` behind. Consumers read these entries instead of
recomputing merged properties or required flags.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompiledFieldEntry:
    """Merged, reference-resolved view of one field path.

    Attributes:
        type: Type taken from the first combinator member declaring one, only
            when the field itself declares no type.
        properties: Properties merged across all combinator members, or the
            field's own properties when it has no combinators.
        required: Required names concatenated across combinator members
            (duplicates kept). ``None`` when no merge happened.
        all_of: ``allOf`` members with references replaced by their targets.
        any_of: ``anyOf`` members with references replaced by their targets.
        one_of: ``oneOf`` members with references replaced by their targets.
        is_required: Whether the last segment is required by its parent.
    """

    type: Any = None
    properties: Mapping[str, Any] | None = None
    required: tuple[str, ...] | None = None
    all_of: tuple[Any, ...] | None = None
    any_of: tuple[Any, ...] | None = None
    one_of: tuple[Any, ...] | None = None
    is_required: bool = False

    def to_mapping(self) -> dict[str, Any]:
        """Return present fields under their JSON Schema names."""

        mapping: dict[str, Any] = {}
        if self.type is not None:
            mapping["type"] = self.type
        if self.properties is not None:
            mapping["properties"] = dict(self.properties)
        if self.required is not None:
            mapping["required"] = list(self.required)
        for name, members in (
            ("allOf", self.all_of),
            ("anyOf", self.any_of),
            ("oneOf", self.one_of),
        ):
            if members is not None:
                mapping[name] = list(members)
        mapping["isRequired"] = self.is_required
        return mapping


class CompiledFieldCache:
    """Mapping from canonical path key to :class:`CompiledFieldEntry`.

    The cache is owned by a single compiler instance and lives as long as it
    does. Entries are written once and never evicted: the schema document is
    immutable after construction, so an entry can never go stale.

    Reads populate the cache as a side effect, so all access goes through an
    RLock. When two threads compile the same prefix concurrently, the first
    entry stored wins and both get it back from :meth:`setdefault`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CompiledFieldEntry] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> CompiledFieldEntry | None:
        with self._lock:
            return self._entries.get(key)

    def setdefault(self, key: str, entry: CompiledFieldEntry) -> CompiledFieldEntry:
        """Store ``entry`` unless ``key`` already has one; return the stored entry."""

        with self._lock:
            return self._entries.setdefault(key, entry)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __getitem__(self, key: str) -> CompiledFieldEntry:
        with self._lock:
            return self._entries[key]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

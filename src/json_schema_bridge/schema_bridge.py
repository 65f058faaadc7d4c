"""Form bridge built on top of the field compiler.

:class:`JSONSchemaBridge` turns resolved field definitions into what a form
needs: initial values, input props and validation error lookups. It never
validates data itself; the validator is stored and handed back unchanged.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping, Sequence
from typing import Any

from .field_compiler import FieldCompiler
from .field_path import FieldName, is_index_segment, to_canonical_key, to_segments

_MISSING = object()

# Words as lodash splits them: acronyms, capitalised words, digit runs.
_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _human_label(name: str) -> str:
    """Turn ``firstName`` or ``first_name`` into ``First name``."""

    label = " ".join(_WORD.findall(name)).lower()
    return label[:1].upper() + label[1:]


def _extract_value(*values: Any) -> Any:
    """Return the first decisive value.

    ``False`` and ``None`` decide for an empty string, ``True`` and missing
    values defer to the next candidate.
    """
    for value in values[:-1]:
        if value is False or value is None:
            return ""
        if value is not True and value is not _MISSING:
            return value
    return values[-1]


def _lookup(value: Any, segments: Sequence[str]) -> Any:
    for segment in segments:
        if isinstance(value, Mapping):
            value = value.get(segment, _MISSING)
        elif (
            isinstance(value, list)
            and is_index_segment(segment)
            and int(segment) < len(value)
        ):
            value = value[int(segment)]
        else:
            return _MISSING
        if value is _MISSING:
            return _MISSING
    return value


def _attribute(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


class JSONSchemaBridge(FieldCompiler):
    """Bridge between a JSON schema and a form.

    Args:
        schema: The root schema document.
        validator: Opaque validator returned by :meth:`get_validator`.

    Example:
        >>> bridge = JSONSchemaBridge({
        ...     "type": "object",
        ...     "properties": {"firstName": {"type": "string"}},
        ...     "required": ["firstName"],
        ... })
        >>> bridge.get_props("firstName")["label"]
        'First name'
    """

    def __init__(self, schema: Mapping[str, Any], validator: Any = None) -> None:
        super().__init__(schema)
        self.validator = validator

    def get_validator(self) -> Any:
        return self.validator

    def get_error(self, name: FieldName, error: Any) -> Any:
        """Return the validation error detail concerning ``name``, if any.

        A detail concerns a field when its ``dataPath`` names the field, or
        names its parent and reports the field as ``missingProperty``.
        """
        details = _attribute(error, "details") if error else None
        if not isinstance(details, Sequence) or isinstance(details, str):
            return None

        segments = to_segments(name)
        key = to_canonical_key(segments)
        root_key = to_canonical_key(segments[:-1])
        base_name = segments[-1] if segments else None

        for detail in details:
            detail_key = to_canonical_key(to_segments(_attribute(detail, "dataPath")))
            if detail_key == key:
                return detail
            params = _attribute(detail, "params") or {}
            if detail_key == root_key and base_name == _attribute(
                params, "missingProperty"
            ):
                return detail
        return None

    def get_error_message(self, name: FieldName, error: Any) -> str:
        detail = self.get_error(name, error)
        return (detail and _attribute(detail, "message")) or ""

    def get_error_messages(self, error: Any) -> list[Any]:
        """Return every message carried by a validation error."""

        if not error:
            return []

        details = _attribute(error, "details")
        if isinstance(details, list):
            return [_attribute(detail, "message") for detail in details]

        return [_attribute(error, "message") or error]

    def get_initial_value(
        self,
        name: FieldName,
        props: Mapping[str, Any] | None = None,
    ) -> Any:
        """Return the value a form field starts with.

        The field's own ``default`` wins over the value found at the same
        path inside the root ``default``. Without a default, arrays start
        with ``props["initialCount"]`` items (0 unless given), objects start
        empty, and everything else starts as ``None``. Defaults are always
        deep-copied.
        """
        props = props or {}
        segments = to_segments(name)
        field = self.get_field(segments)
        entry = self.get_entry(segments)

        default = field.get("default", _MISSING)
        if default is _MISSING:
            default = _lookup(self.schema.get("default", _MISSING), segments)
        if default is not _MISSING:
            return copy.deepcopy(default)

        field_type = entry.type if entry.type is not None else field.get("type")
        if field_type == "array":
            item = self.get_initial_value(segments + ["0"])
            return [copy.deepcopy(item) for _ in range(props.get("initialCount") or 0)]
        if field_type == "object":
            return {}
        return None

    def get_props(
        self,
        name: FieldName,
        props: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the props an input component needs for ``name``.

        Field keys are overlaid by the field's ``uniforms`` mapping and then
        by its compiled entry. ``enum`` becomes ``allowedValues``, ``number``
        fields get ``decimal``, and ``options`` (a mapping of value to label
        or a list of ``{"label", "value"}`` records) add ``transform``.
        """
        props = props or {}
        segments = to_segments(name)
        field = dict(self.get_field(segments))
        uniforms = field.pop("uniforms", None) or {}
        entry = self.get_entry(segments)

        ready: dict[str, Any] = {**field, **uniforms, **entry.to_mapping()}
        for omitted in ("default", "format", "type"):
            ready.pop(omitted, None)
        enum_values = ready.pop("enum", None)
        is_required = ready.pop("isRequired", False)
        title = ready.pop("title", _MISSING)

        if enum_values:
            ready["allowedValues"] = enum_values
        if field.get("type") == "number":
            ready["decimal"] = True
        if uniforms.get("type") is not None:
            ready["type"] = uniforms["type"]
        if not isinstance(ready.get("required"), bool):
            ready["required"] = is_required
        ready["label"] = _extract_value(
            ready.get("label", _MISSING),
            title,
            _human_label(segments[-1]) if segments else "",
        )

        options = props.get("options") or ready.get("options")
        if options:
            if isinstance(options, Mapping):
                ready["transform"] = lambda value: options[value]
                ready["allowedValues"] = list(options)
            else:
                ready["transform"] = lambda value: next(
                    option["label"] for option in options if option["value"] == value
                )
                ready["allowedValues"] = [option["value"] for option in options]

        return ready

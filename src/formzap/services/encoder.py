"""Form encoder — flatten a value into the submission the decoder expects.

The inverse of :mod:`formzap.services.decoder`, used to prefill forms and
to build fixtures: one entry per scalar leaf, repeated entries for scalar
arrays, and ``<path>.<i>.<field>`` (index strategy) or ``<path>.key`` plus
``<path>[<i>].<field>`` (key strategy) for arrays of objects.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel

from formzap.domain.paths import (
    DEFAULT_KEY_SENTINEL,
    child_path,
    index_path,
    key_sentinel_path,
    keyed_path,
)
from formzap.domain.schema import SchemaNode, is_schema_node
from formzap.domain.shape import array_element, is_array, is_object, object_fields, primitive_kind
from formzap.domain.submission import FormSubmission
from formzap.domain.types import ArrayStrategy, PrimitiveKind
from formzap.services.decoder import as_form_schema


def render_scalar(value: Any) -> str:
    """Render one scalar the way the decoder's coercion reads it back."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return render_scalar(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return repr(value)
    return str(value)


def to_plain(value: Any) -> Any:
    """Dump pydantic models and dataclass instances to plain containers."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="python", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def encode_form(
    schema: Any,
    value: Any,
    *,
    strategy: ArrayStrategy | str = ArrayStrategy.INDEX,
    key_sentinel: str = DEFAULT_KEY_SENTINEL,
) -> FormSubmission:
    """Flatten *value* into a :class:`FormSubmission` shaped by *schema*.

    ``AUTO`` encodes like ``KEY``: element ids are their positions.
    Missing keys, and ``None`` for undefined or opaque leaves, are skipped so
    the validator falls back to field defaults.
    """
    node: SchemaNode = schema if is_schema_node(schema) else as_form_schema(schema).describe()
    encoder = _Encoder(ArrayStrategy(strategy), key_sentinel)
    encoder.value(node, to_plain(value), "")
    return encoder.submission


class _Encoder:
    def __init__(self, strategy: ArrayStrategy, key_sentinel: str) -> None:
        self.strategy = strategy
        self.key_sentinel = key_sentinel
        self.submission = FormSubmission()

    def value(self, node: SchemaNode, value: Any, path: str) -> None:
        if is_object(node):
            self._object(node, to_plain(value), path)
            return
        element = array_element(node)
        if element is not None:
            self._array(element, value or [], path)
            return
        kind = primitive_kind(node)
        if value is None and kind in (None, PrimitiveKind.UNDEFINED):
            return
        self.submission.append(path, render_scalar(value))

    def _object(self, node: SchemaNode, value: Any, prefix: str) -> None:
        if not isinstance(value, Mapping):
            return
        for name, child in object_fields(node).items():
            if name in value:
                self.value(child, value[name], child_path(prefix, name))

    def _array(self, element: SchemaNode, items: Any, path: str) -> None:
        if is_array(element):
            return
        if not is_object(element):
            for item in items:
                self.submission.append(path, render_scalar(item))
            return
        for index, item in enumerate(items):
            if self.strategy is ArrayStrategy.INDEX:
                self._object(element, to_plain(item), index_path(path, index))
            else:
                key = str(index)
                self.submission.append(key_sentinel_path(path, self.key_sentinel), key)
                self._object(element, to_plain(item), keyed_path(path, key))

"""Schema nodes — the closed set of shapes a form decoder understands.

A schema is a tree of frozen nodes:

- :class:`ObjectNode` — named, ordered child fields.
- :class:`ArrayNode` — a single element schema.
- :class:`PrimitiveNode` — a scalar leaf of a given :class:`PrimitiveKind`.
- :class:`WrappedNode` — a transform or refinement around another node.
  Decoding looks straight through it.
- :class:`OpaqueNode` — anything else (unions, literals, enums). Decoded
  as a raw pass-through leaf so the validator can judge the field.

Nodes are usually produced by a validation backend (see
:mod:`formzap.validation.pydantic_schema`) but can be built by hand with the
helpers at the bottom of this module.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from formzap.domain.types import PrimitiveKind


@dataclass(frozen=True)
class ObjectNode:
    """Object with named fields, in declaration order."""

    fields: Mapping[str, SchemaNode] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Snapshot so later mutation of the caller's dict cannot leak in.
        object.__setattr__(self, "fields", dict(self.fields))


@dataclass(frozen=True)
class ArrayNode:
    """Homogeneous sequence of ``element``."""

    element: SchemaNode


@dataclass(frozen=True)
class PrimitiveNode:
    """Scalar leaf."""

    kind: PrimitiveKind


@dataclass(frozen=True)
class WrappedNode:
    """Transform/refinement around ``inner``; transparent to decoding."""

    inner: SchemaNode
    label: str = "effects"


@dataclass(frozen=True)
class OpaqueNode:
    """A shape the decoder has no specific rule for."""

    label: str = "unknown"


SchemaNode = ObjectNode | ArrayNode | PrimitiveNode | WrappedNode | OpaqueNode


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def object_of(fields: Mapping[str, SchemaNode] | None = None, /, **named: SchemaNode) -> ObjectNode:
    """Build an :class:`ObjectNode` from a mapping and/or keyword fields.

    Keyword order is preserved, so ``object_of(name=string(), age=number())``
    declares ``name`` before ``age``. Use the mapping form for field names
    that are not valid identifiers.
    """
    merged: dict[str, SchemaNode] = dict(fields or {})
    merged.update(named)
    return ObjectNode(merged)


def array_of(element: SchemaNode) -> ArrayNode:
    return ArrayNode(element)


def primitive(kind: PrimitiveKind | str) -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind(kind))


def string() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.STRING)


def number() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.NUMBER)


def boolean() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.BOOLEAN)


def date() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.DATE)


def bigint() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.BIGINT)


def undefined() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.UNDEFINED)


def null() -> PrimitiveNode:
    return PrimitiveNode(PrimitiveKind.NULL)


def wrapped(inner: SchemaNode, label: str = "effects") -> WrappedNode:
    return WrappedNode(inner, label)


def opaque(label: str = "unknown") -> OpaqueNode:
    return OpaqueNode(label)


def is_schema_node(value: Any) -> bool:
    """Whether *value* is one of the schema node variants."""
    return isinstance(value, ObjectNode | ArrayNode | PrimitiveNode | WrappedNode | OpaqueNode)

"""Shape introspection over schema nodes.

Read-only queries the decoder asks at every nesting level. All of them look
through any number of stacked :class:`WrappedNode` layers first, and none of
them raise: a node the decoder has no rule for reports "not object, not
array, not primitive".
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from formzap.domain.schema import (
    ArrayNode,
    ObjectNode,
    OpaqueNode,
    PrimitiveNode,
    SchemaNode,
    WrappedNode,
)
from formzap.domain.types import PrimitiveKind

_NO_FIELDS: Mapping[str, SchemaNode] = MappingProxyType({})


def unwrap(node: SchemaNode) -> SchemaNode:
    """Return the innermost non-wrapped node."""
    while isinstance(node, WrappedNode):
        node = node.inner
    return node


def is_object(node: SchemaNode) -> bool:
    return isinstance(unwrap(node), ObjectNode)


def is_array(node: SchemaNode) -> bool:
    return isinstance(unwrap(node), ArrayNode)


def primitive_kind(node: SchemaNode) -> PrimitiveKind | None:
    """The leaf kind of *node*, or None when it is not a primitive."""
    inner = unwrap(node)
    if isinstance(inner, PrimitiveNode):
        return inner.kind
    return None


def is_primitive(node: SchemaNode) -> bool:
    return primitive_kind(node) is not None


def object_fields(node: SchemaNode) -> Mapping[str, SchemaNode]:
    """Declared fields of an object node (empty for anything else)."""
    inner = unwrap(node)
    if isinstance(inner, ObjectNode):
        return inner.fields
    return _NO_FIELDS


def array_element(node: SchemaNode) -> SchemaNode | None:
    """Element schema of an array node (None for anything else)."""
    inner = unwrap(node)
    if isinstance(inner, ArrayNode):
        return inner.element
    return None


def describe(node: SchemaNode) -> str:
    """Short human label for *node*, e.g. ``"array<number>"``."""
    inner = unwrap(node)
    if isinstance(inner, ObjectNode):
        return "object"
    if isinstance(inner, ArrayNode):
        return f"array<{describe(inner.element)}>"
    if isinstance(inner, PrimitiveNode):
        return str(inner.kind)
    if isinstance(inner, OpaqueNode):
        return f"opaque:{inner.label}"
    return "unknown"

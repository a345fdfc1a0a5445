"""Dotted field paths — the wire names of form inputs.

The decoder computes child paths with the helpers below. :class:`FieldPaths`
is a separate, pure path builder for templates and tests::

    fields = FieldPaths(schema)
    str(fields.address.zip)      # "address.zip"
    str(fields.items[2].price)   # "items.2.price"
    fields("items.2.price")      # validated string
    leaf_paths(fields)           # [("address.zip", "string"), ...]
"""

from __future__ import annotations

from formzap.domain.schema import SchemaNode
from formzap.domain.shape import array_element, describe, is_array, is_object, object_fields

DEFAULT_KEY_SENTINEL = "key"


def child_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def index_path(prefix: str, index: int) -> str:
    return f"{prefix}.{index}"


def keyed_path(prefix: str, key: str) -> str:
    return f"{prefix}[{key}]"


def key_sentinel_path(prefix: str, sentinel: str = DEFAULT_KEY_SENTINEL) -> str:
    return f"{prefix}.{sentinel}"


class FieldPaths:
    """Navigable view of a schema that renders dotted paths.

    Attribute access walks object fields, item access walks array elements
    (or object fields whose names are not identifiers). ``str()`` gives the
    path accumulated so far.
    """

    __slots__ = ("_node", "_path")

    def __init__(self, node: SchemaNode, path: str = "") -> None:
        self._node = node
        self._path = path

    def __getattr__(self, name: str) -> FieldPaths:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._field(name)

    def __getitem__(self, key: int | str) -> FieldPaths:
        if isinstance(key, int):
            element = array_element(self._node)
            if element is None:
                msg = f"{self._label()} is not an array"
                raise TypeError(msg)
            if key < 0:
                msg = f"negative index {key} for {self._label()}"
                raise IndexError(msg)
            return FieldPaths(element, index_path(self._path, key))
        if is_array(self._node) and key.isdigit():
            return self[int(key)]
        try:
            return self._field(key)
        except AttributeError as exc:
            raise KeyError(key) from exc

    def __call__(self, dotted: str) -> str:
        """Validate *dotted* against the schema and return it."""
        current = self
        for segment in dotted.split("."):
            current = current[segment]
        return str(current)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"FieldPaths({self._path!r}, {describe(self._node)})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldPaths):
            return self._path == other._path
        if isinstance(other, str):
            return self._path == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)

    # ------------------------------------------------------------------

    def _field(self, name: str) -> FieldPaths:
        if not is_object(self._node):
            msg = f"{self._label()} is not an object"
            raise AttributeError(msg)
        fields = object_fields(self._node)
        if name not in fields:
            msg = f"{self._label()} has no field {name!r}"
            raise AttributeError(msg)
        return FieldPaths(fields[name], child_path(self._path, name))

    def _label(self) -> str:
        return repr(self._path) if self._path else "schema root"


def leaf_paths(fields: FieldPaths) -> list[tuple[str, str]]:
    """Every leaf path under *fields* with its kind label.

    Array-of-object elements are shown with a ``<n>`` placeholder.    """
    out: list[tuple[str, str]] = []
    _collect(fields._node, fields._path, out)
    return out


def _collect(node: SchemaNode, path: str, out: list[tuple[str, str]]) -> None:
    if is_object(node):
        for name, child in object_fields(node).items():
            _collect(child, child_path(path, name), out)
        return
    element = array_element(node)
    if element is not None and is_object(element):
        _collect(element, child_path(path, "<n>"), out)
        return
    out.append((path, describe(node)))

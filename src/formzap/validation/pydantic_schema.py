"""Pydantic backend — describe models as schema nodes, validate with TypeAdapter.

Annotation mapping:

==========================================  ======================
``BaseModel`` subclass / stdlib dataclass   object (alias as key)
``list[X]``, ``set[X]``, ``tuple[X, ...]``  array of ``X``
``str``                                     string
``bool``                                    boolean
``int``                                     bigint (exact integer)
``float``                                   number
``Decimal``                                 opaque (exact text)
``datetime``, ``date``                      date
``None``                                    null
constrained field / ``Annotated[X, ...]``   wrapped ``X``
anything else                               plugin hook, then opaque
==========================================  ======================

Unions (including ``X | None``), literals and enums are opaque: their raw
text goes to pydantic unchanged and its lax-mode parsing decides.

A number field that received unparseable text holds ``nan`` in the
candidate. pydantic accepts NaN for ``float`` by default, so every NaN in
the candidate is reported as an issue at its own path.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import math
import types
import typing
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, get_args, get_origin

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from formzap.domain.schema import (
    ArrayNode,
    ObjectNode,
    OpaqueNode,
    PrimitiveNode,
    SchemaNode,
    WrappedNode,
)
from formzap.domain.types import PrimitiveKind
from formzap.errors import SchemaShapeError
from formzap.validation.base import Issue, ValidationFailure, ValidationReport, ValidationSuccess

if TYPE_CHECKING:
    from formzap.plugins.manager import PluginManager

logger = structlog.get_logger(__name__)

_ARRAY_ORIGINS: tuple[Any, ...] = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)


class PydanticFormSchema:
    """:class:`~formzap.validation.base.FormSchema` over a pydantic-validatable type.

    Args:
        model: A ``BaseModel`` subclass or a stdlib dataclass.
        plugins: Optional plugin manager consulted for annotations the
            built-in mapping does not know.
    """

    def __init__(self, model: type[Any], *, plugins: PluginManager | None = None) -> None:
        self.model = model
        self._plugins = plugins
        self._adapter: TypeAdapter[Any] = TypeAdapter(model)

    def describe(self) -> SchemaNode:
        return _Describer(self._plugins).describe(self.model)

    def validate(self, value: Any) -> ValidationReport:
        issues: list[Issue] = []
        try:
            validated = self._adapter.validate_python(value)
        except ValidationError as exc:
            issues = [Issue(tuple(err["loc"]), err["msg"]) for err in exc.errors()]
        reported = {issue.path for issue in issues}
        issues += [issue for issue in _nan_issues(value) if issue.path not in reported]
        if not issues:
            return ValidationSuccess(validated)
        logger.debug("validation.failed", model=self.model.__name__, issues=len(issues))
        return ValidationFailure(issues)

    def __repr__(self) -> str:
        return f"PydanticFormSchema({self.model.__name__})"


def pydantic_schema(model: type[Any], *, plugins: PluginManager | None = None) -> PydanticFormSchema:
    """Factory for :class:`PydanticFormSchema`."""
    return PydanticFormSchema(model, plugins=plugins)


def is_pydantic_describable(value: Any) -> bool:
    """Whether *value* is a model class this backend can describe."""
    return isinstance(value, type) and (
        issubclass(value, BaseModel) or dataclasses.is_dataclass(value)
    )


class _Describer:
    """One describe pass; tracks the model stack to detect cycles."""

    def __init__(self, plugins: PluginManager | None) -> None:
        self._plugins = plugins
        self._stack: list[type[Any]] = []

    def describe(self, annotation: Any) -> SchemaNode:
        origin = get_origin(annotation)

        if origin is Annotated:
            inner, *metadata = get_args(annotation)
            node = self.describe(inner)
            return WrappedNode(node, "refinement") if metadata else node

        if annotation is None or annotation is type(None):
            return PrimitiveNode(PrimitiveKind.NULL)

        if isinstance(annotation, type) and origin is None:
            node = self._describe_class(annotation)
            if node is not None:
                return node

        if origin in _ARRAY_ORIGINS:
            args = get_args(annotation)
            element = self.describe(args[0]) if args else OpaqueNode("any")
            return ArrayNode(element)

        if origin is tuple:
            args = get_args(annotation)
            if len(args) == 2 and args[1] is Ellipsis:
                return ArrayNode(self.describe(args[0]))

        return self._from_plugins(annotation) or OpaqueNode(_label(annotation))

    # ------------------------------------------------------------------

    def _describe_class(self, cls: type[Any]) -> SchemaNode | None:
        if issubclass(cls, BaseModel) or dataclasses.is_dataclass(cls):
            return self._object(cls)
        # Enums subclass str/int; leave them to pydantic.
        if issubclass(cls, Enum):
            return None
        if issubclass(cls, bool):
            return PrimitiveNode(PrimitiveKind.BOOLEAN)
        if issubclass(cls, str):
            return PrimitiveNode(PrimitiveKind.STRING)
        if issubclass(cls, int):
            return PrimitiveNode(PrimitiveKind.BIGINT)
        if issubclass(cls, Decimal):
            return OpaqueNode(cls.__name__)
        if issubclass(cls, float):
            return PrimitiveNode(PrimitiveKind.NUMBER)
        if issubclass(cls, date):
            return PrimitiveNode(PrimitiveKind.DATE)
        return None

    def _object(self, cls: type[Any]) -> ObjectNode:
        if cls in self._stack:
            chain = " -> ".join(c.__name__ for c in [*self._stack, cls])
            msg = f"circular schema: {chain}"
            raise SchemaShapeError(msg)
        self._stack.append(cls)
        try:
            if issubclass(cls, BaseModel):
                return ObjectNode(self._model_fields(cls))
            return ObjectNode(self._dataclass_fields(cls))
        finally:
            self._stack.pop()

    def _model_fields(self, cls: type[BaseModel]) -> dict[str, SchemaNode]:
        out: dict[str, SchemaNode] = {}
        for name, info in cls.model_fields.items():
            alias = info.validation_alias if isinstance(info.validation_alias, str) else None
            key = alias or info.alias or name
            node = self.describe(info.annotation)
            out[key] = WrappedNode(node, "refinement") if info.metadata else node
        return out

    def _dataclass_fields(self, cls: type[Any]) -> dict[str, SchemaNode]:
        hints = typing.get_type_hints(cls, include_extras=True)
        return {
            f.name: self.describe(hints.get(f.name, Any)) for f in dataclasses.fields(cls) if f.init
        }

    def _from_plugins(self, annotation: Any) -> SchemaNode | None:
        if self._plugins is None:
            return None
        return self._plugins.describe_annotation(annotation, self.describe)


NAN_MESSAGE = "Input should be a valid number"


def _nan_issues(value: Any, path: tuple[str | int, ...] = ()) -> list[Issue]:
    """One issue per ``nan`` leaf in a decoded candidate."""
    if isinstance(value, float) and math.isnan(value):
        return [Issue(path, NAN_MESSAGE)]
    if isinstance(value, dict):
        items: Iterable[tuple[str | int, Any]] = value.items()
    elif isinstance(value, list):
        items = enumerate(value)
    else:
        return []
    out: list[Issue] = []
    for segment, child in items:
        out.extend(_nan_issues(child, (*path, segment)))
    return out


def _label(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return "union"
    if origin is typing.Literal:
        return "literal"
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation)

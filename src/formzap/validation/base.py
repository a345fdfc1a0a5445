"""Validator capability contract."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from formzap.domain.schema import SchemaNode


@dataclass(frozen=True)
class Issue:
    """One violation reported by a validator."""

    path: tuple[str | int, ...]
    message: str

    @property
    def dotted(self) -> str:
        return ".".join(str(segment) for segment in self.path)


@dataclass(frozen=True)
class ValidationSuccess:
    value: Any


@dataclass(frozen=True)
class ValidationFailure:
    issues: list[Issue] = field(default_factory=list)


ValidationReport = ValidationSuccess | ValidationFailure


@runtime_checkable
class FormSchema(Protocol):
    """What the decoder needs from a schema backend."""

    def describe(self) -> SchemaNode:
        """Return the schema's shape."""
        ...

    def validate(self, value: Any) -> ValidationReport:
        """Validate a decoded candidate."""
        ...


class NodeSchema:
    """A hand-built :class:`SchemaNode` with an optional validator callable.

    The callable receives the candidate and returns either a
    :class:`ValidationReport` or a sequence of :class:`Issue` (empty means
    valid). With no validator every candidate is accepted unchanged.
    """

    def __init__(
        self,
        node: SchemaNode,
        validator: Callable[[Any], ValidationReport | Sequence[Issue]] | None = None,
    ) -> None:
        self._node = node
        self._validator = validator

    def describe(self) -> SchemaNode:
        return self._node

    def validate(self, value: Any) -> ValidationReport:
        if self._validator is None:
            return ValidationSuccess(value)
        report = self._validator(value)
        if isinstance(report, ValidationSuccess | ValidationFailure):
            return report
        issues = list(report)
        if issues:
            return ValidationFailure(issues)
        return ValidationSuccess(value)

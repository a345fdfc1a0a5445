"""Exception hierarchy.

Only structural problems are exceptions. A submission the schema rejects is
a normal :class:`~formzap.services.outcome.Invalid` outcome, never raised.
"""

from __future__ import annotations


class FormzapError(Exception):
    """Base class for all formzap errors."""


class FormDecodeError(FormzapError):
    """The submission cannot be turned into a candidate value at all."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class UnsupportedValueError(FormDecodeError):
    """A leaf received a non-text payload such as a file upload."""

    def __init__(self, path: str, value_type: str) -> None:
        msg = f"Form value types of non strings are not supported ({value_type} at {path!r})"
        super().__init__(msg, path=path)
        self.value_type = value_type


class SchemaShapeError(FormzapError):
    """The schema cannot drive a form decode (non-object root, cycles)."""

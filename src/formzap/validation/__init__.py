"""Validation layer — the capability the decoder validates candidates with.

The decoder only needs two things from a schema backend: a description of
the expected shape (a :mod:`formzap.domain.schema` tree) and a way to
validate a candidate value. :class:`FormSchema` names that contract.
"""

from formzap.validation.base import (
    FormSchema,
    Issue,
    NodeSchema,
    ValidationFailure,
    ValidationReport,
    ValidationSuccess,
)
from formzap.validation.pydantic_schema import PydanticFormSchema, pydantic_schema

__all__ = [
    "FormSchema",
    "Issue",
    "NodeSchema",
    "PydanticFormSchema",
    "ValidationFailure",
    "ValidationReport",
    "ValidationSuccess",
    "pydantic_schema",
]

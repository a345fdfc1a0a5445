"""Classification enums shared across the decoder and its configuration."""

from __future__ import annotations

from enum import StrEnum


class PrimitiveKind(StrEnum):
    """Scalar kinds a form leaf can be coerced into."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    BIGINT = "bigint"
    UNDEFINED = "undefined"
    NULL = "null"


class ArrayStrategy(StrEnum):
    """How elements of an array-of-objects field are located in a submission.

    ``AUTO`` uses the ``<path>.key`` sentinel when present and falls back to
    positional indices. ``INDEX`` and ``KEY`` pin one strategy.
    """

    AUTO = "auto"
    INDEX = "index"
    KEY = "key"

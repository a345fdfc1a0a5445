"""Primitive coercion — raw form text to typed scalars.

Coercion never fails on bad text: unparseable input is turned into
something the validator will reject (``nan`` for numbers, the raw string
for dates and big integers). The single exception is a non-text payload,
which aborts the whole decode with :class:`UnsupportedValueError`.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Final

from formzap.domain.types import PrimitiveKind
from formzap.errors import UnsupportedValueError

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class _Absent:
    """Marker for a field with no submitted value."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()


def is_absent(value: Any) -> bool:
    return value is ABSENT


def _check_text(raw: Any, path: str) -> Any:
    """Normalize *raw* to ``str`` or ABSENT, rejecting anything else."""
    if raw is None or raw is ABSENT:
        return ABSENT
    if not isinstance(raw, str):
        raise UnsupportedValueError(path, type(raw).__name__)
    return raw


def parse_number(text: str) -> int | float:
    stripped = text.strip()
    if INTEGER_PATTERN.match(stripped):
        return int(stripped)
    if FLOAT_PATTERN.match(stripped):
        return float(stripped)
    return math.nan


def parse_date(text: str) -> datetime | str:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return text


def parse_bigint(text: str) -> int | str:
    stripped = text.strip()
    if INTEGER_PATTERN.match(stripped):
        return int(stripped)
    return text


def coerce_primitive(raw: Any, kind: PrimitiveKind, *, path: str = "") -> Any:
    """Coerce one submitted value according to *kind*.

    Args:
        raw: The submitted value, or None/ABSENT when the key is missing.
        kind: Declared leaf kind.
        path: Dotted field path, for error reporting only.

    Raises:
        UnsupportedValueError: *raw* is present but not a string.
    """
    text = _check_text(raw, path)

    if kind is PrimitiveKind.BOOLEAN:
        return text == "true"
    if kind is PrimitiveKind.NULL:
        return None if text is ABSENT or text == "" else text
    if kind is PrimitiveKind.UNDEFINED:
        return ABSENT if text is ABSENT or text in ("", "undefined") else text
    if text is ABSENT:
        return ABSENT
    if kind is PrimitiveKind.NUMBER:
        return parse_number(text)
    if kind is PrimitiveKind.DATE:
        return parse_date(text)
    if kind is PrimitiveKind.BIGINT:
        return parse_bigint(text)
    return text


def coerce_passthrough(raw: Any, *, path: str = "") -> Any:
    """Leaf with no coercion rule: raw text unchanged, non-text rejected."""
    return _check_text(raw, path)

"""FormSubmission — the flat, ordered multi-map a browser form posts.

Keys are dotted paths (``address.street``, ``tags``, ``items.3.price``) or
keyed element paths (``items[a1].price``) plus the ``items.key`` sentinel.
A key may repeat; every value is kept in submission order.

Values are normally ``str``. Anything else (bytes, an uploaded file) is
stored as-is so the decoder can reject it instead of silently coercing it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any
from urllib.parse import parse_qsl


class FormSubmission:
    """Ordered ``key -> [value, ...]`` multi-map."""

    __slots__ = ("_entries", "_pairs")

    def __init__(self, pairs: Iterable[tuple[str, Any]] = ()) -> None:
        self._entries: dict[str, list[Any]] = {}
        self._pairs: list[tuple[str, Any]] = []
        for key, value in pairs:
            self.append(key, value)

    # --- Construction ---

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Any]]) -> FormSubmission:
        return cls(pairs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> FormSubmission:
        """Build from a plain mapping; list/tuple values become repeated keys."""
        submission = cls()
        for key, value in mapping.items():
            if isinstance(value, list | tuple):
                for item in value:
                    submission.append(key, item)
            else:
                submission.append(key, value)
        return submission

    @classmethod
    def from_query_string(cls, text: str) -> FormSubmission:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Blank values are kept: an empty text input still posts its key.
        """
        return cls(parse_qsl(text, keep_blank_values=True))

    def append(self, key: str, value: Any) -> None:
        self._entries.setdefault(key, []).append(value)
        self._pairs.append((key, value))

    # --- Queries ---

    def has(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any | None:
        """First value submitted under *key*, or None."""
        values = self._entries.get(key)
        return values[0] if values else None

    def get_all(self, key: str) -> list[Any]:
        """Every value under *key* in submission order (a copy)."""
        return list(self._entries.get(key, ()))

    def keys(self) -> list[str]:
        return list(self._entries)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Every ``(key, value)`` pair in the order it was appended."""
        return iter(self._pairs)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormSubmission):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"FormSubmission({list(self.items())!r})"

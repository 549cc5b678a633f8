# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Case-insensitive request headers.

ASGI delivers headers as ``list[tuple[bytes, bytes]]`` in Latin-1. ``Headers``
decodes them once into a ``{lowercase name: [values]}`` map, so repeated
headers keep every value in arrival order.

Example::

    headers = Headers([(b"Accept", b"text/html"), (b"Accept", b"*/*")])
    headers.get("ACCEPT")        # "text/html"
    headers.getlist("accept")    # ["text/html", "*/*"]
"""

from collections.abc import Mapping
from typing import Any, Iterator

__all__ = ["Headers", "headers_from_scope"]


class Headers:
    """Immutable, case-insensitive HTTP headers with multi-value support."""

    __slots__ = ("_values", "_count")

    def __init__(self, raw_headers: list[tuple[bytes, bytes]]) -> None:
        self._values: dict[str, list[str]] = {}
        for raw_name, raw_value in raw_headers:
            name = raw_name.decode("latin-1").lower()
            self._values.setdefault(name, []).append(raw_value.decode("latin-1"))
        self._count = len(raw_headers)

    def get(self, key: str, default: str | None = None) -> str | None:
        values = self._values.get(key.lower())
        return values[0] if values else default

    def getlist(self, key: str) -> list[str]:
        return list(self._values.get(key.lower(), []))

    def keys(self) -> list[str]:
        return list(self._values)

    def items(self) -> list[tuple[str, str]]:
        """Every (name, value) pair, duplicates included."""
        return [(name, value) for name, values in self._values.items() for value in values]

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"Headers({self.items()!r})"


def headers_from_scope(scope: Mapping[str, Any]) -> Headers:
    """Build ``Headers`` from an ASGI scope (empty when the key is missing)."""
    return Headers(scope.get("headers", []))

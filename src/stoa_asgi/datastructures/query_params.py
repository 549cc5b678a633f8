# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Parsed query string.

Names are case-sensitive, repeated names keep every value, ``?key=`` gives
``""`` and percent-escapes are decoded.
"""

from collections.abc import Mapping
from typing import Any, Iterator
from urllib.parse import parse_qsl

__all__ = ["QueryParams", "query_params_from_scope"]


class QueryParams:
    """Read-only view over ``scope["query_string"]``.

    Example:
        >>> params = QueryParams(b"name=john&tags=python&tags=web")
        >>> params.get("name")
        'john'
        >>> params.getlist("tags")
        ['python', 'web']
    """

    __slots__ = ("_pairs",)

    def __init__(self, query_string: bytes | str) -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self._pairs: list[tuple[str, str]] = parse_qsl(query_string, keep_blank_values=True)

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self._pairs:
            if name == key:
                return value
        return default

    def getlist(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def keys(self) -> list[str]:
        return list(dict.fromkeys(name for name, _ in self._pairs))

    def items(self) -> list[tuple[str, str]]:
        """(name, first value) for each distinct name."""
        first: dict[str, str] = {}
        for name, value in self._pairs:
            first.setdefault(name, value)
        return list(first.items())

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __repr__(self) -> str:
        return f"QueryParams({self._pairs!r})"


def query_params_from_scope(scope: Mapping[str, Any]) -> QueryParams:
    return QueryParams(scope.get("query_string", b""))

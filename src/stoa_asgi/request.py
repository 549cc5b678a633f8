# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
HTTP request wrapper.

``HttpRequest`` exposes the ASGI scope with a friendlier API and reads the
body lazily from ``receive``. The dispatcher publishes the request being
handled in a ContextVar, so helpers deep in a handler's call stack can reach
it with ``get_current_request()``.

Example::

    @app.post("/echo")
    async def echo(request: HttpRequest):
        data = await request.json()
        return {"you_sent": data, "from": request.client}
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any

import orjson

from .datastructures import Headers, QueryParams, headers_from_scope, query_params_from_scope
from .types import Receive, Scope

__all__ = ["HttpRequest", "get_current_request", "set_current_request"]

_current_request: ContextVar["HttpRequest | None"] = ContextVar("current_request", default=None)


def get_current_request() -> HttpRequest | None:
    """Get the current request from context. Returns None outside a request."""
    return _current_request.get()


def set_current_request(request: HttpRequest | None) -> Any:
    """Set the current request in context. Returns token for reset."""
    return _current_request.set(request)


class HttpRequest:
    """
    HTTP request built from an ASGI scope.

    Attributes:
        scope: The raw ASGI scope.
        path_params: Values captured by the matched route template.
    """

    __slots__ = ("scope", "_receive", "_headers", "_query", "_body", "path_params")

    def __init__(self, scope: Scope, receive: Receive) -> None:
        self.scope = scope
        self._receive = receive
        self._headers: Headers | None = None
        self._query: QueryParams | None = None
        self._body: bytes | None = None
        self.path_params: dict[str, str] = {}

    @property
    def method(self) -> str:
        return str(self.scope.get("method", "GET")).upper()

    @property
    def path(self) -> str:
        return str(self.scope.get("path", "/"))

    @property
    def headers(self) -> Headers:
        if self._headers is None:
            self._headers = headers_from_scope(self.scope)
        return self._headers

    @property
    def query(self) -> QueryParams:
        if self._query is None:
            self._query = query_params_from_scope(self.scope)
        return self._query

    @property
    def client(self) -> tuple[str, int] | None:
        client = self.scope.get("client")
        return tuple(client) if client else None  # type: ignore[return-value]

    async def body(self) -> bytes:
        """Read and cache the whole request body."""
        if self._body is None:
            chunks: list[bytes] = []
            while True:
                message = await self._receive()
                if message["type"] == "http.disconnect":
                    break
                chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    break
            self._body = b"".join(chunks)
        return self._body

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return orjson.loads(await self.body())

    def __repr__(self) -> str:
        return f"HttpRequest(method={self.method!r}, path={self.path!r})"

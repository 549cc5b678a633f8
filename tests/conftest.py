# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Shared fixtures: drive an ASGI app in-process and capture what it sends."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import pytest


class MockSend:
    """Capture ASGI send messages for testing."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def start_message(self) -> dict[str, Any]:
        """Get the http.response.start message."""
        return self.messages[0]

    @property
    def body_messages(self) -> list[dict[str, Any]]:
        return [m for m in self.messages if m["type"] == "http.response.body"]

    @property
    def status(self) -> int:
        return self.start_message["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.start_message["headers"])

    def header(self, name: str) -> str | None:
        """Get a header value by (case-insensitive) name, decoded."""
        value = self.headers.get(name.lower().encode("latin-1"))
        return value.decode("latin-1") if value is not None else None

    @property
    def body(self) -> bytes:
        """Complete body, concatenated from all body messages."""
        return b"".join(m.get("body", b"") for m in self.body_messages)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")


def make_scope(
    method: str = "GET",
    path: str = "/",
    query_string: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
) -> dict[str, Any]:
    """Build a minimal HTTP scope as uvicorn would."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "scheme": "http",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string,
        "headers": headers or [],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


def make_receive(body: bytes = b"") -> Callable[[], Awaitable[dict[str, Any]]]:
    """Receive callable delivering ``body`` once, then a disconnect."""
    delivered = False

    async def receive() -> dict[str, Any]:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    return receive


Caller = Callable[..., Awaitable[MockSend]]


@pytest.fixture
def call() -> Caller:
    """Return ``await call(app, method, path, ...)`` -> MockSend."""

    async def _call(
        app: Any,
        method: str = "GET",
        path: str = "/",
        body: bytes = b"",
        query_string: bytes = b"",
        headers: list[tuple[bytes, bytes]] | None = None,
    ) -> MockSend:
        send = MockSend()
        scope = make_scope(method, path, query_string, headers)
        await app(scope, make_receive(body), send)
        return send

    return _call


@pytest.fixture
def send() -> MockSend:
    return MockSend()


@pytest.fixture
def public_dir(tmp_path):
    """A public directory with a few files and a nested folder."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "hello.txt").write_text("Hello, static world!\n")
    (public / "style.css").write_text("body { color: red; }")
    (public / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(256)))
    (public / "data.unknownext").write_bytes(b"\x00\x01\x02")
    (public / "css").mkdir()
    (public / "css" / "main.css").write_text("h1 { font-size: 2em; }")
    (public / "docs").mkdir()
    (public / "docs" / "index.html").write_text("<h1>Docs</h1>")
    (tmp_path / "secret.txt").write_text("top secret")
    return public

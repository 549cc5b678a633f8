# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Static file serving through the full application stack.

The tests directory itself is the public directory; this very file is the
static asset being requested.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from stoa_asgi import Application

THIS_FILE = Path(__file__).resolve()
FILE_URL = f"/{THIS_FILE.name}"


@pytest.fixture
def app() -> Application:
    return Application(static=True, public=THIS_FILE.parent)


@pytest.mark.asyncio
async def test_serves_get_requests_for_files_in_public_dir(app, call) -> None:
    res = await call(app, "GET", FILE_URL)

    assert res.status == 200
    assert res.body == THIS_FILE.read_bytes()
    assert res.header("content-length") == str(THIS_FILE.stat().st_size)
    assert res.header("last-modified") is not None


@pytest.mark.asyncio
async def test_serves_head_requests_for_files_in_public_dir(app, call) -> None:
    res = await call(app, "HEAD", FILE_URL)

    assert res.status == 200
    assert res.body == b""
    assert res.header("content-length") == str(THIS_FILE.stat().st_size)
    assert res.header("last-modified") is not None


@pytest.mark.asyncio
async def test_head_and_get_send_same_headers(app, call) -> None:
    get = await call(app, "GET", FILE_URL)
    head = await call(app, "HEAD", FILE_URL)

    assert head.headers == get.headers


@pytest.mark.asyncio
async def test_serves_files_in_preference_to_custom_routes(app, call) -> None:
    calls: list[str] = []

    @app.get(FILE_URL)
    def hello() -> str:
        calls.append("hello")
        return "Hello World"

    res = await call(app, "GET", FILE_URL)

    assert res.status == 200
    assert res.body != b"Hello World"
    assert calls == []


@pytest.mark.asyncio
async def test_does_not_serve_directories(app, call) -> None:
    res = await call(app, "GET", "/")
    assert res.status == 404


@pytest.mark.asyncio
async def test_passes_to_next_handler_when_static_disabled(app, call) -> None:
    app.set("static", False)
    res = await call(app, "GET", FILE_URL)
    assert res.status == 404


@pytest.mark.asyncio
async def test_passes_to_next_handler_when_public_is_none(app, call) -> None:
    app.set("public", None)
    res = await call(app, "GET", FILE_URL)
    assert res.status == 404


@pytest.mark.asyncio
async def test_404s_when_file_not_found(app, call) -> None:
    res = await call(app, "GET", "/foobarbaz.txt")
    assert res.status == 404


@pytest.mark.asyncio
async def test_disabled_static_falls_through_to_route(app, call) -> None:
    @app.get(FILE_URL)
    def hello() -> str:
        return "Hello World"

    app.set("static", False)
    res = await call(app, "GET", FILE_URL)

    assert res.status == 200
    assert res.body == b"Hello World"


@pytest.mark.asyncio
async def test_reenabling_static_serves_again(app, call) -> None:
    app.set("static", False)
    app.set("static", True)
    res = await call(app, "GET", FILE_URL)
    assert res.status == 200


class TestPublicDirectory:
    """Behaviour against a temporary public directory."""

    @pytest.mark.asyncio
    async def test_nested_file(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/css/main.css")

        assert res.status == 200
        assert res.body == b"h1 { font-size: 2em; }"
        assert res.header("content-type") == "text/css; charset=utf-8"

    @pytest.mark.asyncio
    async def test_binary_file_round_trips(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/logo.png")

        assert res.status == 200
        assert res.body == (public_dir / "logo.png").read_bytes()
        assert res.header("content-type") == "image/png"

    @pytest.mark.asyncio
    async def test_unknown_extension_is_octet_stream(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/data.unknownext")
        assert res.header("content-type") == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_directory_with_index_is_not_served(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/docs/")
        assert res.status == 404
        res = await call(app, "GET", "/docs")
        assert res.status == 404

    @pytest.mark.asyncio
    async def test_traversal_outside_root_is_not_served(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/../secret.txt")

        assert res.status == 404
        assert b"top secret" not in res.body

    @pytest.mark.asyncio
    async def test_unreadable_file_is_not_found(self, public_dir, call) -> None:
        locked = public_dir / "locked.txt"
        locked.write_text("hidden")
        locked.chmod(0)
        try:
            if os.access(locked, os.R_OK):
                pytest.skip("file permissions are not enforced for this user")
            app = Application(public=public_dir)
            res = await call(app, "GET", "/locked.txt")
        finally:
            locked.chmod(0o644)

        assert res.status == 404
        assert res.body == b"Not Found"

    @pytest.mark.asyncio
    async def test_trailing_slash_after_file_is_not_found(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        res = await call(app, "GET", "/hello.txt/")
        assert res.status == 404

    @pytest.mark.asyncio
    async def test_file_as_public_root_is_not_served(self, public_dir, call) -> None:
        app = Application(static=True, public=public_dir / "hello.txt")
        res = await call(app, "GET", "/")
        assert res.status == 404

    @pytest.mark.asyncio
    async def test_post_to_static_path_goes_to_routes(self, public_dir, call) -> None:
        app = Application(public=public_dir)

        @app.post("/hello.txt")
        def upload() -> str:
            return "stored"

        res = await call(app, "POST", "/hello.txt")

        assert res.status == 200
        assert res.body == b"stored"

    @pytest.mark.asyncio
    async def test_static_auto_enabled_when_public_exists(self, public_dir, call) -> None:
        app = Application(public=public_dir)
        assert app.static_config.enabled is True
        res = await call(app, "GET", "/hello.txt")
        assert res.body == b"Hello, static world!\n"

    @pytest.mark.asyncio
    async def test_default_public_under_root(self, public_dir, call) -> None:
        app = Application(root=public_dir.parent)
        assert app.static_config.root == public_dir.resolve()
        res = await call(app, "GET", "/hello.txt")
        assert res.status == 200

    @pytest.mark.asyncio
    async def test_large_file_is_streamed_in_chunks(self, tmp_path, call) -> None:
        public = tmp_path / "big"
        public.mkdir()
        payload = bytes(range(256)) * 1024
        (public / "blob.bin").write_bytes(payload)
        app = Application(public=public, static_middleware={"chunk_size": 4096})

        res = await call(app, "GET", "/blob.bin")

        assert res.body == payload
        assert len(res.body_messages) > 2
        assert res.body_messages[-1].get("more_body", False) is False

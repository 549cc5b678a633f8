# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
HTTP Response classes for ASGI applications.

Response
    In-memory body. Can be built directly or created empty and filled by
    ``set_result()``, which picks the content type from the handler result:

    - dict/list: application/json (orjson)
    - Path: file bytes, type guessed from the extension
    - bytes: application/octet-stream
    - str: text/plain
    - None: empty text/plain
    - other: ``str()`` as text/plain

FileResponse
    Streams a ``ResolvedFile`` in chunks with ``content-length`` and
    ``last-modified`` taken from the same ``stat()`` used to resolve it.

HEAD requests
=============
Both classes look at ``scope["method"]``: for HEAD the start message carries
the same headers as GET (``content-length`` included) and the body is empty.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from .exceptions import HTTPNotFound
from .static import DEFAULT_CHUNK_SIZE, ResolvedFile
from .types import Receive, Scope, Send

__all__ = ["FileResponse", "Response"]

HeadersInput = Mapping[str, str] | list[tuple[str, str]] | None


def _normalize_headers(headers: HeadersInput) -> list[tuple[str, str]]:
    """Return headers as a fresh list of (name, value) tuples."""
    if headers is None:
        return []
    if isinstance(headers, list):
        return list(headers)
    return list(headers.items())


def _is_head(scope: Scope) -> bool:
    return scope.get("method") == "HEAD"


class Response:
    """
    Base HTTP response class.

    Attributes:
        body: Encoded response body as bytes.
        status_code: HTTP status code.

    Example:
        >>> response = Response(content="Hello", media_type="text/plain")
        >>> await response(scope, receive, send)

        >>> response = Response()
        >>> response.set_header("X-Custom", "value")
        >>> response.set_result({"data": 123})
    """

    __slots__ = ("body", "status_code", "_media_type", "_headers")

    charset: str = "utf-8"

    def __init__(
        self,
        content: bytes | str | None = None,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._headers: list[tuple[str, str]] = _normalize_headers(headers)
        self._media_type = media_type
        self.body = self._encode_content(content)

        header_names = {name.lower() for name, _ in self._headers}
        if "content-type" not in header_names:
            content_type = self._get_content_type()
            if content_type:
                self._headers.append(("content-type", content_type))
        if "content-length" not in header_names:
            self._headers.append(("content-length", str(len(self.body))))

    def _encode_content(self, content: bytes | str | None) -> bytes:
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    def _get_content_type(self) -> str | None:
        """Content-type value, with charset appended for text types."""
        if self._media_type is None:
            return None
        if self._media_type.startswith("text/") and "charset" not in self._media_type:
            return f"{self._media_type}; charset={self.charset}"
        return self._media_type

    @property
    def headers(self) -> list[tuple[str, str]]:
        return list(self._headers)

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        """Lowercased, latin-1 encoded ASGI headers."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": b"" if _is_head(scope) else self.body,
            }
        )

    def set_header(self, name: str, value: str) -> None:
        """Add a response header."""
        self._headers.append((name, value))

    def set_result(self, result: Any, mime_type: str | None = None) -> None:
        """Set body and content type from a handler result."""
        mime_type = mime_type or self._media_type
        if isinstance(result, (dict, list)):
            self.body = orjson.dumps(result)
            self._media_type = mime_type or "application/json"
        elif isinstance(result, Path):
            self.body = result.read_bytes()
            guessed, _ = mimetypes.guess_type(result.name)
            self._media_type = mime_type or guessed or "application/octet-stream"
        elif isinstance(result, bytes):
            self.body = result
            self._media_type = mime_type or "application/octet-stream"
        elif isinstance(result, str):
            self.body = result.encode(self.charset)
            self._media_type = mime_type or "text/plain"
        elif result is None:
            self.body = b""
            self._media_type = mime_type or "text/plain"
        else:
            self.body = str(result).encode(self.charset)
            self._media_type = mime_type or "text/plain"
        self._update_content_headers()

    def _update_content_headers(self) -> None:
        self._headers = [
            (name, value)
            for name, value in self._headers
            if name.lower() not in ("content-type", "content-length")
        ]
        content_type = self._get_content_type()
        if content_type:
            self._headers.append(("content-type", content_type))
        self._headers.append(("content-length", str(len(self.body))))


class FileResponse:
    """
    Streaming response for a file on disk.

    Example:
        >>> found = resolve("/logo.png", config)
        >>> await FileResponse(found)(scope, receive, send)

        # From a handler, for any path on disk
        >>> return FileResponse.from_path("/srv/reports/latest.pdf")
    """

    __slots__ = ("file", "status_code", "chunk_size", "_headers")

    def __init__(
        self,
        file: ResolvedFile,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.file = file
        self.status_code = status_code
        self.chunk_size = chunk_size
        content_type = media_type or file.media_type
        if content_type.startswith("text/") and "charset" not in content_type:
            content_type = f"{content_type}; charset=utf-8"
        self._headers: list[tuple[str, str]] = [
            ("content-type", content_type),
            ("content-length", str(file.size)),
            ("last-modified", file.last_modified_header),
        ]
        self._headers.extend(_normalize_headers(headers))

    @classmethod
    def from_path(cls, path: str | Path, **kwargs: Any) -> FileResponse:
        """Build a response for ``path``.

        Raises:
            HTTPNotFound: If ``path`` is not a readable regular file.
        """
        file_path = Path(path).resolve()
        try:
            st = file_path.stat()
        except OSError as e:
            raise HTTPNotFound() from e
        if not file_path.is_file():
            raise HTTPNotFound()
        return cls(ResolvedFile(path=file_path, size=st.st_size, last_modified=st.st_mtime), **kwargs)

    @property
    def headers(self) -> list[tuple[str, str]]:
        return list(self._headers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Send the file.

        The file is opened before the start message, so an unreadable file
        raises ``HTTPNotFound`` while an error response is still possible.

        Raises:
            HTTPNotFound: If the file can no longer be opened.
        """
        try:
            fh = self.file.path.open("rb")
        except OSError as e:
            raise HTTPNotFound() from e

        with fh:
            await send(
                {
                    "type": "http.response.start",
                    "status": self.status_code,
                    "headers": [
                        (name.lower().encode("latin-1"), value.encode("latin-1"))
                        for name, value in self._headers
                    ],
                }
            )
            if _is_head(scope):
                await send({"type": "http.response.body", "body": b""})
                return

            for chunk in self.file.read_chunks(fh, self.chunk_size):
                await send({"type": "http.response.body", "body": chunk, "more_body": True})
        await send({"type": "http.response.body", "body": b""})

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Error handling middleware.

Exception handling:
    - Redirect: 3xx with Location header, empty body
    - HTTPException: status code with ``detail`` as text/plain body
    - Exception: 500 Internal Server Error, logged

Config:
    debug (bool): Include the traceback in 500 responses. Default: the
        application "debug" setting.

HEAD requests get the same headers with an empty body.
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..exceptions import HTTPException, Redirect

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("stoa_asgi")


class ErrorMiddleware(BaseMiddleware):
    """Catches exceptions from the rest of the chain and answers with an error response.

    Class Attributes:
        middleware_name: "errors" - identifier for config.
        middleware_order: 100 - outermost, sees every error.
        middleware_default: True - enabled by default.
    """

    middleware_name = "errors"
    middleware_order = 100
    middleware_default = True

    __slots__ = ("debug",)

    def __init__(self, app: ASGIApp, debug: bool | None = None, **kwargs: Any) -> None:
        super().__init__(app, **kwargs)
        if debug is None:
            debug = bool(self.application is not None and self.application.config.get("debug"))
        self.debug = debug

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Any) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Redirect as e:
            if response_started:
                raise
            await self._send(scope, send, e.status_code, b"", [(b"location", e.url.encode("latin-1"))])
        except HTTPException as e:
            if response_started:
                raise
            headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in e.headers or []]
            await self._send(scope, send, e.status_code, (e.detail or "").encode("utf-8"), headers)
        except Exception:
            logger.exception(f"Unhandled error on {scope.get('method')} {scope.get('path')}")
            if response_started:
                raise
            body = "Internal Server Error"
            if self.debug:
                body = f"{body}\n\n{traceback.format_exc()}"
            await self._send(scope, send, 500, body.encode("utf-8"))

    async def _send(
        self,
        scope: Scope,
        send: Send,
        status: int,
        body: bytes,
        extra_headers: list[tuple[bytes, bytes]] | None = None,
    ) -> None:
        headers: list[tuple[bytes, bytes]] = [
            (b"content-type", b"text/plain; charset=utf-8"),
            (b"content-length", str(len(body)).encode()),
        ]
        headers.extend(extra_headers or [])
        await send({"type": "http.response.start", "status": status, "headers": headers})
        await send(
            {
                "type": "http.response.body",
                "body": b"" if scope.get("method") == "HEAD" else body,
            }
        )

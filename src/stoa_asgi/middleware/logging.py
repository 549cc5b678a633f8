# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Access log middleware.

One line when the request arrives, one when the response is done::

    <- GET /logo.png from 192.168.1.1
    -> GET /logo.png 200 14872B (0.8ms)
    -> GET /broken ERROR: ... (0.8ms)

The byte count is the body actually sent, so HEAD requests log ``0B``.

Config (``logging_middleware`` section):
    logger_name (str): Default "stoa_asgi.access".
    level (str): Level name for the two lines. Default "INFO".
    include_query (bool): Append ``?query`` to the path. Default True.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware

if TYPE_CHECKING:
    from ..types import ASGIApp, Message, Receive, Scope, Send


class LoggingMiddleware(BaseMiddleware):
    """Logs method, path, status, body size and duration of each HTTP request.

    Class Attributes:
        middleware_name: "logging"
        middleware_order: 200 - inside error handling, outside static serving.
        middleware_default: False
    """

    middleware_name = "logging"
    middleware_order = 200
    middleware_default = False

    __slots__ = ("logger", "level", "include_query")

    def __init__(
        self,
        app: ASGIApp,
        logger_name: str = "stoa_asgi.access",
        level: str = "INFO",
        include_query: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.logger = logging.getLogger(logger_name)
        self.level = logging.getLevelName(level.upper())
        if not isinstance(self.level, int):
            self.level = logging.INFO
        self.include_query = include_query

    def describe(self, scope: Scope) -> str:
        """``METHOD path[?query]`` for the log lines."""
        target = scope.get("path", "/")
        query = scope.get("query_string", b"")
        if self.include_query and query:
            target = f"{target}?{query.decode('latin-1')}"
        return f"{scope.get('method', '?')} {target}"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_line = self.describe(scope)
        client = scope.get("client")
        self.logger.log(self.level, f"<- {request_line} from {client[0] if client else 'unknown'}")

        status = 0
        sent_bytes = 0
        started = time.perf_counter()

        async def counting_send(message: Message) -> None:
            nonlocal status, sent_bytes
            if message["type"] == "http.response.start":
                status = message.get("status", 0)
            elif message["type"] == "http.response.body":
                sent_bytes += len(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, counting_send)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            self.logger.error(f"-> {request_line} ERROR: {e} ({elapsed:.1f}ms)")
            raise

        elapsed = (time.perf_counter() - started) * 1000
        self.logger.log(self.level, f"-> {request_line} {status} {sent_bytes}B ({elapsed:.1f}ms)")

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Static Files Middleware - public directory served ahead of routes.

For GET and HEAD the request path is looked up under the application's
public directory. A regular file is answered right here, so no route handler
runs for that path. Anything else (disabled, no public dir, missing file,
directory, path outside the root, other methods) passes through unchanged to
the next app in the chain.

The settings are read on every request from ``application.static_config``,
so ``app.set("static", False)`` or ``app.set("public", None)`` take effect
immediately.

Config:
    chunk_size (int): Bytes per body message. Default: 65536.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..response import FileResponse
from ..static import DEFAULT_CHUNK_SIZE, StaticConfig, resolve

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send


class StaticMiddleware(BaseMiddleware):
    """Serves files from the public directory before dispatch.

    Class Attributes:
        middleware_name: "static" - identifier for config.
        middleware_order: 700 - innermost, right before the dispatcher.
        middleware_default: True - enabled by default.
    """

    middleware_name = "static"
    middleware_order = 700
    middleware_default = True

    __slots__ = ("chunk_size",)

    def __init__(self, app: ASGIApp, chunk_size: int = DEFAULT_CHUNK_SIZE, **kwargs: Any) -> None:
        super().__init__(app, **kwargs)
        self.chunk_size = int(chunk_size)

    @property
    def config(self) -> StaticConfig:
        if self.application is None:
            return StaticConfig()
        return self.application.static_config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("method") not in ("GET", "HEAD"):
            await self.app(scope, receive, send)
            return

        found = resolve(scope.get("path", "/"), self.config)
        if found is None:
            await self.app(scope, receive, send)
            return

        await FileResponse(found, chunk_size=self.chunk_size)(scope, receive, send)

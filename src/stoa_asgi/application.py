# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Application - main entry point for stoa-asgi.

Application is the central coordinator that:
- Holds the layered settings (AppConfig)
- Registers user routes on a Router
- Builds the middleware chain (errors -> logging -> static -> dispatcher)
- Handles the ASGI lifespan protocol

Usage:
    from stoa_asgi import Application

    app = Application(public="./public")

    @app.get("/hello/{name}")
    def hello(name: str):
        return f"Hello {name}!"

    app.run()  # Starts uvicorn

Request flow:
    uvicorn -> Application.__call__
        -> ErrorMiddleware -> [LoggingMiddleware]
        -> StaticMiddleware (file under public dir? answer it)
        -> Dispatcher -> route handler -> Response
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from .config import AppConfig
from .dispatcher import Dispatcher
from .lifespan import Lifespan
from .middleware import middleware_chain
from .routing import Router
from .static import StaticConfig
from .types import ASGIApp, Receive, Scope, Send

__all__ = ["Application"]

Endpoint = Callable[..., Any]


class Application:
    """
    ASGI application with static file serving and decorator routing.

    Attributes:
        config: AppConfig with merged settings.
        router: Router holding the user routes.
        lifespan: Lifespan with startup/shutdown handlers.
        logger: Application logger.
    """

    __slots__ = ("config", "router", "lifespan", "logger", "_chain")

    def __init__(self, root: str | Path | None = None, **settings: Any) -> None:
        """Create the application.

        Args:
            root: Project directory. Used to find config.yaml and the default
                ``<root>/public`` directory.
            **settings: Explicit settings, override config.yaml.
        """
        self.config = AppConfig(root, **settings)
        self.router = Router()
        self.lifespan = Lifespan()
        self.logger = logging.getLogger("stoa_asgi")
        self._chain: ASGIApp = self._build_chain()

    def _build_chain(self) -> ASGIApp:
        return middleware_chain(
            self.config.middleware, Dispatcher(self), application=self, full_config=self.config
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set(self, name: str, value: Any) -> None:
        """Change a setting, e.g. ``app.set("static", False)``."""
        self.config.set(name, value)
        if name == "middleware" or name.endswith("_middleware"):
            self._chain = self._build_chain()
        self.logger.debug(f"Setting {name} = {value!r}")

    @property
    def settings(self) -> AppConfig:
        return self.config

    @property
    def static_config(self) -> StaticConfig:
        """StaticConfig snapshot read by the static middleware on each request."""
        return self.config.static

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def add_route(
        self,
        path: str,
        endpoint: Endpoint,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> None:
        self.router.add(path, endpoint, methods=methods, name=name)

    def route(
        self, path: str, methods: Iterable[str] = ("GET",), name: str | None = None
    ) -> Callable[[Endpoint], Endpoint]:
        """Register a handler for ``path`` and ``methods``."""
        return self.router.route(path, methods=methods, name=name)

    def get(self, path: str, name: str | None = None) -> Callable[[Endpoint], Endpoint]:
        """Register a GET route (HEAD is answered too)."""
        return self.route(path, methods=("GET",), name=name)

    def post(self, path: str, name: str | None = None) -> Callable[[Endpoint], Endpoint]:
        return self.route(path, methods=("POST",), name=name)

    def put(self, path: str, name: str | None = None) -> Callable[[Endpoint], Endpoint]:
        return self.route(path, methods=("PUT",), name=name)

    def patch(self, path: str, name: str | None = None) -> Callable[[Endpoint], Endpoint]:
        return self.route(path, methods=("PATCH",), name=name)

    def delete(self, path: str, name: str | None = None) -> Callable[[Endpoint], Endpoint]:
        return self.route(path, methods=("DELETE",), name=name)

    # ------------------------------------------------------------------
    # Lifespan
    # ------------------------------------------------------------------

    def on_startup(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Register a startup handler (sync or async)."""
        return self.lifespan.on_startup(func)

    def on_shutdown(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Register a shutdown handler (sync or async)."""
        return self.lifespan.on_shutdown(func)

    # ------------------------------------------------------------------
    # ASGI
    # ------------------------------------------------------------------

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self.lifespan(scope, receive, send)
        elif scope["type"] == "http":
            await self._chain(scope, receive, send)
        else:
            raise RuntimeError(f"Unsupported scope type: {scope['type']!r}")

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Run the application using Uvicorn."""
        import uvicorn

        host = host or self.config["host"]
        port = int(port or self.config["port"])
        static = self.static_config
        if static.enabled:
            self.logger.info(f"Serving static files from {static.root}")
        self.logger.info(f"Starting server on {host}:{port}")
        uvicorn.run(self, host=host, port=port)

    def __repr__(self) -> str:
        return f"Application(routes={len(self.router)}, static={self.static_config!r})"

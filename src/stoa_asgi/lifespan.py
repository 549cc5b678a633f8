# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
ASGI Lifespan Management.

``Lifespan`` collects startup/shutdown handlers (sync or async) and speaks
the ASGI lifespan protocol for the application.

Design Notes
============
- Startup handlers run in registration order; the first failure sends
  ``lifespan.startup.failed`` and stops the protocol loop.
- Shutdown handlers run in reverse order. Errors are logged and do not
  prevent the remaining handlers from running.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from .types import Receive, Scope, Send

__all__ = ["Lifespan"]

Handler = Callable[[], Any]


class Lifespan:
    """ASGI lifespan handler with decorator registration.

    Example:
        >>> lifespan = Lifespan()
        >>> @lifespan.on_startup
        ... async def open_pool():
        ...     ...
    """

    __slots__ = ("startup_handlers", "shutdown_handlers", "_logger", "started")

    def __init__(self) -> None:
        self.startup_handlers: list[Handler] = []
        self.shutdown_handlers: list[Handler] = []
        self._logger = logging.getLogger("stoa_asgi.lifespan")
        self.started = False

    def on_startup(self, func: Handler) -> Handler:
        """Register a startup handler. Usable as decorator."""
        self.startup_handlers.append(func)
        return func

    def on_shutdown(self, func: Handler) -> Handler:
        """Register a shutdown handler. Usable as decorator."""
        self.shutdown_handlers.append(func)
        return func

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:  # noqa: ARG002
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as e:
                    self._logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(e)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.shutdown()
                finally:
                    await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        self._logger.info("Application starting up...")
        for handler in self.startup_handlers:
            await self._call_handler(handler)
        self.started = True
        self._logger.info("Application started")

    async def shutdown(self) -> None:
        self._logger.info("Application shutting down...")
        for handler in reversed(self.shutdown_handlers):
            try:
                await self._call_handler(handler)
            except Exception:
                self._logger.exception(f"Error in shutdown handler {handler!r}")
        self.started = False
        self._logger.info("Application stopped")

    async def _call_handler(self, handler: Handler) -> None:
        result = handler()
        if inspect.isawaitable(result):
            await result

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatcher - Routes requests to user handlers via the application Router."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from smartasync import smartasync

from .exceptions import HTTPBadRequest, HTTPMethodNotAllowed, HTTPNotFound, Pass
from .request import HttpRequest, set_current_request
from .response import FileResponse, Response

if TYPE_CHECKING:
    from .application import Application
    from .routing import Route, Router
    from .types import Receive, Scope, Send


def build_kwargs(route: Route, request: HttpRequest, params: dict[str, str]) -> dict[str, Any]:
    """Map query string, path params and the request onto the endpoint signature.

    Path params win over query params with the same name. A parameter called
    ``request`` receives the HttpRequest.

    Raises:
        HTTPBadRequest: If a required parameter has no value.
    """
    candidates: dict[str, Any] = dict(request.query.items())
    candidates.update(params)
    signature = inspect.signature(route.endpoint)
    kwargs: dict[str, Any] = {}
    takes_var_kw = False
    for name, param in signature.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            takes_var_kw = True
            continue
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            continue
        if name == "request":
            kwargs[name] = request
        elif name in candidates:
            kwargs[name] = candidates[name]
        elif param.default is inspect.Parameter.empty:
            raise HTTPBadRequest(f"Missing parameter: {name}")
    if takes_var_kw:
        for name, value in candidates.items():
            kwargs.setdefault(name, value)
    return kwargs


class Dispatcher:
    """Innermost ASGI app: runs the first matching route that does not pass."""

    __slots__ = ("application",)

    def __init__(self, application: Application) -> None:
        self.application = application

    @property
    def router(self) -> Router:
        """Proxy to application.router."""
        return self.application.router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface - dispatch request to handler via router."""
        request = HttpRequest(scope, receive)
        set_current_request(request)
        try:
            response = await self.dispatch(request)
            await response(scope, receive, send)
        finally:
            set_current_request(None)

    async def dispatch(self, request: HttpRequest) -> Response | FileResponse:
        """Return the response of the first route that handles ``request``.

        Raises:
            HTTPNotFound: No route matched, or every match passed.
            HTTPMethodNotAllowed: The path exists only under other methods.
        """
        matched = False
        for route, params in self.router.iter_matches(request.method, request.path):
            matched = True
            request.path_params = params
            kwargs = build_kwargs(route, request, params)
            try:
                result = await smartasync(route.endpoint)(**kwargs)
            except Pass:
                continue
            if isinstance(result, (Response, FileResponse)):
                return result
            response = Response()
            response.set_result(result)
            return response

        if not matched:
            allowed = self.router.allowed_methods(request.path)
            if allowed:
                raise HTTPMethodNotAllowed(allowed)
        raise HTTPNotFound()

# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""stoa-asgi - Small ASGI framework that serves a public directory ahead of routes.

Main components:
    Application: settings, routes, middleware chain, lifespan
    resolve / StaticConfig / ResolvedFile: public directory lookup
    Response / FileResponse: in-memory and streamed responses
    HttpRequest: request wrapper with headers, query, body

Middleware:
    ErrorMiddleware: exception to error response (on by default)
    LoggingMiddleware: access log (off by default)
    StaticMiddleware: public directory serving (on by default)

Usage:
    from stoa_asgi import Application

    app = Application(public="./public")

    @app.get("/")
    def index():
        return "Hello"

    app.run()  # Starts uvicorn
"""

__version__ = "0.1.0"

from .application import Application
from .config import AppConfig
from .datastructures import Headers, QueryParams, headers_from_scope, query_params_from_scope
from .exceptions import (
    HTTPBadRequest,
    HTTPException,
    HTTPForbidden,
    HTTPMethodNotAllowed,
    HTTPNotFound,
    Pass,
    Redirect,
)
from .lifespan import Lifespan
from .request import HttpRequest, get_current_request
from .response import FileResponse, Response
from .routing import Route, Router
from .static import ResolvedFile, StaticConfig, resolve
from .types import ASGIApp, Message, Receive, Scope, Send

Request = HttpRequest

__all__ = [
    # Application
    "Application",
    "AppConfig",
    "Lifespan",
    # Static files
    "ResolvedFile",
    "StaticConfig",
    "resolve",
    # Routing
    "Route",
    "Router",
    # Request / Response
    "HttpRequest",
    "Request",
    "get_current_request",
    "Response",
    "FileResponse",
    # Data structures
    "Headers",
    "QueryParams",
    "headers_from_scope",
    "query_params_from_scope",
    # Exceptions
    "HTTPException",
    "HTTPBadRequest",
    "HTTPForbidden",
    "HTTPMethodNotAllowed",
    "HTTPNotFound",
    "Pass",
    "Redirect",
    # ASGI types
    "ASGIApp",
    "Message",
    "Receive",
    "Scope",
    "Send",
]

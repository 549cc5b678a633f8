# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Exception classes for stoa-asgi request handling.

HTTP errors
-----------
Raise an ``HTTPException`` (or one of its subclasses) from a route handler
and ``ErrorMiddleware`` turns it into a plain-text response carrying the
status code, the ``detail`` message and any extra headers::

    >>> raise HTTPNotFound("No such user")
    >>> raise HTTPException(401, detail="Auth required", headers={"WWW-Authenticate": "Bearer"})
    >>> raise Redirect("/login")

Control flow
------------
``Pass`` is not an error. A handler raises it to decline the request; the
dispatcher then tries the next route matching the same path::

    @app.get("/guess/{who}")
    def guess_frank(who: str):
        if who != "frank":
            raise Pass()
        return "You got me!"

    @app.get("/guess/{who}")
    def guess_other(who: str):
        return "You missed!"
"""

from __future__ import annotations

__all__ = [
    "HTTPException",
    "HTTPBadRequest",
    "HTTPForbidden",
    "HTTPMethodNotAllowed",
    "HTTPNotFound",
    "Pass",
    "Redirect",
]


class HTTPException(Exception):
    """
    HTTP exception with status code, detail and optional headers.

    Attributes:
        status_code: HTTP status code (4xx/5xx expected, not validated).
        detail: Error detail message, used as response body.
        headers: Extra response headers as list of tuples, or None.
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        # list form keeps duplicate header names (Set-Cookie)
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, detail={self.detail!r})"


class Redirect(HTTPException):
    """HTTP redirect exception. Raises 302 redirect by default."""

    def __init__(self, url: str, status_code: int = 302) -> None:
        super().__init__(status_code, headers={"Location": url})
        self.url = url

    def __repr__(self) -> str:
        return f"Redirect(url={self.url!r}, status_code={self.status_code})"


class HTTPBadRequest(HTTPException):
    """HTTP 400 Bad Request exception."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(400, detail=detail)


class HTTPForbidden(HTTPException):
    """HTTP 403 Forbidden exception."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(403, detail=detail)


class HTTPNotFound(HTTPException):
    """HTTP 404 Not Found exception."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(404, detail=detail)


class HTTPMethodNotAllowed(HTTPException):
    """HTTP 405 Method Not Allowed, with the ``Allow`` header filled in."""

    def __init__(self, allowed: list[str], detail: str = "Method Not Allowed") -> None:
        super().__init__(405, detail=detail, headers={"Allow": ", ".join(allowed)})
        self.allowed = list(allowed)


class Pass(Exception):
    """Raised by a route handler to hand the request to the next matching route."""

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route table for user-defined handlers.

Path templates accept two placeholder forms:

    /users/{user_id}          one path segment, no slashes
    /files/{rest:path}        the remainder of the path, slashes included

Routes are tried in definition order. A route registered for GET also
answers HEAD.

Example::

    router = Router()

    @router.route("/users/{user_id}", methods=["GET", "DELETE"])
    def user(user_id: str):
        ...

    for route, params in router.iter_matches("GET", "/users/42"):
        ...  # (route, {"user_id": "42"})
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any

__all__ = ["Route", "Router"]

_PARAM_RE = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)(?::(path))?\}")


def compile_path(path: str) -> tuple[re.Pattern[str], list[str]]:
    """Compile a path template into a regex and its parameter names."""
    if not path.startswith("/"):
        raise ValueError(f"Route path must start with '/': {path!r}")
    pattern = "^"
    names: list[str] = []
    pos = 0
    for match in _PARAM_RE.finditer(path):
        pattern += re.escape(path[pos : match.start()])
        name, kind = match.group(1), match.group(2)
        if name in names:
            raise ValueError(f"Duplicate parameter {name!r} in route {path!r}")
        names.append(name)
        pattern += f"(?P<{name}>.+)" if kind == "path" else f"(?P<{name}>[^/]+)"
        pos = match.end()
    pattern += re.escape(path[pos:]) + "$"
    return re.compile(pattern), names


class Route:
    """A path template bound to an endpoint for a set of methods."""

    __slots__ = ("path", "endpoint", "methods", "name", "param_names", "_regex")

    def __init__(
        self,
        path: str,
        endpoint: Callable[..., Any],
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> None:
        self.path = path
        self.endpoint = endpoint
        self.methods = {m.upper() for m in methods}
        if "GET" in self.methods:
            self.methods.add("HEAD")
        self.name = name or getattr(endpoint, "__name__", None)
        self._regex, self.param_names = compile_path(path)

    def match(self, path: str) -> dict[str, str] | None:
        """Return captured parameters if ``path`` fits the template."""
        found = self._regex.match(path)
        if found is None:
            return None
        return found.groupdict()

    def __repr__(self) -> str:
        methods = ",".join(sorted(self.methods))
        return f"Route(path={self.path!r}, methods={methods}, name={self.name!r})"


class Router:
    """Ordered collection of routes."""

    __slots__ = ("routes",)

    def __init__(self) -> None:
        self.routes: list[Route] = []

    def add(
        self,
        path: str,
        endpoint: Callable[..., Any],
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> Route:
        route = Route(path, endpoint, methods=methods, name=name)
        self.routes.append(route)
        return route

    def route(
        self, path: str, methods: Iterable[str] = ("GET",), name: str | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``add()``. Returns the endpoint unchanged."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(path, func, methods=methods, name=name)
            return func

        return decorator

    def iter_matches(self, method: str, path: str) -> Iterator[tuple[Route, dict[str, str]]]:
        """Yield ``(route, params)`` for every route accepting method and path."""
        method = method.upper()
        for route in self.routes:
            if method not in route.methods:
                continue
            params = route.match(path)
            if params is not None:
                yield route, params

    def allowed_methods(self, path: str) -> list[str]:
        """Methods of all routes whose template fits ``path``."""
        allowed: set[str] = set()
        for route in self.routes:
            if route.match(path) is not None:
                allowed |= route.methods
        return sorted(allowed)

    def __len__(self) -> int:
        return len(self.routes)

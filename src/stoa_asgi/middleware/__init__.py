# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package.

Every ``BaseMiddleware`` subclass registers itself under ``middleware_name``
when its module is imported; all modules of this package are imported at
package load. ``middleware_chain()`` then wraps the innermost app with the
enabled middleware, lowest ``middleware_order`` outermost.

Built-in chain (default state in brackets)::

    errors (100) [on] -> logging (200) [off] -> static (700) [on] -> dispatcher

Order ranges:
    100: error handling
    200: logging / tracing
    300-600: application middleware
    700: static files, right before dispatch
"""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..application import Application
    from ..types import ASGIApp, Receive, Scope, Send

MIDDLEWARE_REGISTRY: dict[str, type["BaseMiddleware"]] = {}

_ON_VALUES = ("on", "true", "yes", "1")


class BaseMiddleware(ABC):
    """Wraps the next ASGI app of the chain.

    Class attributes:
        middleware_name: Registry key and config name (default: class name).
        middleware_order: Position in the chain, lower wraps outer.
        middleware_default: Enabled when the config does not mention it.
    """

    middleware_name: str = ""
    middleware_order: int = 500
    middleware_default: bool = False

    __slots__ = ("app", "application")

    def __init__(self, app: ASGIApp, application: Application | None = None, **kwargs: Any) -> None:
        """
        Args:
            app: Next ASGI app in the chain.
            application: Owning Application, None when the chain is built
                standalone.
            **kwargs: Options from the ``{name}_middleware`` config section.
        """
        self.app = app
        self.application = application

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.middleware_name or cls.__name__
        if name in MIDDLEWARE_REGISTRY:
            raise ValueError(f"Middleware name '{name}' already registered")
        cls.middleware_name = name
        MIDDLEWARE_REGISTRY[name] = cls

    @abstractmethod
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


def _import_builtin_middleware() -> None:
    for py_file in sorted(Path(__file__).parent.glob("*.py")):
        if not py_file.name.startswith("_"):
            importlib.import_module(f".{py_file.stem}", __package__)


def _is_on(value: Any) -> bool:
    """Read an on/off flag: bools as-is, strings like "on"/"off", else truthiness."""
    if isinstance(value, str):
        return value.lower() in _ON_VALUES
    return bool(value)


def _switches(middleware_config: Any) -> dict[str, bool]:
    """Normalise the ``middleware`` setting to ``{name: enabled}``.

    Accepts a mapping (plain dict or SmartOptions), a comma-separated string
    of names to enable, or an iterable of names.
    """
    if not middleware_config:
        return {}
    if isinstance(middleware_config, str):
        names = (n.strip() for n in middleware_config.split(","))
        return {name: True for name in names if name}
    if hasattr(middleware_config, "as_dict"):
        middleware_config = middleware_config.as_dict()
    if isinstance(middleware_config, dict):
        return {name: _is_on(value) for name, value in middleware_config.items()}
    return {name: True for name in middleware_config}


def _options_for(full_config: Any, name: str) -> dict[str, Any]:
    """Keyword arguments from the ``{name}_middleware`` section, if any."""
    if full_config is None:
        return {}
    section = full_config[f"{name}_middleware"]
    if section is None:
        return {}
    return section.as_dict() if hasattr(section, "as_dict") else dict(section)


def middleware_chain(
    middleware_config: Any,
    app: ASGIApp,
    application: Application | None = None,
    full_config: Any = None,
) -> ASGIApp:
    """Wrap ``app`` with every enabled middleware.

    Example config.yaml::

        middleware:
          logging: on
          static: off

        logging_middleware:
          level: DEBUG

    Args:
        middleware_config: ``{name: on/off}`` mapping, "a, b" string or list.
        app: Innermost ASGI app, normally the Dispatcher.
        application: Passed to every middleware.
        full_config: Looked up for ``{name}_middleware`` sections.

    Returns:
        The outermost ASGI app.
    """
    switches = _switches(middleware_config)
    enabled = sorted(
        (cls for name, cls in MIDDLEWARE_REGISTRY.items() if switches.get(name, cls.middleware_default)),
        key=lambda cls: cls.middleware_order,
    )
    for cls in reversed(enabled):
        app = cls(app, application=application, **_options_for(full_config, cls.middleware_name))
    return app


_import_builtin_middleware()
globals().update(MIDDLEWARE_REGISTRY)

__all__ = [
    "BaseMiddleware",
    "MIDDLEWARE_REGISTRY",
    "middleware_chain",
    *MIDDLEWARE_REGISTRY.keys(),
]

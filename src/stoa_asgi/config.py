# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Application configuration - layered settings and the static snapshot.

Config precedence (later overrides earlier):
    1. Built-in DEFAULTS
    2. Project config: <root>/config.yaml
    3. Explicit constructor settings

Settings:
    host, port, reload, debug: server options
    static: serve files from the public directory. None (default) means
        "on when the public directory exists"
    public: public directory. When unset and ``root`` is given it defaults
        to ``<root>/public``
    middleware: {name: on/off} map, see ``middleware_chain``
    {name}_middleware: keyword arguments for that middleware

Example config.yaml::

    host: 0.0.0.0
    port: 9000
    public: ./assets
    middleware:
      logging: on
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .static import StaticConfig

__all__ = ["AppConfig", "DEFAULTS"]

DEFAULTS = {"host": "127.0.0.1", "port": 8000, "reload": False, "debug": False}


class AppConfig:
    """Holds the merged settings and the current StaticConfig snapshot."""

    __slots__ = ("_opts", "_overrides", "root", "_static")

    def __init__(self, root: str | Path | None = None, **settings: Any) -> None:
        self.root = Path(root).resolve() if root is not None else None
        self._opts = self._build_config(settings)
        # values set at runtime, None included, shadow the merged options
        self._overrides: dict[str, Any] = {}
        if self._opts["public"] is None and self.root is not None:
            self._opts["public"] = self.root / "public"
        self._static = self._build_static()

    def _build_config(self, settings: dict[str, Any]) -> SmartOptions:
        project_config = SmartOptions({})
        if self.root is not None:
            config_path = self.root / "config.yaml"
            if config_path.exists():
                project_config = SmartOptions(str(config_path))

        caller_opts = SmartOptions(dict(settings), ignore_none=True)
        return SmartOptions(DEFAULTS) + project_config + caller_opts

    def _build_static(self) -> StaticConfig:
        public = self["public"]
        root: Path | None = None
        if public:
            root = Path(public)
            if not root.is_absolute() and self.root is not None:
                root = self.root / root
            root = root.resolve()
        enabled = self["static"]
        if enabled is None:
            enabled = root is not None and root.is_dir()
        return StaticConfig(enabled=bool(enabled), root=root)

    @property
    def static(self) -> StaticConfig:
        """Current static-serving snapshot."""
        return self._static

    @property
    def middleware(self) -> Any:
        """Middleware on/off configuration."""
        return self["middleware"] or {}

    def set(self, name: str, value: Any) -> None:
        """Change a setting at runtime and refresh the static snapshot."""
        self._overrides[name] = value
        self._static = self._build_static()

    def get(self, name: str, default: Any = None) -> Any:
        value = self[name]
        return default if value is None else value

    def __getitem__(self, name: str) -> Any:
        """Runtime value if set, else the merged opts (None when missing)."""
        if name in self._overrides:
            return self._overrides[name]
        return self._opts[name]

    def __repr__(self) -> str:
        return f"AppConfig(root={self.root!r}, static={self._static!r})"


if __name__ == "__main__":
    config = AppConfig(".")
    print(f"Server: {config['host']}:{config['port']}")
    print(f"Static: {config.static}")

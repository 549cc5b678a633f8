# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for AppConfig: layered settings and the static snapshot."""

from __future__ import annotations

from pathlib import Path

from stoa_asgi.config import DEFAULTS, AppConfig
from stoa_asgi.static import StaticConfig


class TestDefaults:
    def test_server_defaults(self) -> None:
        config = AppConfig()
        assert config["host"] == DEFAULTS["host"]
        assert config["port"] == 8000
        assert config["debug"] is False

    def test_missing_key_is_none(self) -> None:
        config = AppConfig()
        assert config["nonexistent"] is None
        assert config.get("nonexistent", "fallback") == "fallback"

    def test_static_off_without_public(self) -> None:
        assert AppConfig().static == StaticConfig(enabled=False, root=None)

    def test_middleware_defaults_to_empty(self) -> None:
        assert AppConfig().middleware == {}

    def test_explicit_settings_override_defaults(self) -> None:
        config = AppConfig(port=9000, host="0.0.0.0")
        assert config["port"] == 9000
        assert config["host"] == "0.0.0.0"

    def test_none_setting_keeps_default(self) -> None:
        assert AppConfig(port=None)["port"] == 8000


class TestPublicDirectory:
    def test_static_auto_enabled_when_dir_exists(self, public_dir: Path) -> None:
        static = AppConfig(public=public_dir).static
        assert static.enabled is True
        assert static.root == public_dir.resolve()

    def test_static_auto_disabled_when_dir_missing(self, tmp_path: Path) -> None:
        static = AppConfig(public=tmp_path / "nope").static
        assert static.enabled is False
        assert static.root == (tmp_path / "nope").resolve()

    def test_explicit_static_wins(self, public_dir: Path) -> None:
        assert AppConfig(public=public_dir, static=False).static.enabled is False

    def test_public_defaults_under_root(self, public_dir: Path) -> None:
        config = AppConfig(public_dir.parent)
        assert config.root == public_dir.parent.resolve()
        assert config.static.root == public_dir.resolve()
        assert config.static.enabled is True

    def test_relative_public_resolved_against_root(self, public_dir: Path) -> None:
        (public_dir.parent / "assets").mkdir()
        config = AppConfig(public_dir.parent, public="assets")
        assert config.static.root == (public_dir.parent / "assets").resolve()

    def test_str_public(self, public_dir: Path) -> None:
        assert AppConfig(public=str(public_dir)).static.enabled is True


class TestRuntimeChanges:
    def test_set_static(self, public_dir: Path) -> None:
        config = AppConfig(public=public_dir)
        config.set("static", False)
        assert config.static.enabled is False
        config.set("static", True)
        assert config.static.enabled is True

    def test_set_public_none(self, public_dir: Path) -> None:
        config = AppConfig(public=public_dir, static=True)
        config.set("public", None)
        assert config["public"] is None
        assert config.static.root is None

    def test_set_public_new_dir(self, public_dir: Path, tmp_path: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        config = AppConfig(public=public_dir)
        config.set("public", other)
        assert config.static.root == other.resolve()

    def test_snapshot_is_replaced_not_mutated(self, public_dir: Path) -> None:
        config = AppConfig(public=public_dir)
        before = config.static
        config.set("static", False)
        assert before.enabled is True
        assert config.static is not before


def test_config_yaml_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("port: 9100\ndebug: true\n")
    config = AppConfig(tmp_path)
    assert config["port"] == 9100
    assert config["debug"] is True


def test_explicit_settings_override_config_yaml(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("port: 9100\n")
    assert AppConfig(tmp_path, port=9200)["port"] == 9200


def test_repr(public_dir: Path) -> None:
    assert "AppConfig(" in repr(AppConfig(public=public_dir))

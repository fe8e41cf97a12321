"""Tests for settings resolution (task_tracker/config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from task_tracker.config import DEFAULT_STORE_URL, Settings, load_config_file, load_settings
from task_tracker.errors import ConfigError


def test_defaults() -> None:
    settings = load_settings(environ={})
    assert settings == Settings()
    assert settings.port == 5000
    assert settings.store_url == DEFAULT_STORE_URL


def test_missing_config_file(tmp_path: Path) -> None:
    assert load_config_file(tmp_path / "absent.yaml") == ({}, None)


def test_config_file_then_env(tmp_path: Path) -> None:
    cfg = tmp_path / "tracker.yaml"
    cfg.write_text(
        "host: 0.0.0.0\nport: 8080\nstore_url: memory://\nlog_level: debug\ncors_origins: [\"http://a\", \"http://b\"]\n",
        encoding="utf-8",
    )
    settings = load_settings(cfg, environ={})
    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.store_url == "memory://"
    assert settings.cors_origins == ["http://a", "http://b"]

    env = {"TASK_TRACKER_PORT": "9000", "TASK_TRACKER_STORE_URL": "yaml:///srv/tasks.yaml"}
    settings = load_settings(cfg, environ=env)
    assert settings.port == 9000
    assert settings.store_url == "yaml:///srv/tasks.yaml"
    assert settings.host == "0.0.0.0"


def test_config_path_from_env(tmp_path: Path) -> None:
    cfg = tmp_path / "tracker.yaml"
    cfg.write_text("port: 7000\n", encoding="utf-8")
    assert load_settings(environ={"TASK_TRACKER_CONFIG": str(cfg)}).port == 7000


def test_plain_port_env_and_origins() -> None:
    settings = load_settings(environ={"PORT": "5050", "TASK_TRACKER_CORS_ORIGINS": "http://x, http://y"})
    assert settings.port == 5050
    assert settings.cors_origins == ["http://x", "http://y"]


@pytest.mark.parametrize("port", ["abc", "0", "70000"])
def test_bad_port(port: str) -> None:
    with pytest.raises(ConfigError):
        load_settings(environ={"TASK_TRACKER_PORT": port})


def test_bad_config_file(tmp_path: Path) -> None:
    cfg = tmp_path / "tracker.yaml"
    cfg.write_text("- not\n- a mapping\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(cfg, environ={})

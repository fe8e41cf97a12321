"""Load runtime settings from an optional YAML file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import ConfigError

ENV_PREFIX = "TASK_TRACKER_"
DEFAULT_STORE_URL = "yaml://.task_tracker/tasks.yaml"


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 5000
    store_url: str = DEFAULT_STORE_URL
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


def load_config_file(path: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        path: YAML file to read.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    if not path.exists():
        return {}, None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        return {}, f"Failed to read {path}: {exc}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, f"{path} must contain a mapping"
    return data, None


def parse_port(raw: Any) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid port: {raw!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range: {port}")
    return port


def _parse_origins(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [o.strip() for o in raw.split(",") if o.strip()]
    if isinstance(raw, list):
        return [str(o) for o in raw]
    raise ConfigError(f"Invalid cors_origins: {raw!r}")


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve settings: defaults, then the config file, then the environment.

    Args:
        config_path: Explicit config file; falls back to ``TASK_TRACKER_CONFIG``.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: If the file cannot be parsed or a value is malformed.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    if config_path is None and env.get(f"{ENV_PREFIX}CONFIG"):
        config_path = Path(env[f"{ENV_PREFIX}CONFIG"])
    if config_path is not None:
        data, err = load_config_file(Path(config_path).expanduser())
        if err:
            raise ConfigError(err)
        if "host" in data:
            settings.host = str(data["host"])
        if "port" in data:
            settings.port = parse_port(data["port"])
        if "store_url" in data:
            settings.store_url = str(data["store_url"])
        if "log_level" in data:
            settings.log_level = str(data["log_level"])
        if "cors_origins" in data:
            settings.cors_origins = _parse_origins(data["cors_origins"])

    if env.get(f"{ENV_PREFIX}HOST"):
        settings.host = env[f"{ENV_PREFIX}HOST"]
    port = env.get(f"{ENV_PREFIX}PORT") or env.get("PORT")
    if port:
        settings.port = parse_port(port)
    if env.get(f"{ENV_PREFIX}STORE_URL"):
        settings.store_url = env[f"{ENV_PREFIX}STORE_URL"]
    if env.get(f"{ENV_PREFIX}LOG_LEVEL"):
        settings.log_level = env[f"{ENV_PREFIX}LOG_LEVEL"]
    if env.get(f"{ENV_PREFIX}CORS_ORIGINS"):
        settings.cors_origins = _parse_origins(env[f"{ENV_PREFIX}CORS_ORIGINS"])

    return settings

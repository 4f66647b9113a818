"""
Central configuration for the Selenium Grid exporter.
Supports defaults, optional config file (YAML), and environment overrides.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from utils import env_float, env_int, env_str, get_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULTS: dict[str, Any] = {
    "hub": {
        "url": "http://127.0.0.1:4444",
        "timeout_sec": 5.0,
        "status_path": "/status",
        "queue_path": "/se/grid/newsessionqueue/queue",
    },
    "exporter": {
        "host": "0.0.0.0",
        "port": 9000,
        "metrics_path": "/metrics",
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}

# -----------------------------------------------------------------------------
# Config file loading (optional YAML)
# -----------------------------------------------------------------------------

_config_overrides: dict[str, Any] = {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config_file(path: str | Path | None = None) -> bool:
    """Load optional YAML config. Returns True if loaded."""
    if path is None:
        for p in (
            Path(os.getcwd()) / "config.yaml",
            Path(os.getcwd()) / "config.yml",
            Path.home() / ".grid_exporter" / "config.yaml",
        ):
            if p.exists():
                path = p
                break
    if path is None:
        return False
    path = Path(path)
    if not path.exists():
        return False
    import yaml
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return False
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", path)
        return False
    global _config_overrides
    _config_overrides = _deep_merge(_config_overrides, data)
    # Environment still wins over the file.
    _apply_env()
    return True


def get(key_path: str, default: Any = None) -> Any:
    """Get config value by dot path, e.g. 'hub.url'."""
    merged = _deep_merge(DEFAULTS, _config_overrides)
    keys = key_path.split(".")
    for k in keys:
        if isinstance(merged, dict) and k in merged:
            merged = merged[k]
        else:
            return default
    return merged


def set_override(key_path: str, value: Any) -> None:
    """Override a single value by dot path (used for CLI flags)."""
    keys = key_path.split(".")
    d = _config_overrides
    for k in keys[:-1]:
        if not isinstance(d.get(k), dict):
            d[k] = {}
        d = d[k]
    d[keys[-1]] = value


def reset_overrides() -> None:
    """Drop file and flag overrides, then re-apply the environment."""
    _config_overrides.clear()
    _apply_env()


# -----------------------------------------------------------------------------
# Environment overrides (take precedence over file)
# -----------------------------------------------------------------------------

def _env_overrides() -> dict[str, Any]:
    return {
        "hub.url": env_str("GRID_EXPORTER_HUB", ""),
        "hub.timeout_sec": env_float("GRID_EXPORTER_TIMEOUT", 0),
        "exporter.host": env_str("GRID_EXPORTER_HOST", ""),
        "exporter.port": env_int("GRID_EXPORTER_PORT", 0),
        "logging.level": env_str("GRID_EXPORTER_LOG_LEVEL", ""),
    }


def _apply_env() -> None:
    for path, value in _env_overrides().items():
        if value == 0 or value == "":
            continue
        set_override(path, value)


# Apply env on import
_apply_env()

# -----------------------------------------------------------------------------
# Convenience constants (values at import time; call get() for live values)
# -----------------------------------------------------------------------------

LISTEN_HOST = str(get("exporter.host", "0.0.0.0"))
LISTEN_PORT = int(get("exporter.port", 9000))

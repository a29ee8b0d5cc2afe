"""Load application settings from config/settings.yaml with .env overrides."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

_DEFAULTS: dict[str, Any] = {
    "api": {
        "base_url": "http://localhost:3000",
        "prefix": "/public",
        "timeout": 10.0,
    },
    "storage": {
        "file": "data/preapproval/state.json",
        "namespace": "preapproval",
    },
    "wizard": {
        "price_min": 100000,
        "price_max": 2000000,
        "price_step": 10000,
        "animation_ms": 600,
        "select_delay_ms": 300,
    },
    "logging": {
        "file": "data/logs/preapproval.log",
        "level": "INFO",
        "log_to_console": False,
        "max_bytes": 10485760,  # 10 MB
        "backup_count": 3,
    },
}

# Environment variable -> dot path of the setting it overrides
_ENV_OVERRIDES: dict[str, str] = {
    "PREAPPROVAL_API_URL": "api.base_url",
    "PREAPPROVAL_LOG_LEVEL": "logging.level",
}

_cached: dict[str, Any] | None = None


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base recursively. Mutates base."""
    for key, value in overlay.items():
        if value is None:
            continue
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def get_default_settings() -> dict[str, Any]:
    """Return a deep copy of default settings."""
    return _deep_copy_nested(_DEFAULTS)


def get_setting(settings: dict[str, Any], path: str, default: Any = None) -> Any:
    """Get a nested value by dot path (e.g. 'api.base_url')."""
    current: Any = settings
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def _set_setting(settings: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    current = settings
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def reload_settings() -> None:
    """Clear the settings cache. Call after config files change."""
    global _cached
    _cached = None


def load_settings(
    config_dir: Path | None = None,
    env_path: Path | None = None,
) -> dict[str, Any]:
    """Load settings: defaults, then config/settings.yaml, then .env and process env."""
    global _cached
    if _cached is not None:
        return _cached

    project_root = Path(__file__).resolve().parent.parent
    if config_dir is None:
        config_dir = project_root / "config"
    if env_path is None:
        env_path = config_dir.parent / ".env"
    path = config_dir / "settings.yaml"

    result = get_default_settings()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                _deep_merge(result, data)
        except (yaml.YAMLError, OSError):
            pass

    env_vars = dict(dotenv_values(env_path)) if env_path.exists() else {}
    env_vars.update(os.environ)
    for name, setting_path in _ENV_OVERRIDES.items():
        value = env_vars.get(name)
        if value:
            _set_setting(result, setting_path, value)

    _cached = result
    return result


def _deep_copy_nested(obj: Any) -> Any:
    """Return a deep copy of nested dicts/lists for defaults."""
    if isinstance(obj, dict):
        return {k: _deep_copy_nested(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_deep_copy_nested(x) for x in obj]
    return obj

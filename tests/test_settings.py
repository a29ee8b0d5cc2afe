"""Tests for core.settings."""

from pathlib import Path

import pytest

from core.settings import get_default_settings, get_setting, load_settings, reload_settings


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PREAPPROVAL_API_URL", raising=False)
    monkeypatch.delenv("PREAPPROVAL_LOG_LEVEL", raising=False)


def test_defaults_when_no_config(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "config")
    assert settings == get_default_settings()
    assert get_setting(settings, "wizard.animation_ms") == 600


def test_yaml_is_merged_over_defaults(tmp_path: Path) -> None:
    config = tmp_path / "config"
    config.mkdir()
    (config / "settings.yaml").write_text(
        "api:\n  base_url: https://api.example.com\nwizard:\n  price_step: 5000\n",
        encoding="utf-8",
    )

    settings = load_settings(config)

    assert settings["api"]["base_url"] == "https://api.example.com"
    assert settings["api"]["prefix"] == "/public"
    assert settings["wizard"]["price_step"] == 5000
    assert settings["wizard"]["price_min"] == 100000


def test_invalid_yaml_keeps_defaults(tmp_path: Path) -> None:
    config = tmp_path / "config"
    config.mkdir()
    (config / "settings.yaml").write_text("api: [unclosed", encoding="utf-8")
    assert load_settings(config) == get_default_settings()


def test_dotenv_and_process_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """.env values apply; the process environment wins over .env."""
    (tmp_path / ".env").write_text(
        "PREAPPROVAL_API_URL=http://from-dotenv:3000\nPREAPPROVAL_LOG_LEVEL=DEBUG\n",
        encoding="utf-8",
    )
    settings = load_settings(tmp_path / "config")
    assert settings["api"]["base_url"] == "http://from-dotenv:3000"
    assert settings["logging"]["level"] == "DEBUG"

    reload_settings()
    monkeypatch.setenv("PREAPPROVAL_API_URL", "http://from-env:4000")
    settings = load_settings(tmp_path / "config")
    assert settings["api"]["base_url"] == "http://from-env:4000"


def test_settings_are_cached_until_reload(tmp_path: Path) -> None:
    first = load_settings(tmp_path / "config")
    assert load_settings(tmp_path / "other") is first
    reload_settings()
    assert load_settings(tmp_path / "config") is not first


def test_get_setting_missing_path_returns_default() -> None:
    settings = {"api": {"base_url": "x"}}
    assert get_setting(settings, "api.base_url") == "x"
    assert get_setting(settings, "api.missing", 5) == 5
    assert get_setting(settings, "api.base_url.deeper") is None

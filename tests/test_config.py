"""Tests for settings."""

import pytest

from food_sync.config import ConfigurationError, Settings


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("OMHH_API_URI", "https://env.test")
    monkeypatch.setenv("OMHH_API_TOKEN", "env-token")
    monkeypatch.setenv("FOOD_DB_PATH", "/data/fdc.sqlite3")

    settings = Settings(_env_file=None)

    assert settings.omhh_api_uri == "https://env.test"
    assert settings.omhh_api_token == "env-token"
    assert settings.food_db_path == "/data/fdc.sqlite3"
    assert settings.portion_sort_key == "unit"


def test_flags_take_precedence_over_environment(monkeypatch) -> None:
    monkeypatch.setenv("OMHH_API_URI", "https://env.test")
    monkeypatch.setenv("OMHH_API_TOKEN", "env-token")

    settings = Settings(_env_file=None).with_overrides(
        omhh_api_uri="https://flag.test", omhh_api_token=None
    )

    assert settings.omhh_api_uri == "https://flag.test"
    assert settings.omhh_api_token == "env-token"


def test_require_api_fails_without_token(monkeypatch) -> None:
    monkeypatch.delenv("OMHH_API_TOKEN", raising=False)
    settings = Settings(_env_file=None, omhh_api_uri="https://omhh.test")

    with pytest.raises(ConfigurationError):
        settings.require_api()

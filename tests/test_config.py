"""Tests for application settings."""

from onenote_migrator.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("BATCH_CONCURRENCY", raising=False)
    settings = Settings(_env_file=None)
    assert settings.batch_concurrency == 5
    assert settings.fetch_timeout_seconds == 30.0
    assert settings.fetch_retry_attempts == 2
    assert settings.max_depth == 10
    assert settings.create_databases is False
    assert settings.graph_base_url == "https://graph.microsoft.com/v1.0"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NOTION_API_KEY", "secret_abc")
    monkeypatch.setenv("create_databases", "true")
    settings = Settings(_env_file=None)
    assert settings.notion_api_key == "secret_abc"
    assert settings.create_databases is True


def test_get_settings_is_cached():
    assert get_settings() is get_settings()

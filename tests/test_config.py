"""Tests for environment configuration."""

from alttext_bot.config import Settings


def test_defaults(settings):
    assert settings.dedup_cache_size == 1000
    assert settings.ack_timeout == 1.5
    assert settings.generation_budget == 20.0
    assert settings.download_timeout == 20.0
    assert settings.generation_timeout == 24.0
    assert settings.max_attempts == 3
    assert settings.rate_limit_backoff == 10.0
    assert settings.timeout_backoff == 5.0
    assert settings.target_width == 800


def test_loads_from_environment(monkeypatch):
    monkeypatch.setenv("SLACK_SIGNING_SECRET", "env-secret")
    monkeypatch.setenv("SLACK_TOKEN", "xoxb-env")
    monkeypatch.setenv("ALT_TEXT_GENERATION_API_KEY", "key-123")
    monkeypatch.setenv("EXCLUDED_USER_IDS", " U1, U2 ,,U3 ")

    settings = Settings(_env_file=None)

    assert settings.slack_signing_secret == "env-secret"
    assert settings.alt_text_api_key == "key-123"
    assert settings.suggestions_enabled
    assert settings.excluded_users == {"U1", "U2", "U3"}


def test_missing_api_key_disables_suggestions(monkeypatch):
    monkeypatch.delenv("ALT_TEXT_GENERATION_API_KEY", raising=False)
    settings = Settings(slack_signing_secret="s", slack_token="t", _env_file=None)

    assert not settings.suggestions_enabled
    assert settings.excluded_users == set()

"""Tests for environment-driven settings."""
import pytest

from companion_chat.config import DEV_SESSION_SECRET, Settings


def test_defaults(monkeypatch):
    for name in ("COHERE_MODEL", "CONTEXT_WINDOW_SIZE", "SESSION_MAX_AGE_SECONDS", "COHERE_TEMPERATURE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.cohere_model == "command-r-plus"
    assert settings.context_window_size == 6
    assert settings.session_max_age_seconds == 86400
    assert settings.cohere_temperature == 0.7


def test_environment_values(monkeypatch):
    monkeypatch.setenv("CONTEXT_WINDOW_SIZE", "10")
    monkeypatch.setenv("COHERE_TEMPERATURE", "0.2")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/companion")

    settings = Settings()

    assert settings.context_window_size == 10
    assert settings.cohere_temperature == 0.2
    assert not settings.is_sqlite


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "database")

    assert Settings(storage_backend="memory").storage_backend == "memory"


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        Settings(not_a_setting=True)


def test_unsupported_backend_rejected():
    with pytest.raises(ValueError):
        Settings(storage_backend="firestore")


def test_dev_secret_fallback(monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)

    assert Settings(environment="development").session_secret == DEV_SESSION_SECRET


def test_production_requires_secret(monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)

    with pytest.raises(RuntimeError):
        Settings(environment="production")

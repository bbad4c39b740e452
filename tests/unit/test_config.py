# tests/unit/test_config.py
"""Tests for application settings."""

from pydantic import SecretStr, ValidationError
import pytest

from bookme.core.config import DEV_SECRET_KEY, Settings


def test_production_refuses_dev_secret():
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(environment="production", secret_key=SecretStr(DEV_SECRET_KEY))


def test_production_accepts_real_secret():
    cfg = Settings(
        environment="production",
        secret_key=SecretStr("a-real-secret-from-the-vault"),
        database_url="postgresql+psycopg2://bookme@db/bookme",
    )
    assert cfg.is_production
    assert not cfg.is_sqlite


def test_log_level_is_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/other.db")
    monkeypatch.setenv("SLOW_REQUEST_THRESHOLD_MS", "250")
    cfg = Settings()
    assert cfg.database_url == "sqlite:///tmp/other.db"
    assert cfg.slow_request_threshold_ms == 250.0
    assert cfg.is_sqlite

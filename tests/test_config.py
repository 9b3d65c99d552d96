from __future__ import annotations

import pytest
from pydantic import ValidationError

from loadplan.config import Settings


def test_cors_origins_derived_from_host():
    settings = Settings(_env_file=None, APP_HOST="127.0.0.1", APP_PORT=9000)

    assert settings.CORS_ORIGINS == ["http://127.0.0.1:9000", "http://localhost:9000"]


def test_cors_origins_from_json_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["http://example.test"]')

    assert Settings(_env_file=None).CORS_ORIGINS == ["http://example.test"]


def test_log_level_normalized():
    assert Settings(_env_file=None, LOG_LEVEL=" debug ").LOG_LEVEL == "DEBUG"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_profile_limits_from_env(monkeypatch):
    monkeypatch.setenv("MAX_WORKERS", "50")

    assert Settings(_env_file=None).MAX_WORKERS == 50

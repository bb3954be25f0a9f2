"""
Tests for environment-driven settings.
"""

import logging
from datetime import timedelta

import pytest

from core.config import DEV_JWT_SECRET, AuthSettings, Settings, parse_duration
from core.errors import ConfigurationError


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1h", timedelta(hours=1)),
        ("15m", timedelta(minutes=15)),
        ("30s", timedelta(seconds=30)),
        ("7d", timedelta(days=7)),
        ("2 days", timedelta(days=2)),
        ("1W", timedelta(weeks=1)),
        ("3600", timedelta(seconds=3600)),
        ("1500ms", timedelta(milliseconds=1500)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "h", "1 fortnight", "-5m", "0s", "500ms", "1.5h"])
def test_parse_duration_rejects_invalid(raw):
    with pytest.raises(ConfigurationError):
        parse_duration(raw)


def test_auth_settings_defaults():
    settings = AuthSettings.from_env({"JWT_SECRET": "s3cret"})

    assert settings.jwt_secret == "s3cret"
    assert settings.jwt_algorithm == "HS256"
    assert settings.token_expiry == timedelta(hours=1)
    assert settings.bcrypt_rounds == 10


def test_auth_settings_reads_overrides():
    settings = AuthSettings.from_env(
        {"JWT_SECRET": "s3cret", "JWT_ALG": "HS512", "JWT_TOKEN_EXPIRY": "30m", "BCRYPT_ROUNDS": "12"}
    )

    assert settings.jwt_algorithm == "HS512"
    assert settings.token_expiry == timedelta(minutes=30)
    assert settings.bcrypt_rounds == 12


def test_missing_secret_fails_in_production():
    with pytest.raises(ConfigurationError):
        AuthSettings.from_env({}, app_env="production")


def test_missing_secret_uses_flagged_default_outside_production(caplog):
    with caplog.at_level(logging.WARNING, logger="core.config"):
        settings = AuthSettings.from_env({}, app_env="development")

    assert settings.jwt_secret == DEV_JWT_SECRET
    assert "insecure_jwt_secret" in caplog.text


@pytest.mark.parametrize("rounds", ["3", "32", "ten"])
def test_bcrypt_rounds_must_be_valid(rounds):
    with pytest.raises(ConfigurationError):
        AuthSettings.from_env({"JWT_SECRET": "s3cret", "BCRYPT_ROUNDS": rounds})


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "APP_ENV": "Development",
            "APP_PORT": "8080",
            "LOG_LEVEL": "debug",
            "CORS_ORIGINS": "http://localhost:5173, http://127.0.0.1:5173,",
        }
    )

    assert settings.app_env == "development"
    assert settings.is_production is False
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("http://localhost:5173", "http://127.0.0.1:5173")


def test_settings_default_to_production():
    settings = Settings.from_env({"JWT_SECRET": "s3cret"})

    assert settings.app_env == "production"
    assert settings.is_production is True
    assert settings.cors_origins == ("*",)

"""Unit tests for configuration selection and :class:`AuthSettings`."""

from __future__ import annotations

import logging

import pytest

from authkit.core.config import (
    AuthSettings,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    get_config,
)

STRONG_SECRET = "s" * 40


def test_get_config_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_config() is TestingConfig
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config() is ProductionConfig
    monkeypatch.setenv("APP_ENV", "unknown")
    assert get_config() is DevelopmentConfig


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    assert env_bool("FLAG") is True
    monkeypatch.setenv("FLAG", "off")
    assert env_bool("FLAG", True) is False
    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", True) is True


def test_defaults_parse_to_seconds():
    settings = AuthSettings.from_mapping({"JWT_SECRET_KEY": STRONG_SECRET})
    assert settings.access_token_ttl == 3600
    assert settings.refresh_token_ttl == 7 * 86400
    assert settings.algorithm == "HS256"
    assert settings.blacklist_fail_open is True


def test_custom_durations_and_policy():
    settings = AuthSettings.from_mapping(
        {
            "JWT_SECRET_KEY": STRONG_SECRET,
            "JWT_ACCESS_EXPIRES_IN": "15m",
            "JWT_REFRESH_EXPIRES_IN": "30d",
            "BLACKLIST_FAIL_OPEN": False,
        }
    )
    assert settings.access_token_ttl == 900
    assert settings.refresh_token_ttl == 30 * 86400
    assert settings.blacklist_fail_open is False


def test_settings_are_immutable():
    settings = AuthSettings.from_mapping({"JWT_SECRET_KEY": STRONG_SECRET})
    with pytest.raises(AttributeError):
        settings.access_token_ttl = 1  # type: ignore[misc]


def test_missing_secret_is_rejected():
    with pytest.raises(ValueError):
        AuthSettings.from_mapping({"JWT_SECRET_KEY": ""})


def test_weak_secret_warns_outside_production(caplog):
    with caplog.at_level(logging.WARNING, logger="authkit.core.config"):
        settings = AuthSettings.from_mapping({"JWT_SECRET_KEY": "CHANGE_ME_JWT"})
    assert settings.access_secret == "CHANGE_ME_JWT"
    assert "weak JWT secret" in caplog.text


@pytest.mark.parametrize("secret", ["CHANGE_ME_JWT", "short-secret"])
def test_weak_secret_is_rejected_in_production(secret):
    with pytest.raises(ValueError):
        AuthSettings.from_mapping({"JWT_SECRET_KEY": secret}, production=True)


@pytest.mark.parametrize("value", ["0s", "abc"])
def test_invalid_durations_are_rejected(value):
    with pytest.raises(ValueError):
        AuthSettings.from_mapping({"JWT_SECRET_KEY": STRONG_SECRET, "JWT_ACCESS_EXPIRES_IN": value})

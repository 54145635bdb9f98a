"""Tests for settings validation."""

import pytest

from natours_core.config import DEV_JWT_SECRET, NatoursSettings
from auth_service.config import Settings
from auth_service.rate_limit import auth_limit, configure_limiter, default_limit, limiter


class TestSecuritySettings:

    def test_dev_secret_allowed_in_development(self):
        settings = NatoursSettings(_env_file=None, ENVIRONMENT="development")
        assert settings.JWT_SECRET_KEY == DEV_JWT_SECRET
        assert settings.is_production is False

    def test_dev_secret_forbidden_in_production(self):
        with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
            NatoursSettings(_env_file=None, ENVIRONMENT="production", JWT_SECRET_KEY=DEV_JWT_SECRET)

    def test_production_with_real_secret(self):
        settings = NatoursSettings(_env_file=None, ENVIRONMENT="production", JWT_SECRET_KEY="s3cr3t")
        assert settings.is_production is True

    def test_non_positive_windows_rejected(self):
        with pytest.raises(ValueError):
            NatoursSettings(_env_file=None, JWT_EXPIRES_IN_DAYS=0)
        with pytest.raises(ValueError):
            NatoursSettings(_env_file=None, PASSWORD_RESET_EXPIRES_MINUTES=0)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PASSWORD_RESET_EXPIRES_MINUTES", "15")
        monkeypatch.setenv("JWT_COOKIE_EXPIRES_IN_DAYS", "7")
        settings = Settings(_env_file=None)
        assert settings.PASSWORD_RESET_EXPIRES_MINUTES == 15
        assert settings.JWT_COOKIE_EXPIRES_IN_DAYS == 7


class TestRateLimitConfiguration:

    def test_limiter_configured(self):
        assert limiter is not None
        assert limiter._key_func is not None

    def test_auth_limit_is_strict(self):
        count, _, period = Settings(_env_file=None).RATE_LIMIT_AUTH.partition("/")
        assert int(count) <= 10
        assert period == "minute"

    def test_configure_applies_settings(self):
        settings = Settings(
            _env_file=None,
            RATE_LIMIT_ENABLED=False,
            RATE_LIMIT_DEFAULT="50/hour",
            RATE_LIMIT_AUTH="2/minute",
        )
        assert configure_limiter(settings) is limiter
        assert limiter.enabled is False
        assert default_limit() == "50/hour"
        assert auth_limit() == "2/minute"

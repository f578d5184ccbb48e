"""
Tests for configuration loading.
"""

import pytest

from otpauth_core.config import AuthConfig
from otpauth_core.exceptions import ConfigurationError


class TestAuthConfig:
    """Tests for AuthConfig."""

    def test_defaults(self):
        config = AuthConfig(allowed_email_domains="*.example.gov")

        assert config.otp_length == 6
        assert config.otp_expiry_seconds == 300
        assert config.max_verify_attempts == 3
        assert config.resend_cooldown_seconds == 20
        assert config.otp_requests_per_window == 5

    def test_immutable(self):
        config = AuthConfig(allowed_email_domains="*.example.gov")

        with pytest.raises(AttributeError):
            config.max_verify_attempts = 10

    @pytest.mark.parametrize("overrides", [
        {"allowed_email_domains": ""},
        {"otp_length": 3},
        {"max_verify_attempts": 0},
        {"resend_cooldown_seconds": -1},
        {"hash_rounds": 2},
        {"cache_timeout_seconds": 0},
    ])
    def test_invalid_values(self, overrides):
        values = {"allowed_email_domains": "*.example.gov", **overrides}

        with pytest.raises(ConfigurationError):
            AuthConfig(**values)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VALID_EMAIL_GLOB_EXPRESSION", "*.example.gov")
        monkeypatch.setenv("OTP_EXPIRY", "120")
        monkeypatch.setenv("OTP_RESEND_COOLDOWN", "30")
        monkeypatch.setenv("LOGIN_MESSAGE", "Government officers only")
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("OTP_RATE_LIMIT", raising=False)

        config = AuthConfig.from_env()

        assert config.allowed_email_domains == "*.example.gov"
        assert config.otp_expiry_seconds == 120
        assert config.resend_cooldown_seconds == 30
        assert config.login_message == "Government officers only"
        assert config.otp_requests_per_window == 5

    def test_from_env_development_rate_limit(self, monkeypatch):
        monkeypatch.setenv("VALID_EMAIL_GLOB_EXPRESSION", "*.example.gov")
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("OTP_RATE_LIMIT", raising=False)

        assert AuthConfig.from_env().otp_requests_per_window == 10

    def test_from_env_missing_pattern(self, monkeypatch):
        monkeypatch.delenv("VALID_EMAIL_GLOB_EXPRESSION", raising=False)

        with pytest.raises(ConfigurationError):
            AuthConfig.from_env()

    def test_from_env_bad_number(self, monkeypatch):
        monkeypatch.setenv("VALID_EMAIL_GLOB_EXPRESSION", "*.example.gov")
        monkeypatch.setenv("OTP_MAX_ATTEMPTS", "three")

        with pytest.raises(ConfigurationError):
            AuthConfig.from_env()

"""Unit tests for relay configuration.

Tests environment loading, validation, and derived helpers.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mail_relay.config import RelayConfig
from mail_relay.config.settings import DEFAULT_API_SECRET_KEY
from mail_relay.core.exceptions import RelayConfigError
from mail_relay.gate.origins import BASE_ALLOWED_ORIGINS


class TestEnvironmentLoading:
    """Tests for loading settings from environment variables."""

    def test_reads_environment(self, monkeypatch):
        """Test settings are read from the environment."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("EMAIL_PROVIDER", "sendgrid")
        monkeypatch.setenv("SENDGRID_API_KEY", "sg-key")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com")

        config = RelayConfig(_env_file=None)

        assert config.PORT == 8080
        assert config.EMAIL_PROVIDER == "sendgrid"
        assert config.provider_api_key() == "sg-key"
        assert "https://a.example.com" in config.allowed_origin_set()

    def test_defaults(self, monkeypatch):
        """Test defaults when nothing is configured."""
        for var in ("PORT", "ENVIRONMENT", "EMAIL_PROVIDER", "API_SECRET_KEY", "ALLOWED_ORIGINS"):
            monkeypatch.delenv(var, raising=False)

        config = RelayConfig(_env_file=None)

        assert config.PORT == 3000
        assert config.ENVIRONMENT == "production"
        assert config.EMAIL_PROVIDER == "brevo"
        assert config.API_SECRET_KEY == DEFAULT_API_SECRET_KEY
        assert config.uses_default_secret is True
        assert config.allowed_origin_set().as_list() == list(BASE_ALLOWED_ORIGINS)


class TestValidation:
    """Tests for field validation."""

    @pytest.mark.parametrize("overrides", [
        {"API_SECRET_KEY": ""},
        {"API_SECRET_KEY": "   "},
        {"EMAIL_PROVIDER": "mailgun"},
        {"ENVIRONMENT": "staging"},
        {"PORT": 0},
        {"DEFAULT_FROM_EMAIL": " "},
        {"LOG_LEVEL": "VERBOSE"},
    ])
    def test_invalid_values(self, config_factory, overrides):
        """Test invalid settings fail at construction."""
        with pytest.raises(ValidationError):
            config_factory(**overrides)

    def test_api_urls_trimmed(self, config_factory):
        """Test provider URLs lose trailing slashes."""
        config = config_factory(BREVO_API_URL="https://api.brevo.com/v3/")

        assert config.BREVO_API_URL == "https://api.brevo.com/v3"

    def test_validate_provider_config(self, config_factory):
        """Test a missing key for the selected provider is reported."""
        config = config_factory(EMAIL_PROVIDER="sendgrid", SENDGRID_API_KEY="")

        with pytest.raises(RelayConfigError, match="SENDGRID_API_KEY"):
            config.validate_provider_config()

    def test_validate_provider_config_ok(self, config_factory):
        """Test a configured provider key passes."""
        config_factory(BREVO_API_KEY="xkeysib-123").validate_provider_config()


class TestAllowedOrigins:
    """Tests for allow-list construction from settings."""

    def test_production_has_no_local_origins(self, config_factory):
        """Test production mode does not admit localhost."""
        origins = config_factory(ENVIRONMENT="production").allowed_origin_set()

        assert "http://localhost:3000" not in origins

    def test_development_adds_local_origins(self, config_factory):
        """Test development mode admits local dev servers."""
        origins = config_factory(ENVIRONMENT="development").allowed_origin_set()

        assert "http://localhost:3000" in origins
        assert "http://127.0.0.1:5173" in origins
        assert config_factory(ENVIRONMENT="development").is_development is True

    def test_extras_merged(self, config_factory):
        """Test extras are trimmed and merged after the base list."""
        config = config_factory(ALLOWED_ORIGINS=" https://b.example.com/ ,https://b.example.com")

        assert config.allowed_origin_set().as_list() == [
            *BASE_ALLOWED_ORIGINS,
            "https://b.example.com",
        ]

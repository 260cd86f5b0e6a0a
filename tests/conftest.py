"""Pytest configuration and fixtures for mail relay tests.

Provides reusable fixtures for unit and integration tests including a
test configuration, a mocked delivery provider, and a FastAPI test client.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing application modules
os.environ.setdefault("API_SECRET_KEY", "test-api-key-12345")
os.environ.setdefault("EMAIL_PROVIDER", "brevo")
os.environ.setdefault("BREVO_API_KEY", "test-brevo-key")
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("LOG_TO_FILE", "false")

from mail_relay.clients.base import EmailProvider  # noqa: E402
from mail_relay.config import RelayConfig  # noqa: E402

API_KEY = "test-api-key-12345"
ALLOWED_ORIGIN = "https://kenyaonabudgetsafaris.co.uk"
EXTRA_ORIGIN = "https://admin.example.com"
PROVIDER_DATA = {"messageId": "<202510181200.12345@smtp-relay.mailin.fr>"}


# =============================================================================
# Configuration Fixtures
# =============================================================================
def build_config(**overrides: Any) -> RelayConfig:
    """Build a RelayConfig isolated from any local .env file."""
    values: dict[str, Any] = {
        "API_SECRET_KEY": API_KEY,
        "ALLOWED_ORIGINS": f" {EXTRA_ORIGIN}/ ,{ALLOWED_ORIGIN}",
        "ENVIRONMENT": "production",
        "EMAIL_PROVIDER": "brevo",
        "BREVO_API_KEY": "test-brevo-key",
        "DEFAULT_FROM_EMAIL": "info@kenyaonabudgetsafaris.co.uk",
        "DEFAULT_FROM_NAME": "KenyaOnABudget Safaris",
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
    }
    values.update(overrides)
    return RelayConfig(_env_file=None, **values)


@pytest.fixture
def test_config() -> RelayConfig:
    """Production-mode configuration with one extra allowed origin."""
    return build_config()


# =============================================================================
# Provider Fixtures
# =============================================================================
@pytest.fixture
def mock_provider() -> MagicMock:
    """Create a mock email-delivery provider that always succeeds."""
    provider = MagicMock(spec=EmailProvider)
    provider.name = "Brevo"
    provider.send_transactional_email = AsyncMock(return_value=dict(PROVIDER_DATA))
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def sample_email_request() -> dict[str, Any]:
    """Create a sample send-email request body."""
    return {
        "to": "a@x.com",
        "subject": "Hi",
        "html": "<p>hi</p>",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================
def make_client(config: RelayConfig, provider: MagicMock):
    """Create an app with an injected provider and enter its lifespan."""
    from fastapi.testclient import TestClient

    from mail_relay.api.main import create_app

    return TestClient(create_app(config, provider=provider), raise_server_exceptions=False)


@pytest.fixture
def test_client(test_config: RelayConfig, mock_provider: MagicMock):
    """Create a FastAPI test client with a mocked provider."""
    with make_client(test_config, mock_provider) as client:
        yield client


@pytest.fixture
def dev_client(mock_provider: MagicMock):
    """Create a test client running in development mode."""
    with make_client(build_config(ENVIRONMENT="development"), mock_provider) as client:
        yield client


@pytest.fixture
def authenticated_client(test_client):
    """Create a test client that sends the X-API-Key header."""

    class AuthenticatedClient:
        def __init__(self, client):
            self.client = client
            self.headers = {"X-API-Key": API_KEY}

        def get(self, url, **kwargs):
            kwargs.setdefault("headers", {}).update(self.headers)
            return self.client.get(url, **kwargs)

        def post(self, url, **kwargs):
            kwargs.setdefault("headers", {}).update(self.headers)
            return self.client.post(url, **kwargs)

    return AuthenticatedClient(test_client)


def sent_payload(provider: MagicMock) -> dict[str, Any]:
    """Return the collaborator payload of the provider's single call."""
    provider.send_transactional_email.assert_awaited_once()
    message = provider.send_transactional_email.await_args.args[0]
    return message.to_payload()


# =============================================================================
# Helper Fixtures
# =============================================================================
@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def config_factory():
    """Factory building isolated RelayConfig instances with overrides."""
    return build_config


@pytest.fixture
def provider_payload():
    """Extract the collaborator payload from a mocked provider."""
    return sent_payload


@pytest.fixture
def client_factory():
    """Factory for test clients with a custom config and provider."""
    return make_client

"""Unit tests for the request gate.

Tests origin allow-list construction, origin decisions, and the
credential check.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mail_relay.core.exceptions import RelayConfigError, UnauthorizedError
from mail_relay.gate.origins import (
    BASE_ALLOWED_ORIGINS,
    AllowedOriginSet,
    normalize_origin,
    normalize_request_origin,
)
from mail_relay.gate.request_gate import RequestGate

SECRET = "s3cret-value"


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def gate(mock_logger: MagicMock) -> RequestGate:
    origins = AllowedOriginSet.from_sources(
        BASE_ALLOWED_ORIGINS, "https://admin.example.com"
    )
    return RequestGate(origins, SECRET, logger=mock_logger)


class TestAllowedOriginSet:
    """Tests for AllowedOriginSet construction and membership."""

    def test_merges_base_and_extra(self):
        """Test base origins come first, then extras."""
        origins = AllowedOriginSet.from_sources(
            ["https://a.example.com"], "https://b.example.com,https://c.example.com"
        )

        assert origins.as_list() == [
            "https://a.example.com",
            "https://b.example.com",
            "https://c.example.com",
        ]

    def test_trims_and_deduplicates(self):
        """Test whitespace and trailing slashes are removed before de-duplication."""
        origins = AllowedOriginSet.from_sources(
            ["https://a.example.com"],
            "  https://a.example.com/ , https://b.example.com//,https://b.example.com",
        )

        assert origins.as_list() == ["https://a.example.com", "https://b.example.com"]
        assert len(origins) == 2

    def test_drops_empty_values(self):
        """Test empty entries from stray commas are ignored."""
        origins = AllowedOriginSet.from_sources([], ",, ,https://a.example.com,")

        assert origins.as_list() == ["https://a.example.com"]

    def test_no_extras(self):
        """Test the base list alone is used when no extras are configured."""
        origins = AllowedOriginSet.from_sources(BASE_ALLOWED_ORIGINS, None)

        assert origins.as_list() == list(BASE_ALLOWED_ORIGINS)

    def test_exact_membership(self):
        """Test membership has no wildcard, scheme or subdomain leniency."""
        origins = AllowedOriginSet.from_sources(["https://example.com"])

        assert "https://example.com" in origins
        assert "https://www.example.com" not in origins
        assert "http://example.com" not in origins
        assert "https://example.com:443" not in origins
        assert "HTTPS://EXAMPLE.COM" not in origins
        assert None not in origins

    def test_is_immutable(self):
        """Test the set cannot be modified after construction."""
        origins = AllowedOriginSet.from_sources(["https://example.com"])

        with pytest.raises(AttributeError):
            origins.origins = ("https://other.example.com",)

    def test_normalize_helpers(self):
        """Test configured values lose all trailing slashes, request values only one."""
        assert normalize_origin("  https://a.example.com// ") == "https://a.example.com"
        assert normalize_request_origin("https://a.example.com/") == "https://a.example.com"
        assert normalize_request_origin("https://a.example.com//") == "https://a.example.com/"


class TestOriginCheck:
    """Tests for RequestGate.check_origin."""

    def test_absent_origin_allowed_without_headers(self, gate):
        """Test non-browser requests pass without CORS headers."""
        decision = gate.check_origin(None)

        assert decision.allowed is True
        assert decision.origin is None
        assert decision.headers == {}

    def test_allowed_origin(self, gate):
        """Test member origins are echoed with the fixed methods and headers."""
        decision = gate.check_origin("https://admin.example.com")

        assert decision.allowed is True
        assert decision.headers["Access-Control-Allow-Origin"] == "https://admin.example.com"
        assert decision.headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
        assert (
            decision.headers["Access-Control-Allow-Headers"]
            == "Content-Type, Authorization, X-API-Key"
        )

    def test_trailing_slash_trimmed(self, gate):
        """Test a single trailing slash does not prevent a match."""
        decision = gate.check_origin("https://admin.example.com/")

        assert decision.allowed is True

    def test_denied_origin(self, gate, mock_logger):
        """Test non-member origins get no headers and a warning record."""
        decision = gate.check_origin("https://evil.example.net")

        assert decision.allowed is False
        assert decision.headers == {}
        mock_logger.warning.assert_called_once()
        assert "denied" in mock_logger.warning.call_args.args[0]

    @pytest.mark.parametrize("method,expected", [
        ("OPTIONS", True),
        ("options", True),
        ("POST", False),
        ("GET", False),
    ])
    def test_is_preflight(self, method, expected):
        """Test only OPTIONS is treated as a pre-flight."""
        assert RequestGate.is_preflight(method) is expected


class TestCredentialCheck:
    """Tests for RequestGate credential decisions."""

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_key(self, gate, api_key):
        """Test absence is a rejection, distinct from a wrong key."""
        decision = gate.check_credential(api_key)

        assert decision.allowed is False
        assert decision.reason == "missing"
        assert decision.message == "Unauthorized: API key required"

    @pytest.mark.parametrize("api_key", ["wrong", "S3CRET-VALUE", "s3cret-value ", "s3cret"])
    def test_invalid_key(self, gate, api_key):
        """Test anything but an exact match is rejected."""
        decision = gate.check_credential(api_key)

        assert decision.allowed is False
        assert decision.reason == "invalid"
        assert decision.message == "Unauthorized: Invalid API key"

    def test_valid_key(self, gate):
        """Test the exact secret is accepted."""
        decision = gate.check_credential(SECRET)

        assert decision.allowed is True
        assert decision.reason is None
        assert decision.message is None

    def test_require_credential_raises(self, gate):
        """Test require_credential raises UnauthorizedError with the reason."""
        with pytest.raises(UnauthorizedError) as exc_info:
            gate.require_credential(None)

        assert exc_info.value.reason == "missing"
        assert str(exc_info.value) == "Unauthorized: API key required"

    def test_require_credential_passes(self, gate):
        """Test require_credential returns quietly for a valid key."""
        assert gate.require_credential(SECRET) is None

    def test_empty_secret_rejected(self):
        """Test a gate cannot be built without a secret."""
        with pytest.raises(RelayConfigError):
            RequestGate(AllowedOriginSet(), "")

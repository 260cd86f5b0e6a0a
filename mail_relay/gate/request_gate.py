"""Request gate: origin authorization and shared-secret credential checks.

Every inbound request passes the origin check (CORS exposure). The send
operation additionally passes the credential check. Both checks are pure
decisions; logging happens at each decision point through the injected
logger and never changes the outcome.

Version: 1.0.0
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field

from mail_relay.core.exceptions import RelayConfigError, UnauthorizedError
from mail_relay.core.logger import get_logger, log_context
from mail_relay.gate.origins import AllowedOriginSet, normalize_request_origin

ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization, X-API-Key"

MISSING_KEY_MESSAGE = "Unauthorized: API key required"
INVALID_KEY_MESSAGE = "Unauthorized: Invalid API key"


@dataclass(frozen=True)
class OriginDecision:
    """Outcome of the origin check.

    ``headers`` holds the CORS headers to echo; it is empty when the origin
    is absent or not on the allow-list.
    """

    origin: str | None
    allowed: bool
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CredentialDecision:
    """Outcome of the credential check. ``reason`` is "missing" or "invalid" on rejection."""

    allowed: bool
    reason: str | None = None

    @property
    def message(self) -> str | None:
        if self.reason == "missing":
            return MISSING_KEY_MESSAGE
        if self.reason == "invalid":
            return INVALID_KEY_MESSAGE
        return None


class RequestGate:
    """Decides whether a request may proceed to dispatch.

    Attributes:
        allowed_origins: Origins whose browser callers may read responses.
    """

    def __init__(
        self,
        allowed_origins: AllowedOriginSet,
        api_secret: str,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            allowed_origins: Normalized allow-list, fixed for the process lifetime.
            api_secret: Shared secret expected in the X-API-Key header.
            logger: Logger used for decision records.

        Raises:
            RelayConfigError: If the shared secret is empty.
        """
        if not api_secret:
            raise RelayConfigError("API_SECRET_KEY cannot be empty")

        self.allowed_origins = allowed_origins
        self._api_secret = api_secret
        self._logger = logger or get_logger(__name__)

    @staticmethod
    def is_preflight(method: str) -> bool:
        return method.upper() == "OPTIONS"

    def cors_headers(self, origin: str) -> dict[str, str]:
        """CORS headers echoed back to an allowed origin."""
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Vary": "Origin",
        }

    def check_origin(self, origin: str | None) -> OriginDecision:
        """Decide whether the request's Origin may read the response.

        Args:
            origin: Raw Origin header value, or None for non-browser clients.

        Returns:
            OriginDecision with the CORS headers to attach, if any.
        """
        if not origin:
            self._logger.debug(log_context("origin_check", decision="no-origin"))
            return OriginDecision(origin=None, allowed=True)

        if normalize_request_origin(origin) in self.allowed_origins:
            self._logger.debug(
                log_context("origin_check", origin=origin, decision="allowed")
            )
            return OriginDecision(
                origin=origin, allowed=True, headers=self.cors_headers(origin)
            )

        self._logger.warning(
            log_context("origin_check", origin=origin, decision="denied")
        )
        return OriginDecision(origin=origin, allowed=False)

    def check_credential(self, api_key: str | None) -> CredentialDecision:
        """Compare the X-API-Key value against the configured secret.

        Args:
            api_key: Header value, or None when the header is absent.

        Returns:
            CredentialDecision; absence is a rejection, never a skipped check.
        """
        if not api_key:
            self._logger.warning(log_context("credential_check", key="missing"))
            return CredentialDecision(allowed=False, reason="missing")

        if not secrets.compare_digest(
            api_key.encode("utf-8"), self._api_secret.encode("utf-8")
        ):
            self._logger.warning(log_context("credential_check", key="invalid"))
            return CredentialDecision(allowed=False, reason="invalid")

        self._logger.debug(log_context("credential_check", key="valid"))
        return CredentialDecision(allowed=True)

    def require_credential(self, api_key: str | None) -> None:
        """Raise UnauthorizedError unless the credential matches.

        Raises:
            UnauthorizedError: If the key is missing or wrong.
        """
        decision = self.check_credential(api_key)
        if not decision.allowed:
            raise UnauthorizedError(decision.message, reason=decision.reason)

"""Custom exceptions for the mail relay.

Defines specific exception types for each way a relayed request can fail
so the API layer can map them to precise HTTP responses.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

import json
from typing import Any


class RelayServiceError(Exception):
    """Base exception for all mail relay errors.

    Serves as the parent class for all custom exceptions in the relay,
    allowing consumers to catch every relay failure with a single except block.

    Example:
        try:
            await dispatcher.dispatch(request)
        except RelayServiceError as e:
            logger.error(f"Relay error: {e}")
    """

    pass


class RelayConfigError(RelayServiceError):
    """Exception raised for configuration errors.

    Indicates invalid or missing settings in RelayConfig, such as an empty
    shared secret or a missing provider API key.

    Example:
        raise RelayConfigError("BREVO_API_KEY environment variable not set")
    """

    pass


class PayloadValidationError(RelayServiceError):
    """Exception raised when a send request body is missing or malformed.

    Always surfaced to the caller as HTTP 400 and never retried.

    Example:
        raise PayloadValidationError("Missing required fields (to, subject, html)")
    """

    pass


class UnauthorizedError(RelayServiceError):
    """Exception raised when the X-API-Key credential is missing or wrong.

    Attributes:
        reason (str): Either "missing" or "invalid".
    """

    def __init__(self, message: str, reason: str = "invalid"):
        """Initialize unauthorized error.

        Args:
            message: Error description returned to the caller.
            reason: Why the credential was rejected ("missing" or "invalid").
        """
        super().__init__(message)
        self.reason = reason


class ProviderError(RelayServiceError):
    """Exception raised when the email-delivery provider call fails.

    Carries the provider's structured error body when the provider answered
    with a non-2xx response. Transport failures (DNS, connection reset,
    timeout) carry no body.

    Attributes:
        provider (str): Display name of the provider (e.g. "Brevo").
        status_code (int, optional): HTTP status returned by the provider.
        body (Any, optional): Parsed JSON body, or raw text if not JSON.

    Example:
        raise ProviderError(
            "Provider rejected request",
            provider="SendGrid",
            status_code=401,
            body={"errors": [{"message": "Permission denied"}]},
        )
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        body: Any = None,
    ):
        """Initialize provider error.

        Args:
            message: Raw error description.
            provider: Provider display name.
            status_code: Optional HTTP status code from the provider.
            body: Optional structured error body from the provider.
        """
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body

    @property
    def has_body(self) -> bool:
        """Whether the provider returned a structured error body."""
        return self.body is not None

    def describe(self) -> str:
        """Compose the caller-facing error string.

        Returns:
            "<provider> error (<status>): <json body>" when a body is present,
            otherwise the raw error message.
        """
        if not self.has_body:
            return str(self)
        return (
            f"{self.provider} error ({self.status_code}): "
            f"{json.dumps(self.body, default=str)}"
        )

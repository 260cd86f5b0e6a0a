"""Email-delivery provider interface.

A provider performs exactly one "send transactional email" call per
relayed request: no retries and no timeout override beyond httpx's own
default.

Version: 1.0.0
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from mail_relay.core.exceptions import ProviderError
from mail_relay.core.logger import get_logger
from mail_relay.models.email import OutboundEmail


class EmailProvider(ABC):
    """Base class for HTTP email-delivery providers.

    Subclasses supply the endpoint path, the auth headers and the payload
    shape; this class owns the httpx client and the error mapping.

    Attributes:
        name: Provider display name used in error strings and logs.
        send_path: Path of the send endpoint, relative to ``base_url``.
    """

    name: str = "Provider"
    send_path: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize provider client.

        Args:
            api_key: Provider API key.
            base_url: Provider API base URL.
            transport: Optional httpx transport (used by tests).
            logger: Logger for request outcomes.
        """
        self._logger = logger or get_logger(__name__)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=self.auth_headers(api_key),
            transport=transport,
        )
        self._logger.info(f"{self.name} client initialized: {base_url}")

    @abstractmethod
    def auth_headers(self, api_key: str) -> dict[str, str]:
        """Headers that authenticate every request."""

    @abstractmethod
    def build_payload(self, message: OutboundEmail) -> dict[str, Any]:
        """Translate the provider-neutral message into the provider's JSON body."""

    @abstractmethod
    def parse_success(self, response: httpx.Response) -> dict[str, Any]:
        """Extract the opaque success data from a 2xx response."""

    async def send_transactional_email(self, message: OutboundEmail) -> dict[str, Any]:
        """Send one message through the provider.

        Args:
            message: Normalized outbound message.

        Returns:
            Opaque provider response data.

        Raises:
            ProviderError: On transport failure, a non-2xx response or a
                2xx body that cannot be parsed.
        """
        payload = self.build_payload(message)

        try:
            response = await self._client.post(self.send_path, json=payload)
        except httpx.HTTPError as e:
            self._logger.error(f"{self.name} request failed: {e!r}")
            raise ProviderError(
                str(e) or e.__class__.__name__, provider=self.name
            ) from e

        if response.is_success:
            try:
                return self.parse_success(response)
            except ValueError as e:
                self._logger.error(f"{self.name} sent an unreadable success body: {e!r}")
                raise ProviderError(
                    f"{self.name} returned an unreadable response: {e}",
                    provider=self.name,
                ) from e

        body = self._error_body(response)
        self._logger.error(
            f"{self.name} rejected request: HTTP {response.status_code} {body!r}"
        )
        raise ProviderError(
            f"{self.name} responded with HTTP {response.status_code}",
            provider=self.name,
            status_code=response.status_code,
            body=body,
        )

    @staticmethod
    def _error_body(response: httpx.Response) -> Any:
        """Parsed JSON error body, raw text if not JSON, None if empty."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> EmailProvider:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

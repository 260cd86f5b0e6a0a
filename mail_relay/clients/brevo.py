"""Brevo (formerly Sendinblue) transactional email client.

Calls ``POST /v3/smtp/email``. The outbound message already has Brevo's
body shape, so the payload is sent as-is.

Version: 1.0.0
"""

from __future__ import annotations

from typing import Any

import httpx

from mail_relay.clients.base import EmailProvider
from mail_relay.models.email import OutboundEmail


class BrevoClient(EmailProvider):
    """Brevo transactional email delivery client."""

    name = "Brevo"
    send_path = "/smtp/email"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"api-key": api_key, "accept": "application/json"}

    def build_payload(self, message: OutboundEmail) -> dict[str, Any]:
        return message.to_payload()

    def parse_success(self, response: httpx.Response) -> dict[str, Any]:
        # 201 {"messageId": "<...>"}; 202 for batch sends may have no body
        if not response.content:
            return {}
        return response.json()

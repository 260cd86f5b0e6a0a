"""SendGrid v3 Mail Send client.

Calls ``POST /v3/mail/send``. SendGrid answers 202 with an empty body, so
the success data is built from the status code and the X-Message-Id
response header.

Version: 1.0.0
"""

from __future__ import annotations

from typing import Any

import httpx

from mail_relay.clients.base import EmailProvider
from mail_relay.models.email import OutboundEmail


class SendGridClient(EmailProvider):
    """SendGrid email delivery client."""

    name = "SendGrid"
    send_path = "/mail/send"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def build_payload(self, message: OutboundEmail) -> dict[str, Any]:
        """Map the outbound message onto SendGrid's personalizations shape."""
        personalization: dict[str, Any] = {
            "to": [contact.model_dump(exclude_none=True) for contact in message.to],
        }
        if message.cc:
            personalization["cc"] = [
                contact.model_dump(exclude_none=True) for contact in message.cc
            ]

        return {
            "personalizations": [personalization],
            "from": message.sender.model_dump(exclude_none=True),
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html_content}],
        }

    def parse_success(self, response: httpx.Response) -> dict[str, Any]:
        return {
            "statusCode": response.status_code,
            "messageId": response.headers.get("X-Message-Id"),
        }

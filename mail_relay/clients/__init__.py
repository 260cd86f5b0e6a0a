"""Clients module for the mail relay.

Contains integrations with external email-delivery providers.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mail_relay.clients.base import EmailProvider
from mail_relay.clients.brevo import BrevoClient
from mail_relay.clients.sendgrid import SendGridClient

if TYPE_CHECKING:
    from mail_relay.config.settings import RelayConfig

__all__ = ["EmailProvider", "BrevoClient", "SendGridClient", "create_provider"]


def create_provider(config: RelayConfig) -> EmailProvider:
    """Create the provider client selected by EMAIL_PROVIDER."""
    if config.EMAIL_PROVIDER == "sendgrid":
        return SendGridClient(
            api_key=config.SENDGRID_API_KEY, base_url=config.SENDGRID_API_URL
        )
    return BrevoClient(api_key=config.BREVO_API_KEY, base_url=config.BREVO_API_URL)

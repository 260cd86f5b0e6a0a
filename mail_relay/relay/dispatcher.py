"""Relay dispatcher.

Turns a gate-approved, validated send request into exactly one provider
call and maps the outcome onto a RelayResult.

Flow:
    EmailRequest → build_outbound() → provider.send_transactional_email()
    → RelayResult (200 with provider data, or 500 with composed error)

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import logging
import traceback

from mail_relay.clients.base import EmailProvider
from mail_relay.core.exceptions import ProviderError
from mail_relay.core.logger import get_logger, log_context
from mail_relay.models.email import EmailContact, EmailRequest, OutboundEmail
from mail_relay.models.result import RelayResult


class RelayDispatcher:
    """Builds provider send requests and maps their outcome.

    Attributes:
        provider: Email-delivery collaborator.
        default_from_email: Sender address used when the request has none.
        default_from_name: Sender name used when the request has none.
        include_stack: Whether failure results carry a traceback.
    """

    def __init__(
        self,
        provider: EmailProvider,
        default_from_email: str,
        default_from_name: str,
        include_stack: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.default_from_email = default_from_email
        self.default_from_name = default_from_name
        self.include_stack = include_stack
        self._logger = logger or get_logger(__name__)

    def build_outbound(self, request: EmailRequest) -> OutboundEmail:
        """Build the provider-neutral send request.

        An empty CC list is never forwarded: ``cc`` stays None.
        """
        return OutboundEmail(
            sender=EmailContact(
                email=request.from_email or self.default_from_email,
                name=request.from_name or self.default_from_name,
            ),
            to=[EmailContact(email=address) for address in request.to],
            cc=[EmailContact(email=address) for address in request.cc] or None,
            subject=request.subject,
            html_content=request.html,
        )

    async def dispatch(self, request: EmailRequest) -> RelayResult:
        """Send the request through the provider, once.

        Args:
            request: Validated send request.

        Returns:
            RelayResult with provider data on success, or the composed
            provider error on failure. Failures without a provider body
            carry the raw exception message.
        """
        outbound = self.build_outbound(request)
        context = log_context(
            "dispatch",
            recipient=request.recipients_summary,
            provider=self.provider.name,
            cc=len(request.cc),
        )
        self._logger.debug(f"Sending: {context}")

        try:
            data = await self.provider.send_transactional_email(outbound)
        except ProviderError as e:
            error = e.describe()
            self._logger.error(f"Error sending email: {error}", exc_info=True)
            return RelayResult.failed(
                error,
                stack=traceback.format_exc() if self.include_stack else None,
            )
        except Exception as e:
            error = str(e) or e.__class__.__name__
            self._logger.error(f"Error sending email: {error}", exc_info=True)
            return RelayResult.failed(
                error,
                stack=traceback.format_exc() if self.include_stack else None,
            )

        self._logger.info(
            f"Email sent: {request.subject} to {request.recipients_summary} "
            f"({request.email_type or 'general'})"
        )
        return RelayResult.sent(data)

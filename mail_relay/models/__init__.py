"""Models module for the mail relay.

Defines Pydantic v2 models for the inbound send payload and the outbound
provider message, plus the dispatch result.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from mail_relay.models.email import (
    MISSING_FIELDS_MESSAGE,
    EmailContact,
    EmailRequest,
    OutboundEmail,
    parse_email_request,
)
from mail_relay.models.result import RelayResult

__all__ = [
    "EmailRequest",
    "EmailContact",
    "OutboundEmail",
    "RelayResult",
    "parse_email_request",
    "MISSING_FIELDS_MESSAGE",
]

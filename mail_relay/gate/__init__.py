"""Request gate module for the mail relay.

Contains the CORS origin allow-list and the credential check that every
request passes before it reaches the relay dispatcher.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from mail_relay.gate.origins import (
    BASE_ALLOWED_ORIGINS,
    DEVELOPMENT_ORIGINS,
    AllowedOriginSet,
    normalize_origin,
    normalize_request_origin,
)
from mail_relay.gate.request_gate import (
    ALLOWED_HEADERS,
    ALLOWED_METHODS,
    CredentialDecision,
    OriginDecision,
    RequestGate,
)

__all__ = [
    "AllowedOriginSet",
    "BASE_ALLOWED_ORIGINS",
    "DEVELOPMENT_ORIGINS",
    "normalize_origin",
    "normalize_request_origin",
    "RequestGate",
    "OriginDecision",
    "CredentialDecision",
    "ALLOWED_METHODS",
    "ALLOWED_HEADERS",
]

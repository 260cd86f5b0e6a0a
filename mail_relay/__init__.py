"""Mail Relay - HTTP relay for transactional email.

Receives a send request over HTTP, gates it, and forwards it to an
email-delivery provider, returning a normalized JSON envelope.

Provides:
- Origin allow-list (CORS) with pre-flight short-circuit
- Shared-secret API key check for the send operation
- Payload validation (to, subject, html required; cc optional)
- Brevo and SendGrid provider clients (httpx)
- Single-attempt dispatch with uniform success/failure envelopes

Architecture:
    - FastAPI application with an origin gate middleware
    - Request gate (origin + credential decisions)
    - Relay dispatcher (outbound message build, provider call, result mapping)
    - Provider clients over httpx

Modules:
    - core: Exceptions, logger
    - config: Pydantic v2 settings
    - gate: Allowed origins and request gate
    - models: Inbound request, outbound message, relay result
    - clients: Email-delivery providers (Brevo, SendGrid)
    - relay: Dispatcher
    - api: FastAPI application

Usage:
    # Run the API server
    python -m mail_relay

    # Relay from code
    from mail_relay.clients import BrevoClient
    from mail_relay.models import parse_email_request
    from mail_relay.relay import RelayDispatcher

    dispatcher = RelayDispatcher(
        BrevoClient(api_key="...", base_url="https://api.brevo.com/v3"),
        default_from_email="info@example.com",
        default_from_name="Example",
    )
    result = await dispatcher.dispatch(
        parse_email_request({"to": "a@example.com", "subject": "Hi", "html": "<p>hi</p>"})
    )

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

__version__ = "1.0.0"

# Clients
from mail_relay.clients import (
    BrevoClient,
    EmailProvider,
    SendGridClient,
    create_provider,
)

# Configuration
from mail_relay.config import RelayConfig

# Core utilities
from mail_relay.core import (
    PayloadValidationError,
    ProviderError,
    RelayConfigError,
    RelayServiceError,
    UnauthorizedError,
    get_logger,
)

# Gate
from mail_relay.gate import AllowedOriginSet, RequestGate

# Models
from mail_relay.models import (
    EmailContact,
    EmailRequest,
    OutboundEmail,
    RelayResult,
    parse_email_request,
)

# Relay
from mail_relay.relay import RelayDispatcher

__all__ = [
    # Version
    "__version__",
    # Core exceptions
    "RelayServiceError",
    "RelayConfigError",
    "PayloadValidationError",
    "UnauthorizedError",
    "ProviderError",
    "get_logger",
    # Configuration
    "RelayConfig",
    # Gate
    "AllowedOriginSet",
    "RequestGate",
    # Models
    "EmailRequest",
    "EmailContact",
    "OutboundEmail",
    "RelayResult",
    "parse_email_request",
    # Clients
    "EmailProvider",
    "BrevoClient",
    "SendGridClient",
    "create_provider",
    # Relay
    "RelayDispatcher",
]

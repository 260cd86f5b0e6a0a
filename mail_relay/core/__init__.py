"""Core module for the mail relay.

Provides foundational utilities, exceptions, and robust logging configuration.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from mail_relay.core.exceptions import (
    PayloadValidationError,
    ProviderError,
    RelayConfigError,
    RelayServiceError,
    UnauthorizedError,
)
from mail_relay.core.logger import (
    get_logger,
    get_logs_directory,
    log_context,
    setup_logging,
)

__all__ = [
    # Exceptions
    "RelayServiceError",
    "RelayConfigError",
    "PayloadValidationError",
    "UnauthorizedError",
    "ProviderError",
    # Logging
    "get_logger",
    "setup_logging",
    "get_logs_directory",
    "log_context",
]

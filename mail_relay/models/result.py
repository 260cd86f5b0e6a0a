"""Relay result model.

Outcome of one dispatch attempt, mapped by the API layer onto the
response envelope.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RelayResult:
    """Outcome of a dispatch attempt.

    Attributes:
        success: Whether the provider accepted the message.
        status_code: HTTP status to surface (200 or 500).
        message: Success message, set only on success.
        data: Opaque provider response data, echoed verbatim on success.
        error: Human-readable error, set only on failure.
        stack: Formatted traceback, set only on failure in development mode.
    """

    success: bool
    status_code: int
    message: str | None = None
    data: Any = None
    error: str | None = None
    stack: str | None = None

    @classmethod
    def sent(cls, data: Any, message: str = "Email sent successfully") -> RelayResult:
        return cls(success=True, status_code=200, message=message, data=data)

    @classmethod
    def failed(
        cls, error: str, status_code: int = 500, stack: str | None = None
    ) -> RelayResult:
        return cls(success=False, status_code=status_code, error=error, stack=stack)

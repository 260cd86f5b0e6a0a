"""API response schemas.

Pydantic models for the JSON envelopes returned by the relay.

Version: 1.0.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SendEmailResponse(BaseModel):
    """Response model for a successful POST /send-email."""

    success: bool = Field(default=True, description="Always true")
    message: str = Field(description="Status message")
    data: Any = Field(default=None, description="Opaque provider response data")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class FailureResponse(BaseModel):
    """Response model for a rejected or failed POST /send-email."""

    success: bool = Field(default=False, description="Always false")
    error: str = Field(description="Error description")
    stack: str | None = Field(
        default=None, description="Traceback (development mode only)"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class HealthResponse(BaseModel):
    """Response model for GET /health endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="up", description="Liveness status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())
    uptime: float = Field(description="Seconds since startup")
    environment: str = Field(description="Runtime mode")
    allowed_origins: list[str] = Field(
        alias="allowedOrigins",
        description="Configured CORS allow-list",
    )


class CorsTestResponse(BaseModel):
    """Response model for GET /cors-test endpoint."""

    message: str = Field(description="Status message")
    origin: str | None = Field(description="Origin header as received")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())
    headers: dict[str, str] = Field(
        description="CORS headers the gate attaches for this origin"
    )


class ErrorResponse(BaseModel):
    """Standard error response model (404, 405, unhandled 500)."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error description")
    stack: str | None = Field(
        default=None, description="Traceback (development mode only)"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now())

"""Mail Relay API.

FastAPI application relaying transactional email to a delivery provider:
- POST /send-email: Validate and relay an email (X-API-Key required)
- GET /health: Liveness check with uptime and allowed origins
- GET /cors-test: Report the CORS headers granted to the caller's origin
- OPTIONS *: Pre-flight, answered by the origin gate middleware

Request pipeline:
    origin gate (middleware) → credential check (dependency)
    → payload validation → relay dispatcher → JSON envelope

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import time
import traceback
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from mail_relay.api.middleware import OriginGateMiddleware
from mail_relay.api.schemas import (
    CorsTestResponse,
    ErrorResponse,
    FailureResponse,
    HealthResponse,
    SendEmailResponse,
)
from mail_relay.clients import EmailProvider, create_provider
from mail_relay.config import RelayConfig
from mail_relay.core.exceptions import (
    PayloadValidationError,
    RelayConfigError,
    UnauthorizedError,
)
from mail_relay.core.logger import get_logger, setup_logging
from mail_relay.gate.request_gate import RequestGate
from mail_relay.models.email import parse_email_request
from mail_relay.relay.dispatcher import RelayDispatcher

logger = get_logger(__name__)


# =============================================================================
# Application State (Dependency Injection)
# =============================================================================
@dataclass
class AppState:
    """Application state container for dependency injection."""

    config: RelayConfig
    gate: RequestGate
    dispatcher: RelayDispatcher | None = None
    started_at: float = field(default_factory=time.monotonic)


def get_state(request: Request) -> AppState:
    """Dependency: Get application state."""
    state = getattr(request.app.state, "relay", None)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return state


def get_dispatcher(state: Annotated[AppState, Depends(get_state)]) -> RelayDispatcher:
    """Dependency: Get relay dispatcher instance."""
    if state.dispatcher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return state.dispatcher


# =============================================================================
# API Key Authentication
# =============================================================================
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    api_key: Annotated[str | None, Depends(API_KEY_HEADER)],
    state: Annotated[AppState, Depends(get_state)],
) -> None:
    """Reject the request unless X-API-Key exactly matches the shared secret.

    Raises:
        UnauthorizedError: If the header is missing or wrong.
    """
    state.gate.require_credential(api_key)


# =============================================================================
# Response Helpers
# =============================================================================
def _envelope(
    model: BaseModel, status_code: int, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _is_development(request: Request) -> bool:
    state = getattr(request.app.state, "relay", None)
    return bool(state and state.config.is_development)


async def _read_json(request: Request) -> Any:
    """Decode a JSON body; anything else reads as an empty object."""
    if "application/json" not in request.headers.get("content-type", ""):
        return {}
    try:
        return await request.json()
    except ValueError:
        return {}


# =============================================================================
# Exception Handlers
# =============================================================================
async def handle_unauthorized(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _envelope(
        FailureResponse(error=str(exc)),
        status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def handle_payload_error(
    request: Request, exc: PayloadValidationError
) -> JSONResponse:
    logger.info(f"Rejected send request: {exc}")
    return _envelope(FailureResponse(error=str(exc)), status.HTTP_400_BAD_REQUEST)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unmatched routes included) as JSON."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = "Not Found"
        message = f"Route {request.method} {request.url.path} not found"
    else:
        error = HTTPStatus(exc.status_code).phrase
        message = str(exc.detail)

    return _envelope(
        ErrorResponse(error=error, message=message),
        exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log everything, return a generic 500."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    stack = None
    if _is_development(request):
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return _envelope(
        ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            stack=stack,
        ),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# =============================================================================
# API Endpoints
# =============================================================================
router = APIRouter()


@router.post(
    "/send-email",
    response_model=SendEmailResponse,
    responses={
        400: {"model": FailureResponse, "description": "Missing or invalid fields"},
        401: {"model": FailureResponse, "description": "Missing or invalid API key"},
        500: {"model": FailureResponse, "description": "Provider error"},
    },
    dependencies=[Depends(verify_api_key)],
)
async def send_email(
    request: Request,
    dispatcher: Annotated[RelayDispatcher, Depends(get_dispatcher)],
) -> SendEmailResponse | JSONResponse:
    """Validate the body and relay it to the email provider.

    Requires the X-API-Key header. Makes exactly one provider call.
    """
    email_request = parse_email_request(await _read_json(request))

    result = await dispatcher.dispatch(email_request)

    if not result.success:
        return _envelope(
            FailureResponse(error=result.error, stack=result.stack),
            result.status_code,
        )

    return SendEmailResponse(message=result.message, data=result.data)


@router.get("/health", response_model=HealthResponse)
async def health_check(state: Annotated[AppState, Depends(get_state)]) -> HealthResponse:
    """Check service liveness.

    No authentication required - used by load balancers and monitoring.
    """
    return HealthResponse(
        uptime=round(time.monotonic() - state.started_at, 3),
        environment=state.config.ENVIRONMENT,
        allowed_origins=state.gate.allowed_origins.as_list(),
    )


@router.get("/cors-test", response_model=CorsTestResponse)
async def cors_test(
    request: Request, state: Annotated[AppState, Depends(get_state)]
) -> CorsTestResponse:
    """Report which CORS headers the gate grants the caller's origin.

    No authentication required - intended for debugging browser integration.
    """
    origin = request.headers.get("origin")
    decision = getattr(request.state, "origin_decision", None)
    if decision is None:
        decision = state.gate.check_origin(origin)

    if origin is None:
        message = "No Origin header received"
    elif decision.headers:
        message = "Origin is allowed"
    else:
        message = "Origin is not on the allow-list"

    return CorsTestResponse(message=message, origin=origin, headers=decision.headers)


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    config: RelayConfig | None = None,
    provider: EmailProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Relay configuration (loaded from the environment if None).
        provider: Delivery provider to use instead of the one selected by
            EMAIL_PROVIDER. A provider passed in is not closed at shutdown.

    Returns:
        Configured FastAPI application.
    """
    config = config or RelayConfig()
    gate = RequestGate(
        config.allowed_origin_set(),
        config.API_SECRET_KEY,
        logger=get_logger("mail_relay.gate"),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            log_dir=config.LOG_DIR,
            log_level=config.LOG_LEVEL,
            enable_file=config.LOG_TO_FILE,
            max_size_mb=config.LOG_MAX_SIZE_MB,
            backup_count=config.LOG_BACKUP_COUNT,
            settings=config,
        )

        if config.uses_default_secret and not config.is_development:
            logger.warning("API_SECRET_KEY is still the default value; override it")

        try:
            config.validate_provider_config()
        except RelayConfigError as e:
            logger.warning(f"{e} Sends will fail until it is set.")

        client = provider or create_provider(config)
        app.state.relay = AppState(
            config=config,
            gate=gate,
            dispatcher=RelayDispatcher(
                client,
                default_from_email=config.DEFAULT_FROM_EMAIL,
                default_from_name=config.DEFAULT_FROM_NAME,
                include_stack=config.is_development,
                logger=get_logger("mail_relay.relay"),
            ),
        )
        logger.info(
            f"{config.SERVICE_NAME} relaying via {client.name} "
            f"({len(gate.allowed_origins)} allowed origins)"
        )

        yield  # Application runs here

        logger.info(f"Shutting down {config.SERVICE_NAME}...")
        if provider is None:
            await client.aclose()
        app.state.relay = None
        logger.info(f"{config.SERVICE_NAME} stopped")

    application = FastAPI(
        title=config.SERVICE_NAME,
        description="Transactional email relay with origin and API key gating",
        version=config.SERVICE_VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        OriginGateMiddleware, gate=gate, on_error=handle_unexpected_error
    )
    application.add_exception_handler(UnauthorizedError, handle_unauthorized)
    application.add_exception_handler(PayloadValidationError, handle_payload_error)
    application.add_exception_handler(StarletteHTTPException, handle_http_exception)
    application.add_exception_handler(Exception, handle_unexpected_error)
    application.include_router(router)

    return application


# =============================================================================
# Module-level Configuration (single instantiation)
# =============================================================================
_config = RelayConfig()

app = create_app(_config)


# =============================================================================
# Entry Point
# =============================================================================
def run():
    """Run the API server."""
    import uvicorn

    logger.info(f"Starting {_config.SERVICE_NAME} on {_config.API_HOST}:{_config.PORT}")
    uvicorn.run(
        "mail_relay.api.main:app",
        host=_config.API_HOST,
        port=_config.PORT,
        reload=False,
    )


if __name__ == "__main__":
    run()

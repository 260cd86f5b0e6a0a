"""Origin gate middleware.

Runs the request gate's origin check for every request. Pre-flight
requests are answered here and never reach routing, credential checks or
payload validation. Other requests run normally; the CORS headers are
attached to the response only for allowed origins, error responses
included.

Version: 1.0.0
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from mail_relay.gate.request_gate import RequestGate

ErrorRenderer = Callable[[Request, Exception], Awaitable[Response]]


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Apply the origin decision to every request/response cycle.

    The decision is stored on ``request.state.origin_decision`` so routes
    can read it without checking the origin again.
    """

    def __init__(
        self, app: ASGIApp, gate: RequestGate, on_error: ErrorRenderer
    ) -> None:
        super().__init__(app)
        self.gate = gate
        self.on_error = on_error

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Short-circuit pre-flights, otherwise echo CORS headers on the response.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler.

        Returns:
            The HTTP response, with CORS headers when the origin is allowed.
            Every response varies by Origin.
        """
        decision = self.gate.check_origin(request.headers.get("origin"))
        request.state.origin_decision = decision
        headers = {"Vary": "Origin", **decision.headers}

        if self.gate.is_preflight(request.method):
            return PlainTextResponse("OK", status_code=200, headers=headers)

        try:
            response = await call_next(request)
        except Exception as e:
            response = await self.on_error(request, e)

        response.headers.update(headers)
        return response

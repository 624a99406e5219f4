"""Request admission gate and its Starlette middleware."""

import inspect
import logging
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shutdown_gate.metrics import REJECTED_REQUESTS_TOTAL
from shutdown_gate.state import ShutdownState

logger = logging.getLogger(__name__)


class RequestGate:
    """Per-request admission check against the shared shutdown state."""

    def __init__(self, state: ShutdownState):
        self.state = state

    @property
    def is_draining(self) -> bool:
        return self.state.is_draining

    def rejection_response(self) -> Response:
        """Build the fixed 503 returned while draining."""
        options = self.state.options
        return Response(
            content=options.response_body,
            status_code=503,
            headers={"Connection": "close"},
            media_type=options.response_type,
        )

    def admit(self, request: Any, proceed: Callable[[Any], Any]) -> Any:
        """
        Reject the request while draining, otherwise hand it to proceed.

        Whatever proceed returns (a response, a value or an awaitable) is
        returned as-is.
        """
        if self.state.is_draining:
            method = getattr(request, "method", None) or "-"
            REJECTED_REQUESTS_TOTAL.labels(method=method).inc()
            return self.rejection_response()
        return proceed(request)


class ShutdownGateMiddleware(BaseHTTPMiddleware):
    """
    Middleware that rejects every request once shutdown has started.

    Add it last so it is the outermost middleware and no route, including
    health checks, is reachable while draining.
    """

    def __init__(self, app, gate: RequestGate):
        """
        Initialize the gate middleware.

        Args:
            app: The ASGI application
            gate: RequestGate sharing state with the ShutdownController
        """
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next) -> Response:
        """Admit or reject the request."""
        result = self.gate.admit(request, call_next)
        if inspect.isawaitable(result):
            result = await result
        else:
            logger.debug(f"Rejected {request.method} {request.url.path} while draining")
        return result

"""FastAPI application protected by the shutdown gate."""

from fastapi import FastAPI, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from shutdown_gate import __version__
from shutdown_gate.gate import RequestGate, ShutdownGateMiddleware
from shutdown_gate.state import ShutdownState


def create_app(state: ShutdownState) -> FastAPI:
    """
    Build the application with the gate in front of every route.

    Args:
        state: Shared shutdown state, later handed to the ShutdownController

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="Shutdown Gate",
        description="Rejects new requests with 503 while the server drains.",
        version=__version__,
    )

    # Gate middleware must be outermost so nothing runs while draining
    app.add_middleware(ShutdownGateMiddleware, gate=RequestGate(state))

    @app.get("/health")
    async def health_check():
        """Liveness probe. Only reachable while serving."""
        return {"status": "healthy", "version": __version__, "phase": state.phase.value}

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint.

        Includes:
        - shutdown_draining: 1 once draining has started
        - shutdown_rejected_requests_total: 503s returned by the gate
        - shutdown_exits_total: exits requested, by reason
        """
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Shutdown Gate",
            "version": __version__,
            "health": "/health",
        }

    return app

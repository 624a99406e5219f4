"""Graceful shutdown coordination for request-serving processes."""

__version__ = "0.1.0"

from shutdown_gate.config import Settings, ShutdownOptions, get_settings  # noqa: E402
from shutdown_gate.controller import ShutdownController  # noqa: E402
from shutdown_gate.gate import RequestGate, ShutdownGateMiddleware  # noqa: E402
from shutdown_gate.state import ExitCode, ShutdownPhase, ShutdownState  # noqa: E402

__all__ = [
    "ExitCode",
    "RequestGate",
    "Settings",
    "ShutdownController",
    "ShutdownGateMiddleware",
    "ShutdownOptions",
    "ShutdownPhase",
    "ShutdownState",
    "get_settings",
]

"""Shutdown controller: the serving -> draining -> terminated state machine."""

import asyncio
import functools
import threading
from typing import Any, Callable, Optional, Protocol

from shutdown_gate.metrics import SHUTDOWN_EXITS_TOTAL
from shutdown_gate.process import ProcessFacade, SystemProcess
from shutdown_gate.server import ServerHandle
from shutdown_gate.state import ExitCode, ShutdownState


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


CallLater = Callable[[float, Callable[[], None]], Cancellable]


def loop_call_later(delay: float, callback: Callable[[], None]) -> Cancellable:
    """Schedule callback on the running event loop, or a daemon thread timer."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
    return loop.call_later(delay, callback)


class ShutdownController:
    """
    Coordinates a graceful shutdown of one server.

    On the first termination signal the shared state flips to draining, the
    server is asked to close and drain, and a force timer is armed. The drain
    path exits with 0 (after the optional ``before_shutdown`` hook), the timer
    path exits with 1.

    With ``guard_termination`` enabled the drain path cancels the timer, a late
    drain after a forced exit is ignored, and ``process.exit`` runs at most
    once. Disabled, both paths may call ``process.exit``.
    """

    def __init__(
        self,
        server: ServerHandle,
        state: ShutdownState,
        process: Optional[ProcessFacade] = None,
        call_later: Optional[CallLater] = None,
    ):
        """
        Initialize the controller and subscribe to the configured signals.

        Args:
            server: Handle exposing close(on_drained)
            state: Shared state, also read by the request gate
            process: Signal subscription and exit; defaults to the real process
            call_later: Timer factory (delay_seconds, callback) -> handle with cancel()
        """
        self.server = server
        self.state = state
        self.options = state.options
        self.logger = self.options.logger
        self.process = process or SystemProcess()
        self.call_later = call_later or loop_call_later

        self._timer: Optional[Cancellable] = None
        self._exited = False

        for signal_name in self.options.signals:
            if signal_name:
                self.process.on(
                    signal_name, functools.partial(self.trigger_shutdown, signal_name)
                )

    @property
    def exited(self) -> bool:
        """Whether process termination has been requested."""
        return self._exited

    def trigger_shutdown(self, signal_name: str = "SIGTERM") -> None:
        """Start shutting down; repeated calls are no-ops."""
        if not self.state.begin_draining():
            return

        if not self.options.graceful:
            self._exit(ExitCode.OK, "immediate")
            return

        self.logger.warning(f"Received kill signal ({signal_name}), shutting down...")

        self._timer = self.call_later(
            self.options.force_timeout_seconds, self._on_force_timeout
        )
        self.server.close(self._on_drained)

    def _on_force_timeout(self) -> None:
        if self.options.guard_termination and self._exited:
            return
        self.logger.error("Could not close connections in time, forcefully shutting down")
        self._exit(ExitCode.FORCED, "forced")

    def _on_drained(self) -> None:
        if self.options.guard_termination:
            if self._exited:
                self.logger.info("Connections closed after forced shutdown, ignoring")
                return
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        self.logger.info("Closed out remaining connections")
        if self.options.before_shutdown is not None:
            self.options.before_shutdown(lambda: self._exit(ExitCode.OK, "drained"))
        else:
            self._exit(ExitCode.OK, "drained")

    def _exit(self, code: ExitCode, reason: str) -> None:
        if self.options.guard_termination and self._exited:
            self.logger.info(f"Process exit already requested, skipping exit({int(code)})")
            return
        self._exited = True
        SHUTDOWN_EXITS_TOTAL.labels(reason=reason).inc()
        self.process.exit(int(code))

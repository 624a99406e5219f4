"""OS-facing process facade: signal subscription and termination."""

import asyncio
import logging
import os
import signal
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ProcessFacade(Protocol):
    """What the controller needs from the running process."""

    def on(self, signal_name: str, handler: Callable[[], None]) -> None: ...

    def exit(self, code: int) -> None: ...


class SystemProcess:
    """
    ProcessFacade backed by the real process.

    Signal handlers go through the event loop when one is running so they run
    on the loop thread alongside request handling. Without a running loop the
    plain ``signal`` module is used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self.loop is not None:
            return self.loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def on(self, signal_name: str, handler: Callable[[], None]) -> None:
        """
        Register handler for the named signal.

        Raises:
            ValueError: If the name is not a signal on this platform
        """
        signum = getattr(signal, signal_name, None)
        if not isinstance(signum, signal.Signals):
            raise ValueError(f"Unknown signal: {signal_name!r}")

        loop = self._resolve_loop()
        if loop is not None:
            try:
                loop.add_signal_handler(signum, handler)
                logger.debug(f"Registered {signal_name} handler on event loop")
                return
            except NotImplementedError:
                # Windows event loops have no signal support
                pass

        signal.signal(signum, lambda _signum, _frame: handler())
        logger.debug(f"Registered {signal_name} handler with signal module")

    def exit(self, code: int) -> None:
        """Flush logging and terminate immediately with the given code."""
        logger.info("Exiting process", extra={"exit_code": int(code)})
        logging.shutdown()
        os._exit(int(code))

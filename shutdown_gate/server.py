"""Server handles exposing ``close(on_drained)`` for the controller."""

import asyncio
import contextlib
import logging
from typing import Callable, Optional, Protocol

import uvicorn

logger = logging.getLogger(__name__)


class ServerHandle(Protocol):
    """A server that can stop accepting connections and report when drained."""

    def close(self, on_drained: Callable[[], None]) -> None: ...


class AsyncioServerHandle:
    """
    Handle for a plain ``asyncio.Server``.

    ``close`` stops the listener and waits on ``wait_closed()``, which on
    Python 3.12+ returns only after every accepted connection has finished.
    """

    def __init__(self, server: asyncio.AbstractServer):
        self.server = server
        self._drain_task: Optional[asyncio.Task] = None

    def close(self, on_drained: Callable[[], None]) -> None:
        """Stop accepting connections and call on_drained once they finish."""
        self.server.close()
        self._drain_task = asyncio.ensure_future(self.server.wait_closed())

        def _done(task: asyncio.Task) -> None:
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                logger.error(f"Error while waiting for connections to close: {exc}")
            on_drained()

        self._drain_task.add_done_callback(_done)


class UvicornServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the shutdown controller."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class UvicornServerHandle:
    """
    Handle for a ``uvicorn.Server``.

    Closing sets ``should_exit``; uvicorn then stops its listeners, waits for
    open connections and runs the lifespan shutdown before ``serve`` returns.
    """

    def __init__(self, server: uvicorn.Server):
        self.server = server
        self.serving = False
        self._on_drained: Optional[Callable[[], None]] = None

    async def serve(self) -> None:
        """Run the server until it has been closed and drained."""
        self.serving = True
        try:
            await self.server.serve()
        finally:
            self.serving = False
        if self._on_drained is not None:
            self._on_drained()

    def close(self, on_drained: Callable[[], None]) -> None:
        """Ask uvicorn to exit and call on_drained once serve() returns."""
        if not self.serving:
            asyncio.get_running_loop().call_soon(on_drained)
            return
        self._on_drained = on_drained
        self.server.should_exit = True

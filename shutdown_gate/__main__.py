"""Run the gated application under uvicorn: ``python -m shutdown_gate``."""

import asyncio
import logging

import uvicorn

from shutdown_gate.app import create_app
from shutdown_gate.config import Settings, ShutdownOptions, get_settings
from shutdown_gate.controller import ShutdownController
from shutdown_gate.logging_config import setup_logging
from shutdown_gate.process import SystemProcess
from shutdown_gate.server import UvicornServer, UvicornServerHandle
from shutdown_gate.state import ShutdownState

logger = logging.getLogger("shutdown_gate")


async def serve(settings: Settings) -> None:
    options = ShutdownOptions.from_settings(settings, logger=logger)
    state = ShutdownState(options)
    setup_logging(settings.log_level, settings.log_json, state=state)

    app = create_app(state)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
    handle = UvicornServerHandle(UvicornServer(config))

    # Signal handlers need the running loop
    ShutdownController(handle, state, process=SystemProcess())
    logger.info(
        "Starting server",
        extra={"host": settings.host, "port": settings.port, "graceful": options.graceful},
    )
    await handle.serve()


def main() -> None:
    asyncio.run(serve(get_settings()))


if __name__ == "__main__":
    main()

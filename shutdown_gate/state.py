"""Shared shutdown state."""

import logging
from enum import Enum, IntEnum
from typing import Optional

from shutdown_gate.config import ShutdownOptions
from shutdown_gate.metrics import SHUTDOWN_DRAINING

logger = logging.getLogger(__name__)


class ShutdownPhase(str, Enum):
    """Lifecycle phases observable while the process is alive."""

    SERVING = "serving"
    DRAINING = "draining"


class ExitCode(IntEnum):
    """Process exit codes used by the controller."""

    OK = 0
    FORCED = 1


class ShutdownState:
    """
    Phase flag plus the options it was created with.

    One instance is shared by reference between the controller, which is the
    only writer, and any number of request gates, which only read it.
    """

    def __init__(self, options: Optional[ShutdownOptions] = None):
        self.options = options or ShutdownOptions()
        self._phase = ShutdownPhase.SERVING

    @property
    def phase(self) -> ShutdownPhase:
        return self._phase

    @property
    def is_draining(self) -> bool:
        """Check if shutdown is in progress."""
        return self._phase is ShutdownPhase.DRAINING

    def begin_draining(self) -> bool:
        """
        Move from serving to draining.

        Returns:
            True for the call that performed the transition, False afterwards
        """
        if self._phase is ShutdownPhase.DRAINING:
            return False
        self._phase = ShutdownPhase.DRAINING
        SHUTDOWN_DRAINING.set(1)
        logger.info("Graceful shutdown initiated")
        return True

    def __repr__(self) -> str:
        return f"ShutdownState(phase={self._phase.value})"

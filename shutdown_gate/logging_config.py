"""Structured JSON logging configuration with shutdown phase stamping."""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter as BaseJsonFormatter

from shutdown_gate.state import ShutdownState

NO_PHASE = "-"


class ShutdownPhaseFilter(logging.Filter):
    """Logging filter that adds shutdown_phase to all log records."""

    def __init__(self, state: Optional[ShutdownState] = None):
        super().__init__()
        self.state = state

    def filter(self, record: logging.LogRecord) -> bool:
        """Add shutdown_phase attribute to the log record."""
        record.shutdown_phase = self.state.phase.value if self.state else NO_PHASE
        return True


class CustomJsonFormatter(BaseJsonFormatter):
    """Custom JSON formatter with consistent field naming."""

    def add_fields(
        self,
        log_record: dict,
        record: logging.LogRecord,
        message_dict: dict,
    ) -> None:
        """Add custom fields to the JSON log record."""
        super().add_fields(log_record, record, message_dict)

        # Rename fields for consistency with log aggregators
        if "asctime" in log_record:
            log_record["timestamp"] = log_record.pop("asctime")
        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        if "shutdown_phase" not in log_record:
            log_record["shutdown_phase"] = getattr(record, "shutdown_phase", NO_PHASE)


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    logger_name: Optional[str] = None,
    state: Optional[ShutdownState] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, output JSON; if False, output human-readable format
        logger_name: If provided, configure only this logger; otherwise configure root
        state: Shutdown state whose phase is stamped on every record
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level.upper())

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level.upper())

    if json_format:
        formatter = CustomJsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(shutdown_phase)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S.%fZ",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] [%(shutdown_phase)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    handler.addFilter(ShutdownPhaseFilter(state))
    logger.addHandler(handler)

    if logger_name:
        logger.propagate = False

"""Application and shutdown configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings

DEFAULT_FORCE_TIMEOUT_MS = 30 * 1000
DEFAULT_RESPONSE_BODY = "Server is in the process of restarting"
DEFAULT_RESPONSE_TYPE = "text/plain; charset=utf-8"
DEFAULT_SIGNALS = "SIGTERM"

# Environments in which draining is skipped and the process exits at once
NON_GRACEFUL_ENVIRONMENTS = ("", "development")


def split_signals(value: Any) -> tuple[str, ...]:
    """Accept a space-delimited string or an iterable of names, drop empties."""
    if isinstance(value, str):
        value = value.split(" ")
    return tuple(name.strip() for name in value if name and name.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    app_env: str = ""  # empty or "development" disables graceful draining

    # Logging
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_json: bool = True  # JSON format for production, False for human-readable

    # Graceful Shutdown
    force_timeout_ms: PositiveInt = DEFAULT_FORCE_TIMEOUT_MS
    response_body: str = DEFAULT_RESPONSE_BODY
    response_type: str = DEFAULT_RESPONSE_TYPE
    shutdown_signals: str = DEFAULT_SIGNALS  # space-delimited, e.g. "SIGTERM SIGINT"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def graceful(self) -> bool:
        """Whether shutdown should drain connections instead of exiting at once."""
        return self.app_env.strip().lower() not in NON_GRACEFUL_ENVIRONMENTS


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class ShutdownOptions(BaseModel):
    """Immutable options captured when the shutdown coordinator is installed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    logger: Any = Field(default_factory=lambda: logging.getLogger("shutdown_gate"))
    force_timeout_ms: PositiveInt = DEFAULT_FORCE_TIMEOUT_MS
    response_body: str = DEFAULT_RESPONSE_BODY
    response_type: str = DEFAULT_RESPONSE_TYPE
    signals: tuple[str, ...] = (DEFAULT_SIGNALS,)
    before_shutdown: Optional[Callable[[Callable[[], None]], Any]] = None
    graceful: bool = True
    # Cancel the losing completion and exit at most once
    guard_termination: bool = True

    @field_validator("signals", mode="before")
    @classmethod
    def _split_signals(cls, value: Any) -> tuple[str, ...]:
        return split_signals(value)

    @field_validator("logger")
    @classmethod
    def _check_logger(cls, value: Any) -> Any:
        missing = [m for m in ("info", "warning", "error") if not callable(getattr(value, m, None))]
        if missing:
            raise ValueError(f"logger is missing methods: {', '.join(missing)}")
        return value

    @property
    def force_timeout_seconds(self) -> float:
        return self.force_timeout_ms / 1000

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "ShutdownOptions":
        """
        Build options from application settings.

        Args:
            settings: Loaded Settings instance
            **overrides: Field values taking precedence over settings
                (typically ``logger`` and ``before_shutdown``)

        Returns:
            Frozen ShutdownOptions
        """
        values: dict[str, Any] = {
            "force_timeout_ms": settings.force_timeout_ms,
            "response_body": settings.response_body,
            "response_type": settings.response_type,
            "signals": settings.shutdown_signals,
            "graceful": settings.graceful,
        }
        values.update(overrides)
        return cls(**values)

"""Pydantic models for btshow configuration.

Provides validated data models for runtime configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from btshow.utils.tracker_utils import parse_tracker_address


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TrackerConfig(BaseModel):
    """UDP tracker client configuration."""

    host: str = Field(
        default="tracker.opentrackr.org:1337",
        description="Default UDP tracker address (host:port or udp:// URL)",
    )
    timeout: float | None = Field(
        default=10.0,
        gt=0.0,
        le=600.0,
        description="Receive timeout in seconds (None blocks forever)",
    )
    connection_id_lifetime: float = Field(
        default=60.0,
        gt=0.0,
        le=3600.0,
        description="Seconds a connection ID is reused before a new handshake",
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate tracker address format."""
        parse_tracker_address(v)
        return v


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Emit JSON log records instead of Rich console output",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class Config(BaseModel):
    """Main btshow configuration."""

    tracker: TrackerConfig = Field(
        default_factory=TrackerConfig,
        description="Tracker client configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

"""Logging configuration settings."""

import sys

from pydantic import BaseModel, Field, field_validator


class LoggingSettings(BaseModel):
    """Logging configuration for applications embedding Conduit."""

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    format: str = Field(
        default="auto",
        description="Logging output format: 'rich' for development, 'json' for production, 'auto' for automatic selection",
    )

    show_time: bool = Field(
        default=True,
        description="Whether to show timestamps in logs",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        upper_v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate and normalize log format."""
        lower_v = v.lower()
        valid_formats = ["auto", "rich", "json", "plain"]
        if lower_v not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return lower_v

    @property
    def json_logs(self) -> bool:
        """Whether logs should be rendered as JSON.

        ``auto`` selects JSON when stderr is not a terminal.
        """
        if self.format == "json":
            return True
        if self.format == "auto":
            return not sys.stderr.isatty()
        return False

    @property
    def plain_logs(self) -> bool:
        """Whether console logs should be rendered without colors or rich tracebacks."""
        return self.format == "plain"

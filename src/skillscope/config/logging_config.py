"""Logging configuration model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging settings for the ``skillscope`` logger hierarchy.

    Attributes:
        level: Minimum level emitted.
        structured: Emit JSON lines instead of plain text.
        format: ``logging`` format string for plain-text output.
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Minimum log level",
    )
    structured: bool = Field(
        default=False,
        description="Emit JSON-formatted log records",
    )
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Format string for plain-text logs",
    )

"""Logging setup for skillscope.

Library modules only call ``logging.getLogger(__name__)``. Applications that
want output call ``setup_logging`` once with a ``LoggingConfig``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from skillscope.config.logging_config import LoggingConfig

ROOT_LOGGER = "skillscope"


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    config: LoggingConfig | None = None,
    *,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Configure the ``skillscope`` logger.

    Replaces handlers previously installed by this function so repeated
    calls do not duplicate output.

    Args:
        config: Logging configuration. Uses defaults if ``None``.
        handler: Handler to install (defaults to a stderr ``StreamHandler``).

    Returns:
        The configured ``skillscope`` logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(ROOT_LOGGER)

    for existing in list(logger.handlers):
        if getattr(existing, "_skillscope_handler", False):
            logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler._skillscope_handler = True  # type: ignore[attr-defined]
    if config.structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))

    logger.addHandler(handler)
    logger.setLevel(config.level)
    return logger

"""Environment-driven settings for skillscope.

Values are read, in order of precedence, from keyword arguments,
``SKILLSCOPE_``-prefixed environment variables, and a ``.env`` file in the
working directory. Nested fields use ``__`` as the delimiter, e.g.
``SKILLSCOPE_LOGGING__LEVEL=DEBUG``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillscope.config.logging_config import LoggingConfig


class SkillscopeSettings(BaseSettings):
    """Root settings object.

    Attributes:
        user_dir: Default base for user skill roots and plugin files.
        plugins_fallback: Scan ``<plugins_root>/skills`` when the installed
            plugins manifest is missing or yields no skills.
        logging: Logging configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKILLSCOPE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user_dir: Path | None = Field(
        default=None,
        description="Base directory for user skill roots",
    )
    plugins_fallback: bool = Field(
        default=False,
        description="Enable the conventional plugin skills directory fallback",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("user_dir", mode="after")
    @classmethod
    def _expand_user_dir(cls, value: Path | None) -> Path | None:
        """Expand ``~`` in user_dir."""
        return value.expanduser() if value is not None else None

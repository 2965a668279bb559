"""Configuration system for skillscope.

Main exports:
- SkillscopeSettings: Root settings loaded from env and ``.env``
- LoggingConfig: Logging configuration
"""

from skillscope.config.logging_config import LoggingConfig
from skillscope.config.settings import SkillscopeSettings

__all__ = [
    "LoggingConfig",
    "SkillscopeSettings",
]

"""
skillscope - discover, deduplicate, filter and resolve agent skill bundles.

Quick Start:
    >>> from skillscope import SkillRegistry
    >>> registry = SkillRegistry()
    >>> for skill in registry.get_all():
    ...     print(skill.name, skill.location.value)

With Options:
    >>> from skillscope import DiscoveryOptions, SkillRegistry
    >>> options = DiscoveryOptions(custom_dirs=["./skills"], skip_plugins=True)
    >>> registry = SkillRegistry(options)
    >>> skill = registry.load("pdf")

With Settings:
    >>> from skillscope import SkillscopeSettings, setup_logging
    >>> settings = SkillscopeSettings()  # Loads from env and .env
    >>> setup_logging(settings.logging)
"""

from skillscope.config import LoggingConfig, SkillscopeSettings
from skillscope.observability import setup_logging
from skillscope.skills import (
    AmbiguousSkillNameError,
    DiscoveryOptions,
    SelectorSyntaxError,
    Skill,
    SkillError,
    SkillLocation,
    SkillMetadata,
    SkillNotFoundError,
    SkillParseError,
    SkillProvider,
    SkillRegistry,
    SkillValidationError,
    apply_filters,
    parse_filters,
    resolve_skill,
)

__all__ = [
    "AmbiguousSkillNameError",
    "DiscoveryOptions",
    "LoggingConfig",
    "SelectorSyntaxError",
    "Skill",
    "SkillError",
    "SkillLocation",
    "SkillMetadata",
    "SkillNotFoundError",
    "SkillParseError",
    "SkillProvider",
    "SkillRegistry",
    "SkillValidationError",
    "SkillscopeSettings",
    "apply_filters",
    "parse_filters",
    "resolve_skill",
    "setup_logging",
]

__version__ = "0.1.0"

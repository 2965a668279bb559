"""Skill discovery, filtering and resolution.

Finds skill bundles (directories holding a ``SKILL.md`` manifest) under
project roots, user roots, ad-hoc roots and installed plugins, keeps every
copy in a flat registry, and offers selectors and name resolution to pick
the copy a caller should see.

Quick Start:
    >>> from skillscope.skills import SkillRegistry, apply_filters, parse_filters
    >>> registry = SkillRegistry()
    >>> parsed = parse_filters(["auto"], ["codex"])
    >>> visible = apply_filters(registry.get_all(), parsed.includes, parsed.excludes)
    >>> skill = registry.load("pdf")

Classes:
    SkillRegistry: Flat collection of discovered skills with find/load.
    SkillMetadata: Immutable snapshot of one bundle.
    Skill: Metadata plus full manifest content.
    DiscoveryOptions: Options controlling which roots are scanned.
    SelectorToken: Parsed include/exclude selector.

Enums:
    SkillProvider: Scanning pipeline (claude, codex, custom).
    SkillLocation: Priority class (project, user, plugin).

Exceptions:
    SkillError: Base exception for all skill-related errors.
    SkillNotFoundError: No skill matches a query.
    AmbiguousSkillNameError: Several skills match a query.
    SkillParseError: A manifest cannot be read or decoded.
    SkillValidationError: A manifest's required fields are invalid.
    SelectorSyntaxError: A selector string is malformed.
"""

from __future__ import annotations

from skillscope.skills.config import (
    CustomDir,
    DiscoveryDiagnostics,
    DiscoveryOptions,
    PluginInfo,
    Skill,
    SkillLocation,
    SkillMetadata,
    SkillProvider,
    ValidationResult,
)
from skillscope.skills.discovery import (
    DiscoveryResult,
    SkillRoot,
    default_skill_roots,
    discover_skills,
)
from skillscope.skills.display import render_diagnostics
from skillscope.skills.errors import (
    AmbiguousSkillNameError,
    SelectorSyntaxError,
    SkillError,
    SkillNotFoundError,
    SkillParseError,
    SkillValidationError,
)
from skillscope.skills.filters import (
    ExcludeToken,
    FilterParseResult,
    IncludeToken,
    SelectorToken,
    apply_filters,
    matches_pattern,
    parse_filters,
    parse_selector,
)
from skillscope.skills.loader import ParsedManifest, parse_skill_file, validate_skill_file
from skillscope.skills.plugins import PluginScanResult, expand_plugins, load_installed_plugins
from skillscope.skills.registry import RegistryDiagnostics, SkillRegistry
from skillscope.skills.resolution import (
    format_skill_id,
    resolve_selectors,
    resolve_skill,
    skill_aliases,
)
from skillscope.skills.scanner import ScanResult, scan_root
from skillscope.skills.search import rank_strings, search_skills
from skillscope.skills.toggle import (
    ToggleResult,
    ToggleStatus,
    ToggleSummary,
    detect_variant_conflicts,
    disable_skill,
    enable_skill,
    toggle_skills,
)

__all__ = [
    "AmbiguousSkillNameError",
    "CustomDir",
    "DiscoveryDiagnostics",
    "DiscoveryOptions",
    "DiscoveryResult",
    "ExcludeToken",
    "FilterParseResult",
    "IncludeToken",
    "ParsedManifest",
    "PluginInfo",
    "PluginScanResult",
    "RegistryDiagnostics",
    "ScanResult",
    "SelectorSyntaxError",
    "SelectorToken",
    "Skill",
    "SkillError",
    "SkillLocation",
    "SkillMetadata",
    "SkillNotFoundError",
    "SkillParseError",
    "SkillProvider",
    "SkillRegistry",
    "SkillRoot",
    "SkillValidationError",
    "ToggleResult",
    "ToggleStatus",
    "ToggleSummary",
    "ValidationResult",
    "apply_filters",
    "default_skill_roots",
    "detect_variant_conflicts",
    "disable_skill",
    "discover_skills",
    "enable_skill",
    "expand_plugins",
    "format_skill_id",
    "load_installed_plugins",
    "matches_pattern",
    "parse_filters",
    "parse_selector",
    "parse_skill_file",
    "rank_strings",
    "render_diagnostics",
    "resolve_selectors",
    "resolve_skill",
    "scan_root",
    "search_skills",
    "skill_aliases",
    "toggle_skills",
    "validate_skill_file",
]

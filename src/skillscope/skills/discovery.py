"""Skill discovery across custom and default roots.

Roots are scanned in order, caller-supplied custom roots first and then the
built-in roots for each provider:

1. Custom: ``DiscoveryOptions.custom_dirs`` in the order given
2. Project: ``<cwd>/.claude/skills`` then ``<cwd>/.codex/skills``
3. User: ``<user_dir>/.claude/skills`` then ``<user_dir>/.codex/skills``

Results are concatenated without deduplication. When a name reappears, a
conflict note is recorded so later stages can decide which copy wins.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from skillscope.config.settings import SkillscopeSettings
from skillscope.skills.config import (
    DiscoveryDiagnostics,
    DiscoveryOptions,
    SkillMetadata,
    SkillProvider,
)
from skillscope.skills.scanner import scan_root

logger = logging.getLogger(__name__)

# Scope label given to custom-provider roots configured without one.
DEFAULT_CUSTOM_SCOPE = "other"


@dataclass(frozen=True)
class SkillRoot:
    """A root directory paired with the provider that owns it.

    Attributes:
        path: Absolute root directory.
        provider: Provider tag for records found below the root.
        scope: Optional namespace label for record names.
    """

    path: Path
    provider: SkillProvider
    scope: str | None = None


@dataclass
class DiscoveryResult:
    """Records from every root plus merged diagnostics."""

    skills: list[SkillMetadata] = field(default_factory=list)
    diagnostics: DiscoveryDiagnostics = field(default_factory=DiscoveryDiagnostics)


def resolve_user_dir(user_dir: Path | None = None) -> Path:
    """Return the user-root base: explicit value, then settings, then home."""
    if user_dir is not None:
        return user_dir.expanduser()
    configured = SkillscopeSettings().user_dir
    return configured if configured is not None else Path.home()


def default_skill_roots(user_dir: Path, cwd: Path | None = None) -> list[SkillRoot]:
    """Build the built-in roots for every provider.

    Args:
        user_dir: Base of the user roots.
        cwd: Base of the project roots (defaults to the process cwd).

    Returns:
        Project roots followed by user roots, ``claude`` before ``codex``.
    """
    project_base = Path(os.path.abspath(cwd or Path.cwd()))
    user_base = Path(os.path.abspath(user_dir.expanduser()))

    return [
        SkillRoot(project_base / ".claude" / "skills", SkillProvider.CLAUDE),
        SkillRoot(project_base / ".codex" / "skills", SkillProvider.CODEX),
        SkillRoot(user_base / ".claude" / "skills", SkillProvider.CLAUDE),
        SkillRoot(user_base / ".codex" / "skills", SkillProvider.CODEX),
    ]


def custom_skill_roots(options: DiscoveryOptions) -> list[SkillRoot]:
    """Turn ``options.custom_dirs`` into absolute roots.

    Relative paths resolve against ``options.cwd``. Roots for the ``custom``
    provider default to the ``other`` scope; other providers keep bare names
    unless a scope is given.
    """
    base = Path(os.path.abspath(options.cwd or Path.cwd()))
    provider = options.custom_provider
    roots: list[SkillRoot] = []

    for entry in options.custom_dirs:
        path = entry.path.expanduser()
        if not path.is_absolute():
            path = base / path
        scope = entry.scope
        if scope is None and provider is SkillProvider.CUSTOM:
            scope = DEFAULT_CUSTOM_SCOPE
        roots.append(SkillRoot(Path(os.path.abspath(path)), provider, scope))

    return roots


def _record_duplicates(
    skills: list[SkillMetadata],
    diagnostics: DiscoveryDiagnostics,
) -> None:
    """Note the first reappearance of each name without dropping anything."""
    first_seen: dict[str, SkillMetadata] = {}
    reported: set[str] = set()

    for skill in skills:
        existing = first_seen.get(skill.name)
        if existing is None:
            first_seen[skill.name] = skill
            continue
        # Variants of one bundle are reported by the scanner.
        if existing.path == skill.path or skill.name in reported:
            continue
        reported.add(skill.name)
        note = (
            f"Duplicate skill '{skill.name}': keeping {existing.path} "
            f"and also found {skill.path}"
        )
        logger.info(note)
        diagnostics.conflicts.append(note)


def discover_skills(options: DiscoveryOptions | None = None) -> DiscoveryResult:
    """Scan custom and default roots and concatenate the results.

    Args:
        options: Discovery options. Uses defaults if ``None``.

    Returns:
        ``DiscoveryResult`` with every record in root order and diagnostics
        covering every root visited.
    """
    options = options or DiscoveryOptions()
    result = DiscoveryResult()

    roots = custom_skill_roots(options)
    if options.scan_default_dirs:
        roots.extend(default_skill_roots(resolve_user_dir(options.user_dir), options.cwd))

    for root in roots:
        scanned = scan_root(
            root.path,
            provider=root.provider,
            recursive=True,
            include_disabled=options.include_disabled,
            scope=root.scope,
            cwd=options.cwd,
        )
        result.skills.extend(scanned.skills)
        result.diagnostics.merge(scanned.diagnostics)

    _record_duplicates(result.skills, result.diagnostics)

    logger.debug(
        "Discovered %d skill(s) across %d root(s)", len(result.skills), len(roots)
    )
    return result

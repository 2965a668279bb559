"""In-memory skill registry built from discovery and installed plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from skillscope.skills.config import (
    LOCATION_PRIORITY,
    DiscoveryOptions,
    Skill,
    SkillMetadata,
)
from skillscope.skills.discovery import discover_skills, resolve_user_dir
from skillscope.skills.errors import AmbiguousSkillNameError, SkillNotFoundError
from skillscope.skills.loader import parse_skill_file
from skillscope.skills.plugins import default_plugins_file, default_plugins_root, expand_plugins
from skillscope.skills.resolution import (
    collapse_by_path,
    format_skill_id,
    match_skills,
    split_provider_prefix,
    suggest_skill_ids,
)

logger = logging.getLogger(__name__)


@dataclass
class RegistryDiagnostics:
    """Summary of the last ``refresh()``.

    Attributes:
        total_skills: Number of records held.
        by_location: Record count per location.
        by_provider: Record count per provider.
        directories_scanned: Every root visited, absent ones included.
        plugin_sources: Plugin manifest and install paths visited.
        warnings: Read, parse and plugin warnings.
        conflicts: Duplicate-name and manifest-variant notes.
    """

    total_skills: int = 0
    by_location: dict[str, int] = field(default_factory=dict)
    by_provider: dict[str, int] = field(default_factory=dict)
    directories_scanned: list[Path] = field(default_factory=list)
    plugin_sources: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)


class SkillRegistry:
    """Flat, ordered collection of every discovered skill record.

    Records from every root and plugin are kept, duplicates included, so
    that provider-qualified lookups and filters can still reach a shadowed
    copy. Choosing between duplicates happens in ``find`` and in the filter
    and resolution helpers, never here.

    ``refresh()`` replaces the whole collection and is not safe to call
    concurrently. A long-lived process that rescans periodically must
    serialize its calls.

    Example::

        registry = SkillRegistry(DiscoveryOptions(custom_dirs=["./skills"]))
        skill = registry.load("pdf")
        print(skill.full_name, len(registry))
    """

    def __init__(self, options: DiscoveryOptions | None = None) -> None:
        """Create the registry and run the first scan.

        Args:
            options: Discovery options. Uses defaults if ``None``.
        """
        self._options = options or DiscoveryOptions()
        self._skills: list[SkillMetadata] = []
        self._diagnostics = RegistryDiagnostics()
        self.refresh()

    @property
    def options(self) -> DiscoveryOptions:
        """Options the registry scans with."""
        return self._options

    def refresh(self) -> None:
        """Rescan every root and plugin, replacing the current records."""
        options = self._options
        diagnostics = RegistryDiagnostics()

        discovered = discover_skills(options)
        skills = list(discovered.skills)
        diagnostics.directories_scanned.extend(discovered.diagnostics.scanned_directories)
        diagnostics.warnings.extend(discovered.diagnostics.warnings)
        diagnostics.conflicts.extend(discovered.diagnostics.conflicts)

        if not options.skip_plugins:
            plugins_file, plugins_root = self._plugin_paths()
            expanded = expand_plugins(
                plugins_file,
                plugins_root,
                include_disabled=options.include_disabled,
                fallback=options.plugins_fallback,
            )
            diagnostics.plugin_sources.extend(expanded.diagnostics.scanned_plugins)
            diagnostics.warnings.extend(expanded.diagnostics.warnings)
            diagnostics.conflicts.extend(expanded.diagnostics.conflicts)

            known = {skill.name: skill for skill in skills}
            for plugin_skill in expanded.skills:
                existing = known.get(plugin_skill.name)
                if existing is not None and existing.path != plugin_skill.path:
                    note = (
                        f"Plugin skill '{plugin_skill.name}' from {plugin_skill.path} "
                        f"shares its name with {existing.path}"
                    )
                    logger.info(note)
                    diagnostics.conflicts.append(note)
                skills.append(plugin_skill)

        for skill in skills:
            location = skill.location.value
            provider = skill.provider.value
            diagnostics.by_location[location] = diagnostics.by_location.get(location, 0) + 1
            diagnostics.by_provider[provider] = diagnostics.by_provider.get(provider, 0) + 1
        diagnostics.total_skills = len(skills)

        self._skills = skills
        self._diagnostics = diagnostics
        logger.debug("Registry refreshed with %d skill(s)", len(skills))

    def _plugin_paths(self) -> tuple[Path, Path]:
        """Return the plugin manifest and install root for the current options."""
        options = self._options
        user_dir = resolve_user_dir(options.user_dir)
        plugins_file = options.plugins_file or default_plugins_file(user_dir)
        if options.plugins_root is not None:
            plugins_root = options.plugins_root
        elif options.plugins_file is not None:
            plugins_root = options.plugins_file.parent
        else:
            plugins_root = default_plugins_root(user_dir)
        return plugins_file, plugins_root

    def get_all(self) -> list[SkillMetadata]:
        """Return a copy of every record, in discovery order."""
        return list(self._skills)

    def find(self, name: str) -> SkillMetadata:
        """Find one skill by name.

        ``name`` may carry a provider prefix (``claude:``, ``codex:``,
        ``custom:``). Exact full-name matches are preferred over alias
        matches such as the short name or ``@plugin:skill``. Among the
        candidates, the project tier wins over user, and user over plugin.

        Args:
            name: Skill name or alias, case-insensitive.

        Returns:
            The matching record.

        Raises:
            AmbiguousSkillNameError: If the winning tier holds several bundles.
            SkillNotFoundError: If nothing matches.
        """
        provider, target = split_provider_prefix(name)

        candidates = collapse_by_path(
            [
                skill
                for skill in self._skills
                if (provider is None or skill.provider is provider)
                and skill.name.lower() == target
            ]
        )
        if not candidates:
            candidates = match_skills(self._skills, target, provider)

        for tier in sorted(LOCATION_PRIORITY, key=LOCATION_PRIORITY.__getitem__):
            tier_matches = [skill for skill in candidates if skill.location is tier]
            if len(tier_matches) == 1:
                return tier_matches[0]
            if tier_matches:
                raise AmbiguousSkillNameError(name, [format_skill_id(s) for s in tier_matches])

        raise SkillNotFoundError(name, suggest_skill_ids(self._skills, name, provider))

    def has(self, name: str) -> bool:
        """Check whether ``name`` resolves to exactly one skill."""
        try:
            self.find(name)
        except (SkillNotFoundError, AmbiguousSkillNameError):
            return False
        return True

    def load(self, name: str) -> Skill:
        """Find a skill and read its full manifest.

        Raises:
            SkillNotFoundError: If nothing matches.
            AmbiguousSkillNameError: If the name is ambiguous.
            SkillParseError: If the manifest can no longer be read.
            SkillValidationError: If the manifest is no longer valid.
        """
        metadata = self.find(name)
        parsed = parse_skill_file(metadata.manifest_file)
        return Skill(
            metadata=metadata,
            content=parsed.full_content,
            full_name=format_skill_id(metadata),
        )

    def get_diagnostics(self) -> RegistryDiagnostics:
        """Return the diagnostics gathered by the last ``refresh()``."""
        return self._diagnostics

    def __len__(self) -> int:
        """Return the number of records held."""
        return len(self._skills)

    def __repr__(self) -> str:
        """Return a string representation of the registry."""
        names = [skill.name for skill in self._skills]
        return f"SkillRegistry(skills={names})"

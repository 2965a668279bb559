"""Skill data models, enums, and discovery options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Manifest file names for enabled and disabled bundles.
SKILL_FILE = "SKILL.md"
DISABLED_SKILL_FILE = ".SKILL.md"

# Separator between a namespace (plugin or scope) and a skill name.
NAMESPACE_SEPARATOR = ":"


class SkillProvider(str, Enum):
    """Scanning pipeline that produced a skill record.

    Attributes:
        CLAUDE: ``.claude/skills`` roots and installed plugins.
        CODEX: ``.codex/skills`` roots.
        CUSTOM: Explicitly configured ad-hoc roots.
    """

    CLAUDE = "claude"
    CODEX = "codex"
    CUSTOM = "custom"


class SkillLocation(str, Enum):
    """Priority class of a skill record.

    Attributes:
        PROJECT: Found under the working directory's conventional roots.
        USER: Found under the user root (or an ad-hoc root).
        PLUGIN: Provided by an installed plugin.
    """

    PROJECT = "project"
    USER = "user"
    PLUGIN = "plugin"


# Priority order for locations (lower index = higher priority).
LOCATION_PRIORITY: dict[SkillLocation, int] = {
    SkillLocation.PROJECT: 0,
    SkillLocation.USER: 1,
    SkillLocation.PLUGIN: 2,
}


@dataclass(frozen=True)
class PluginInfo:
    """Plugin origin of a plugin-sourced skill.

    Attributes:
        plugin_name: Name part of the ``name@marketplace`` plugin key.
        marketplace: Marketplace part of the plugin key.
        version: Installed plugin version.
    """

    plugin_name: str
    marketplace: str
    version: str


@dataclass(frozen=True)
class SkillMetadata:
    """Immutable snapshot of one on-disk skill bundle.

    Two records with the same ``path`` describe the same bundle. Names are
    unique only within a provider and namespace.

    Attributes:
        name: Skill name, possibly namespaced (``plugin:skill``, ``scope:skill``).
        description: Description with internal whitespace collapsed.
        provider: Scanning pipeline that produced the record.
        location: Priority class used for tie-breaking.
        path: Absolute path of the bundle directory.
        disabled: Whether the record came from the ``.SKILL.md`` variant.
        has_references: Whether a ``references/`` directory exists.
        has_scripts: Whether a ``scripts/`` directory exists.
        has_assets: Whether an ``assets/`` directory exists.
        plugin_info: Plugin origin, only set for plugin records.
    """

    name: str
    description: str
    provider: SkillProvider
    location: SkillLocation
    path: Path
    disabled: bool = False
    has_references: bool = False
    has_scripts: bool = False
    has_assets: bool = False
    plugin_info: PluginInfo | None = None

    @property
    def short_name(self) -> str:
        """Name with any namespace prefix stripped."""
        return self.name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]

    @property
    def manifest_file(self) -> Path:
        """Manifest file this record was read from."""
        return self.path / (DISABLED_SKILL_FILE if self.disabled else SKILL_FILE)


class Skill(BaseModel):
    """Full skill with loaded manifest content.

    Attributes:
        metadata: Skill metadata (always loaded).
        content: Full manifest text, frontmatter included.
        full_name: Qualified display id (e.g. ``claude:@plugin:skill``).
    """

    model_config = {"arbitrary_types_allowed": True}

    metadata: SkillMetadata
    content: str
    full_name: str

    @property
    def name(self) -> str:
        """Shortcut for ``metadata.name``."""
        return self.metadata.name


@dataclass
class DiscoveryDiagnostics:
    """Advisory information collected while scanning roots.

    Attributes:
        scanned_directories: Roots visited, including absent ones.
        warnings: Read and parse failures.
        conflicts: Notes about duplicate names or coexisting manifest variants.
        by_provider: Number of records produced per provider.
    """

    scanned_directories: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    by_provider: dict[str, int] = field(default_factory=dict)

    def merge(self, other: DiscoveryDiagnostics) -> None:
        """Append another diagnostics object into this one."""
        self.scanned_directories.extend(other.scanned_directories)
        self.warnings.extend(other.warnings)
        self.conflicts.extend(other.conflicts)
        for provider, count in other.by_provider.items():
            self.by_provider[provider] = self.by_provider.get(provider, 0) + count


@dataclass
class ValidationResult:
    """Result from validating a manifest file without raising.

    Attributes:
        valid: Whether the manifest parsed and passed validation.
        errors: Issue strings.
        suggestions: Remediation hints.
        skill_path: Path of the validated manifest file.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    skill_path: Path | None = None


class CustomDir(BaseModel):
    """A caller-supplied root directory.

    Attributes:
        path: Root to scan (relative paths resolve against the working directory).
        scope: Optional label used to namespace ad-hoc results as ``scope:name``.
    """

    path: Path
    scope: str | None = None


class DiscoveryOptions(BaseModel):
    """Options controlling skill discovery.

    Attributes:
        custom_dirs: Extra roots scanned before the default roots.
        custom_provider: Provider assigned to records from ``custom_dirs``.
        skip_plugins: Skip installed plugin skills.
        scan_default_dirs: Scan the built-in ``.claude``/``.codex`` roots.
        include_disabled: Include ``.SKILL.md`` bundles.
        user_dir: Base of the user roots (defaults to the home directory).
        plugins_file: Installed-plugins manifest (defaults under ``user_dir``).
        plugins_root: Base for relative plugin install paths.
        plugins_fallback: Scan ``<plugins_root>/skills`` when the manifest
            yields nothing. ``None`` defers to ``SkillscopeSettings``.
        cwd: Working directory used for project roots and relative paths.
    """

    custom_dirs: list[CustomDir] = Field(
        default_factory=list,
        description="Additional roots scanned first, in order",
    )
    custom_provider: SkillProvider = Field(
        default=SkillProvider.CUSTOM,
        description="Provider tag for custom roots",
    )
    skip_plugins: bool = Field(
        default=False,
        description="Skip plugin skills",
    )
    scan_default_dirs: bool = Field(
        default=True,
        description="Scan built-in project and user roots",
    )
    include_disabled: bool = Field(
        default=False,
        description="Include disabled (.SKILL.md) bundles",
    )
    user_dir: Path | None = Field(
        default=None,
        description="User root base directory",
    )
    plugins_file: Path | None = Field(
        default=None,
        description="Path to installed_plugins.json",
    )
    plugins_root: Path | None = Field(
        default=None,
        description="Base directory for plugin install paths",
    )
    plugins_fallback: bool | None = Field(
        default=None,
        description="Scan the conventional plugin skills directory as a fallback",
    )
    cwd: Path | None = Field(
        default=None,
        description="Working directory override",
    )

    @field_validator("custom_dirs", mode="before")
    @classmethod
    def _coerce_custom_dirs(cls, value: Any) -> Any:
        """Accept plain paths and strings alongside ``CustomDir`` entries."""
        if value is None:
            return []
        coerced = []
        for entry in value:
            if isinstance(entry, (str, Path)):
                coerced.append({"path": Path(entry)})
            else:
                coerced.append(entry)
        return coerced

    @field_validator("user_dir", "plugins_file", "plugins_root", mode="after")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        """Expand ``~`` in path options."""
        return value.expanduser() if value is not None else None

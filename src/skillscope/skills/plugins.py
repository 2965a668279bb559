"""Plugin expander for ``installed_plugins.json``.

Reads the installed-plugins manifest, resolves every plugin's install path,
and turns each ``SKILL.md`` found below it into a plugin record named
``plugin:skill``.

Supported manifest format:
    {
      "version": 1,
      "plugins": {
        "example-skills@anthropic-agent-skills": {
          "version": "0.1.0",
          "installedAt": "2024-01-01T00:00:00Z",
          "lastUpdated": "2024-01-02T00:00:00Z",
          "installPath": "marketplaces/example-skills",
          "gitCommitSha": "abc123",
          "isLocal": false
        }
      }
    }

When the manifest is absent, invalid, or yields no skills, and the fallback
is enabled (``SKILLSCOPE_PLUGINS_FALLBACK``), ``<plugins_root>/skills`` is
scanned directly using the layout ``skills/<plugin>/.../SKILL.md``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skillscope.config.settings import SkillscopeSettings
from skillscope.skills.config import (
    DISABLED_SKILL_FILE,
    NAMESPACE_SEPARATOR,
    SKILL_FILE,
    PluginInfo,
    SkillLocation,
    SkillMetadata,
    SkillProvider,
)
from skillscope.skills.errors import SkillError
from skillscope.skills.loader import parse_skill_file

logger = logging.getLogger(__name__)

PLUGINS_FILE_NAME = "installed_plugins.json"
FALLBACK_DIR_NAME = "skills"
LOCAL_MARKETPLACE = "local"
LOCAL_VERSION = "0.0.0"


class PluginEntry(BaseModel):
    """A single plugin entry as it appears in ``installed_plugins.json``."""

    model_config = ConfigDict(populate_by_name=True)

    version: str
    installed_at: str = Field(alias="installedAt")
    last_updated: str = Field(alias="lastUpdated")
    install_path: str = Field(alias="installPath")
    git_commit_sha: str = Field(alias="gitCommitSha")
    is_local: bool = Field(alias="isLocal")


class InstalledPlugins(BaseModel):
    """Root structure of ``installed_plugins.json``.

    Attributes:
        version: Manifest format version.
        plugins: Entries keyed by ``name@marketplace``.
    """

    version: int
    plugins: dict[str, PluginEntry] = Field(default_factory=dict)


@dataclass
class PluginDiagnostics:
    """Advisory information collected while expanding plugins.

    Attributes:
        scanned_plugins: Manifest file and every install path visited.
        warnings: Missing files, invalid manifests, empty plugins, parse failures.
        conflicts: Bundles holding both manifest variants.
    """

    scanned_plugins: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)


@dataclass
class PluginScanResult:
    """Plugin records and diagnostics."""

    skills: list[SkillMetadata] = field(default_factory=list)
    diagnostics: PluginDiagnostics = field(default_factory=PluginDiagnostics)


def default_plugins_root(user_dir: Path) -> Path:
    """Return ``<user_dir>/.claude/plugins``."""
    return user_dir / ".claude" / "plugins"


def default_plugins_file(user_dir: Path) -> Path:
    """Return ``<user_dir>/.claude/plugins/installed_plugins.json``."""
    return default_plugins_root(user_dir) / PLUGINS_FILE_NAME


def resolve_install_path(raw_path: str, plugins_root: Path) -> Path:
    """Absolute install paths pass through; relative ones join ``plugins_root``."""
    path = Path(raw_path).expanduser()
    return path if path.is_absolute() else plugins_root / path


def split_plugin_key(key: str) -> tuple[str, str] | None:
    """Split ``name@marketplace``; return ``None`` for malformed keys."""
    parts = key.split("@")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    # Anything after a second "@" is ignored.
    return parts[0], parts[1]


def plugin_skill_name(plugin_name: str, skill_name: str) -> str:
    """Namespace ``skill_name`` with the plugin unless it is already qualified."""
    if NAMESPACE_SEPARATOR in skill_name or skill_name == plugin_name:
        return skill_name
    return f"{plugin_name}{NAMESPACE_SEPARATOR}{skill_name}"


def _warn(diagnostics: PluginDiagnostics, message: str) -> None:
    logger.warning(message)
    diagnostics.warnings.append(message)


def load_installed_plugins(
    plugins_file: str | Path,
    diagnostics: PluginDiagnostics | None = None,
) -> InstalledPlugins | None:
    """Load and validate ``installed_plugins.json``.

    Never raises: a missing file, invalid JSON, or a schema mismatch is
    recorded as a warning and ``None`` is returned.

    Args:
        plugins_file: Path to the manifest.
        diagnostics: Optional diagnostics receiving warnings.

    Returns:
        The validated manifest, or ``None``.
    """
    diagnostics = diagnostics if diagnostics is not None else PluginDiagnostics()
    file_path = Path(plugins_file).expanduser()

    if not file_path.exists():
        logger.info("No plugin manifest found at %s", file_path)
        diagnostics.warnings.append(f"Plugins file not found at {file_path}")
        return None

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _warn(diagnostics, f"Failed to load {file_path.name}: {exc}")
        return None

    try:
        return InstalledPlugins.model_validate(data)
    except ValidationError as exc:
        _warn(
            diagnostics,
            f"Invalid {file_path.name} format: {exc.error_count()} validation error(s)",
        )
        return None


def find_skill_files(
    directory: Path,
    diagnostics: PluginDiagnostics,
    *,
    include_disabled: bool = False,
) -> list[Path]:
    """Recursively find manifest files below ``directory``.

    Args:
        directory: Directory to walk.
        diagnostics: Receives a warning for each unreadable directory.
        include_disabled: Also collect ``.SKILL.md`` files.

    Returns:
        Manifest paths in depth-first, name-sorted order.
    """
    wanted = {SKILL_FILE, DISABLED_SKILL_FILE} if include_disabled else {SKILL_FILE}
    found: list[Path] = []
    visited: set[Path] = set()

    def walk(current: Path) -> None:
        try:
            key = current.resolve()
        except OSError:
            key = current
        if key in visited:
            return
        visited.add(key)

        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            _warn(diagnostics, f"Failed to scan plugin directory {current}: {exc.strerror or exc}")
            return

        subdirs: list[Path] = []
        for entry in entries:
            try:
                if entry.is_dir():
                    subdirs.append(Path(entry.path))
                elif entry.name in wanted:
                    found.append(Path(entry.path))
            except OSError:
                continue

        for subdir in subdirs:
            walk(subdir)

    if directory.is_dir():
        walk(directory)
    return found


def _records_from_files(
    skill_files: list[Path],
    diagnostics: PluginDiagnostics,
    plugin_for: dict[Path, PluginInfo] | PluginInfo,
) -> list[SkillMetadata]:
    """Parse manifest files into plugin records.

    ``plugin_for`` is either one ``PluginInfo`` shared by every file or a
    mapping from bundle directory to its ``PluginInfo``.
    """
    records: list[SkillMetadata] = []
    seen_dirs: set[Path] = set()

    for skill_file in skill_files:
        skill_dir = skill_file.parent
        disabled = skill_file.name == DISABLED_SKILL_FILE

        if skill_dir in seen_dirs:
            note = f"Both {SKILL_FILE} and {DISABLED_SKILL_FILE} found in {skill_dir}."
            logger.info(note)
            diagnostics.conflicts.append(note)
        seen_dirs.add(skill_dir)

        info = plugin_for if isinstance(plugin_for, PluginInfo) else plugin_for[skill_dir]
        try:
            parsed = parse_skill_file(skill_file)
        except SkillError as exc:
            _warn(diagnostics, f"Failed to parse plugin skill {skill_file}: {exc.message}")
            continue

        records.append(
            SkillMetadata(
                name=plugin_skill_name(info.plugin_name, parsed.name),
                description=parsed.description,
                provider=SkillProvider.CLAUDE,
                location=SkillLocation.PLUGIN,
                path=skill_dir,
                disabled=disabled,
                has_references=(skill_dir / "references").exists(),
                has_scripts=(skill_dir / "scripts").exists(),
                has_assets=(skill_dir / "assets").exists(),
                plugin_info=info,
            )
        )

    # Enabled variant first, matching the root scanner's order.
    records.sort(key=lambda r: r.disabled)
    return records


def _expand_manifest(
    manifest: InstalledPlugins,
    plugins_root: Path,
    diagnostics: PluginDiagnostics,
    include_disabled: bool,
) -> list[SkillMetadata]:
    records: list[SkillMetadata] = []

    for key, entry in manifest.plugins.items():
        parts = split_plugin_key(key)
        if parts is None:
            _warn(diagnostics, f"Skipping malformed plugin key '{key}'")
            continue
        plugin_name, marketplace = parts

        install_path = resolve_install_path(entry.install_path, plugins_root)
        diagnostics.scanned_plugins.append(install_path)

        if not install_path.is_dir():
            _warn(diagnostics, f"Plugin '{key}' install path not found: {install_path}")
            continue

        skill_files = find_skill_files(
            install_path, diagnostics, include_disabled=include_disabled
        )
        if not skill_files:
            _warn(diagnostics, f"Plugin '{key}' has no skills at {install_path}")
            continue

        info = PluginInfo(plugin_name=plugin_name, marketplace=marketplace, version=entry.version)
        plugin_records = _records_from_files(skill_files, diagnostics, info)
        # Sort within each plugin only; plugins stay in manifest order.
        records.extend(plugin_records)

    return records


def _expand_fallback(
    plugins_root: Path,
    diagnostics: PluginDiagnostics,
    include_disabled: bool,
) -> list[SkillMetadata]:
    """Scan ``<plugins_root>/skills/<plugin>/...`` without a manifest."""
    fallback_root = plugins_root / FALLBACK_DIR_NAME
    diagnostics.scanned_plugins.append(fallback_root)

    skill_files = find_skill_files(fallback_root, diagnostics, include_disabled=include_disabled)
    if not skill_files:
        return []

    plugin_for: dict[Path, PluginInfo] = {}
    for skill_file in skill_files:
        skill_dir = skill_file.parent
        relative = skill_dir.relative_to(fallback_root)
        plugin_name = relative.parts[0] if relative.parts else fallback_root.name
        plugin_for[skill_dir] = PluginInfo(
            plugin_name=plugin_name,
            marketplace=LOCAL_MARKETPLACE,
            version=LOCAL_VERSION,
        )

    logger.debug("Using plugin fallback directory %s", fallback_root)
    return _records_from_files(skill_files, diagnostics, plugin_for)


def expand_plugins(
    plugins_file: str | Path,
    plugins_root: str | Path,
    *,
    include_disabled: bool = False,
    fallback: bool | None = None,
) -> PluginScanResult:
    """Discover skills provided by installed plugins.

    Missing install paths and plugins without skills are warnings, never
    failures.

    Args:
        plugins_file: Path to ``installed_plugins.json``.
        plugins_root: Base directory for relative install paths and the
            fallback ``skills`` directory.
        include_disabled: Also collect ``.SKILL.md`` bundles.
        fallback: Enable the fallback scan. ``None`` reads
            ``SkillscopeSettings.plugins_fallback``.

    Returns:
        ``PluginScanResult`` with plugin records and diagnostics.
    """
    result = PluginScanResult()
    diagnostics = result.diagnostics
    file_path = Path(os.path.abspath(Path(plugins_file).expanduser()))
    root = Path(os.path.abspath(Path(plugins_root).expanduser()))
    diagnostics.scanned_plugins.append(file_path)

    manifest = load_installed_plugins(file_path, diagnostics)
    if manifest is not None:
        result.skills.extend(_expand_manifest(manifest, root, diagnostics, include_disabled))

    if fallback is None:
        fallback = SkillscopeSettings().plugins_fallback

    if not result.skills and fallback:
        result.skills.extend(_expand_fallback(root, diagnostics, include_disabled))

    return result

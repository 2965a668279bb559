"""Root scanner: finds skill bundles below a single root directory.

A bundle is any directory holding a ``SKILL.md`` manifest (or, when the
caller opts in, its disabled ``.SKILL.md`` variant). The walk is depth-first
and keeps descending into bundles, since bundles may nest.

Scanning never raises for filesystem or manifest problems. Unreadable
directories and malformed manifests become warnings in the returned
``DiscoveryDiagnostics`` and the walk carries on.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from skillscope.skills.config import (
    DISABLED_SKILL_FILE,
    NAMESPACE_SEPARATOR,
    SKILL_FILE,
    DiscoveryDiagnostics,
    SkillLocation,
    SkillMetadata,
    SkillProvider,
)
from skillscope.skills.errors import SkillError
from skillscope.skills.loader import parse_skill_file

logger = logging.getLogger(__name__)

# Directories below cwd/user_dir that hold the conventional skill roots.
CONVENTIONAL_DIRS = (".claude", ".codex", ".agent")


@dataclass
class ScanResult:
    """Records and diagnostics produced by one scan.

    Attributes:
        skills: Records in walk order.
        diagnostics: Visited roots, warnings and conflicts.
    """

    skills: list[SkillMetadata] = field(default_factory=list)
    diagnostics: DiscoveryDiagnostics = field(default_factory=DiscoveryDiagnostics)


def _is_under(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


def determine_location(skill_dir: Path, *, cwd: Path | None = None) -> SkillLocation:
    """Derive the location class of a bundle from its path.

    Paths under ``<cwd>/.claude``, ``<cwd>/.codex`` or ``<cwd>/.agent`` are
    project skills. Everything else, including the user roots and ad-hoc
    roots, counts as a user skill.

    Args:
        skill_dir: Absolute bundle directory.
        cwd: Working directory (defaults to the process cwd).

    Returns:
        The bundle's ``SkillLocation``.
    """
    normalized = Path(os.path.abspath(skill_dir))
    project_base = Path(os.path.abspath(cwd or Path.cwd()))

    if any(_is_under(normalized, project_base / d) for d in CONVENTIONAL_DIRS):
        return SkillLocation.PROJECT

    return SkillLocation.USER


def apply_scope(name: str, scope: str | None) -> str:
    """Prefix ``name`` with ``scope:`` unless it already carries that prefix."""
    if not scope:
        return name
    prefix = f"{scope}{NAMESPACE_SEPARATOR}"
    return name if name.startswith(prefix) else f"{prefix}{name}"


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def has_manifest(directory: Path, include_disabled: bool) -> bool:
    """Return whether ``directory`` is a bundle."""
    if _is_file(directory / SKILL_FILE):
        return True
    return include_disabled and _is_file(directory / DISABLED_SKILL_FILE)


def _warn(diagnostics: DiscoveryDiagnostics, message: str) -> None:
    logger.warning(message)
    diagnostics.warnings.append(message)


def _collect_bundle_dirs(
    directory: Path,
    *,
    recursive: bool,
    include_disabled: bool,
    diagnostics: DiscoveryDiagnostics,
    found: list[Path],
    visited: set[Path],
) -> None:
    """Depth-first walk appending bundle directories to ``found``."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        _warn(diagnostics, f"Failed to scan directory {directory}: {exc.strerror or exc}")
        return

    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError:
            continue

        child = Path(entry.path)
        try:
            key = child.resolve()
        except OSError:
            key = child
        if key in visited:
            continue
        visited.add(key)

        if has_manifest(child, include_disabled):
            found.append(child)

        if recursive:
            _collect_bundle_dirs(
                child,
                recursive=True,
                include_disabled=include_disabled,
                diagnostics=diagnostics,
                found=found,
                visited=visited,
            )


def build_record(
    skill_dir: Path,
    manifest: Path,
    *,
    provider: SkillProvider,
    location: SkillLocation,
    disabled: bool,
    scope: str | None = None,
) -> SkillMetadata:
    """Parse ``manifest`` and build the record for ``skill_dir``.

    Raises:
        SkillError: If the manifest fails to parse or validate.
    """
    parsed = parse_skill_file(manifest)
    return SkillMetadata(
        name=apply_scope(parsed.name, scope),
        description=parsed.description,
        provider=provider,
        location=location,
        path=skill_dir,
        disabled=disabled,
        has_references=(skill_dir / "references").exists(),
        has_scripts=(skill_dir / "scripts").exists(),
        has_assets=(skill_dir / "assets").exists(),
    )


def scan_root(
    root: str | Path,
    *,
    provider: SkillProvider = SkillProvider.CUSTOM,
    recursive: bool = True,
    include_disabled: bool = False,
    scope: str | None = None,
    location: SkillLocation | None = None,
    cwd: Path | None = None,
) -> ScanResult:
    """Scan one root directory for skill bundles.

    The root itself is checked too, so pointing at a single bundle works.
    A missing root is recorded in ``scanned_directories`` and yields no
    records. When a bundle holds both ``SKILL.md`` and ``.SKILL.md`` and
    ``include_disabled`` is set, both records are emitted and one conflict
    note mentioning the bundle path is recorded.

    Args:
        root: Directory to scan.
        provider: Provider tag for every record.
        recursive: Descend below the root's immediate children.
        include_disabled: Also accept ``.SKILL.md`` bundles.
        scope: Optional namespace prefix for record names.
        location: Fixed location for every record; derived from the path
            when omitted.
        cwd: Working directory used for location derivation.

    Returns:
        ``ScanResult`` with records in walk order and diagnostics.
    """
    result = ScanResult()
    diagnostics = result.diagnostics
    root_path = Path(os.path.abspath(Path(root).expanduser()))
    diagnostics.scanned_directories.append(root_path)

    if not root_path.is_dir():
        logger.debug("Skills directory does not exist, skipping: %s", root_path)
        return result

    visited: set[Path] = {root_path.resolve()}
    bundle_dirs: list[Path] = []
    if has_manifest(root_path, include_disabled):
        bundle_dirs.append(root_path)

    _collect_bundle_dirs(
        root_path,
        recursive=recursive,
        include_disabled=include_disabled,
        diagnostics=diagnostics,
        found=bundle_dirs,
        visited=visited,
    )

    for skill_dir in bundle_dirs:
        skill_file = skill_dir / SKILL_FILE
        disabled_file = skill_dir / DISABLED_SKILL_FILE
        has_skill = _is_file(skill_file)
        has_disabled = include_disabled and _is_file(disabled_file)

        if has_skill and has_disabled:
            note = f"Both {SKILL_FILE} and {DISABLED_SKILL_FILE} found in {skill_dir}."
            logger.info(note)
            diagnostics.conflicts.append(note)

        candidates: list[tuple[Path, bool]] = []
        if has_skill:
            candidates.append((skill_file, False))
        if has_disabled:
            candidates.append((disabled_file, True))

        skill_location = location or determine_location(skill_dir, cwd=cwd)

        for manifest, disabled in candidates:
            try:
                record = build_record(
                    skill_dir,
                    manifest,
                    provider=provider,
                    location=skill_location,
                    disabled=disabled,
                    scope=scope,
                )
            except SkillError as exc:
                _warn(diagnostics, f"Failed to parse {manifest}: {exc.message}")
                continue
            result.skills.append(record)

    if result.skills:
        diagnostics.by_provider[provider.value] = len(result.skills)

    return result

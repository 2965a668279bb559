"""Enable and disable skill bundles on disk.

A bundle is disabled by renaming ``SKILL.md`` to ``.SKILL.md`` and enabled by
renaming it back. When both files exist the bundle is left alone unless the
caller forces the operation, in which case the file in the way is removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

from skillscope.skills.config import DISABLED_SKILL_FILE, SKILL_FILE, SkillMetadata

logger = logging.getLogger(__name__)

ToggleMode = Literal["enable", "disable"]


class ToggleStatus(str, Enum):
    """Outcome of toggling one bundle."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ToggleResult:
    """Outcome of toggling one bundle.

    Attributes:
        skill: Skill name.
        path: Bundle directory.
        status: What happened.
        error: Why the bundle was skipped or failed.
    """

    skill: str
    path: Path
    status: ToggleStatus
    error: str | None = None


@dataclass
class ToggleSummary:
    """Outcome of toggling several bundles."""

    mode: ToggleMode
    results: list[ToggleResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        target = ToggleStatus.ENABLED if self.mode == "enable" else ToggleStatus.DISABLED
        return sum(1 for r in self.results if r.status is target)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status is ToggleStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status is ToggleStatus.FAILED)


@dataclass(frozen=True)
class VariantConflict:
    """A bundle holding both ``SKILL.md`` and ``.SKILL.md``."""

    skill: str
    path: Path
    reason: str = f"Both {SKILL_FILE} and {DISABLED_SKILL_FILE} exist"


def _result(skill: SkillMetadata, status: ToggleStatus, error: str | None = None) -> ToggleResult:
    return ToggleResult(skill=skill.name, path=skill.path, status=status, error=error)


def disable_skill(skill: SkillMetadata, force: bool = False) -> ToggleResult:
    """Rename ``SKILL.md`` to ``.SKILL.md``.

    Args:
        skill: Bundle to disable.
        force: Remove an existing ``.SKILL.md`` first.

    Returns:
        ``ToggleResult``; OS errors are reported as ``failed``.
    """
    enabled_file = skill.path / SKILL_FILE
    disabled_file = skill.path / DISABLED_SKILL_FILE
    has_enabled = enabled_file.is_file()
    has_disabled = disabled_file.is_file()

    if not has_enabled and has_disabled:
        return _result(skill, ToggleStatus.SKIPPED, "Already disabled")
    if not has_enabled:
        return _result(skill, ToggleStatus.FAILED, f"No {SKILL_FILE} found")
    if has_disabled and not force:
        return _result(skill, ToggleStatus.SKIPPED, "Both files exist, use force")

    try:
        if has_disabled:
            disabled_file.unlink()
        enabled_file.rename(disabled_file)
    except OSError as exc:
        logger.warning("Failed to disable %s: %s", skill.path, exc)
        return _result(skill, ToggleStatus.FAILED, str(exc))

    logger.info("Disabled skill %s at %s", skill.name, skill.path)
    return _result(skill, ToggleStatus.DISABLED)


def enable_skill(skill: SkillMetadata, force: bool = False) -> ToggleResult:
    """Rename ``.SKILL.md`` back to ``SKILL.md``.

    Args:
        skill: Bundle to enable.
        force: Remove an existing ``SKILL.md`` first.

    Returns:
        ``ToggleResult``; OS errors are reported as ``failed``.
    """
    enabled_file = skill.path / SKILL_FILE
    disabled_file = skill.path / DISABLED_SKILL_FILE
    has_enabled = enabled_file.is_file()
    has_disabled = disabled_file.is_file()

    if has_enabled and not has_disabled:
        return _result(skill, ToggleStatus.SKIPPED, "Already enabled")
    if not has_disabled:
        return _result(skill, ToggleStatus.FAILED, f"No {DISABLED_SKILL_FILE} found")
    if has_enabled and not force:
        return _result(skill, ToggleStatus.SKIPPED, "Both files exist, use force")

    try:
        if has_enabled:
            enabled_file.unlink()
        disabled_file.rename(enabled_file)
    except OSError as exc:
        logger.warning("Failed to enable %s: %s", skill.path, exc)
        return _result(skill, ToggleStatus.FAILED, str(exc))

    logger.info("Enabled skill %s at %s", skill.name, skill.path)
    return _result(skill, ToggleStatus.ENABLED)


def detect_variant_conflicts(skills: list[SkillMetadata]) -> list[VariantConflict]:
    """List bundles that currently hold both manifest variants, once per path."""
    conflicts: list[VariantConflict] = []
    seen: set[Path] = set()
    for skill in skills:
        if skill.path in seen:
            continue
        seen.add(skill.path)
        if (skill.path / SKILL_FILE).is_file() and (skill.path / DISABLED_SKILL_FILE).is_file():
            conflicts.append(VariantConflict(skill=skill.name, path=skill.path))
    return conflicts


def toggle_skills(
    mode: ToggleMode,
    skills: list[SkillMetadata],
    force: bool = False,
) -> ToggleSummary:
    """Enable or disable each bundle once, in order.

    Args:
        mode: ``enable`` or ``disable``.
        skills: Bundles to toggle; repeated paths are toggled once.
        force: Overwrite the conflicting variant where both exist.

    Returns:
        ``ToggleSummary`` with one result per bundle.

    Raises:
        ValueError: If ``mode`` is not ``enable`` or ``disable``.
    """
    if mode not in ("enable", "disable"):
        raise ValueError(f"Unknown toggle mode: {mode!r}")

    action = enable_skill if mode == "enable" else disable_skill
    summary = ToggleSummary(mode=mode)
    seen: set[Path] = set()

    for skill in skills:
        if skill.path in seen:
            continue
        seen.add(skill.path)
        summary.results.append(action(skill, force))

    return summary

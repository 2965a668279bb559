"""Tests for skill discovery across custom and default roots."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillscope.skills.config import CustomDir, DiscoveryOptions, SkillLocation, SkillProvider
from skillscope.skills.discovery import (
    custom_skill_roots,
    default_skill_roots,
    discover_skills,
    resolve_user_dir,
)

# ---------------------------------------------------------------------------
# default_skill_roots / resolve_user_dir
# ---------------------------------------------------------------------------


class TestDefaultSkillRoots:
    """The built-in root list is a pure function of user_dir and cwd."""

    def test_order_and_providers(self, tmp_path: Path) -> None:
        user = tmp_path / "user"
        cwd = tmp_path / "project"

        roots = default_skill_roots(user, cwd)

        assert [(r.path, r.provider) for r in roots] == [
            (cwd / ".claude" / "skills", SkillProvider.CLAUDE),
            (cwd / ".codex" / "skills", SkillProvider.CODEX),
            (user / ".claude" / "skills", SkillProvider.CLAUDE),
            (user / ".codex" / "skills", SkillProvider.CODEX),
        ]

    def test_no_scope_labels(self, tmp_path: Path) -> None:
        assert all(r.scope is None for r in default_skill_roots(tmp_path))


class TestResolveUserDir:
    def test_explicit_value_wins(self, tmp_path: Path) -> None:
        assert resolve_user_dir(tmp_path / "x") == tmp_path / "x"

    def test_settings_value(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_USER_DIR", str(tmp_path / "configured"))

        assert resolve_user_dir() == tmp_path / "configured"

    def test_home_fallback(self, tmp_path: Path) -> None:
        assert resolve_user_dir() == tmp_path / "home"


# ---------------------------------------------------------------------------
# custom_skill_roots
# ---------------------------------------------------------------------------


class TestCustomSkillRoots:
    """Custom root normalization."""

    def test_plain_paths_get_default_scope(self, tmp_path: Path) -> None:
        options = DiscoveryOptions(custom_dirs=[tmp_path / "a", str(tmp_path / "b")])

        roots = custom_skill_roots(options)

        assert [r.scope for r in roots] == ["other", "other"]
        assert all(r.provider is SkillProvider.CUSTOM for r in roots)

    def test_explicit_scope_kept(self, tmp_path: Path) -> None:
        options = DiscoveryOptions(custom_dirs=[CustomDir(path=tmp_path / "a", scope="team")])

        assert custom_skill_roots(options)[0].scope == "team"

    def test_other_provider_has_no_default_scope(self, tmp_path: Path) -> None:
        options = DiscoveryOptions(
            custom_dirs=[tmp_path / "a"], custom_provider=SkillProvider.CODEX
        )

        root = custom_skill_roots(options)[0]

        assert root.scope is None
        assert root.provider is SkillProvider.CODEX

    def test_relative_paths_resolve_against_cwd(self, tmp_path: Path) -> None:
        options = DiscoveryOptions(custom_dirs=["rel/skills"], cwd=tmp_path / "project")

        assert custom_skill_roots(options)[0].path == tmp_path / "project" / "rel" / "skills"


# ---------------------------------------------------------------------------
# discover_skills
# ---------------------------------------------------------------------------


class TestDiscoverSkills:
    """Concatenation and conflict recording."""

    def test_duplicates_are_kept(self, tmp_path: Path, make_skill) -> None:
        high = tmp_path / "high"
        low = tmp_path / "low"
        make_skill(high, "shared", description="High")
        make_skill(low, "shared", description="Low")

        result = discover_skills(DiscoveryOptions(custom_dirs=[high, low], scan_default_dirs=False))

        assert [s.description for s in result.skills] == ["High", "Low"]
        assert result.diagnostics.scanned_directories == [high, low]

    def test_duplicate_name_records_one_conflict(self, tmp_path: Path, make_skill) -> None:
        roots = [tmp_path / "a", tmp_path / "b", tmp_path / "c"]
        for root in roots:
            make_skill(root, "shared")

        result = discover_skills(DiscoveryOptions(custom_dirs=roots, scan_default_dirs=False))

        assert len(result.skills) == 3
        assert result.diagnostics.conflicts == [
            f"Duplicate skill 'other:shared': keeping {roots[0] / 'shared'} "
            f"and also found {roots[1] / 'shared'}"
        ]

    def test_default_roots(self, tmp_path: Path, make_skill) -> None:
        cwd = tmp_path / "project"
        user = tmp_path / "user"
        make_skill(cwd / ".claude" / "skills", "proj")
        make_skill(user / ".codex" / "skills", "mine")

        result = discover_skills(DiscoveryOptions(user_dir=user, cwd=cwd))

        by_name = {s.name: s for s in result.skills}
        assert by_name["proj"].provider is SkillProvider.CLAUDE
        assert by_name["proj"].location is SkillLocation.PROJECT
        assert by_name["mine"].provider is SkillProvider.CODEX
        assert by_name["mine"].location is SkillLocation.USER
        assert len(result.diagnostics.scanned_directories) == 4
        assert result.diagnostics.by_provider == {"claude": 1, "codex": 1}

    def test_custom_roots_come_first(self, tmp_path: Path, make_skill) -> None:
        cwd = tmp_path / "project"
        make_skill(cwd / ".claude" / "skills", "b")
        make_skill(tmp_path / "extra", "a")

        result = discover_skills(
            DiscoveryOptions(custom_dirs=[tmp_path / "extra"], user_dir=tmp_path / "u", cwd=cwd)
        )

        assert [s.name for s in result.skills] == ["other:a", "b"]

    def test_include_disabled(self, tmp_path: Path, make_skill) -> None:
        make_skill(tmp_path / "x", "off", disabled=True)
        options = DiscoveryOptions(custom_dirs=[tmp_path / "x"], scan_default_dirs=False)

        assert discover_skills(options).skills == []
        options = options.model_copy(update={"include_disabled": True})
        assert [s.disabled for s in discover_skills(options).skills] == [True]

    def test_missing_roots_do_not_fail(self, tmp_path: Path) -> None:
        result = discover_skills(DiscoveryOptions(user_dir=tmp_path / "nobody", cwd=tmp_path))

        assert result.skills == []
        assert result.diagnostics.warnings == []

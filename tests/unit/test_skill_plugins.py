"""Tests for installed-plugin skill expansion."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skillscope.skills.config import SkillLocation, SkillProvider
from skillscope.skills.plugins import (
    PluginDiagnostics,
    expand_plugins,
    load_installed_plugins,
    plugin_skill_name,
    resolve_install_path,
    split_plugin_key,
)

# ---------------------------------------------------------------------------
# Manifest loading
# ---------------------------------------------------------------------------


class TestLoadInstalledPlugins:
    """Reading and validating installed_plugins.json."""

    def test_valid_manifest(self, tmp_path: Path, make_plugins_file) -> None:
        plugins_file = make_plugins_file(tmp_path, {"docs@market": "cache/docs"})

        manifest = load_installed_plugins(plugins_file)

        assert manifest is not None
        entry = manifest.plugins["docs@market"]
        assert entry.install_path == "cache/docs"
        assert entry.version == "1.0.0"
        assert entry.is_local is False

    def test_missing_file(self, tmp_path: Path) -> None:
        diagnostics = PluginDiagnostics()

        assert load_installed_plugins(tmp_path / "none.json", diagnostics) is None
        assert diagnostics.warnings == [f"Plugins file not found at {tmp_path / 'none.json'}"]

    def test_invalid_json(self, tmp_path: Path) -> None:
        plugins_file = tmp_path / "installed_plugins.json"
        plugins_file.write_text("{not json", encoding="utf-8")
        diagnostics = PluginDiagnostics()

        assert load_installed_plugins(plugins_file, diagnostics) is None
        assert diagnostics.warnings[0].startswith("Failed to load installed_plugins.json")

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        plugins_file = tmp_path / "installed_plugins.json"
        plugins_file.write_text(
            json.dumps({"version": 1, "plugins": {"a@b": {"version": "1"}}}),
            encoding="utf-8",
        )
        diagnostics = PluginDiagnostics()

        assert load_installed_plugins(plugins_file, diagnostics) is None
        assert diagnostics.warnings[0].startswith("Invalid installed_plugins.json format")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestPluginHelpers:
    def test_split_plugin_key(self) -> None:
        assert split_plugin_key("docs@market") == ("docs", "market")
        assert split_plugin_key("docs@market@extra") == ("docs", "market")
        assert split_plugin_key("docs") is None
        assert split_plugin_key("@market") is None
        assert split_plugin_key("docs@") is None

    def test_plugin_skill_name(self) -> None:
        assert plugin_skill_name("docs", "pdf") == "docs:pdf"
        assert plugin_skill_name("docs", "docs") == "docs"
        assert plugin_skill_name("docs", "other:pdf") == "other:pdf"

    def test_resolve_install_path(self, tmp_path: Path) -> None:
        absolute = tmp_path / "abs"
        assert resolve_install_path(str(absolute), tmp_path / "root") == absolute
        assert resolve_install_path("rel/x", tmp_path / "root") == tmp_path / "root" / "rel" / "x"


# ---------------------------------------------------------------------------
# expand_plugins
# ---------------------------------------------------------------------------


class TestExpandPlugins:
    """Turning plugin installs into skill records."""

    def test_namespaced_records(self, tmp_path: Path, make_skill, make_plugins_file) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "cache" / "docs" / "skills", "pdf")
        make_skill(root / "cache" / "docs" / "skills", "xlsx")
        plugins_file = make_plugins_file(root, {"docs@market": "cache/docs"})

        result = expand_plugins(plugins_file, root)

        assert [s.name for s in result.skills] == ["docs:pdf", "docs:xlsx"]
        for skill in result.skills:
            assert skill.provider is SkillProvider.CLAUDE
            assert skill.location is SkillLocation.PLUGIN
            assert skill.plugin_info is not None
            assert skill.plugin_info.plugin_name == "docs"
            assert skill.plugin_info.marketplace == "market"
            assert skill.plugin_info.version == "1.0.0"

    def test_absolute_install_path(self, tmp_path: Path, make_skill, make_plugins_file) -> None:
        install = tmp_path / "elsewhere" / "tools"
        make_skill(install, "lint")
        plugins_file = make_plugins_file(tmp_path / "plugins", {"tools@market": str(install)})

        result = expand_plugins(plugins_file, tmp_path / "plugins")

        assert [s.name for s in result.skills] == ["tools:lint"]
        assert install in result.diagnostics.scanned_plugins

    def test_missing_install_path_warns(self, tmp_path: Path, make_plugins_file) -> None:
        root = tmp_path / "plugins"
        plugins_file = make_plugins_file(root, {"gone@market": "cache/gone"})

        result = expand_plugins(plugins_file, root)

        assert result.skills == []
        assert result.diagnostics.warnings == [
            f"Plugin 'gone@market' install path not found: {root / 'cache' / 'gone'}"
        ]

    def test_empty_install_path_warns_once(self, tmp_path: Path, make_plugins_file) -> None:
        root = tmp_path / "plugins"
        (root / "cache" / "empty" / "docs").mkdir(parents=True)
        plugins_file = make_plugins_file(root, {"empty@market": "cache/empty"})

        result = expand_plugins(plugins_file, root)

        assert result.skills == []
        assert result.diagnostics.warnings == [
            f"Plugin 'empty@market' has no skills at {root / 'cache' / 'empty'}"
        ]

    def test_malformed_key_is_skipped(self, tmp_path: Path, make_skill, make_plugins_file) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "cache" / "ok", "pdf")
        plugins_file = make_plugins_file(root, {"broken": "cache/ok", "ok@m": "cache/ok"})

        result = expand_plugins(plugins_file, root)

        assert [s.name for s in result.skills] == ["ok:pdf"]
        assert any("broken" in w for w in result.diagnostics.warnings)

    def test_parse_failure_is_a_warning(self, tmp_path: Path, make_skill, make_plugins_file) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "cache" / "docs", "good")
        bad = root / "cache" / "docs" / "bad"
        bad.mkdir()
        (bad / "SKILL.md").write_text("nope", encoding="utf-8")
        plugins_file = make_plugins_file(root, {"docs@market": "cache/docs"})

        result = expand_plugins(plugins_file, root)

        assert [s.name for s in result.skills] == ["docs:good"]
        assert any("Failed to parse plugin skill" in w for w in result.diagnostics.warnings)

    def test_disabled_plugin_skills_need_opt_in(
        self, tmp_path: Path, make_skill, make_plugins_file
    ) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "cache" / "docs", "pdf", disabled=True)
        make_skill(root / "cache" / "docs", "xlsx")
        plugins_file = make_plugins_file(root, {"docs@market": "cache/docs"})

        hidden = expand_plugins(plugins_file, root)
        shown = expand_plugins(plugins_file, root, include_disabled=True)

        assert [s.name for s in hidden.skills] == ["docs:xlsx"]
        assert {(s.name, s.disabled) for s in shown.skills} == {
            ("docs:pdf", True),
            ("docs:xlsx", False),
        }


class TestPluginFallback:
    """Scanning <plugins_root>/skills when the manifest yields nothing."""

    def test_fallback_disabled_by_default(self, tmp_path: Path, make_skill) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "skills" / "docs", "pdf")

        result = expand_plugins(root / "installed_plugins.json", root)

        assert result.skills == []

    def test_fallback_when_enabled(self, tmp_path: Path, make_skill) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "skills" / "docs", "pdf")
        make_skill(root / "skills" / "tools", "nested/lint")

        result = expand_plugins(root / "installed_plugins.json", root, fallback=True)

        assert [s.name for s in result.skills] == ["docs:pdf", "tools:lint"]
        info = result.skills[0].plugin_info
        assert info is not None
        assert info.marketplace == "local"
        assert info.version == "0.0.0"

    def test_fallback_from_environment(
        self, tmp_path: Path, make_skill, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLSCOPE_PLUGINS_FALLBACK", "true")
        root = tmp_path / "plugins"
        make_skill(root / "skills" / "docs", "pdf")

        result = expand_plugins(root / "installed_plugins.json", root)

        assert [s.name for s in result.skills] == ["docs:pdf"]

    def test_fallback_when_manifest_yields_nothing(
        self, tmp_path: Path, make_skill, make_plugins_file
    ) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "skills" / "docs", "pdf")
        plugins_file = make_plugins_file(root, {"gone@market": "cache/gone"})

        result = expand_plugins(plugins_file, root, fallback=True)

        assert [s.name for s in result.skills] == ["docs:pdf"]

    def test_manifest_results_suppress_fallback(
        self, tmp_path: Path, make_skill, make_plugins_file
    ) -> None:
        root = tmp_path / "plugins"
        make_skill(root / "cache" / "docs", "pdf")
        make_skill(root / "skills" / "local", "other")
        plugins_file = make_plugins_file(root, {"docs@market": "cache/docs"})

        result = expand_plugins(plugins_file, root, fallback=True)

        assert [s.name for s in result.skills] == ["docs:pdf"]


class TestRelativePluginPaths:
    """Plugin records always carry absolute bundle paths."""

    def test_relative_plugins_file_and_root(
        self, tmp_path: Path, make_skill, make_plugins_file
    ) -> None:
        make_skill(tmp_path / "plugins" / "inst", "pdf")
        make_plugins_file(tmp_path / "plugins", {"docs@market": "inst"})

        result = expand_plugins(Path("plugins/installed_plugins.json"), Path("plugins"))

        assert [s.path for s in result.skills] == [tmp_path / "plugins" / "inst" / "pdf"]
        assert all(s.path.is_absolute() for s in result.skills)
        assert result.diagnostics.scanned_plugins[0].is_absolute()

    def test_relative_fallback_root(self, tmp_path: Path, make_skill) -> None:
        make_skill(tmp_path / "plugins" / "skills" / "docs", "pdf")

        result = expand_plugins(Path("plugins/installed_plugins.json"), "plugins", fallback=True)

        assert [s.path for s in result.skills] == [
            tmp_path / "plugins" / "skills" / "docs" / "pdf"
        ]

"""Shared test fixtures and configuration for skillscope tests."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from skillscope.skills.config import (
    PluginInfo,
    SkillLocation,
    SkillMetadata,
    SkillProvider,
)

_MANIFEST = """\
---
name: {name}
description: {description}
---
{body}"""


def _write_skill(
    base_dir: Path,
    dirname: str,
    *,
    name: str | None = None,
    description: str | None = None,
    body: str = "# Instructions\n",
    disabled: bool = False,
    mtime: float | None = None,
) -> Path:
    """Create a bundle directory holding a manifest.

    Args:
        base_dir: Parent directory (created if missing).
        dirname: Bundle directory name, may contain ``/`` for nesting.
        name: Skill name (defaults to the last path segment).
        description: Skill description.
        body: Markdown after the frontmatter.
        disabled: Write ``.SKILL.md`` instead of ``SKILL.md``.
        mtime: Pin the manifest's modification time.

    Returns:
        The bundle directory.
    """
    skill_dir = base_dir / dirname
    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_name = name or Path(dirname).name
    manifest = skill_dir / (".SKILL.md" if disabled else "SKILL.md")
    manifest.write_text(
        _MANIFEST.format(
            name=skill_name,
            description=description or f"A test skill called {skill_name}",
            body=body,
        ),
        encoding="utf-8",
    )
    if mtime is not None:
        os.utime(manifest, (mtime, mtime))
    return skill_dir


def _write_plugins_file(plugins_root: Path, plugins: dict[str, str], version: int = 1) -> Path:
    """Write ``installed_plugins.json`` mapping plugin keys to install paths."""
    plugins_root.mkdir(parents=True, exist_ok=True)
    data = {
        "version": version,
        "plugins": {
            key: {
                "version": "1.0.0",
                "installedAt": "2024-01-01T00:00:00Z",
                "lastUpdated": "2024-01-02T00:00:00Z",
                "installPath": install_path,
                "gitCommitSha": "abc123",
                "isLocal": False,
            }
            for key, install_path in plugins.items()
        },
    }
    plugins_file = plugins_root / "installed_plugins.json"
    plugins_file.write_text(json.dumps(data), encoding="utf-8")
    return plugins_file


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real settings, home directory and .env files out of every test."""
    for key in list(os.environ):
        if key.startswith("SKILLSCOPE_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    """Factory fixture creating bundle directories (see ``_write_skill``)."""
    return _write_skill


@pytest.fixture
def make_plugins_file() -> Callable[..., Path]:
    """Factory fixture writing ``installed_plugins.json`` (see ``_write_plugins_file``)."""
    return _write_plugins_file


@pytest.fixture
def make_record(tmp_path: Path) -> Callable[..., SkillMetadata]:
    """Factory fixture building ``SkillMetadata`` records without scanning.

    Usage:
        def test_something(make_record):
            record = make_record("pdf", provider=SkillProvider.CODEX)
    """

    def _make(
        name: str,
        *,
        provider: SkillProvider = SkillProvider.CLAUDE,
        location: SkillLocation = SkillLocation.USER,
        path: Path | None = None,
        disabled: bool = False,
        plugin: str | None = None,
        mtime: float | None = None,
    ) -> SkillMetadata:
        plugin_info = None
        if plugin is not None:
            plugin_info = PluginInfo(plugin_name=plugin, marketplace="market", version="1.0.0")
            location = SkillLocation.PLUGIN
        skill_path = path or (
            tmp_path / "records" / provider.value / location.value / (plugin or "") / name
        )
        if mtime is not None:
            skill_path.mkdir(parents=True, exist_ok=True)
            manifest = skill_path / (".SKILL.md" if disabled else "SKILL.md")
            manifest.write_text("---\nname: x\ndescription: y\n---\n", encoding="utf-8")
            os.utime(manifest, (mtime, mtime))
        return SkillMetadata(
            name=name,
            description=f"Description of {name}",
            provider=provider,
            location=location,
            path=skill_path,
            disabled=disabled,
            plugin_info=plugin_info,
        )

    return _make

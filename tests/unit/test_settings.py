"""Tests for SkillscopeSettings and LoggingConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from skillscope.config import LoggingConfig, SkillscopeSettings


class TestSkillscopeSettingsDefaults:
    """Defaults with an empty environment."""

    def test_defaults(self) -> None:
        settings = SkillscopeSettings(_env_file=None)

        assert settings.user_dir is None
        assert settings.plugins_fallback is False
        assert settings.logging == LoggingConfig()

    def test_logging_defaults(self) -> None:
        config = LoggingConfig()

        assert config.level == "WARNING"
        assert config.structured is False


class TestSkillscopeSettingsEnvironment:
    """Values read from SKILLSCOPE_ variables and .env files."""

    def test_user_dir_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_USER_DIR", str(tmp_path / "u"))

        assert SkillscopeSettings(_env_file=None).user_dir == tmp_path / "u"

    def test_user_dir_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_USER_DIR", "~/agents")

        assert SkillscopeSettings(_env_file=None).user_dir == tmp_path / "home" / "agents"

    @pytest.mark.parametrize("raw", ["true", "1", "yes"])
    def test_plugins_fallback_flag(self, raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_PLUGINS_FALLBACK", raw)

        assert SkillscopeSettings(_env_file=None).plugins_fallback is True

    def test_nested_logging_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_LOGGING__LEVEL", "DEBUG")
        monkeypatch.setenv("SKILLSCOPE_LOGGING__STRUCTURED", "true")

        settings = SkillscopeSettings(_env_file=None)

        assert settings.logging.level == "DEBUG"
        assert settings.logging.structured is True

    def test_invalid_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_LOGGING__LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            SkillscopeSettings(_env_file=None)

    def test_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("SKILLSCOPE_PLUGINS_FALLBACK=true\n", encoding="utf-8")

        assert SkillscopeSettings().plugins_fallback is True

    def test_unrelated_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_SOMETHING_ELSE", "x")

        assert SkillscopeSettings(_env_file=None).plugins_fallback is False

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSCOPE_USER_DIR", str(tmp_path / "env"))

        settings = SkillscopeSettings(_env_file=None, user_dir=tmp_path / "kw")

        assert settings.user_dir == tmp_path / "kw"

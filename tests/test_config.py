"""Tests for settings and the per-user .env helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, write_user_env_vars


@pytest.mark.unit
class TestAppSettings:
    def test_defaults(self, settings):
        assert settings.pac_executable == "pac"
        assert settings.workspace_dir_name == "powerplatform"
        assert settings.source_dir_name == "solution-src"
        assert settings.canvas_extension == ".msapp"
        assert settings.timestamp_format == "%Y%m%d-%H%M%S"
        assert settings.command_timeout_seconds is None
        assert settings.strict_resolution is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PPSYNC_AUTH_PROFILE_NAME", "ci")
        monkeypatch.setenv("PPSYNC_STRICT_RESOLUTION", "true")
        configured = AppSettings(_env_file=None)
        assert configured.auth_profile_name == "ci"
        assert configured.strict_resolution is True

    def test_rejects_bad_log_level(self, monkeypatch):
        monkeypatch.setenv("PPSYNC_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_rejects_bad_extension(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, canvas_extension="msapp")

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PPSYNC_DEFAULT_ENV_URL=https://org.crm.dynamics.com\n", encoding="utf-8")
        configured = AppSettings(_env_file=env_file)
        assert configured.default_env_url == "https://org.crm.dynamics.com"


@pytest.mark.unit
class TestUserEnvFile:
    def test_write_merges_and_sorts(self, tmp_path):
        env_path = tmp_path / "cfg" / ".env"
        write_user_env_vars({"PPSYNC_PAC_EXECUTABLE": "pac"}, env_path=env_path)
        write_user_env_vars({"PPSYNC_AUTH_PROFILE_NAME": "dev"}, env_path=env_path)
        lines = env_path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == ["PPSYNC_AUTH_PROFILE_NAME=dev", "PPSYNC_PAC_EXECUTABLE=pac"]

    def test_empty_value_removes_key(self, tmp_path):
        env_path = tmp_path / ".env"
        write_user_env_vars({"PPSYNC_DEFAULT_ENV_URL": "https://a", "PPSYNC_AUTH_PROFILE_NAME": "dev"}, env_path=env_path)
        write_user_env_vars({"PPSYNC_DEFAULT_ENV_URL": "", "PPSYNC_AUTH_PROFILE_NAME": None}, env_path=env_path)
        text = env_path.read_text(encoding="utf-8")
        assert "PPSYNC_DEFAULT_ENV_URL" not in text
        assert "PPSYNC_AUTH_PROFILE_NAME=dev" in text

    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_user_config_dir() == tmp_path / "pp-solution-sync"

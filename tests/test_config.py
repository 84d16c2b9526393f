"""Tests for settings loading."""

import sys

import pytest
from pydantic import ValidationError

from seqteams.config import IngestConfig, Settings, default_config_path, load_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(webhook_url="https://teams.example.test/hook")
        assert settings.base_url == ""
        assert settings.trace_message is False
        assert settings.color == ""
        assert settings.ingest == IngestConfig()
        assert settings.log_format == "console"

    def test_webhook_url_required(self, monkeypatch):
        monkeypatch.delenv("SEQTEAMS_WEBHOOK_URL", raising=False)
        monkeypatch.delenv("SEQ_APP_SETTING_TEAMSBASEURL", raising=False)
        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize("url", ["not a url", "ftp://teams.example.test/x", "/relative"])
    def test_webhook_url_must_be_http(self, url):
        with pytest.raises(ValidationError):
            Settings(webhook_url=url)

    def test_log_format_checked(self):
        with pytest.raises(ValidationError):
            Settings(webhook_url="https://t.example.test", log_format="xml")

    def test_immutable(self, settings):
        with pytest.raises(ValidationError):
            settings.color = "purple"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SEQTEAMS_WEBHOOK_URL", "https://teams.example.test/env")
        monkeypatch.setenv("SEQTEAMS_TRACE_MESSAGE", "true")
        monkeypatch.setenv("SEQTEAMS_INGEST__PORT", "9000")
        settings = Settings()
        assert settings.webhook_url == "https://teams.example.test/env"
        assert settings.trace_message is True
        assert settings.ingest.port == 9000

    def test_seq_app_host_env(self, monkeypatch):
        monkeypatch.delenv("SEQTEAMS_WEBHOOK_URL", raising=False)
        monkeypatch.setenv("SEQ_APP_SETTING_TEAMSBASEURL", "https://teams.example.test/seq")
        monkeypatch.setenv("SEQ_APP_SETTING_BASEURL", "https://seq.example.com")
        monkeypatch.setenv("SEQ_APP_SETTING_TRACEMESSAGE", "True")
        monkeypatch.setenv("SEQ_APP_SETTING_COLOR", "purple")
        settings = Settings()
        assert settings.webhook_url == "https://teams.example.test/seq"
        assert settings.base_url == "https://seq.example.com"
        assert settings.trace_message is True
        assert settings.color == "purple"


class TestLoadSettings:
    def test_yaml_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SEQTEAMS_WEBHOOK_URL", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            "webhook_url: https://teams.example.test/yaml\n"
            "color: purple\n"
            "ingest:\n"
            "  port: 9100\n"
            "  secret: abc\n"
        )
        settings = load_settings(path)
        assert settings.webhook_url == "https://teams.example.test/yaml"
        assert settings.color == "purple"
        assert settings.ingest.port == 9100
        assert settings.ingest.secret == "abc"

    def test_default_config_dir(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("webhook_url: https://teams.example.test/dir\n")
        monkeypatch.setenv("SEQTEAMS_CONFIG_DIR", str(config_dir))
        assert load_settings().webhook_url == "https://teams.example.test/dir"

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("webhook_url: https://teams.example.test/yaml\nlog_level: INFO\n")
        settings = load_settings(path, log_level="DEBUG", color=None)
        assert settings.log_level == "DEBUG"
        assert settings.color == ""

    def test_missing_file_falls_back_to_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEQTEAMS_WEBHOOK_URL", "https://teams.example.test/env")
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.webhook_url == "https://teams.example.test/env"


class TestDefaultConfigPath:
    def test_env_dir_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEQTEAMS_CONFIG_DIR", str(tmp_path))
        assert default_config_path() == tmp_path / "config.yaml"

    @pytest.mark.skipif(sys.platform == "win32", reason="XDG lookup is POSIX only")
    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SEQTEAMS_CONFIG_DIR", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_path() == tmp_path / "seqteams" / "config.yaml"

        (tmp_path / "seqteams").mkdir()
        (tmp_path / "seqteams" / "config.yaml").write_text(
            "webhook_url: https://teams.example.test/xdg\n"
        )
        assert load_settings().webhook_url == "https://teams.example.test/xdg"

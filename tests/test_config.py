"""Tests for settings loading."""

import sys

import pytest
from pydantic import ValidationError
from qqcodec.config import EncoderConfig, Settings, get_config_dir, load_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.encoder.keyboard_row_width == 4
        assert settings.encoder.msg_seq_min == 1
        assert settings.encoder.msg_seq_max == 1_000_000
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("QQCODEC_ENCODER__KEYBOARD_ROW_WIDTH", "3")
        monkeypatch.setenv("QQCODEC_BOT__APP_ID", "123")
        settings = Settings()
        assert settings.encoder.keyboard_row_width == 3
        assert settings.bot.app_id == "123"

    def test_invalid_seq_range(self):
        with pytest.raises(ValidationError):
            EncoderConfig(msg_seq_min=10, msg_seq_max=5)

    def test_invalid_row_width(self):
        with pytest.raises(ValidationError):
            EncoderConfig(keyboard_row_width=0)


class TestLoadSettings:
    def test_yaml_overlay(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("encoder:\n  keyboard_row_width: 2\nlog_level: DEBUG\n")
        settings = load_settings(path)
        assert settings.encoder.keyboard_row_width == 2
        assert settings.log_level == "DEBUG"

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "nope.yaml")
        assert settings.encoder.keyboard_row_width == 4

    def test_config_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "c.yaml"
        path.write_text("bot:\n  sandbox: true\n")
        monkeypatch.setenv("QQCODEC_CONFIG", str(path))
        assert load_settings().bot.sandbox is True

    def test_default_config_dir(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("log_json: true\n")
        monkeypatch.delenv("QQCODEC_CONFIG", raising=False)
        monkeypatch.setenv("QQCODEC_CONFIG_DIR", str(tmp_path))
        assert load_settings().log_json is True


class TestConfigDir:
    def test_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("QQCODEC_CONFIG_DIR", str(tmp_path))
        assert get_config_dir() == tmp_path

    def test_xdg_on_linux(self, tmp_path, monkeypatch):
        monkeypatch.delenv("QQCODEC_CONFIG_DIR", raising=False)
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "qqcodec"

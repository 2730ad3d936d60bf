"""
Tests for editor settings loading (YAML file + environment overrides).
"""

import pytest
from qesm.config import ConfigError, EditorSettings, load_settings

ENV_KEYS = ("QESM_DEFAULT_LANGUAGE", "QESM_DEFAULT_MODES", "QESM_LOG_LEVEL", "QESM_LOG_JSON")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def write_settings(tmp_path, text):
    path = tmp_path / "qesm.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_without_file(self):
        assert load_settings() == EditorSettings()

    def test_default_values(self):
        settings = EditorSettings()
        assert settings.default_language == "en"
        assert settings.default_modes == ("sms", "ivr")
        assert settings.log_level == "INFO"
        assert not settings.log_json


class TestYamlFile:
    def test_reads_values(self, tmp_path):
        path = write_settings(tmp_path, """
default_language: fr
default_modes: [sms, mobileweb]
language_names:
  xx: Klingon
log_level: DEBUG
log_json: true
""")
        settings = load_settings(path)
        assert settings.default_language == "fr"
        assert settings.default_modes == ("sms", "mobileweb")
        assert settings.language_names == {"xx": "Klingon"}
        assert settings.log_level == "DEBUG"
        assert settings.log_json

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_settings(write_settings(tmp_path, "")) == EditorSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(write_settings(tmp_path, "- just\n- a list\n"))

    def test_unknown_mode(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(write_settings(tmp_path, "default_modes: [sms, fax]\n"))

    def test_language_names_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(write_settings(tmp_path, "language_names: [en]\n"))


class TestEnvironment:
    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = write_settings(tmp_path, "default_language: fr\nlog_json: false\n")
        monkeypatch.setenv("QESM_DEFAULT_LANGUAGE", "es")
        monkeypatch.setenv("QESM_DEFAULT_MODES", "ivr, mobileweb")
        monkeypatch.setenv("QESM_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("QESM_LOG_JSON", "yes")
        settings = load_settings(path)
        assert settings.default_language == "es"
        assert settings.default_modes == ("ivr", "mobileweb")
        assert settings.log_level == "WARNING"
        assert settings.log_json

    def test_blank_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv("QESM_DEFAULT_LANGUAGE", "   ")
        assert load_settings().default_language == "en"

    def test_bad_env_mode(self, monkeypatch):
        monkeypatch.setenv("QESM_DEFAULT_MODES", "sms,pager")
        with pytest.raises(ConfigError):
            load_settings()

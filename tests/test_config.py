"""Tests for daily_text.config"""

import pytest

from daily_text.config import DEFAULT_OUTPUT_JSON, DEFAULT_WORK_DIR, load_settings, validate_year
from daily_text.errors import ConfigError


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings.year is None
        assert settings.database_url is None
        assert settings.output_path == DEFAULT_OUTPUT_JSON
        assert settings.work_dir == DEFAULT_WORK_DIR
        assert settings.verbose is False

    def test_from_environment(self):
        settings = load_settings({
            "YEAR": " 2025 ",
            "DAILY_TEXT_DATABASE_URL": "sqlite:///x.db",
            "OUTPUT_JSON_PATH": "out/texts.json",
            "DAILY_TEXT_WORK_DIR": "scratch",
            "VERBOSE": "yes",
        })
        assert settings.year == "2025"
        assert settings.database_url == "sqlite:///x.db"
        assert settings.output_path == "out/texts.json"
        assert settings.work_dir == "scratch"
        assert settings.verbose is True

    @pytest.mark.parametrize("value", ["25", "20255", "abcd"])
    def test_bad_year(self, value):
        with pytest.raises(ConfigError):
            load_settings({"YEAR": value})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("YEAR", "2024")
        assert load_settings().year == "2024"


class TestValidateYear:
    def test_valid(self):
        assert validate_year("2025", current_year=2026) == "2025"
        assert validate_year(2036, current_year=2026) == "2036"

    @pytest.mark.parametrize("value", ["1989", "2037", "abc", None])
    def test_invalid(self, value):
        with pytest.raises(ConfigError):
            validate_year(value, current_year=2026)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_year("nope")

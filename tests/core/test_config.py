#!/usr/bin/env python3
"""Tests for the layered settings manager."""

import pytest

from pathfinder.core.config import (
    SETTINGS_SCHEMA,
    ConfigError,
    ConfigManager,
    ConfigSource,
)
from pathfinder.core.constants import ErrorCode


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any PATHFINDER_* variables from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("PATHFINDER_"):
            monkeypatch.delenv(key)
    return monkeypatch


class TestConfigSource:
    def test_precedence_order(self):
        sources = [
            ConfigSource.COMPILED_DEFAULTS,
            ConfigSource.SETTINGS_FILE,
            ConfigSource.ENVIRONMENT,
            ConfigSource.CLI_ARGS,
        ]
        for lower, higher in zip(sources, sources[1:]):
            assert lower.value < higher.value


class TestConfigError:
    def test_config_error_creation(self):
        error = ConfigError("Test error", ErrorCode.NOT_FOUND)
        assert error.message == "Test error"
        assert error.error_code == ErrorCode.NOT_FOUND
        assert str(error) == "Test error"

    def test_config_error_default_code(self):
        assert ConfigError("Test error").error_code == ErrorCode.INVALID_INPUT


class TestDefaults:
    def test_default_values(self, clean_env):
        config = ConfigManager()
        assert config.get("pathfinder.list_file").endswith("pathfinder.txt")
        assert config.get("pathfinder.output_path") == "."
        assert config.get("pathfinder.output_name") == ""
        assert config.get("pathfinder.verbose") is False
        assert config.get("pathfinder.logging.level") == "WARNING"
        assert config.get("pathfinder.directory") is None

    def test_defaults_are_not_shared(self, clean_env):
        first = ConfigManager()
        first._config[ConfigSource.COMPILED_DEFAULTS]["pathfinder"]["output_path"] = "/x"
        assert ConfigManager().get("pathfinder.output_path") == "."

    def test_missing_key_returns_default(self, clean_env):
        assert ConfigManager().get("pathfinder.nope", default=42) == 42


class TestLoadFile:
    def test_load_file(self, clean_env, settings_file):
        path = settings_file({"pathfinder": {"output_path": "/tmp/out", "verbose": True}})
        config = ConfigManager(settings_file=str(path))

        assert config.get("pathfinder.output_path") == "/tmp/out"
        assert config.get("pathfinder.verbose") is True
        # Untouched keys fall through to defaults
        assert config.get("pathfinder.output_name") == ""

    def test_top_level_key_optional(self, clean_env, settings_file):
        path = settings_file({"output_name": "bundle.zip"})
        config = ConfigManager(settings_file=str(path))
        assert config.get("pathfinder.output_name") == "bundle.zip"

    def test_empty_file(self, clean_env, temp_dir):
        path = temp_dir / "empty.yaml"
        path.write_text("")
        config = ConfigManager(settings_file=str(path))
        assert config.get("pathfinder.output_path") == "."

    def test_missing_file(self, clean_env, temp_dir):
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(settings_file=str(temp_dir / "missing.yaml"))
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_invalid_yaml(self, clean_env, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("pathfinder: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            ConfigManager(settings_file=str(path))

    def test_non_dict_yaml(self, clean_env, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Invalid settings format"):
            ConfigManager(settings_file=str(path))


class TestEnvironment:
    def test_environment_values(self, clean_env):
        clean_env.setenv("PATHFINDER_OUTPUT_PATH", "/srv/out")
        clean_env.setenv("PATHFINDER_VERBOSE", "true")
        clean_env.setenv("PATHFINDER_LOGGING__LEVEL", "DEBUG")

        config = ConfigManager()

        assert config.get("pathfinder.output_path") == "/srv/out"
        assert config.get("pathfinder.verbose") is True
        assert config.get("pathfinder.logging.level") == "DEBUG"

    def test_environment_can_be_skipped(self, clean_env):
        clean_env.setenv("PATHFINDER_OUTPUT_PATH", "/srv/out")
        config = ConfigManager(load_environment=False)
        assert config.get("pathfinder.output_path") == "."

    def test_parse_env_value(self, clean_env):
        config = ConfigManager(load_environment=False)
        assert config._parse_env_value("yes") is True
        assert config._parse_env_value("False") is False
        assert config._parse_env_value("1") is True
        assert config._parse_env_value("0") is False
        assert config._parse_env_value("12") == 12
        assert config._parse_env_value("1.5") == 1.5
        assert config._parse_env_value("request.zip") == "request.zip"

    def test_string_settings_keep_raw_value(self, clean_env):
        clean_env.setenv("PATHFINDER_OUTPUT_NAME", "2024")
        clean_env.setenv("PATHFINDER_OUTPUT_PATH", "1")
        clean_env.setenv("PATHFINDER_LOGGING__FILE", "0")

        config = ConfigManager()

        assert config.get("pathfinder.output_name") == "2024"
        assert config.get("pathfinder.output_path") == "1"
        assert config.get("pathfinder.logging.file") == "0"
        assert config.validate_schema() is True

    @pytest.mark.parametrize("value, expected", [("1", True), ("0", False), ("yes", True), ("no", False)])
    def test_numeric_booleans(self, clean_env, value, expected):
        clean_env.setenv("PATHFINDER_VERBOSE", value)

        config = ConfigManager()

        assert config.get("pathfinder.verbose") is expected
        assert config.validate_schema() is True

    def test_unknown_setting_still_parsed(self, clean_env):
        clean_env.setenv("PATHFINDER_RETRIES", "3")
        assert ConfigManager().get("pathfinder.retries") == 3

    def test_environment_overrides_file(self, clean_env, settings_file):
        path = settings_file({"pathfinder": {"output_path": "/from/file"}})
        clean_env.setenv("PATHFINDER_OUTPUT_PATH", "/from/env")

        config = ConfigManager(settings_file=str(path))

        assert config.get("pathfinder.output_path") == "/from/env"


class TestPrecedence:
    def test_cli_overrides_everything(self, clean_env, settings_file):
        path = settings_file({"pathfinder": {"output_name": "file.zip"}})
        clean_env.setenv("PATHFINDER_OUTPUT_NAME", "env.zip")

        config = ConfigManager(settings_file=str(path))
        config.load_dict({"pathfinder": {"output_name": "cli.zip"}}, ConfigSource.CLI_ARGS)

        assert config.get("pathfinder.output_name") == "cli.zip"
        assert config.get_all()["pathfinder"]["output_name"] == "cli.zip"

    def test_none_does_not_override(self, clean_env):
        config = ConfigManager()
        config.load_dict({"pathfinder": {"output_path": None}}, ConfigSource.CLI_ARGS)

        assert config.get("pathfinder.output_path") == "."
        assert config.get_all()["pathfinder"]["output_path"] == "."

    def test_nested_merge(self, clean_env):
        config = ConfigManager()
        config.load_dict({"pathfinder": {"logging": {"file": "/tmp/p.log"}}})

        logging_settings = config.get_all()["pathfinder"]["logging"]
        assert logging_settings == {"level": "WARNING", "file": "/tmp/p.log"}

    def test_set_overrides_lower_sources(self, clean_env):
        config = ConfigManager()
        config.set("pathfinder.output_name", "y.zip", ConfigSource.SETTINGS_FILE)
        assert config.get("pathfinder.output_name") == "y.zip"

        config.set("pathfinder.output_name", "x.zip")
        assert config.get("pathfinder.output_name") == "x.zip"


class TestValidateSchema:
    def test_defaults_are_valid(self, clean_env):
        assert ConfigManager().validate_schema() is True

    def test_wrong_type(self, clean_env):
        config = ConfigManager()
        config.set("pathfinder.verbose", "sometimes")
        with pytest.raises(ConfigError, match="Expected bool for pathfinder.verbose"):
            config.validate_schema()

    def test_wrong_nested_type(self, clean_env):
        config = ConfigManager()
        config.set("pathfinder.logging", "DEBUG")
        with pytest.raises(ConfigError, match="Expected dict for pathfinder.logging"):
            config.validate_schema(SETTINGS_SCHEMA)

    def test_unknown_keys_ignored(self, clean_env):
        config = ConfigManager()
        config.set("pathfinder.extra", 1)
        assert config.validate_schema() is True

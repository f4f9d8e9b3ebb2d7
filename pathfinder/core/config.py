#!/usr/bin/env python3
"""Layered run settings for Pathfinder.

Settings are resolved from four sources, highest precedence last:
1. Compiled defaults
2. YAML settings file (``--settings``)
3. Environment variables (PATHFINDER_*)
4. Command-line arguments

The rule file itself is not handled here; see ``pathfinder.rules.parser``.

Example:
    >>> config = ConfigManager()
    >>> config.load_file("pathfinder.yaml")
    >>> config.get("pathfinder.output_path", default=".")
"""

import copy
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pathfinder.core.constants import ENV_PREFIX, Defaults, ErrorCode


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    SETTINGS_FILE = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# Expected types of the known settings; None values are always accepted
SETTINGS_SCHEMA: Dict[str, Any] = {
    "pathfinder": {
        "directory": str,
        "list_file": str,
        "output_path": str,
        "output_name": str,
        "verbose": bool,
        "logging": {
            "level": str,
            "file": str,
        },
    }
}


class ConfigManager:
    """Hierarchical run settings manager.

    Each source keeps its own nested dictionary; lookups walk the sources
    from highest to lowest precedence and ``get_all`` deep-merges them.
    """

    DEFAULT_CONFIG = {
        "pathfinder": {
            "directory": None,
            "list_file": os.path.join(".", Defaults.LIST_FILE),
            "output_path": Defaults.OUTPUT_PATH,
            "output_name": "",
            "verbose": False,
            "logging": {
                "level": Defaults.LOG_LEVEL,
                "file": None,
            },
        }
    }

    def __init__(self, settings_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            settings_file: Optional YAML settings file to load
            load_environment: Read PATHFINDER_* environment variables
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if settings_file:
            self.load_file(settings_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.SETTINGS_FILE) -> None:
        """Load settings from a YAML file.

        Args:
            file_path: Path to YAML settings file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser()

        if not path.exists():
            raise ConfigError(f"Settings file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading settings {file_path}: {e}", ErrorCode.IO_ERROR)

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid settings format in {file_path}", ErrorCode.INVALID_INPUT)

        # Settings files may omit the top-level key
        if "pathfinder" not in config_data:
            config_data = {"pathfinder": config_data}

        self._config[source] = config_data

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Load settings from a dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load settings from environment variables.

        Format: PATHFINDER_<KEY>=value, nested keys separated by a double
        underscore. Example: PATHFINDER_LOGGING__LEVEL=DEBUG
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX) :].lower().split("__")
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = self._parse_env_value(value, self._schema_type(parts))

        if env_config:
            self._config[ConfigSource.ENVIRONMENT] = {"pathfinder": env_config}

    def _schema_type(self, parts: List[str]) -> Any:
        """Expected type of a ``pathfinder`` setting, or None if unknown."""
        current: Any = SETTINGS_SCHEMA["pathfinder"]
        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def _parse_env_value(self, value: str, expected_type: Any = None) -> Any:
        """Parse environment variable value.

        Settings declared as strings keep the raw value, so
        PATHFINDER_OUTPUT_NAME=2024 stays "2024".

        Args:
            value: String value from environment
            expected_type: Schema type of the setting, if known

        Returns:
            Parsed value (bool, int, float, or str)
        """
        if expected_type is str:
            return value

        # Try boolean
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False

        # Try int
        try:
            return int(value)
        except ValueError:
            pass

        # Try float
        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "pathfinder.logging.level")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
            value = self._get_nested(self._config[source], key)
            if value is not None:
                return value

        return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        """Get value from nested dictionary using dot notation."""
        current: Any = config

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            if part not in current:
                return None
            current = current[part]

        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        if source not in self._config:
            self._config[source] = {}

        parts = key.split(".")
        current = self._config[source]

        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sorted(self._config.keys(), key=lambda s: s.value):
            merged = self._deep_merge(merged, self._config[source])

        return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries; None in override keeps the base value."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif value is not None or key not in result:
                result[key] = value

        return result

    def validate_schema(self, schema: Optional[Dict[str, Any]] = None) -> bool:
        """Validate merged settings against a schema.

        Args:
            schema: Schema dictionary, defaults to SETTINGS_SCHEMA

        Returns:
            True if valid

        Raises:
            ConfigError: If validation fails
        """
        return self._validate_dict(self.get_all(), schema or SETTINGS_SCHEMA, "")

    def _validate_dict(self, config: Dict[str, Any], schema: Dict[str, Any], prefix: str) -> bool:
        for key, expected_type in schema.items():
            if key not in config or config[key] is None:
                continue

            value = config[key]
            name = f"{prefix}{key}"

            if isinstance(expected_type, dict):
                if not isinstance(value, dict):
                    raise ConfigError(f"Expected dict for {name}, got {type(value).__name__}")
                self._validate_dict(value, expected_type, f"{name}.")
            elif isinstance(expected_type, type):
                if not isinstance(value, expected_type):
                    raise ConfigError(
                        f"Expected {expected_type.__name__} for {name}, "
                        f"got {type(value).__name__}"
                    )

        return True

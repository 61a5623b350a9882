#!/usr/bin/env python3
"""Layered configuration for assetembed runs.

Configuration is assembled from layers, lowest precedence first:
- compiled defaults
- the YAML file given with --config
- ASSETEMBED_<SECTION>_<KEY> environment variables
- command-line arguments

Nested mappings are merged across layers; lists (the pipelines) are
replaced as a whole by the highest layer that sets them.

Example:
    >>> config = ConfigManager("assetembed.yaml")
    >>> config.get("assetembed.output.target")
    'python'
"""

import copy
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from assetembed.core.constants import DEFAULT_CONFIG, ErrorCode
from assetembed.core.errors import AssetEmbedError

ENV_PREFIX = "ASSETEMBED_"
ROOT_KEY = "assetembed"

_MISSING = object()


class ConfigSource(Enum):
    """Configuration layers in precedence order."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigError(AssetEmbedError):
    """Configuration file could not be loaded."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


def parse_env_value(value: str) -> Any:
    """Parse an environment variable into bool, int, float or str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            pass

    return value


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base.

    Nested dictionaries are merged key by key; any other value, lists
    included, replaces the base value.
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result


class ConfigManager:
    """Merge configuration layers for one run."""

    def __init__(self, config_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Optional YAML file to load
            load_environment: Whether to read ASSETEMBED_* variables

        Raises:
            ConfigError: If the file cannot be loaded or parsed
        """
        self._layers: Dict[ConfigSource, Dict[str, Any]] = {
            ConfigSource.COMPILED_DEFAULTS: {ROOT_KEY: copy.deepcopy(DEFAULT_CONFIG)},
        }

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str) -> None:
        """Load the YAML configuration file layer.

        The top-level ``assetembed`` key is optional.

        Args:
            file_path: Path to YAML config file

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        if ROOT_KEY not in config_data:
            config_data = {ROOT_KEY: config_data}

        self._layers[ConfigSource.USER_CONFIG] = config_data

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Replace one layer with a dictionary.

        Args:
            config_data: Configuration dictionary, including the assetembed key
            source: Layer to replace
        """
        self._layers[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Build the environment layer.

        ASSETEMBED_OUTPUT_TARGET=rust becomes assetembed.output.target.
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split("_")
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = parse_env_value(value)

        if env_config:
            self._layers[ConfigSource.ENVIRONMENT] = {ROOT_KEY: env_config}

    def get_all(self) -> Dict[str, Any]:
        """Merge all layers, lowest precedence first."""
        merged: Dict[str, Any] = {}
        for source in sorted(self._layers, key=lambda s: s.value):
            merged = deep_merge(merged, self._layers[source])
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a merged value by dot-separated key.

        Args:
            key: Key path, e.g. "assetembed.output.target"
            default: Returned when the key is missing or null

        Returns:
            Merged value or default
        """
        current: Any = self.get_all()
        for part in key.split("."):
            if not isinstance(current, dict):
                return default
            current = current.get(part, _MISSING)
            if current is _MISSING:
                return default

        return default if current is None else current

    def section(self) -> Dict[str, Any]:
        """Merged contents of the top-level assetembed key."""
        return self.get(ROOT_KEY, {})

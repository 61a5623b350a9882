#!/usr/bin/env python3
"""Tests for the layered ConfigManager."""

import pytest
import yaml

from assetembed.core.constants import ErrorCode
from assetembed.infrastructure.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    deep_merge,
    parse_env_value,
)


class TestConfigSource:
    """Tests for ConfigSource enum."""

    def test_precedence_order(self):
        """Test config source precedence ordering."""
        sources = [
            ConfigSource.COMPILED_DEFAULTS,
            ConfigSource.USER_CONFIG,
            ConfigSource.ENVIRONMENT,
            ConfigSource.CLI_ARGS,
        ]

        for i in range(len(sources) - 1):
            assert sources[i].value < sources[i + 1].value


class TestDefaults:
    """Tests for compiled defaults."""

    def test_default_values(self):
        """Defaults describe a python artifact with no pipelines."""
        config = ConfigManager(load_environment=False)

        assert config.get("assetembed.output.target") == "python"
        assert config.get("assetembed.output.path") is None
        assert config.get("assetembed.pipelines") == []
        assert config.get("assetembed.logging.level") == "INFO"
        assert config.get("assetembed.watch.enabled") is False

    def test_defaults_not_shared(self):
        """Managers do not share default dictionaries."""
        first = ConfigManager(load_environment=False)
        first.section()["output"]["target"] = "rust"
        first.get_all()["assetembed"]["pipelines"].append({"name": "X"})

        second = ConfigManager(load_environment=False)

        assert second.get("assetembed.output.target") == "python"
        assert second.get("assetembed.pipelines") == []


class TestLoadFile:
    """Tests for YAML file loading."""

    def test_load_file(self, config_file):
        """File values override defaults."""
        config = ConfigManager(config_file=str(config_file), load_environment=False)

        assert config.get("assetembed.logging.level") == "DEBUG"
        assert len(config.get("assetembed.pipelines")) == 2

    def test_file_without_root_key(self, temp_dir):
        """Files may omit the top-level assetembed key."""
        path = temp_dir / "bare.yaml"
        path.write_text(yaml.dump({"output": {"target": "rust"}}))

        config = ConfigManager(config_file=str(path), load_environment=False)

        assert config.get("assetembed.output.target") == "rust"

    def test_missing_file(self, temp_dir):
        """Missing files raise NOT_FOUND."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(config_file=str(temp_dir / "missing.yaml"))

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_invalid_yaml(self, temp_dir):
        """Unparseable files raise INVALID_INPUT."""
        path = temp_dir / "broken.yaml"
        path.write_text("assetembed: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            ConfigManager(config_file=str(path))

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT

    def test_non_mapping(self, temp_dir):
        """Top-level lists are rejected."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            ConfigManager(config_file=str(path))


class TestEnvironment:
    """Tests for ASSETEMBED_* variables."""

    def test_environment_overrides_file(self, config_file, monkeypatch):
        """Environment variables override the file."""
        monkeypatch.setenv("ASSETEMBED_LOGGING_LEVEL", "WARNING")
        monkeypatch.setenv("ASSETEMBED_WATCH_ENABLED", "true")

        config = ConfigManager(config_file=str(config_file))

        assert config.get("assetembed.logging.level") == "WARNING"
        assert config.get("assetembed.watch.enabled") is True

    def test_environment_disabled(self, monkeypatch):
        """Environment loading can be turned off."""
        monkeypatch.setenv("ASSETEMBED_OUTPUT_TARGET", "rust")

        config = ConfigManager(load_environment=False)

        assert config.get("assetembed.output.target") == "python"

    def test_malformed_variable_ignored(self, monkeypatch):
        """Variables with empty key parts are skipped."""
        monkeypatch.setenv("ASSETEMBED__TARGET", "rust")

        config = ConfigManager()

        assert config.get("assetembed.output.target") == "python"

    @pytest.mark.parametrize(
        "raw, parsed",
        [("true", True), ("no", False), ("42", 42), ("1.5", 1.5), ("rust", "rust")],
    )
    def test_parse_env_value(self, raw, parsed):
        """Values are parsed to bool, int, float or str."""
        assert parse_env_value(raw) == parsed


class TestPrecedence:
    """Tests for merging across sources."""

    def test_cli_overrides_environment(self, monkeypatch):
        """CLI arguments win over environment variables."""
        monkeypatch.setenv("ASSETEMBED_OUTPUT_TARGET", "rust")
        config = ConfigManager()

        config.load_dict({"assetembed": {"output": {"target": "python"}}})

        assert config.get("assetembed.output.target") == "python"

    def test_section_deep_merges(self, config_file):
        """section() merges nested dictionaries across sources."""
        config = ConfigManager(config_file=str(config_file), load_environment=False)
        config.load_dict({"assetembed": {"output": {"target": "rust"}}}, ConfigSource.CLI_ARGS)

        section = config.section()

        assert section["output"]["target"] == "rust"
        assert section["output"]["path"].endswith("assets.py")
        assert section["watch"]["enabled"] is False

    def test_lists_replaced(self, config_file):
        """Lists from a higher source replace lower ones."""
        config = ConfigManager(config_file=str(config_file), load_environment=False)
        config.load_dict({"assetembed": {"pipelines": [{"name": "ONLY", "root": "x"}]}})

        assert [p["name"] for p in config.section()["pipelines"]] == ["ONLY"]

    def test_get_default(self):
        """Missing or null keys return the default."""
        config = ConfigManager(load_environment=False)

        assert config.get("assetembed.missing.key", default=3) == 3
        assert config.get("assetembed.output.path", default="out.py") == "out.py"
        assert config.get("assetembed.output.target.deeper") is None


class TestDeepMerge:
    """Tests for the merge helper."""

    def test_nested_and_replaced(self):
        """Dictionaries merge, other values replace."""
        base = {"a": {"x": 1, "y": [1]}, "b": 1}
        override = {"a": {"y": [2]}, "b": {"c": 2}}

        assert deep_merge(base, override) == {"a": {"x": 1, "y": [2]}, "b": {"c": 2}}
        assert base == {"a": {"x": 1, "y": [1]}, "b": 1}

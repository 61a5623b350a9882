"""Tests for the CodegenMain controller."""

from unittest.mock import patch

import pytest

from assetembed.core.constants import ErrorCode, ListPolicy, PipelineKind
from assetembed.core.errors import AssetEmbedError, EmptyResultError
from assetembed.core.validators import ValidationError
from assetembed.infrastructure.logger import get_logger
from assetembed.main import CodegenMain, run_codegen
from assetembed.pipeline.assets import AssetsPipeline, WebAssetsPipeline
from assetembed.pipeline.walker import PrintWatchSink


@pytest.fixture
def logger():
    return get_logger()


class TestInitializeComponents:
    """Test pipeline construction from configuration."""

    def test_builds_configured_pipelines(self, sample_config, logger):
        """Each pipeline dictionary becomes a finalized pipeline."""
        main = CodegenMain(None, sample_config["assetembed"], logger)

        main.initialize_components()

        assets, web = main.pipelines
        assert isinstance(assets, AssetsPipeline)
        assert isinstance(web, WebAssetsPipeline)
        assert main.codegen.pipelines == [assets, web]
        assert main.codegen.path == sample_config["assetembed"]["output"]["path"]

    def test_web_flags(self, sample_config, logger):
        """Web flags reach the pipeline configuration."""
        main = CodegenMain(None, sample_config["assetembed"], logger)
        main.initialize_components()

        web = main.pipelines[1].config

        assert web.gzip is True
        assert web.brotli is False
        assert web.guess_mime is False
        assert len(web.filters) == 1

    def test_allow_empty_defaults_by_kind(self, asset_dir, logger):
        """Omitted allow_empty uses the default of the pipeline kind."""
        config = {
            "pipelines": [
                {"name": "PLAIN", "root": str(asset_dir)},
                {"name": "WEB", "root": str(asset_dir), "kind": "web"},
                {"name": "STRICT", "root": str(asset_dir), "kind": "web", "allow_empty": False},
            ]
        }
        main = CodegenMain(None, config, logger)

        main.initialize_components()

        assert [p.config.allow_empty for p in main.pipelines] == [False, True, False]

    def test_prefix_policy_and_filters(self, asset_dir, logger):
        """Prefix, policy and filter order are applied."""
        config = {
            "pipelines": [
                {
                    "name": "LUA",
                    "root": str(asset_dir),
                    "prefix": "/scripts",
                    "policy": "whitelist",
                    "filters": [
                        {"type": "exclude", "pattern": "^lua/vendor"},
                        {"type": "include", "extension": "lua"},
                    ],
                }
            ]
        }
        main = CodegenMain(None, config, logger)

        main.initialize_components()

        pipeline = main.pipelines[0]
        assert pipeline.kind == PipelineKind.PLAIN
        assert pipeline.config.prefix == "/scripts"
        assert pipeline.config.policy == ListPolicy.WHITELIST
        assert [r.uri for r in pipeline.collect()] == ["/scripts/lua/init.lua"]

    def test_invalid_config(self, logger):
        """Validation errors propagate."""
        main = CodegenMain(None, {"pipelines": [{"name": "A"}]}, logger)

        with pytest.raises(ValidationError):
            main.initialize_components()

    def test_no_pipelines_warns(self, log_stream):
        """An empty configuration warns."""
        main = CodegenMain(None, {}, get_logger())

        main.initialize_components()

        assert "WARNING - No pipelines configured" in log_stream.getvalue()

    def test_watch_sink(self, asset_dir, logger):
        """Enabled watch creates a print sink with the configured format."""
        config = {
            "watch": {"enabled": True, "format": "cargo:rerun-if-changed={path}"},
            "pipelines": [{"name": "DATA", "root": str(asset_dir)}],
        }
        main = CodegenMain(None, config, logger)

        watch = main._create_watch()

        assert isinstance(watch, PrintWatchSink)
        assert watch.format == "cargo:rerun-if-changed={path}"

    def test_watch_format_without_path(self, asset_dir, logger):
        """A watch format using another placeholder fails before any traversal."""
        config = {
            "watch": {"enabled": True, "format": "{file}"},
            "pipelines": [{"name": "DATA", "root": str(asset_dir)}],
        }
        main = CodegenMain(None, config, logger)

        with pytest.raises(ValidationError, match="\{path\}"):
            main.initialize_components()

        assert main.pipelines == []

    def test_watch_disabled(self, logger):
        """Disabled watch creates no sink."""
        main = CodegenMain(None, {"watch": {"enabled": False}}, logger)

        assert main._create_watch() is None


class TestRun:
    """Test full generation runs."""

    def test_run_writes_artifact(self, sample_config, logger):
        """run() writes the artifact and returns 0."""
        main = CodegenMain(None, sample_config["assetembed"], logger)

        assert main.run() == 0

        content = open(sample_config["assetembed"]["output"]["path"]).read()
        assert "ASSETS: Tuple[Asset, ...]" in content
        assert "/js/app.js.map" not in content

    def test_run_propagates_generation_errors(self, asset_dir, temp_dir, logger):
        """Generation errors are re-raised for the CLI to report."""
        config = {
            "output": {"path": str(temp_dir / "a.py")},
            "pipelines": [
                {
                    "name": "NONE",
                    "root": str(asset_dir),
                    "policy": "whitelist",
                    "filters": [{"type": "include", "extension": "exe"}],
                }
            ],
        }
        main = CodegenMain(None, config, logger)

        with pytest.raises(EmptyResultError) as exc_info:
            main.run()

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_run_logs_failure(self, asset_dir, temp_dir, log_stream):
        """Failures are logged at error level before propagating."""
        config = {
            "output": {"path": str(temp_dir / "a.py")},
            "pipelines": [{"name": "NONE", "root": str(temp_dir / "missing")}],
        }
        main = CodegenMain(None, config, get_logger())

        with pytest.raises(AssetEmbedError):
            main.run()

        assert "ERROR - Generation failed | error_code=NOT_FOUND" in log_stream.getvalue()

    def test_generate_before_initialize(self, logger):
        """generate() without pipelines built raises instead of crashing."""
        main = CodegenMain(None, {}, logger)

        with pytest.raises(AssetEmbedError) as exc_info:
            main.generate()

        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR
        assert "initialize_components" in str(exc_info.value)

    def test_run_keyboard_interrupt(self, sample_config, logger):
        """Interrupts return 130."""
        main = CodegenMain(None, sample_config["assetembed"], logger)

        with patch.object(CodegenMain, "generate", side_effect=KeyboardInterrupt):
            assert main.run() == 130

    def test_cleanup_logs_stats(self, sample_config, log_stream):
        """Final statistics are logged per pipeline."""
        main = CodegenMain(None, sample_config["assetembed"], get_logger())

        main.run()

        assert "Final statistics for ASSETS" in log_stream.getvalue()
        assert "Final statistics for WEB" in log_stream.getvalue()

    def test_run_codegen(self, sample_config, logger):
        """run_codegen runs a controller."""
        assert run_codegen(None, sample_config["assetembed"], logger) == 0

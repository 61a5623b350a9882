#!/usr/bin/env python3
"""Main entry point for assetembed generation runs.

This module handles:
- Configuration validation
- Pipeline construction from configuration dictionaries
- Codegen registration and artifact writing
- Final statistics logging

Example:
    >>> from assetembed.main import run_codegen
    >>> run_codegen(args, config, logger)
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from assetembed.codegen import Codegen
from assetembed.core.constants import (
    DEFAULT_PREFIX,
    DEFAULT_WATCH_FORMAT,
    ConfigKey,
    ErrorCode,
    FilterAction,
    ListPolicy,
    OutputTarget,
    PipelineKind,
)
from assetembed.core.errors import AssetEmbedError
from assetembed.core.validators import validate_config
from assetembed.infrastructure.logger import Logger
from assetembed.pipeline.assets import Assets, WebAssets
from assetembed.pipeline.base import Pipeline, PipelineBuilder
from assetembed.pipeline.walker import PrintWatchSink, WatchCallback
from assetembed.rules.engine import Filter
from assetembed.rules.patterns import ExtensionRule, FilterRule, PatternRule


class CodegenMain:
    """
    Main class for a generation run.

    Builds pipelines from configuration, registers them with a Codegen
    and writes the artifact.
    """

    def __init__(self, args: Optional[argparse.Namespace], config: Dict[str, Any], logger: Logger):
        """
        Initialize codegen main controller.

        Args:
            args: Parsed command-line arguments
            config: Configuration dictionary (contents of the assetembed key)
            logger: Logger instance
        """
        self.args = args
        self.config_dict = config
        self.logger = logger
        self.codegen: Optional[Codegen] = None
        self.pipelines: List[Pipeline] = []

    def initialize_components(self) -> None:
        """
        Validate configuration and build the Codegen.

        Raises:
            ValidationError: If the configuration is invalid
            AssetEmbedError: If a pipeline cannot be built
        """
        self.logger.debug("Validating configuration")
        validate_config(self.config_dict)

        output_config = self.config_dict.get(ConfigKey.OUTPUT) or {}
        target = output_config.get(ConfigKey.OUTPUT_TARGET) or OutputTarget.PYTHON.value

        self.codegen = Codegen(
            path=output_config.get(ConfigKey.OUTPUT_PATH),
            target=target,
            watch=self._create_watch(),
        )

        pipelines_config = self.config_dict.get(ConfigKey.PIPELINES) or []
        for pipeline_dict in pipelines_config:
            pipeline = self._create_pipeline_from_dict(pipeline_dict)
            self.codegen.pipe(pipeline)
            self.pipelines.append(pipeline)
            self.logger.debug(
                f"Added pipeline: {pipeline.identifier}",
                kind=pipeline.kind.value,
                root=pipeline.config.root,
            )

        if not self.pipelines:
            self.logger.warning("No pipelines configured; the artifact will only contain a header")

    def _create_watch(self) -> Optional[WatchCallback]:
        watch_config = self.config_dict.get(ConfigKey.WATCH) or {}
        if not watch_config.get(ConfigKey.WATCH_ENABLED):
            return None
        return PrintWatchSink(watch_config.get(ConfigKey.WATCH_FORMAT) or DEFAULT_WATCH_FORMAT)

    def _create_filter_from_dict(self, filter_dict: Dict[str, Any]) -> Filter:
        """
        Create Filter object from configuration dictionary.

        Args:
            filter_dict: Filter configuration dictionary

        Returns:
            Filter instance

        Raises:
            InvalidRuleError: If filter configuration is invalid
        """
        action = FilterAction(filter_dict[ConfigKey.FILTER_TYPE])

        rule: FilterRule
        if ConfigKey.FILTER_EXTENSION in filter_dict:
            rule = ExtensionRule(filter_dict[ConfigKey.FILTER_EXTENSION])
        else:
            rule = PatternRule(filter_dict[ConfigKey.FILTER_PATTERN])

        return Filter(action, rule)

    def _create_pipeline_from_dict(self, pipeline_dict: Dict[str, Any]) -> Pipeline:
        """
        Create a finalized pipeline from configuration dictionary.

        Args:
            pipeline_dict: Pipeline configuration dictionary

        Returns:
            Pipeline instance
        """
        kind = PipelineKind(pipeline_dict.get(ConfigKey.PIPELINE_KIND, PipelineKind.PLAIN.value))
        name = pipeline_dict[ConfigKey.PIPELINE_NAME]
        root = pipeline_dict[ConfigKey.PIPELINE_ROOT]

        builder: PipelineBuilder
        if kind == PipelineKind.WEB:
            web = WebAssets(name, root)
            web.gzip(pipeline_dict.get(ConfigKey.PIPELINE_GZIP, True))
            web.brotli(pipeline_dict.get(ConfigKey.PIPELINE_BROTLI, True))
            web.guess_mime(pipeline_dict.get(ConfigKey.PIPELINE_GUESS_MIME, False))
            builder = web
        else:
            builder = Assets(name, root)

        builder.prefix(pipeline_dict.get(ConfigKey.PIPELINE_PREFIX, DEFAULT_PREFIX))
        builder.policy(pipeline_dict.get(ConfigKey.PIPELINE_POLICY, ListPolicy.BLACKLIST.value))

        # Omitted means the kind's default
        if ConfigKey.PIPELINE_ALLOW_EMPTY in pipeline_dict:
            builder.allow_empty(pipeline_dict[ConfigKey.PIPELINE_ALLOW_EMPTY])

        for filter_dict in pipeline_dict.get(ConfigKey.PIPELINE_FILTERS) or []:
            builder.filter(self._create_filter_from_dict(filter_dict))

        return builder.build()

    def generate(self) -> int:
        """
        Write the artifact.

        Returns:
            Exit code (0 for success)

        Raises:
            AssetEmbedError: If rendering or writing fails
        """
        if self.codegen is None:
            raise AssetEmbedError(
                "Codegen is not initialized; call initialize_components() first",
                ErrorCode.INTERNAL_ERROR,
            )

        written = self.codegen.write()
        self.logger.debug(f"Artifact complete: {written} bytes")
        return 0

    def cleanup(self) -> None:
        """Log final statistics."""
        for pipeline in self.pipelines:
            self.logger.debug(f"Final statistics for {pipeline.identifier}: {pipeline.get_stats()}")

    def run(self) -> int:
        """
        Run a generation.

        Returns:
            Exit code (0 for success, 130 if interrupted)

        Raises:
            AssetEmbedError: If configuration, rendering or writing fails
        """
        try:
            # Build pipelines
            self.initialize_components()

            # Render and write
            return self.generate()

        except KeyboardInterrupt:
            self.logger.info("Interrupted by user")
            return 130

        except AssetEmbedError as e:
            self.logger.error("Generation failed", error_code=e.error_code.name, path=e.path)
            raise

        finally:
            self.cleanup()


def run_codegen(args: Optional[argparse.Namespace], config: Dict[str, Any], logger: Logger) -> int:
    """
    Main entry point for a generation run.

    Args:
        args: Parsed command-line arguments
        config: Configuration dictionary (contents of the assetembed key)
        logger: Logger instance

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    # Create main controller
    main = CodegenMain(args, config, logger)

    # Run
    return main.run()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py, but can be run directly for testing.
    """
    from assetembed.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

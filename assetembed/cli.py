#!/usr/bin/env python3
"""Command-line interface for assetembed.

This module provides the CLI for generating asset artifacts:
- Argument parsing and validation
- Configuration file loading
- Ad-hoc single pipeline definition
- Logging setup
- Help and version information

Example:
    >>> from assetembed.cli import parse_arguments
    >>> args = parse_arguments(['--root', 'web/dist', '--name', 'WEB', '--web'])
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from assetembed.core.constants import (
    ASSETEMBED_VERSION,
    CARGO_WATCH_FORMAT,
    DEFAULT_PREFIX,
    ConfigKey,
    FilterAction,
    ListPolicy,
    OutputTarget,
    PipelineKind,
)
from assetembed.core.errors import AssetEmbedError
from assetembed.core.validators import ValidationError, validate_logging_config, validate_watch_format
from assetembed.infrastructure.config_manager import ROOT_KEY, ConfigManager, ConfigSource
from assetembed.infrastructure.logger import Logger, set_global_logger

DESCRIPTION = "assetembed - Build-time asset embedding"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


class OrderedFilterAction(argparse.Action):
    """Collect filter flags into one list, keeping command-line order."""

    def __init__(self, option_strings, dest, filter_type, rule_field, **kwargs):
        self.filter_type = filter_type
        self.rule_field = rule_field
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        filters = list(getattr(namespace, self.dest, None) or [])
        filters.append({ConfigKey.FILTER_TYPE: self.filter_type, self.rule_field: values})
        setattr(namespace, self.dest, filters)


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If arguments are inconsistent
    """
    parser = argparse.ArgumentParser(
        prog="assetembed",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Generate from a configuration file
  assetembed --config assetembed.yaml --output build/assets.py

  # Embed everything except PNG files
  assetembed --root resources --name ASSETS --exclude-ext png --output assets.py

  # Web assets with gzip siblings only, inside a Cargo build script
  assetembed --root web/dist --name WEB --web --no-brotli --target rust \\
      --watch --watch-format '{CARGO_WATCH_FORMAT}'

Filters apply in the order given; the first matching filter decides.
        """,
    )

    # Version
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {ASSETEMBED_VERSION}",
    )

    # Configuration file
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    # Ad-hoc pipeline
    pipeline_group = parser.add_argument_group("pipeline options")

    pipeline_group.add_argument(
        "-r",
        "--root",
        metavar="DIR",
        type=str,
        help="Asset root directory of an ad-hoc pipeline",
    )

    pipeline_group.add_argument(
        "-n",
        "--name",
        metavar="IDENT",
        type=str,
        help="Name of the generated constant (required with --root)",
    )

    pipeline_group.add_argument(
        "--web",
        action="store_true",
        help="Generate web assets with compressed variants and MIME types",
    )

    pipeline_group.add_argument(
        "--prefix",
        metavar="PREFIX",
        type=str,
        default=DEFAULT_PREFIX,
        help="URI prefix (default: /)",
    )

    policy_group = pipeline_group.add_mutually_exclusive_group()
    policy_group.add_argument(
        "--whitelist",
        action="store_const",
        dest="policy",
        const=ListPolicy.WHITELIST.value,
        help="Reject files unless a filter includes them",
    )
    policy_group.add_argument(
        "--blacklist",
        action="store_const",
        dest="policy",
        const=ListPolicy.BLACKLIST.value,
        help="Accept files unless a filter excludes them (default)",
    )

    pipeline_group.add_argument(
        "--allow-empty",
        action="store_true",
        default=None,
        help="Do not fail when no file matches",
    )

    # Filters
    filter_group = parser.add_argument_group("filter options (applied in order)")

    for flag, filter_type, rule_field, metavar, help_text in (
        ("--include-ext", FilterAction.INCLUDE, ConfigKey.FILTER_EXTENSION, "EXT", "Include files with extension"),
        ("--exclude-ext", FilterAction.EXCLUDE, ConfigKey.FILTER_EXTENSION, "EXT", "Exclude files with extension"),
        ("--include-regex", FilterAction.INCLUDE, ConfigKey.FILTER_PATTERN, "REGEX", "Include paths matching regex"),
        ("--exclude-regex", FilterAction.EXCLUDE, ConfigKey.FILTER_PATTERN, "REGEX", "Exclude paths matching regex"),
    ):
        filter_group.add_argument(
            flag,
            metavar=metavar,
            dest="filters",
            action=OrderedFilterAction,
            filter_type=filter_type.value,
            rule_field=rule_field,
            help=help_text,
        )

    # Web options
    web_group = parser.add_argument_group("web options")

    web_group.add_argument(
        "--no-gzip",
        action="store_true",
        help="Do not attach .gz siblings",
    )

    web_group.add_argument(
        "--no-brotli",
        action="store_true",
        help="Do not attach .br siblings",
    )

    web_group.add_argument(
        "--guess-mime",
        action="store_true",
        help="Guess MIME types from file names (default: text/plain)",
    )

    # Output options
    output_group = parser.add_argument_group("output options")

    output_group.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        type=str,
        help="Generated file path (default: $OUT_DIR/assets.<ext>)",
    )

    output_group.add_argument(
        "-t",
        "--target",
        choices=[t.value for t in OutputTarget],
        help="Generated language (default: python)",
    )

    output_group.add_argument(
        "--watch",
        action="store_true",
        help="Print a rebuild hint for every visited path",
    )

    output_group.add_argument(
        "--watch-format",
        metavar="FMT",
        type=str,
        help="Rebuild hint format, {path} is replaced (default: rerun-if-changed={path})",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write logs to FILE",
    )

    # Parse arguments
    parsed = parser.parse_args(args)

    # Validate arguments
    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    # Either config or root must be specified
    if not args.config and not args.root:
        raise CLIError(
            "Either --config or --root must be specified\n" "Use --help for usage information"
        )

    if args.root:
        if not args.name:
            raise CLIError("--name is required with --root")

        root_path = Path(args.root)

        if not root_path.exists():
            raise CLIError(f"Asset root does not exist: {args.root}")

        if not root_path.is_dir():
            raise CLIError(f"Asset root is not a directory: {args.root}")

    elif args.name or args.filters:
        raise CLIError("Pipeline options require --root")

    if not args.web and (args.no_gzip or args.no_brotli or args.guess_mime):
        raise CLIError("--no-gzip, --no-brotli and --guess-mime require --web")

    if args.watch_format is not None:
        try:
            validate_watch_format(args.watch_format)
        except ValidationError as e:
            raise CLIError(str(e))

    # Validate config file (if specified)
    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")


def build_pipeline_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the ad-hoc pipeline configuration from command-line arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Pipeline configuration dictionary
    """
    pipeline: Dict[str, Any] = {
        ConfigKey.PIPELINE_NAME: args.name,
        ConfigKey.PIPELINE_KIND: PipelineKind.WEB.value if args.web else PipelineKind.PLAIN.value,
        ConfigKey.PIPELINE_ROOT: args.root,
        ConfigKey.PIPELINE_PREFIX: args.prefix,
        ConfigKey.PIPELINE_POLICY: args.policy or ListPolicy.BLACKLIST.value,
        ConfigKey.PIPELINE_FILTERS: list(args.filters or []),
    }

    if args.web:
        pipeline[ConfigKey.PIPELINE_GZIP] = not args.no_gzip
        pipeline[ConfigKey.PIPELINE_BROTLI] = not args.no_brotli
        pipeline[ConfigKey.PIPELINE_GUESS_MIME] = args.guess_mime

    if args.allow_empty is not None:
        pipeline[ConfigKey.PIPELINE_ALLOW_EMPTY] = args.allow_empty

    return pipeline


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Only options given on the command line are included, so that they
    override the configuration file without masking it.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    config: Dict[str, Any] = {}

    output: Dict[str, Any] = {}
    if args.output:
        output[ConfigKey.OUTPUT_PATH] = args.output
    if args.target:
        output[ConfigKey.OUTPUT_TARGET] = args.target
    if output:
        config[ConfigKey.OUTPUT] = output

    logging_config: Dict[str, Any] = {}
    if args.debug:
        logging_config["level"] = "DEBUG"
    if args.log_file:
        logging_config["file"] = args.log_file
    if logging_config:
        config[ConfigKey.LOGGING] = logging_config

    watch: Dict[str, Any] = {}
    if args.watch or args.watch_format:
        watch[ConfigKey.WATCH_ENABLED] = True
    if args.watch_format:
        watch[ConfigKey.WATCH_FORMAT] = args.watch_format
    if watch:
        config[ConfigKey.WATCH] = watch

    # An ad-hoc pipeline replaces the pipelines of the configuration file
    if args.root:
        config[ConfigKey.PIPELINES] = [build_pipeline_from_args(args)]

    return {ROOT_KEY: config}


def load_configuration(args: argparse.Namespace) -> ConfigManager:
    """
    Load layered configuration for a run.

    Precedence: defaults < configuration file < ASSETEMBED_* environment
    variables < command-line arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Populated configuration manager

    Raises:
        ConfigError: If the configuration file cannot be loaded or parsed
    """
    manager = ConfigManager(config_file=args.config)
    manager.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    return manager


def setup_logging(args: argparse.Namespace, config: Dict[str, Any]) -> Logger:
    """
    Setup logging based on arguments and configuration.

    The logger becomes the global logger used by the pipelines.

    Args:
        args: Parsed arguments namespace
        config: Configuration dictionary (contents of the assetembed key)

    Returns:
        Configured logger instance

    Raises:
        ValidationError: If the logging section is invalid
    """
    logging_config = config.get(ConfigKey.LOGGING) or {}
    validate_logging_config(logging_config)

    log_level = "DEBUG" if args.debug else logging_config.get("level", "INFO")
    log_file = args.log_file or logging_config.get("file")

    logger = Logger("assetembed", level=log_level)

    if log_file:
        logger.log_to_file(os.path.expanduser(log_file))
        logger.debug(f"Logging to file: {log_file}")

    set_global_logger(logger)
    return logger


def print_banner(logger: Logger) -> None:
    """
    Print startup banner with version information.

    Args:
        logger: Logger instance
    """
    logger.debug("=" * 60)
    logger.debug(f"assetembed v{ASSETEMBED_VERSION}")
    logger.debug(DESCRIPTION)
    logger.debug("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Handles argument parsing, validation and configuration loading, then
    passes control to main.py for artifact generation.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 success, 1 failure, 130 interrupted)
    """
    try:
        # Parse arguments
        args = parse_arguments(argv)

        # Load configuration
        config = load_configuration(args).section()

        # Setup logging
        logger = setup_logging(args, config)
        print_banner(logger)

        # Import and run main
        from assetembed.main import run_codegen

        return run_codegen(args, config, logger)

    except (CLIError, AssetEmbedError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

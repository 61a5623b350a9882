"""
assetembed Core: Input Validators.

This module provides validation functions for the YAML configuration,
filter rule inputs and the identifiers used for generated constants.
"""
import keyword
import re
from typing import Any, Dict, Pattern, Union

from assetembed.core.constants import (
    LOG_LEVELS,
    PYTHON_RESERVED_NAMES,
    RUST_RESERVED_NAMES,
    ConfigKey,
    ErrorCode,
    FilterAction,
    ListPolicy,
    OutputTarget,
    PipelineKind,
)
from assetembed.core.errors import AssetEmbedError, InvalidIdentifierError, InvalidRuleError

RUST_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RUST_KEYWORDS = frozenset(
    {
        "as", "async", "await", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while",
    }
)


class ValidationError(AssetEmbedError):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message, error_code)


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate assetembed configuration structure.

    Args:
        config: Configuration dictionary (contents of the ``assetembed`` key)

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    # Validate output
    if ConfigKey.OUTPUT in config and config[ConfigKey.OUTPUT] is not None:
        validate_output_config(config[ConfigKey.OUTPUT])

    # Validate logging
    if config.get(ConfigKey.LOGGING) is not None:
        validate_logging_config(config[ConfigKey.LOGGING])

    # Validate watch
    if config.get(ConfigKey.WATCH) is not None:
        validate_watch_config(config[ConfigKey.WATCH])

    # Validate pipelines
    if ConfigKey.PIPELINES in config:
        pipelines = config[ConfigKey.PIPELINES]
        if not isinstance(pipelines, list):
            raise ValidationError("Pipelines must be a list")

        target = OutputTarget.PYTHON.value
        output = config.get(ConfigKey.OUTPUT) or {}
        if isinstance(output, dict) and output.get(ConfigKey.OUTPUT_TARGET):
            target = output[ConfigKey.OUTPUT_TARGET]

        seen = set()
        for i, pipeline in enumerate(pipelines):
            try:
                validate_pipeline_config(pipeline, target)
            except AssetEmbedError as e:
                raise ValidationError(f"Invalid pipeline configuration at index {i}: {e}")

            name = pipeline[ConfigKey.PIPELINE_NAME]
            if name in seen:
                raise ValidationError(f"Duplicate pipeline name: {name}", ErrorCode.CONFLICT)
            seen.add(name)

    return True


def validate_output_config(output: Dict[str, Any]) -> bool:
    """Validate output configuration.

    Args:
        output: Output configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If output config is invalid
    """
    if not isinstance(output, dict):
        raise ValidationError("Output configuration must be a dictionary")

    unknown_fields = set(output.keys()) - {ConfigKey.OUTPUT_PATH, ConfigKey.OUTPUT_TARGET}
    if unknown_fields:
        raise ValidationError(
            f"Unknown output configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    path = output.get(ConfigKey.OUTPUT_PATH)
    if path is not None:
        validate_path(path)

    target = output.get(ConfigKey.OUTPUT_TARGET)
    if target is not None:
        try:
            OutputTarget(target)
        except ValueError:
            valid_targets = [t.value for t in OutputTarget]
            raise ValidationError(f"Invalid output target: {target}. Must be one of {valid_targets}")

    return True


def validate_logging_config(logging_config: Dict[str, Any]) -> bool:
    """Validate logging configuration.

    Args:
        logging_config: Logging configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If the level is unknown or the file path is unusable
    """
    if not isinstance(logging_config, dict):
        raise ValidationError("Logging configuration must be a dictionary")

    unknown_fields = set(logging_config.keys()) - {"level", "file"}
    if unknown_fields:
        raise ValidationError(
            f"Unknown logging configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    level = logging_config.get("level")
    if level is not None and (not isinstance(level, str) or level.upper() not in LOG_LEVELS):
        raise ValidationError(f"Invalid logging level: {level}. Must be one of {list(LOG_LEVELS)}")

    log_file = logging_config.get("file")
    if log_file is not None:
        validate_path(log_file)

    return True


def validate_watch_config(watch: Dict[str, Any]) -> bool:
    """Validate watch configuration.

    Raises:
        ValidationError: If a field is unknown or malformed
    """
    if not isinstance(watch, dict):
        raise ValidationError("Watch configuration must be a dictionary")

    unknown_fields = set(watch.keys()) - {ConfigKey.WATCH_ENABLED, ConfigKey.WATCH_FORMAT}
    if unknown_fields:
        raise ValidationError(
            f"Unknown watch configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    enabled = watch.get(ConfigKey.WATCH_ENABLED)
    if enabled is not None and not isinstance(enabled, bool):
        raise ValidationError(f"Watch enabled must be boolean: {enabled}")

    fmt = watch.get(ConfigKey.WATCH_FORMAT)
    if fmt is not None:
        validate_watch_format(fmt)

    return True


def validate_watch_format(fmt: str) -> bool:
    """Validate a watch line format.

    The only replacement field available is ``{path}``.

    Raises:
        ValidationError: If the format cannot be rendered with a path
    """
    if not isinstance(fmt, str):
        raise ValidationError(f"Watch format must be string, got {type(fmt)}")

    try:
        fmt.format(path="")
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise ValidationError(
            f"Invalid watch format {fmt!r}: only the {{path}} placeholder is available ({e!r})"
        )

    return True


def validate_pipeline_config(pipeline: Dict[str, Any], target: str = "python") -> bool:
    """Validate a single pipeline configuration.

    Args:
        pipeline: Pipeline configuration dictionary
        target: Output language the identifier must be valid in

    Returns:
        True if valid

    Raises:
        ValidationError: If pipeline is invalid
        InvalidIdentifierError: If the pipeline name is not a valid identifier
        InvalidRuleError: If one of the filters is malformed
    """
    if not isinstance(pipeline, dict):
        raise ValidationError("Pipeline must be a dictionary")

    # Required fields: name, root
    if ConfigKey.PIPELINE_NAME not in pipeline:
        raise ValidationError("Pipeline must have 'name' field")
    validate_identifier(pipeline[ConfigKey.PIPELINE_NAME], target)

    if ConfigKey.PIPELINE_ROOT not in pipeline:
        raise ValidationError("Pipeline must have 'root' field")
    validate_path(pipeline[ConfigKey.PIPELINE_ROOT])

    if ConfigKey.PIPELINE_KIND in pipeline:
        kind = pipeline[ConfigKey.PIPELINE_KIND]
        try:
            PipelineKind(kind)
        except ValueError:
            valid_kinds = [k.value for k in PipelineKind]
            raise ValidationError(f"Invalid pipeline kind: {kind}. Must be one of {valid_kinds}")

    if ConfigKey.PIPELINE_POLICY in pipeline:
        policy = pipeline[ConfigKey.PIPELINE_POLICY]
        try:
            ListPolicy(policy)
        except ValueError:
            valid_policies = [p.value for p in ListPolicy]
            raise ValidationError(
                f"Invalid filter policy: {policy}. Must be one of {valid_policies}"
            )

    if ConfigKey.PIPELINE_PREFIX in pipeline:
        prefix = pipeline[ConfigKey.PIPELINE_PREFIX]
        if not isinstance(prefix, str):
            raise ValidationError(f"Pipeline prefix must be string: {prefix}")

    for flag in (
        ConfigKey.PIPELINE_GZIP,
        ConfigKey.PIPELINE_BROTLI,
        ConfigKey.PIPELINE_ALLOW_EMPTY,
        ConfigKey.PIPELINE_GUESS_MIME,
    ):
        if flag in pipeline and not isinstance(pipeline[flag], bool):
            raise ValidationError(f"Pipeline {flag} must be boolean: {pipeline[flag]}")

    filters = pipeline.get(ConfigKey.PIPELINE_FILTERS, [])
    if not isinstance(filters, list):
        raise ValidationError("Filters must be a list")
    for i, filter_config in enumerate(filters):
        try:
            validate_filter_config(filter_config)
        except InvalidRuleError as e:
            raise InvalidRuleError(f"Invalid filter at index {i}: {e}", path=e.path)

    return True


def validate_filter_config(filter_config: Dict[str, Any]) -> bool:
    """Validate a filter configuration.

    A filter has a 'type' (include/exclude) and exactly one of
    'extension' or 'pattern'.

    Args:
        filter_config: Filter configuration dictionary

    Returns:
        True if valid

    Raises:
        InvalidRuleError: If filter is invalid
    """
    if not isinstance(filter_config, dict):
        raise InvalidRuleError("Filter must be a dictionary")

    if ConfigKey.FILTER_TYPE not in filter_config:
        raise InvalidRuleError("Filter must have 'type' field")

    filter_type = filter_config[ConfigKey.FILTER_TYPE]
    try:
        FilterAction(filter_type)
    except ValueError:
        valid_types = [a.value for a in FilterAction]
        raise InvalidRuleError(f"Invalid filter type: {filter_type}. Must be one of {valid_types}")

    has_extension = ConfigKey.FILTER_EXTENSION in filter_config
    has_pattern = ConfigKey.FILTER_PATTERN in filter_config

    if has_extension == has_pattern:
        raise InvalidRuleError("Filter must have exactly one of 'extension' or 'pattern'")

    if has_extension:
        validate_extension(filter_config[ConfigKey.FILTER_EXTENSION])
    else:
        validate_pattern(filter_config[ConfigKey.FILTER_PATTERN])

    return True


def validate_extension(extension: str) -> bool:
    """Validate a file extension for an extension rule.

    Args:
        extension: Extension without a leading period (e.g. "html")

    Returns:
        True if valid

    Raises:
        InvalidRuleError: If extension is invalid
    """
    if not isinstance(extension, str):
        raise InvalidRuleError(f"Extension must be string, got {type(extension)}")

    if not extension:
        raise InvalidRuleError("Extension cannot be empty")

    if extension.startswith("."):
        raise InvalidRuleError(
            f"Extension should not contain a period prefix: {extension}", path=extension
        )

    if "/" in extension or "\\" in extension or "\0" in extension:
        raise InvalidRuleError(f"Extension contains invalid characters: {extension!r}")

    return True


def validate_pattern(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    """Validate and compile a regex pattern.

    Args:
        pattern: Regex pattern string or an already compiled pattern

    Returns:
        Compiled regex pattern

    Raises:
        InvalidRuleError: If pattern is invalid
    """
    if isinstance(pattern, re.Pattern):
        return pattern

    if not isinstance(pattern, str):
        raise InvalidRuleError(f"Pattern must be string, got {type(pattern)}")

    if not pattern:
        raise InvalidRuleError("Pattern cannot be empty")

    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidRuleError(f"Failed to compile regex pattern {pattern!r}: {e}", path=pattern)


def validate_identifier(name: str, target: Union[str, OutputTarget] = OutputTarget.PYTHON) -> bool:
    """Validate a constant name for the generated artifact.

    Args:
        name: Identifier for the generated constant
        target: Output language the identifier must be valid in

    Returns:
        True if valid

    Raises:
        InvalidIdentifierError: If name is not a valid identifier
    """
    if not isinstance(name, str) or not name:
        raise InvalidIdentifierError(f"Identifier must be a non-empty string: {name!r}")

    target = OutputTarget(target)

    if target == OutputTarget.PYTHON:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise InvalidIdentifierError(f"Not a valid Python identifier: {name!r}")
        reserved = PYTHON_RESERVED_NAMES
    else:
        if not RUST_IDENTIFIER.match(name) or name == "_" or name in RUST_KEYWORDS:
            raise InvalidIdentifierError(f"Not a valid Rust identifier: {name!r}")
        reserved = RUST_RESERVED_NAMES

    if name in reserved:
        raise InvalidIdentifierError(
            f"Identifier {name!r} is used by the generated {target.value} code; choose another name"
        )

    return True


def validate_path(path: str) -> bool:
    """Validate that a configured path is usable.

    Args:
        path: Path to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If path is invalid
    """
    if not path:
        raise ValidationError("Path cannot be empty")

    if not isinstance(path, str):
        raise ValidationError(f"Path must be string, got {type(path)}")

    # Check for null bytes
    if "\0" in path:
        raise ValidationError("Path contains null bytes")

    # Check for control characters
    if any(ord(c) < 32 and c not in "\t\n\r" for c in path):
        raise ValidationError("Path contains control characters")

    return True

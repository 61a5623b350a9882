"""
assetembed Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and the enums shared
by the filter rules, the pipelines and the configuration layer.
"""
from enum import Enum, IntEnum
from typing import TypeAlias

# Version information
ASSETEMBED_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for assetembed operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad rule, identifier or configuration
    NOT_FOUND = 2  # File, directory or match doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Duplicate URI
    INTERNAL_ERROR = 6  # Unexpected I/O failure


# Type aliases for clarity
FilePath: TypeAlias = str
Uri: TypeAlias = str
Identifier: TypeAlias = str


class ListPolicy(Enum):
    """Default disposition when no filter matches a candidate."""

    BLACKLIST = "blacklist"  # Accept unless excluded
    WHITELIST = "whitelist"  # Reject unless included


class FilterAction(Enum):
    """Action to take when a filter's rule matches."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class PipelineKind(Enum):
    """Kinds of asset pipelines."""

    PLAIN = "plain"  # Asset{uri, data}
    WEB = "web"  # WebAsset{uri, data, data_gz, data_br, mime}


class OutputTarget(Enum):
    """Languages the artifact generator can emit."""

    PYTHON = "python"
    RUST = "rust"

    @property
    def extension(self) -> str:
        """File extension of the generated artifact."""
        return {OutputTarget.PYTHON: "py", OutputTarget.RUST: "rs"}[self]


# Compression sibling suffixes
GZIP_SUFFIX = ".gz"
BROTLI_SUFFIX = ".br"

# Generated artifact defaults
DEFAULT_FILENAME_STEM = "assets"
OUT_DIR_ENV = "OUT_DIR"
DEFAULT_PREFIX = "/"
DEFAULT_MIME = "text/plain"
INDEX_FILENAME = "index.html"

# Watch signal
DEFAULT_WATCH_FORMAT = "rerun-if-changed={path}"
CARGO_WATCH_FORMAT = "cargo:rerun-if-changed={path}"

# Logging level names accepted in configuration
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Names the generated code uses itself; a constant may not shadow them
PYTHON_RESERVED_NAMES = frozenset({"Tuple", "Asset", "WebAsset"})
RUST_RESERVED_NAMES = frozenset({"Asset", "WebAsset", "Some", "None"})


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    OUTPUT = "output"
    PIPELINES = "pipelines"
    LOGGING = "logging"
    WATCH = "watch"

    # Output configuration
    OUTPUT_PATH = "path"
    OUTPUT_TARGET = "target"

    # Pipeline configuration
    PIPELINE_NAME = "name"
    PIPELINE_KIND = "kind"
    PIPELINE_ROOT = "root"
    PIPELINE_PREFIX = "prefix"
    PIPELINE_POLICY = "policy"
    PIPELINE_FILTERS = "filters"
    PIPELINE_GZIP = "gzip"
    PIPELINE_BROTLI = "brotli"
    PIPELINE_ALLOW_EMPTY = "allow_empty"
    PIPELINE_GUESS_MIME = "guess_mime"

    # Filter configuration
    FILTER_TYPE = "type"
    FILTER_EXTENSION = "extension"
    FILTER_PATTERN = "pattern"

    # Watch configuration
    WATCH_ENABLED = "enabled"
    WATCH_FORMAT = "format"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.OUTPUT: {
        ConfigKey.OUTPUT_PATH: None,
        ConfigKey.OUTPUT_TARGET: OutputTarget.PYTHON.value,
    },
    ConfigKey.PIPELINES: [],
    ConfigKey.LOGGING: {
        "level": "INFO",
        "file": None,
    },
    ConfigKey.WATCH: {
        ConfigKey.WATCH_ENABLED: False,
        ConfigKey.WATCH_FORMAT: DEFAULT_WATCH_FORMAT,
    },
}

"""assetembed Infrastructure Layer.

This layer provides services used by the pipelines and the CLI:
- ConfigManager: Layered YAML/environment configuration
- Logger: Structured logging system
"""

from .config_manager import ConfigError, ConfigManager, ConfigSource
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "ConfigManager",
]

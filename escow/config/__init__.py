"""Configuration management for escow."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    DirectoryType,
    LogFormat,
    LogLevel,
    LoggingConfig,
    LookupConfig,
    PathsConfig,
)

__all__ = [
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "AppConfig",
    "LookupConfig",
    "PathsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DirectoryType",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]

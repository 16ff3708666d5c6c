"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_ENVIRONMENT = "local"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        data_dir: Optional[Path] = None,
        environment: Optional[str] = None,
    ):
        self.log_level = log_level
        self.data_dir = data_dir
        self.environment = environment or DEFAULT_ENVIRONMENT


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ESCOW_DATA_DIR: Override paths.data_dir from the config file
    - ESCOW_ENVIRONMENT: Label attached to every log record (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    data_dir_str = os.getenv("ESCOW_DATA_DIR")
    environment = os.getenv("ESCOW_ENVIRONMENT")

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
    else:
        log_level = None

    data_dir = None
    if data_dir_str is not None:
        if not data_dir_str.strip():
            errors.append("ESCOW_DATA_DIR is set but empty")
        else:
            data_dir = Path(data_dir_str.strip())
            if data_dir.exists() and not data_dir.is_dir():
                errors.append(f"ESCOW_DATA_DIR is not a directory: {data_dir}")

    if environment is not None:
        environment = environment.strip() or None

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level,
        data_dir=data_dir,
        environment=environment,
    )

"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from ncd_screen.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from ncd_screen.config.schema import BatchConfig, Config, LoggingConfig, ScreeningConfig
from ncd_screen.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "NCD_SCREEN_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (NCD_SCREEN_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> year = config.screening.reference_year
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or the root is not an object
    """
    if not config_path.exists():
        logger.info(f"Config file not found: {config_path}. Using default configuration.")
        # Deep copy so callers never mutate the defaults
        return json.loads(json.dumps(DEFAULT_CONFIG))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file must contain a JSON object: {config_path}\n"
            f"Fix: Wrap settings in {{ ... }} with screening, logging and batch sections"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply NCD_SCREEN_* environment variables on top of file values.

    Batch settings use the NCD_SCREEN_BATCH_ prefix; see ENV_OVERRIDES for
    the full list.
    """
    for suffix, (section, key, parse) in ENV_OVERRIDES.items():
        variable = f"{ENV_PREFIX}{suffix}"
        raw = os.getenv(variable)
        if not raw:
            continue
        config_dict.setdefault(section, {})[key] = parse(raw, variable)
        logger.debug(f"Override: {section}.{key} from {variable}")
    return config_dict


def _parse_bool(value: str, variable: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def _parse_str(value: str, variable: str) -> str:
    return value


def _parse_int(value: str, variable: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid integer in environment variable {variable}: {value!r}\n"
            f"Fix: Set {variable} to a whole number"
        ) from e


# suffix after NCD_SCREEN_ -> (config section, field, parser)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str, str], Any]]] = {
    "REFERENCE_YEAR": ("screening", "reference_year", _parse_int),
    "INCLUDE_DETAILS": ("screening", "include_details", _parse_bool),
    "LOG_LEVEL": ("logging", "level", _parse_str),
    "LOG_FILE": ("logging", "log_file", _parse_str),
    "REDACT_PII": ("logging", "redact_pii", _parse_bool),
    "BATCH_FAIL_FAST": ("batch", "fail_fast", _parse_bool),
    "BATCH_OUTPUT_DIR": ("batch", "output_dir", _parse_str),
}


def get_screening_config(config: Config) -> ScreeningConfig:
    """Get screening engine configuration.

    Args:
        config: Configuration instance

    Returns:
        ScreeningConfig instance

    Example:
        >>> config = load_config()
        >>> screening_cfg = get_screening_config(config)
        >>> year = screening_cfg.reference_year
    """
    return config.screening


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration.

    Args:
        config: Configuration instance

    Returns:
        LoggingConfig instance
    """
    return config.logging


def get_batch_config(config: Config) -> BatchConfig:
    """Get batch screening configuration.

    Args:
        config: Configuration instance

    Returns:
        BatchConfig instance
    """
    return config.batch

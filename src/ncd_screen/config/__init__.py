"""Config module.

This module provides configuration management functionality.
"""

from ncd_screen.config.manager import (
    get_batch_config,
    get_logging_config,
    get_screening_config,
    load_config,
)
from ncd_screen.config.schema import (
    BatchConfig,
    Config,
    LoggingConfig,
    ScreeningConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_screening_config",
    "get_logging_config",
    "get_batch_config",
    # Configuration models
    "Config",
    "ScreeningConfig",
    "LoggingConfig",
    "BatchConfig",
]

"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "screening": {
        # None means the current calendar year at analysis time
        "reference_year": None,
        "include_details": False,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/ncd-screen.log",
        # Patient names are redacted unless the user opts out
        "redact_pii": True,
    },
    "batch": {
        "fail_fast": False,
        "output_dir": "output",
    },
}

DEFAULT_CONFIG_PATH = "config/config.json"

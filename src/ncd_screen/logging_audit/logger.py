"""Logging configuration and logger factory for NCD Screen.

Console output goes to stderr so that ``--json`` results on stdout stay
parseable. A rotating file handler always records DEBUG and above; both
handlers share a formatter that can strip patient names.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .formatters import PIIRedactingFormatter

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "ncd-screen.log"
LOG_FILE_ENV_VAR = "NCD_SCREEN_LOG_FILE"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

CONSOLE_HANDLER_NAME = "ncd-screen-console"
FILE_HANDLER_NAME = "ncd-screen-file"


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return log_file
    env_log_file = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE


def _owned_handlers(root_logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in root_logger.handlers if h.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME)
    ]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_pii: bool = True,
) -> None:
    """Configure root logging for a screening session.

    Safe to call more than once: handlers installed by an earlier call are
    closed and replaced.

    Args:
        level: Console log level, one of LOG_LEVELS. The file always gets DEBUG.
        log_file: Log file path. Falls back to $NCD_SCREEN_LOG_FILE, then
            DEFAULT_LOG_FILE.
        redact_pii: Replace patient names in every handler's output

    Raises:
        ValueError: If level is not a known log level
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", log_file=Path("logs/clinic.log"))
    """
    if level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(LOG_LEVELS)}"
        )
    console_level = getattr(logging, level.upper())

    log_file = _resolve_log_file(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(
            f"Failed to create log directory: {log_file.parent}. "
            f"Ensure write permissions are available. Error: {e}"
        ) from e

    root_logger = logging.getLogger()
    for handler in _owned_handlers(root_logger):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.DEBUG)

    formatter = PIIRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_pii=redact_pii)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        root_logger.warning(f"Cannot write log file {log_file} ({e}); logging to console only")
        return
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


def console_handlers() -> list[logging.Handler]:
    """Return the console handler(s) installed by configure_logging."""
    return [h for h in logging.getLogger().handlers if h.get_name() == CONSOLE_HANDLER_NAME]


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module, typically ``__name__``."""
    return logging.getLogger(module_name)

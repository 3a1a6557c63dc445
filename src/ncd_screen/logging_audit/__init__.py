"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import format_audit_message, log_audit_event
from .formatters import PIIRedactingFormatter, redact_names
from .logger import configure_logging, console_handlers, get_logger

__all__ = [
    "configure_logging",
    "console_handlers",
    "format_audit_message",
    "get_logger",
    "log_audit_event",
    "PIIRedactingFormatter",
    "redact_names",
]

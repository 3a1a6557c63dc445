"""Audit trail for screening runs.

Every analysis, CSV validation and batch screen emits one ``AUDIT [...]``
line. Events used by the CLI:

- ANALYSIS_COMPLETED / ANALYSIS_FAILED: single profile analysed
- SCENARIO_RUN: built-in scenario analysed
- CSV_VALIDATED: CSV file checked without screening
- BATCH_SCREENED: CSV file screened
"""

import time
import uuid
from typing import Any

from .logger import get_logger

logger = get_logger(__name__)

# Well-known fields come first, in this order; anything else follows as given
AUDIT_FIELD_ORDER = (
    "status",
    "input_file",
    "record_count",
    "cbac_score",
    "duration",
    "error_count",
    "error_message",
    "correlation_id",
)


def _format_field(field: str, value: Any) -> str:
    if field == "duration" and isinstance(value, (int, float)):
        return f"duration={value:.2f}s"
    return f"{field}={value}"


def format_audit_message(event_type: str, details: dict[str, Any]) -> str:
    """Render an audit event as ``AUDIT [TYPE] | field=value | ...``.

    The timestamp is kept out of the message; log records carry their own.
    """
    parts = [f"AUDIT [{event_type}]"]
    parts.extend(_format_field(f, details[f]) for f in AUDIT_FIELD_ORDER if f in details)
    parts.extend(
        _format_field(k, v)
        for k, v in details.items()
        if k not in AUDIT_FIELD_ORDER and k != "timestamp"
    )
    return " | ".join(parts)


def log_audit_event(event_type: str, details: dict[str, Any]) -> None:
    """Log an audit trail event.

    Failures (``status == "failure"``) are logged at ERROR, everything else
    at INFO. A correlation id is generated when the caller does not pass
    one. The details dictionary is not modified.

    Args:
        event_type: Event name, e.g. "BATCH_SCREENED"
        details: Event fields such as status, input_file, record_count,
            cbac_score, duration (seconds), error_count, error_message

    Example:
        >>> log_audit_event("BATCH_SCREENED", {
        ...     "status": "success",
        ...     "input_file": "patients.csv",
        ...     "record_count": 100,
        ...     "duration": 0.4,
        ... })
    """
    event = {"timestamp": time.time(), "correlation_id": str(uuid.uuid4()), **details}
    message = format_audit_message(event_type, event)
    if event.get("status") == "failure":
        logger.error(message)
    else:
        logger.info(message)

"""Stored profile sanitization.

Stored profiles may come from older versions of the tool or be hand-edited.
Sanitization keeps only the keys the current profile shape knows about,
drops values whose type does not match the default shape, and translates
legacy fields, so that stale data never corrupts a screening.
"""

import math
from typing import Any

from ncd_screen.engine.thresholds import STICKS_PER_PACK
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.profile import PatientProfile

logger = get_logger(__name__)

# Authoritative default shape of a stored profile
DEFAULT_PROFILE_DATA: dict[str, Any] = PatientProfile().to_dict()

LEGACY_PACKS_PER_DAY_KEY = "smoking_packs_per_day"

# Numeric fields that may legitimately be null in storage
OPTIONAL_NUMERIC_KEYS = frozenset(
    {
        "age",
        "height_cm",
        "weight_kg",
        "smoking_sticks_per_day",
        "smoking_years",
        "quit_smoking_year",
    }
)
OPTIONAL_TEXT_KEYS = frozenset({"womens_health_status"})


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _matches_default_type(key: str, value: Any) -> bool:
    """Check a stored value against the type of the default shape."""
    if key in OPTIONAL_NUMERIC_KEYS:
        return value is None or _is_number(value)
    if key in OPTIONAL_TEXT_KEYS:
        return value is None or isinstance(value, str)

    default = DEFAULT_PROFILE_DATA[key]
    if isinstance(default, list):
        return isinstance(value, list)
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, (int, float)):
        return _is_number(value)
    return isinstance(value, type(default))


def _clean_family_history(entries: list[Any]) -> list[dict[str, Any]]:
    cleaned = []
    for entry in entries:
        if isinstance(entry, dict) and isinstance(entry.get("condition"), str) and entry["condition"]:
            cleaned.append(entry)
        else:
            logger.warning("Dropping malformed stored family history entry")
    return cleaned


def sanitize_stored_profile(stored: dict[str, Any]) -> dict[str, Any]:
    """Reconcile stored profile data with the current profile shape.

    Known keys whose value type matches the default are kept; unknown keys
    and mistyped values are dropped with a warning. A legacy packs-per-day
    value is converted to sticks-per-day when sticks are absent or zero.

    Args:
        stored: Parsed stored data

    Returns:
        Complete profile dictionary: sanitized values merged over the defaults

    Example:
        >>> data = sanitize_stored_profile({"age": "forty", "smoking_packs_per_day": 1})
        >>> data["age"], data["smoking_sticks_per_day"]
        (None, 20)
    """
    sanitized: dict[str, Any] = {}

    if LEGACY_PACKS_PER_DAY_KEY in stored and not stored.get("smoking_sticks_per_day"):
        packs = stored[LEGACY_PACKS_PER_DAY_KEY]
        if _is_number(packs):
            sanitized["smoking_sticks_per_day"] = packs * STICKS_PER_PACK
            logger.info("Migrated legacy packs-per-day value to sticks-per-day")

    for key, value in stored.items():
        if key == LEGACY_PACKS_PER_DAY_KEY:
            continue
        if key not in DEFAULT_PROFILE_DATA:
            logger.warning(f"Dropping unknown stored profile key: {key}")
            continue
        if not _matches_default_type(key, value):
            logger.warning(
                f"Dropping stored value for {key}: expected the type of "
                f"{DEFAULT_PROFILE_DATA[key]!r}, got {type(value).__name__}"
            )
            continue
        if key == "smoking_sticks_per_day" and key in sanitized and not value:
            # Legacy migration already produced a non-zero value
            continue
        sanitized[key] = value

    if "family_history" in sanitized:
        sanitized["family_history"] = _clean_family_history(sanitized["family_history"])

    return {**DEFAULT_PROFILE_DATA, **sanitized}

"""JSON file storage for patient profiles."""

import json
from pathlib import Path

from ncd_screen.logging_audit import get_logger
from ncd_screen.models.profile import PatientProfile
from ncd_screen.persistence.sanitizer import sanitize_stored_profile
from ncd_screen.utils.exceptions import ValidationError

logger = get_logger(__name__)


def load_profile(file_path: Path) -> PatientProfile:
    """Load a stored patient profile from a JSON file.

    The stored data is sanitized before it is validated, so profiles written
    by older versions load with unknown keys dropped and legacy fields
    translated.

    Args:
        file_path: Path to the JSON file

    Returns:
        PatientProfile instance

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON, the root is not an
            object, or a sanitized value is still invalid (e.g. an unknown sex)
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Profile file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON in profile file: {file_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e

    if not isinstance(stored, dict):
        raise ValidationError(
            f"Profile file must contain a JSON object, got {type(stored).__name__}: {file_path}"
        )

    profile = PatientProfile.from_dict(sanitize_stored_profile(stored))
    logger.debug(f"Loaded profile from {file_path}")
    return profile


def save_profile(profile: PatientProfile, file_path: Path) -> Path:
    """Write a patient profile to a JSON file, creating parent directories.

    Args:
        profile: Profile to store
        file_path: Destination path

    Returns:
        The path written
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(profile.to_dict(), f, indent=2, ensure_ascii=False)
    logger.debug(f"Saved profile to {file_path}")
    return file_path

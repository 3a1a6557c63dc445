"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import json
import logging
from pathlib import Path
from typing import Callable, Iterator

import pytest
from click.testing import CliRunner

from ncd_screen.models.profile import PatientProfile, Sex

# Fixed calendar year so years-since-quit is reproducible
REFERENCE_YEAR = 2025


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Run every test from an empty working directory with no NCD_SCREEN_* overrides.

    Keeps config/config.json, .env and logs/ of the developer's checkout out
    of the tests.
    """
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    for variable in [
        "NCD_SCREEN_REFERENCE_YEAR",
        "NCD_SCREEN_INCLUDE_DETAILS",
        "NCD_SCREEN_LOG_LEVEL",
        "NCD_SCREEN_LOG_FILE",
        "NCD_SCREEN_REDACT_PII",
        "NCD_SCREEN_BATCH_FAIL_FAST",
        "NCD_SCREEN_BATCH_OUTPUT_DIR",
    ]:
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop root handlers after each test so captured CLI streams do not leak."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if type(handler).__module__.startswith("_pytest"):
            continue
        root_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def reference_year() -> int:
    return REFERENCE_YEAR


@pytest.fixture
def runner() -> CliRunner:
    """Create Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def base_profile() -> PatientProfile:
    """
    Return a healthy 30-year-old male profile.

    Returns:
        PatientProfile: Profile that only triggers the age-30 checks.
    """
    return PatientProfile(
        name="Test Patient",
        age=30,
        sex=Sex.MALE,
        height_cm=170,
        weight_kg=65,
        waist_circumference_in=32,
    )


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Return a helper that writes CSV text to a temporary file.

    Returns:
        Callable taking (content, filename) and returning the file path.
    """

    def _write(content: str, filename: str = "patients.csv") -> Path:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def profile_file(tmp_path: Path) -> Path:
    """
    Write a stored profile for a 45-year-old male smoker with high blood pressure.

    Returns:
        Path: Path to the JSON profile file.
    """
    path = tmp_path / "profile.json"
    path.write_text(
        json.dumps(
            {
                "name": "Rajesh Metabolic",
                "age": 45,
                "sex": "male",
                "height_cm": 170,
                "weight_kg": 90,
                "waist_circumference_in": 40,
                "smoking_status": "current",
                "smoking_sticks_per_day": 20,
                "smoking_years": 20,
                "personal_conditions": ["High Blood Pressure"],
            }
        ),
        encoding="utf-8",
    )
    return path

"""Unit tests for configuration management.

Tests cover configuration loading, validation, environment variable overrides,
and error handling.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ncd_screen.config import (
    Config,
    get_batch_config,
    get_logging_config,
    get_screening_config,
    load_config,
)
from ncd_screen.config.defaults import DEFAULT_CONFIG
from ncd_screen.config.schema import LoggingConfig, ScreeningConfig
from ncd_screen.utils.exceptions import ConfigurationError


def _write_config(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestConfigurationSchema:
    """Test pydantic configuration models validation."""

    def test_defaults(self) -> None:
        # Arrange & Act
        config = Config()

        # Assert
        assert config.screening.reference_year is None
        assert config.screening.include_details is False
        assert config.logging.level == "INFO"
        assert config.logging.redact_pii is True
        assert config.batch.fail_fast is False
        assert config.batch.output_dir == Path("output")

    def test_logging_config_case_insensitive(self) -> None:
        """Test LoggingConfig normalizes level to uppercase."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_logging_config_invalid_level(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            LoggingConfig(level="VERBOSE")

        assert "Invalid log level" in str(exc_info.value)

    @pytest.mark.parametrize("year", [1899, 2201])
    def test_reference_year_bounds(self, year: int) -> None:
        with pytest.raises(ValidationError):
            ScreeningConfig(reference_year=year)

    def test_defaults_dict_matches_schema(self) -> None:
        """Test DEFAULT_CONFIG validates against the schema."""
        config = Config(**DEFAULT_CONFIG)
        assert config == Config()


class TestLoadConfig:
    """Test configuration file loading."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        # Act
        config = load_config(tmp_path / "nope.json")

        # Assert
        assert config == Config()

    def test_default_path_missing_uses_defaults(self) -> None:
        """Test load_config() without a path falls back when ./config/config.json is absent."""
        assert load_config() == Config()

    def test_load_from_file(self, tmp_path: Path) -> None:
        # Arrange
        path = _write_config(
            tmp_path / "config.json",
            {
                "screening": {"reference_year": 2024, "include_details": True},
                "logging": {"level": "warning", "redact_pii": False},
                "batch": {"output_dir": "results"},
            },
        )

        # Act
        config = load_config(path)

        # Assert
        assert config.screening.reference_year == 2024
        assert config.screening.include_details is True
        assert config.logging.level == "WARNING"
        assert config.logging.redact_pii is False
        assert config.batch.output_dir == Path("results")
        assert config.batch.fail_fast is False

    def test_partial_file_keeps_other_defaults(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.json", {"batch": {"fail_fast": True}})
        config = load_config(path)
        assert config.batch.fail_fast is True
        assert config.logging.level == "INFO"

    def test_invalid_json(self, tmp_path: Path) -> None:
        # Arrange
        path = tmp_path / "config.json"
        path.write_text("{ invalid json", encoding="utf-8")

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "Invalid JSON" in str(exc_info.value)

    def test_non_object_root(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.json", ["screening"])
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)

    def test_schema_violation(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "config.json", {"screening": {"reference_year": 1500}})
        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            load_config(path)


class TestEnvironmentOverrides:
    """Test NCD_SCREEN_* environment variable overrides."""

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # Arrange
        path = _write_config(tmp_path / "config.json", {"screening": {"reference_year": 2020}})
        monkeypatch.setenv("NCD_SCREEN_REFERENCE_YEAR", "2025")
        monkeypatch.setenv("NCD_SCREEN_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("NCD_SCREEN_REDACT_PII", "false")
        monkeypatch.setenv("NCD_SCREEN_BATCH_FAIL_FAST", "yes")
        monkeypatch.setenv("NCD_SCREEN_BATCH_OUTPUT_DIR", "batch-out")
        monkeypatch.setenv("NCD_SCREEN_INCLUDE_DETAILS", "1")

        # Act
        config = load_config(path)

        # Assert
        assert config.screening.reference_year == 2025
        assert config.screening.include_details is True
        assert config.logging.level == "ERROR"
        assert config.logging.redact_pii is False
        assert config.batch.fail_fast is True
        assert config.batch.output_dir == Path("batch-out")

    def test_env_log_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NCD_SCREEN_LOG_FILE", "custom/app.log")
        assert load_config().logging.log_file == Path("custom/app.log")

    def test_invalid_integer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Arrange
        monkeypatch.setenv("NCD_SCREEN_REFERENCE_YEAR", "next year")

        # Act & Assert
        with pytest.raises(ConfigurationError, match="NCD_SCREEN_REFERENCE_YEAR"):
            load_config()

    def test_defaults_not_mutated_by_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NCD_SCREEN_LOG_LEVEL", "DEBUG")
        load_config()
        assert DEFAULT_CONFIG["logging"]["level"] == "INFO"


class TestAccessors:
    """Test section accessor helpers."""

    def test_section_accessors(self) -> None:
        # Arrange
        config = Config()

        # Act & Assert
        assert get_screening_config(config) is config.screening
        assert get_logging_config(config) is config.logging
        assert get_batch_config(config) is config.batch

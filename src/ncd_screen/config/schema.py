"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ncd_screen.logging_audit.logger import LOG_LEVELS


class ScreeningConfig(BaseModel):
    """Screening engine configuration.

    Attributes:
        reference_year: Calendar year used for years-since-quit; current year when None
        include_details: Attach detail content blocks to analysis output
    """

    reference_year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2200,
        description="Calendar year used for years-since-quit",
    )
    include_details: bool = Field(
        default=False,
        description="Attach recommendation detail blocks to output",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact patient names from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/ncd-screen.log"),
        description="Log file path"
    )
    redact_pii: bool = Field(
        default=True,
        description="Redact patient names from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept any case; store uppercase."""
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(LOG_LEVELS)}"
            )
        return v_upper


class BatchConfig(BaseModel):
    """CSV batch screening configuration.

    Attributes:
        fail_fast: Stop screening at the first row that fails validation
        output_dir: Directory for results files when no explicit path is given
    """

    fail_fast: bool = Field(
        default=False,
        description="Stop processing on first error"
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="Base output directory for batch results"
    )


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        screening: Screening engine configuration
        logging: Logging configuration
        batch: CSV batch screening configuration

    Example:
        >>> config = Config(screening=ScreeningConfig(reference_year=2025))
        >>> config.screening.reference_year
        2025
        >>> config.logging.redact_pii
        True
    """

    screening: ScreeningConfig = ScreeningConfig()
    logging: LoggingConfig = LoggingConfig()
    batch: BatchConfig = BatchConfig()

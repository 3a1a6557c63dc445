"""CSV parser for screening questionnaires.

This module loads one patient profile per CSV row for batch screening and
writes batch results back out as CSV.
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ncd_screen.csv_parser.columns import (
    OPTIONAL_COLUMNS,
    REQUIRED_COLUMNS,
    row_to_profile_dict,
)
from ncd_screen.csv_parser.validator import ValidationResult, validate_screening_rows
from ncd_screen.models.analysis import AnalysisResult
from ncd_screen.models.profile import PatientProfile
from ncd_screen.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "name",
    "cbac_score",
    "risk_band",
    "lifestyle_alert",
    "high_priority",
    "recommendations",
]


def parse_csv(
    file_path: Path, validate: bool = True
) -> tuple[pd.DataFrame, Optional[ValidationResult]]:
    """Parse screening rows from a CSV file.

    Every cell is read as text; decoding happens in rows_to_profiles so that
    validation can report the original cell values.

    Args:
        file_path: Path to CSV file containing one patient per row
        validate: If True, runs comprehensive validation after basic parsing.
                  Warnings are logged; errors are returned in the result for
                  the caller to act on. If False, skips validation.

    Returns:
        Tuple of (DataFrame, ValidationResult):
        - DataFrame with one row per patient, cells as strings (NaN when empty)
        - ValidationResult with comprehensive validation details, or None if
          validate=False

    Raises:
        ValidationError: If the file is not a readable CSV or the name column is missing
        FileNotFoundError: If CSV file does not exist
    """
    logger.info(f"Loading CSV from {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"CSV file not found: {file_path}")

    try:
        df = pd.read_csv(file_path, encoding="utf-8", dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ValidationError(
            f"Failed to read CSV file {file_path}. Ensure file is valid CSV with UTF-8 encoding. Error: {e}"
        ) from e

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise ValidationError(
            f"CSV validation failed:\n  - Missing required columns: {', '.join(missing_columns)}. "
            f"Required columns are: {', '.join(REQUIRED_COLUMNS)}"
        )

    all_valid_columns = set(REQUIRED_COLUMNS + OPTIONAL_COLUMNS)
    unknown_columns = [col for col in df.columns if col not in all_valid_columns]
    if unknown_columns:
        logger.warning(
            f"CSV contains unknown columns that will be ignored: {', '.join(unknown_columns)}"
        )

    if df.empty:
        raise ValidationError(f"CSV file {file_path} has a header but no patient rows")

    logger.info(f"Successfully parsed {len(df)} screening row(s)")

    validation_result = None
    if validate:
        logger.info("Running comprehensive validation")
        validation_result = validate_screening_rows(df)

        for warning in validation_result.all_warnings:
            logger.warning(
                f"Row {warning.row_number} [{warning.column_name}]: {warning.message}"
            )

        logger.info(
            f"Comprehensive validation complete: {len(validation_result.all_errors)} errors, "
            f"{len(validation_result.all_warnings)} warnings"
        )

    return df, validation_result


def rows_to_profiles(
    df: pd.DataFrame, skip_rows: Optional[set[int]] = None
) -> list[tuple[int, PatientProfile]]:
    """Convert CSV rows to patient profiles.

    Args:
        df: DataFrame returned by parse_csv
        skip_rows: 1-indexed row numbers (header = row 1) to leave out,
                   typically ValidationResult.error_row_numbers

    Returns:
        List of (row_number, PatientProfile) in file order

    Raises:
        ValidationError: If a row that is not skipped cannot be decoded
    """
    skip_rows = skip_rows or set()
    profiles = []
    for idx, row in df.iterrows():
        row_num = idx + 2  # +2 because: +1 for header, +1 for 1-indexed
        if row_num in skip_rows:
            logger.debug(f"Skipping row {row_num} with validation errors")
            continue
        try:
            profile = PatientProfile.from_dict(row_to_profile_dict(row))
        except ValidationError as e:
            raise ValidationError(f"Row {row_num}: {e}") from e
        profiles.append((row_num, profile))
    return profiles


def export_results(results: list[tuple[str, AnalysisResult]], output_path: Path) -> Path:
    """Write batch screening results to a CSV file.

    Args:
        results: (patient name, AnalysisResult) pairs in output order
        output_path: Destination CSV path; parent directories are created

    Returns:
        The path written
    """
    records = [
        {
            "name": name,
            "cbac_score": result.cbac_score,
            "risk_band": result.risk_band.value,
            "lifestyle_alert": result.has_lifestyle_risk_alert,
            "high_priority": ";".join(
                r.key for r in result.recommendations if r.is_high_priority
            ),
            "recommendations": ";".join(result.recommendation_keys),
        }
        for name, result in results
    ]
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(records, columns=RESULT_COLUMNS).to_csv(
        output_path, index=False, encoding="utf-8"
    )
    logger.info(f"Exported {len(records)} screening result(s) to {output_path}")
    return output_path

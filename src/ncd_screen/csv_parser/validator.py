"""Comprehensive validation for screening CSV data.

This module provides detailed validation with actionable error messages,
collecting all issues before reporting to help users fix multiple problems at once.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import pandas as pd

from ncd_screen.csv_parser.columns import (
    BOOLEAN_COLUMNS,
    ENUM_COLUMNS,
    FAMILY_FIELD_SEPARATOR,
    FAMILY_HISTORY_COLUMN,
    FALSE_VALUES,
    NUMERIC_COLUMNS,
    TRUE_VALUES,
    is_blank,
    parse_list_cell,
)
from ncd_screen.engine.thresholds import KNOWN_CONDITIONS, MAXIMUM_PATIENT_AGE
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.profile import Relationship, SmokingStatus

logger = get_logger(__name__)

MAX_REPORTED_ISSUES = 20


class IssueSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """Individual validation issue with context and suggested fix.

    Attributes:
        row_number: 1-indexed row number (including header) for user readability
        column_name: Name of the column with the issue
        severity: ERROR or WARNING level
        message: Description of what's wrong
        suggestion: Actionable guidance on how to fix the issue
    """

    row_number: int
    column_name: str
    severity: IssueSeverity
    message: str
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_number": self.row_number,
            "column_name": self.column_name,
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass
class ValidationResult:
    """Comprehensive validation results with statistics and issues.

    Attributes:
        total_rows: Total number of data rows processed
        valid_rows: Number of rows with no errors (warnings OK)
        error_rows: Number of rows with at least one error
        warning_rows: Number of rows with at least one warning
        all_errors: List of all error-level issues
        all_warnings: List of all warning-level issues
    """

    total_rows: int
    valid_rows: int
    error_rows: int
    warning_rows: int
    all_errors: list[ValidationIssue] = field(default_factory=list)
    all_warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if any error-level issues exist."""
        return len(self.all_errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if any warning-level issues exist."""
        return len(self.all_warnings) > 0

    @property
    def error_row_numbers(self) -> set[int]:
        return {e.row_number for e in self.all_errors}

    def format_report(self) -> str:
        """Format validation results as human-readable report.

        Returns:
            Multi-line string with validation summary and detailed issues
        """
        lines = []
        lines.append("=" * 60)
        lines.append("SCREENING CSV VALIDATION REPORT")
        lines.append("=" * 60)
        lines.append("")

        lines.append("SUMMARY:")
        lines.append(f"  Total rows: {self.total_rows}")
        lines.append(f"  Valid rows: {self.valid_rows}")
        lines.append(f"  Rows with errors: {self.error_rows}")
        lines.append(f"  Rows with warnings: {self.warning_rows}")
        lines.append("")

        for title, issues in (("ERRORS", self.all_errors), ("WARNINGS", self.all_warnings)):
            if not issues:
                continue
            lines.append(f"{title} ({len(issues)}):")
            for issue in issues[:MAX_REPORTED_ISSUES]:
                lines.append(
                    f"  Row {issue.row_number} [{issue.column_name}]: {issue.message}"
                )
                lines.append(f"    → {issue.suggestion}")
            if len(issues) > MAX_REPORTED_ISSUES:
                lines.append(
                    f"  ... and {len(issues) - MAX_REPORTED_ISSUES} more {title.lower()}"
                )
            lines.append("")

        lines.append("=" * 60)
        if not self.has_errors and not self.has_warnings:
            lines.append("RESULT: ✓ All validations passed")
        elif not self.has_errors:
            lines.append("RESULT: ✓ Validation passed with warnings")
        else:
            lines.append("RESULT: ✗ Validation failed - please fix errors above")
        lines.append("=" * 60)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Export validation results as structured dictionary for JSON serialization.

        Returns:
            Dictionary with all validation results
        """
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "error_rows": self.error_rows,
            "warning_rows": self.warning_rows,
            "errors": [e.to_dict() for e in self.all_errors],
            "warnings": [w.to_dict() for w in self.all_warnings],
        }


def _error(row_num: int, column: str, message: str, suggestion: str) -> ValidationIssue:
    return ValidationIssue(row_num, column, IssueSeverity.ERROR, message, suggestion)


def _warning(row_num: int, column: str, message: str, suggestion: str) -> ValidationIssue:
    return ValidationIssue(row_num, column, IssueSeverity.WARNING, message, suggestion)


def _to_number(value: Any) -> float:
    return float(str(value).strip())


def _number_or_none(value: Any) -> Optional[float]:
    if is_blank(value):
        return None
    try:
        number = _to_number(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _validate_numbers(row: pd.Series, row_num: int, errors: list[ValidationIssue]) -> None:
    for column in NUMERIC_COLUMNS:
        value = row.get(column)
        if is_blank(value):
            continue
        try:
            number = _to_number(value)
        except ValueError:
            errors.append(
                _error(row_num, column, f"Not a number: {value}", "Enter a plain number, e.g. 45")
            )
            continue
        if not math.isfinite(number):
            errors.append(
                _error(row_num, column, f"Not a finite number: {value}", "Enter a plain number, e.g. 45")
            )
            continue
        if number < 0:
            errors.append(
                _error(row_num, column, f"Negative value: {value}", "Values must be zero or more")
            )


def _validate_categories(row: pd.Series, row_num: int, errors: list[ValidationIssue]) -> None:
    for column in BOOLEAN_COLUMNS:
        value = row.get(column)
        if is_blank(value):
            continue
        if str(value).strip().lower() not in TRUE_VALUES | FALSE_VALUES:
            errors.append(
                _error(
                    row_num,
                    column,
                    f"Invalid yes/no value: {value}",
                    "Use one of: true, false, yes, no, 1, 0",
                )
            )

    for column, enum_cls in ENUM_COLUMNS.items():
        value = row.get(column)
        if is_blank(value):
            continue
        valid = [m.value for m in enum_cls if m.value]
        if str(value).strip().lower() not in valid:
            errors.append(
                _error(
                    row_num,
                    column,
                    f"Unknown value: {value}",
                    f"Must be one of: {', '.join(valid)} (case-insensitive)",
                )
            )


def _validate_family_history(
    row: pd.Series,
    row_num: int,
    errors: list[ValidationIssue],
    warnings: list[ValidationIssue],
) -> None:
    valid_relationships = [r.value for r in Relationship]
    for item in parse_list_cell(row.get(FAMILY_HISTORY_COLUMN)):
        parts = [p.strip() for p in item.split(FAMILY_FIELD_SEPARATOR)]
        condition = parts[0]
        if not condition:
            errors.append(
                _error(
                    row_num,
                    FAMILY_HISTORY_COLUMN,
                    f"Entry without a condition: {item}",
                    "Use condition:age:relationship, e.g. Breast Cancer:40:parent",
                )
            )
            continue
        if condition not in KNOWN_CONDITIONS:
            warnings.append(
                _warning(
                    row_num,
                    FAMILY_HISTORY_COLUMN,
                    f"Unknown condition: {condition}",
                    "Unknown conditions are ignored by screening; check spelling",
                )
            )
        if len(parts) > 1 and parts[1]:
            try:
                if not math.isfinite(_to_number(parts[1])):
                    raise ValueError(parts[1])
            except ValueError:
                errors.append(
                    _error(
                        row_num,
                        FAMILY_HISTORY_COLUMN,
                        f"Relative's age is not a number: {parts[1]}",
                        "Enter the age at diagnosis in years, or leave it empty",
                    )
                )
        if len(parts) > 2 and parts[2] and parts[2].lower() not in valid_relationships:
            errors.append(
                _error(
                    row_num,
                    FAMILY_HISTORY_COLUMN,
                    f"Unknown relationship: {parts[2]}",
                    f"Must be one of: {', '.join(valid_relationships)}",
                )
            )


def _validate_plausibility(
    row: pd.Series, row_num: int, warnings: list[ValidationIssue], current_year: int
) -> None:
    # Unparseable numbers are reported by _validate_numbers
    age = _number_or_none(row.get("age"))
    if age is not None and age > MAXIMUM_PATIENT_AGE:
        warnings.append(
            _warning(
                row_num,
                "age",
                f"Age appears unreasonable ({row.get('age')} years old)",
                "Verify age is correct",
            )
        )

    quit_year = row.get("quit_smoking_year")
    quit_year_value = _number_or_none(quit_year)
    if quit_year_value is None:
        return

    if quit_year_value > current_year:
        warnings.append(
            _warning(
                row_num,
                "quit_smoking_year",
                f"Quit year is in the future: {quit_year}",
                "Verify the calendar year the patient stopped smoking",
            )
        )
    status = row.get("smoking_status")
    if is_blank(status) or str(status).strip().lower() != SmokingStatus.FORMER.value:
        warnings.append(
            _warning(
                row_num,
                "quit_smoking_year",
                "Quit year given but smoking_status is not 'former'",
                "Quit year is ignored unless smoking_status is former",
            )
        )


def validate_screening_rows(df: pd.DataFrame) -> ValidationResult:
    """Perform comprehensive validation on a screening DataFrame.

    Checks names, numbers, categorical values, family history entries and
    plausibility of ages and quit years. Collects all errors and warnings
    before returning results (not fail-fast).

    Args:
        df: pandas DataFrame from the CSV parser. Must include the name column.

    Returns:
        ValidationResult containing all errors, warnings, and statistics

    Raises:
        ValueError: If DataFrame is empty or missing the name column
    """
    logger.info("Validation started")

    if df.empty:
        raise ValueError("DataFrame is empty - no data to validate")
    if "name" not in df.columns:
        raise ValueError("DataFrame missing required column: name")

    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    current_year = datetime.now(timezone.utc).year

    for idx, row in df.iterrows():
        row_num = idx + 2  # +2 for 1-indexed + header row

        if is_blank(row.get("name")):
            errors.append(
                _error(row_num, "name", "Missing required field 'name'", "Enter a name or identifier")
            )

        _validate_numbers(row, row_num, errors)
        _validate_categories(row, row_num, errors)
        _validate_family_history(row, row_num, errors, warnings)
        _validate_plausibility(row, row_num, warnings, current_year)

        for condition in parse_list_cell(row.get("personal_conditions")):
            if condition not in KNOWN_CONDITIONS:
                warnings.append(
                    _warning(
                        row_num,
                        "personal_conditions",
                        f"Unknown condition: {condition}",
                        "Unknown conditions are ignored by screening; check spelling",
                    )
                )

    error_rows = len({e.row_number for e in errors})
    warning_rows = len({w.row_number for w in warnings})

    result = ValidationResult(
        total_rows=len(df),
        valid_rows=len(df) - error_rows,
        error_rows=error_rows,
        warning_rows=warning_rows,
        all_errors=errors,
        all_warnings=warnings,
    )

    logger.info(f"Validation errors found: {len(errors)}")
    if warnings:
        logger.info(f"Validation warnings: {len(warnings)}")

    return result

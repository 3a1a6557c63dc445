"""CSV parser module.

This module loads screening questionnaires from CSV files, validates them,
and exports batch screening results.
"""

from ncd_screen.csv_parser.parser import export_results, parse_csv, rows_to_profiles
from ncd_screen.csv_parser.validator import (
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
    validate_screening_rows,
)

__all__ = [
    "export_results",
    "IssueSeverity",
    "parse_csv",
    "rows_to_profiles",
    "validate_screening_rows",
    "ValidationIssue",
    "ValidationResult",
]

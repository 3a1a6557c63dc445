"""Screening CSV column schema and cell decoding.

Every profile field maps to one CSV column of the same name. Cells are plain
text: booleans as true/false/yes/no/1/0, lists separated by ';', and family
history entries as 'condition:age:relationship' separated by ';' (age and
relationship may be left empty).
"""

import math
from enum import Enum
from typing import Any, Optional

import pandas as pd

from ncd_screen.models.profile import (
    AlcoholFrequency,
    CookingFuel,
    FamilyHistoryCondition,
    HepatitisHistory,
    HPVVaccineStatus,
    PhysicalActivity,
    Relationship,
    SaltIntake,
    Sex,
    SmokingStatus,
)
from ncd_screen.utils.exceptions import ValidationError

REQUIRED_COLUMNS = ["name"]

NUMERIC_COLUMNS = [
    "age",
    "height_cm",
    "weight_kg",
    "waist_circumference_in",
    "smoking_sticks_per_day",
    "smoking_years",
    "quit_smoking_year",
]

BOOLEAN_COLUMNS = [
    "uses_smokeless_tobacco",
    "marble_mining_exposure",
    "has_oral_signs",
    "family_history_unsure",
]

ENUM_COLUMNS: dict[str, type[Enum]] = {
    "sex": Sex,
    "smoking_status": SmokingStatus,
    "alcohol_frequency": AlcoholFrequency,
    "salt_intake": SaltIntake,
    "physical_activity": PhysicalActivity,
    "cooking_fuel_type": CookingFuel,
    "hpv_vaccine_status": HPVVaccineStatus,
    "hepatitis_history": HepatitisHistory,
}

LIST_COLUMNS = ["smokeless_tobacco_products", "personal_conditions"]

FAMILY_HISTORY_COLUMN = "family_history"

TEXT_COLUMNS = ["womens_health_status"]

OPTIONAL_COLUMNS = (
    NUMERIC_COLUMNS
    + BOOLEAN_COLUMNS
    + list(ENUM_COLUMNS)
    + LIST_COLUMNS
    + [FAMILY_HISTORY_COLUMN]
    + TEXT_COLUMNS
)

TRUE_VALUES = {"true", "yes", "1"}
FALSE_VALUES = {"false", "no", "0"}

LIST_SEPARATOR = ";"
FAMILY_FIELD_SEPARATOR = ":"


def is_blank(value: Any) -> bool:
    """Check whether a cell is empty (NaN, None or whitespace)."""
    return value is None or pd.isna(value) or str(value).strip() == ""


def parse_bool_cell(value: Any, column: str) -> bool:
    if is_blank(value):
        return False
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValidationError(
        f"Invalid {column}: {value!r}. Use one of: true, false, yes, no, 1, 0"
    )


def parse_number_cell(value: Any, column: str) -> Optional[float]:
    if is_blank(value):
        return None
    try:
        number = float(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {column}: {value!r}. Expected a number.") from e
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {column}: {value!r}. Expected a finite number.")
    if number < 0:
        raise ValidationError(f"Invalid {column}: {value!r}. Must be non-negative.")
    return number


def parse_list_cell(value: Any) -> list[str]:
    if is_blank(value):
        return []
    return [item.strip() for item in str(value).split(LIST_SEPARATOR) if item.strip()]


def parse_family_history_cell(value: Any) -> list[FamilyHistoryCondition]:
    """Decode 'condition:age:relationship;...' into family history entries.

    Raises:
        ValidationError: If an age is not a number or a relationship is unknown
    """
    entries = []
    for item in parse_list_cell(value):
        parts = [p.strip() for p in item.split(FAMILY_FIELD_SEPARATOR)]
        condition = parts[0]
        age = parts[1] if len(parts) > 1 else ""
        relationship = parts[2] if len(parts) > 2 else ""
        entries.append(
            FamilyHistoryCondition.from_dict(
                {
                    "condition": condition,
                    "relative_age_at_diagnosis": age or None,
                    "relationship": relationship or None,
                }
            )
        )
    return entries


def row_to_profile_dict(row: pd.Series) -> dict[str, Any]:
    """Decode one CSV row into a dictionary for PatientProfile.from_dict.

    Columns absent from the row take the profile defaults.

    Raises:
        ValidationError: If any cell cannot be decoded
    """
    data: dict[str, Any] = {"name": "" if is_blank(row.get("name")) else str(row["name"]).strip()}

    for column in NUMERIC_COLUMNS:
        if column in row.index:
            data[column] = parse_number_cell(row[column], column)
    for column in BOOLEAN_COLUMNS:
        if column in row.index:
            data[column] = parse_bool_cell(row[column], column)
    for column in ENUM_COLUMNS:
        if column in row.index and not is_blank(row[column]):
            data[column] = str(row[column]).strip()
    for column in LIST_COLUMNS:
        if column in row.index:
            data[column] = parse_list_cell(row[column])
    if FAMILY_HISTORY_COLUMN in row.index:
        data[FAMILY_HISTORY_COLUMN] = parse_family_history_cell(row[FAMILY_HISTORY_COLUMN])
    for column in TEXT_COLUMNS:
        if column in row.index and not is_blank(row[column]):
            data[column] = str(row[column]).strip()

    return data

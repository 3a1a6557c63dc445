"""Unit tests for the screening CSV parser and cell decoding."""

from pathlib import Path

import pandas as pd
import pytest

from ncd_screen.csv_parser import export_results, parse_csv, rows_to_profiles
from ncd_screen.csv_parser.columns import (
    parse_bool_cell,
    parse_family_history_cell,
    parse_list_cell,
    parse_number_cell,
)
from ncd_screen.engine import analyze
from ncd_screen.models.profile import (
    PatientProfile,
    Relationship,
    Sex,
    SmokingStatus,
)
from ncd_screen.utils.exceptions import ValidationError


class TestCellDecoding:
    """Test decoding of individual CSV cells."""

    @pytest.mark.parametrize("value", ["true", "Yes", "1", " TRUE "])
    def test_true_values(self, value: str) -> None:
        assert parse_bool_cell(value, "has_oral_signs") is True

    @pytest.mark.parametrize("value", ["false", "No", "0", "", None, float("nan")])
    def test_false_and_blank_values(self, value) -> None:
        assert parse_bool_cell(value, "has_oral_signs") is False

    def test_invalid_bool(self) -> None:
        with pytest.raises(ValidationError, match="has_oral_signs"):
            parse_bool_cell("maybe", "has_oral_signs")

    def test_number(self) -> None:
        assert parse_number_cell(" 45 ", "age") == 45.0
        assert parse_number_cell("", "age") is None

    def test_negative_number_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-negative"):
            parse_number_cell("-3", "smoking_years")

    @pytest.mark.parametrize("value", ["inf", "-Infinity", "nan"])
    def test_non_finite_rejected(self, value: str) -> None:
        with pytest.raises(ValidationError, match="finite"):
            parse_number_cell(value, "age")

    def test_non_numeric_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Expected a number"):
            parse_number_cell("forty", "age")

    def test_list(self) -> None:
        assert parse_list_cell("gutka; khaini ;") == ["gutka", "khaini"]
        assert parse_list_cell(float("nan")) == []

    def test_family_history(self) -> None:
        # Act
        entries = parse_family_history_cell("Breast Cancer:40:parent;Stroke::;Heart Disease")

        # Assert
        assert len(entries) == 3
        assert entries[0].condition == "Breast Cancer"
        assert entries[0].relative_age_at_diagnosis == 40.0
        assert entries[0].relationship is Relationship.PARENT
        assert entries[1].relative_age_at_diagnosis is None
        assert entries[1].relationship is None
        assert entries[2].condition == "Heart Disease"

    def test_family_history_bad_relationship(self) -> None:
        with pytest.raises(ValidationError, match="relationship"):
            parse_family_history_cell("Stroke:60:cousin")


class TestParseCsv:
    """Test loading and validating CSV files."""

    def test_parse_valid_file(self, write_csv) -> None:
        # Arrange
        path = write_csv(
            "name,age,sex,smoking_status\n"
            "Asha Devi,45,female,never\n"
            "Ravi Kumar,60,male,current\n"
        )

        # Act
        df, result = parse_csv(path)

        # Assert
        assert len(df) == 2
        assert df.loc[0, "age"] == "45"
        assert result.total_rows == 2
        assert not result.has_errors

    def test_parse_without_validation(self, write_csv) -> None:
        path = write_csv("name\nAsha\n")
        df, result = parse_csv(path, validate=False)
        assert result is None
        assert list(df["name"]) == ["Asha"]

    def test_na_like_text_kept_verbatim(self, write_csv) -> None:
        """Test cells such as NA or None stay text instead of becoming blanks."""
        # Arrange
        path = write_csv("name,hpv_vaccine_status\nNA,None\nAsha,\n")

        # Act
        df, result = parse_csv(path)

        # Assert
        assert list(df["name"]) == ["NA", "Asha"]
        assert df.loc[0, "hpv_vaccine_status"] == "None"
        assert df.loc[1, "hpv_vaccine_status"] == ""
        assert not result.has_errors

    def test_missing_name_column(self, write_csv) -> None:
        path = write_csv("age,sex\n45,female\n")
        with pytest.raises(ValidationError, match="Missing required columns: name"):
            parse_csv(path)

    def test_header_without_rows(self, write_csv) -> None:
        path = write_csv("name,age\n")
        with pytest.raises(ValidationError, match="no patient rows"):
            parse_csv(path)

    def test_empty_file(self, write_csv) -> None:
        path = write_csv("")
        with pytest.raises(ValidationError, match="Failed to read CSV"):
            parse_csv(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            parse_csv(tmp_path / "missing.csv")

    def test_unknown_columns_warned(self, write_csv, caplog: pytest.LogCaptureFixture) -> None:
        path = write_csv("name,village\nAsha,Rampur\n")
        parse_csv(path)
        assert "unknown columns that will be ignored: village" in caplog.text


class TestRowsToProfiles:
    """Test converting parsed rows to profiles."""

    def test_full_row(self, write_csv) -> None:
        # Arrange
        path = write_csv(
            "name,age,sex,height_cm,weight_kg,waist_circumference_in,smoking_status,"
            "smoking_sticks_per_day,smoking_years,quit_smoking_year,uses_smokeless_tobacco,"
            "smokeless_tobacco_products,family_history,personal_conditions\n"
            "Kishan,52,Male,170,65,32,former,20,15,2020,no,,"
            "Colon Cancer:45:sibling,High Blood Pressure;Stroke\n"
        )
        df, _ = parse_csv(path)

        # Act
        profiles = rows_to_profiles(df)

        # Assert
        assert len(profiles) == 1
        row_num, profile = profiles[0]
        assert row_num == 2
        assert profile.name == "Kishan"
        assert profile.age == 52
        assert profile.sex is Sex.MALE
        assert profile.smoking_status is SmokingStatus.FORMER
        assert profile.quit_smoking_year == 2020
        assert profile.uses_smokeless_tobacco is False
        assert profile.smokeless_tobacco_products == ()
        assert profile.family_history[0].relationship is Relationship.SIBLING
        assert profile.personal_conditions == ("High Blood Pressure", "Stroke")

    def test_absent_columns_take_defaults(self, write_csv) -> None:
        path = write_csv("name,age\nAsha,30\n")
        df, _ = parse_csv(path)
        _, profile = rows_to_profiles(df)[0]
        assert profile == PatientProfile(name="Asha", age=30)

    def test_skip_rows(self, write_csv) -> None:
        # Arrange
        path = write_csv("name,age\nAsha,30\nRavi,abc\nMeena,45\n")
        df, result = parse_csv(path)

        # Act
        profiles = rows_to_profiles(df, skip_rows=result.error_row_numbers)

        # Assert
        assert [row_num for row_num, _ in profiles] == [2, 4]

    def test_invalid_row_reports_row_number(self, write_csv) -> None:
        path = write_csv("name,age\nAsha,30\nRavi,abc\n")
        df, _ = parse_csv(path, validate=False)
        with pytest.raises(ValidationError, match="Row 3:"):
            rows_to_profiles(df)


class TestExportResults:
    """Test writing batch results."""

    def test_export(self, tmp_path: Path) -> None:
        # Arrange
        result = analyze(PatientProfile(name="Asha", age=30, sex=Sex.FEMALE), reference_year=2025)
        output = tmp_path / "out" / "results.csv"

        # Act
        written = export_results([("Asha", result)], output)

        # Assert
        assert written == output
        df = pd.read_csv(output, dtype=str, keep_default_na=False)
        assert list(df.columns) == [
            "name",
            "cbac_score",
            "risk_band",
            "lifestyle_alert",
            "high_priority",
            "recommendations",
        ]
        row = df.iloc[0]
        assert row["name"] == "Asha"
        assert row["cbac_score"] == "1"
        assert row["risk_band"] == "low"
        assert row["lifestyle_alert"] == "False"
        assert row["high_priority"] == ""
        assert row["recommendations"] == "bp;sugar;cervix;breast_cbe;hpv_prevention;lifestyle"

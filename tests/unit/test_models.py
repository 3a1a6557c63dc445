"""Unit tests for the patient profile and analysis models."""

import pytest

from ncd_screen.engine.thresholds import DiseaseCondition
from ncd_screen.models.profile import (
    FamilyHistoryCondition,
    PatientProfile,
    Relationship,
    Sex,
    SmokingStatus,
)
from ncd_screen.utils.exceptions import NCDScreenError, ValidationError


class TestPatientProfileFromDict:
    """Test strict profile construction from dictionaries."""

    def test_minimal_dict_takes_defaults(self) -> None:
        # Act
        profile = PatientProfile.from_dict({"name": "Asha"})

        # Assert
        assert profile.name == "Asha"
        assert profile.age is None
        assert profile.sex is Sex.UNSET
        assert profile.smoking_status is SmokingStatus.NEVER
        assert profile.family_history == ()

    def test_enum_values_are_case_insensitive(self) -> None:
        profile = PatientProfile.from_dict({"sex": "Female", "smoking_status": "CURRENT"})
        assert profile.sex is Sex.FEMALE
        assert profile.smoking_status is SmokingStatus.CURRENT

    def test_numeric_strings_accepted(self) -> None:
        # Act
        profile = PatientProfile.from_dict({"age": "45", "height_cm": "170.5"})

        # Assert
        assert profile.age == 45
        assert profile.height_cm == 170.5

    def test_unknown_enum_value_rejected(self) -> None:
        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            PatientProfile.from_dict({"smoking_status": "sometimes"})

        assert "smoking_status" in str(exc_info.value)
        assert "'former'" in str(exc_info.value)

    def test_negative_age_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid age"):
            PatientProfile.from_dict({"age": -1})

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "inf", "NaN"])
    def test_non_finite_numbers_rejected(self, value) -> None:
        """Test infinities and NaN are input errors rather than crashes later on."""
        with pytest.raises(ValidationError, match="Expected a finite number"):
            PatientProfile.from_dict({"age": value})

    def test_non_finite_relative_age_rejected(self) -> None:
        with pytest.raises(ValidationError, match="relative_age_at_diagnosis"):
            PatientProfile.from_dict(
                {
                    "family_history": [
                        {"condition": "Stroke", "relative_age_at_diagnosis": float("inf")}
                    ]
                }
            )

    def test_boolean_not_accepted_as_number(self) -> None:
        with pytest.raises(ValidationError, match="height_cm"):
            PatientProfile.from_dict({"height_cm": True})

    def test_list_field_must_be_list(self) -> None:
        with pytest.raises(ValidationError, match="personal_conditions"):
            PatientProfile.from_dict({"personal_conditions": "Stroke"})

    def test_non_dict_rejected(self) -> None:
        with pytest.raises(ValidationError, match="JSON object"):
            PatientProfile.from_dict(["not", "a", "profile"])

    def test_validation_error_is_ncd_screen_error(self) -> None:
        """Test custom exceptions share the package base class."""
        with pytest.raises(NCDScreenError):
            PatientProfile.from_dict({"sex": "unknown"})


class TestFamilyHistoryCondition:
    """Test family history entries."""

    def test_from_dict(self) -> None:
        # Act
        entry = FamilyHistoryCondition.from_dict(
            {
                "condition": DiseaseCondition.BREAST_CANCER,
                "relative_age_at_diagnosis": 40,
                "relationship": "parent",
            }
        )

        # Assert
        assert entry.condition == "Breast Cancer"
        assert entry.relative_age_at_diagnosis == 40.0
        assert entry.relationship is Relationship.PARENT

    def test_condition_required(self) -> None:
        with pytest.raises(ValidationError, match="condition"):
            FamilyHistoryCondition.from_dict({"relative_age_at_diagnosis": 40})

    def test_optional_fields_may_be_empty(self) -> None:
        entry = FamilyHistoryCondition.from_dict(
            {"condition": "Stroke", "relative_age_at_diagnosis": "", "relationship": ""}
        )
        assert entry.relative_age_at_diagnosis is None
        assert entry.relationship is None


class TestPatientProfileBehavior:
    """Test profile helpers."""

    def test_effective_family_history_respects_unsure(self) -> None:
        # Arrange
        history = (FamilyHistoryCondition(DiseaseCondition.STROKE, 55),)
        sure = PatientProfile(family_history=history)
        unsure = PatientProfile(family_history=history, family_history_unsure=True)

        # Act & Assert
        assert sure.effective_family_history() == history
        assert unsure.effective_family_history() == ()
        # The recorded entries are kept even when ignored
        assert unsure.family_history == history

    def test_to_dict_round_trips(self) -> None:
        # Arrange
        profile = PatientProfile(
            name="Kishan",
            age=52,
            sex=Sex.MALE,
            smoking_status=SmokingStatus.FORMER,
            quit_smoking_year=2020,
            smokeless_tobacco_products=("khaini",),
            family_history=(
                FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 45.0, Relationship.SIBLING),
            ),
            personal_conditions=(DiseaseCondition.STROKE,),
        )

        # Act
        restored = PatientProfile.from_dict(profile.to_dict())

        # Assert
        assert restored == profile

    def test_profile_is_immutable(self) -> None:
        profile = PatientProfile(age=30)
        with pytest.raises(AttributeError):
            profile.age = 31

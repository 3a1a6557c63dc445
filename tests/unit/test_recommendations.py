"""Unit tests for the recommendation deriver."""

import pytest

from ncd_screen.content import default_resolver
from ncd_screen.engine.biometrics import analyze_biometrics
from ncd_screen.engine.recommendations import (
    SCREENING_RULES,
    RecommendationCandidate,
    assign_priority,
    build_recommendation,
    derive_candidates,
    high_risk_start_age,
    is_lung_screening_eligible,
    lifestyle_risk_alert,
    pack_years,
    years_since_quit,
)
from ncd_screen.engine.scoring import compute_score
from ncd_screen.engine.thresholds import DiseaseCondition
from ncd_screen.models.analysis import Priority
from ncd_screen.models.profile import (
    AlcoholFrequency,
    CookingFuel,
    FamilyHistoryCondition,
    HepatitisHistory,
    HPVVaccineStatus,
    PatientProfile,
    SaltIntake,
    Sex,
    SmokingStatus,
)

REFERENCE_YEAR = 2025


def _candidates(profile: PatientProfile) -> dict[str, RecommendationCandidate]:
    biometrics = analyze_biometrics(profile)
    candidates = derive_candidates(
        profile, biometrics, compute_score(profile), REFERENCE_YEAR
    )
    return {c.key: c for c in candidates}


def _history(condition: str, age=None) -> tuple[FamilyHistoryCondition, ...]:
    return (FamilyHistoryCondition(condition, age),)


class TestSmokingExposure:
    """Test pack-years and years since quitting."""

    def test_pack_years(self) -> None:
        # Arrange
        profile = PatientProfile(
            smoking_status=SmokingStatus.CURRENT, smoking_sticks_per_day=10, smoking_years=10
        )

        # Act & Assert
        assert pack_years(profile) == 5.0

    def test_never_smoker_ignores_stale_values(self) -> None:
        """Test leftover smoking numbers on a never-smoker give zero exposure."""
        profile = PatientProfile(smoking_sticks_per_day=20, smoking_years=30)
        assert pack_years(profile) == 0.0

    def test_missing_values_give_zero(self) -> None:
        profile = PatientProfile(smoking_status=SmokingStatus.FORMER)
        assert pack_years(profile) == 0.0

    def test_years_since_quit(self) -> None:
        # Arrange
        former = PatientProfile(smoking_status=SmokingStatus.FORMER, quit_smoking_year=2020)
        current = PatientProfile(smoking_status=SmokingStatus.CURRENT, quit_smoking_year=2020)

        # Act & Assert
        assert years_since_quit(former, REFERENCE_YEAR) == 5
        assert years_since_quit(current, REFERENCE_YEAR) == 0


class TestLungEligibility:
    """Test USPSTF low-dose CT criteria."""

    def _former(self, quit_year) -> PatientProfile:
        return PatientProfile(
            age=60,
            sex=Sex.MALE,
            smoking_status=SmokingStatus.FORMER,
            smoking_sticks_per_day=20,
            smoking_years=25,
            quit_smoking_year=quit_year,
        )

    def test_recent_quitter_is_eligible(self) -> None:
        assert "lung" in _candidates(self._former(2012))

    def test_lapsed_quitter_is_not_eligible(self) -> None:
        """Test a former smoker who quit more than 15 years ago is excluded."""
        assert "lung" not in _candidates(self._former(2005))

    def test_former_without_quit_year_is_not_eligible(self) -> None:
        assert "lung" not in _candidates(self._former(None))

    def test_current_smoker_eligibility_window(self) -> None:
        # Arrange
        profile = PatientProfile(smoking_status=SmokingStatus.CURRENT)

        # Act & Assert
        assert is_lung_screening_eligible(profile, 50, 20, 0) is True
        assert is_lung_screening_eligible(profile, 80, 20, 0) is True
        assert is_lung_screening_eligible(profile, 49, 20, 0) is False
        assert is_lung_screening_eligible(profile, 81, 20, 0) is False
        assert is_lung_screening_eligible(profile, 60, 19.9, 0) is False


class TestHighRiskStartAge:
    """Test risk-adjusted screening start ages."""

    def test_no_entries_keeps_default(self) -> None:
        assert high_risk_start_age([], 30) == 30

    def test_never_later_than_default(self) -> None:
        entries = [FamilyHistoryCondition(DiseaseCondition.BREAST_CANCER, 70)]
        assert high_risk_start_age(entries, 40) == 40

    def test_ten_years_before_diagnosis(self) -> None:
        entries = [FamilyHistoryCondition(DiseaseCondition.BREAST_CANCER, 40)]
        assert high_risk_start_age(entries, 30) == 30

    def test_floor_of_25(self) -> None:
        entries = [FamilyHistoryCondition(DiseaseCondition.BREAST_CANCER, 32)]
        assert high_risk_start_age(entries, 30) == 25

    def test_youngest_relative_wins(self) -> None:
        # Arrange
        entries = [
            FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 60),
            FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 45),
        ]

        # Act & Assert
        assert high_risk_start_age(entries, 40) == 35

    def test_unknown_or_zero_ages_ignored(self) -> None:
        entries = [
            FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, None),
            FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 0),
        ]
        assert high_risk_start_age(entries, 40) == 40


class TestGeneralRules:
    """Test age-driven and exposure-driven rules."""

    def test_bp_and_sugar_from_age_30(self) -> None:
        # Act
        at_29 = _candidates(PatientProfile(age=29))
        at_30 = _candidates(PatientProfile(age=30))

        # Assert
        assert "bp" not in at_29 and "sugar" not in at_29
        assert "bp" in at_30 and "sugar" in at_30

    def test_diabetic_gets_monitoring_instead_of_sugar(self) -> None:
        """Test a diabetic gets eye, foot and kidney checks and no sugar test."""
        # Arrange
        profile = PatientProfile(
            age=55, personal_conditions=(DiseaseCondition.DIABETES_TYPE_2,)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert "sugar" not in candidates
        assert candidates["diabetic_retinopathy"].reason_key == "reason_diabetic_retinopathy"
        assert candidates["diabetic_foot"].reason_key == "reason_diabetic_foot"
        assert candidates["diabetic_kidney"].reason_key == "reason_diabetic_kidney"

    @pytest.mark.parametrize(
        "fields",
        [
            {"uses_smokeless_tobacco": True},
            {"has_oral_signs": True},
            {"smoking_status": SmokingStatus.CURRENT},
        ],
    )
    def test_oral_triggers(self, fields) -> None:
        assert "oral" in _candidates(PatientProfile(age=25, **fields))

    def test_former_smoker_no_oral(self) -> None:
        profile = PatientProfile(age=25, smoking_status=SmokingStatus.FORMER)
        assert "oral" not in _candidates(profile)

    def test_gastric_from_age_35_with_high_salt(self) -> None:
        # Act
        at_34 = _candidates(PatientProfile(age=34, salt_intake=SaltIntake.HIGH))
        at_35 = _candidates(PatientProfile(age=35, salt_intake=SaltIntake.HIGH))

        # Assert
        assert "gastric_screening" not in at_34
        assert "gastric_screening" in at_35

    @pytest.mark.parametrize(
        "history", [HepatitisHistory.HEP_B, HepatitisHistory.HEP_C, HepatitisHistory.BOTH]
    )
    def test_liver_for_any_hepatitis(self, history: HepatitisHistory) -> None:
        assert "liver_hep" in _candidates(PatientProfile(hepatitis_history=history))

    def test_hpv_prevention_age_limit(self) -> None:
        # Act
        at_45 = _candidates(PatientProfile(age=45))
        at_46 = _candidates(PatientProfile(age=46))
        vaccinated = _candidates(
            PatientProfile(age=25, hpv_vaccine_status=HPVVaccineStatus.COMPLETE)
        )

        # Assert
        assert "hpv_prevention" in at_45
        assert "hpv_prevention" not in at_46
        assert "hpv_prevention" not in vaccinated

    def test_hpv_prevention_without_recorded_age(self) -> None:
        """Test an unrecorded age counts as 0, which is inside the vaccination window."""
        assert list(_candidates(PatientProfile())) == ["hpv_prevention", "lifestyle"]

    def test_lifestyle_always_present(self) -> None:
        profile = PatientProfile(hpv_vaccine_status=HPVVaccineStatus.COMPLETE)
        assert list(_candidates(profile)) == ["lifestyle"]


class TestWomensRules:
    """Test cervical and breast rules."""

    def test_cervix_window(self) -> None:
        # Act & Assert
        assert "cervix" not in _candidates(PatientProfile(age=29, sex=Sex.FEMALE))
        assert "cervix" in _candidates(PatientProfile(age=30, sex=Sex.FEMALE))
        assert "cervix" in _candidates(PatientProfile(age=65, sex=Sex.FEMALE))
        assert "cervix" not in _candidates(PatientProfile(age=66, sex=Sex.FEMALE))
        assert "cervix" not in _candidates(PatientProfile(age=40, sex=Sex.MALE))

    def test_breast_general_average_risk(self) -> None:
        # Act
        candidates = _candidates(PatientProfile(age=45, sex=Sex.FEMALE))

        # Assert
        assert candidates["breast_general"].reason_key == "breast_general_reason"
        assert candidates["breast_general"].high_risk is False
        assert "breast_cbe" in candidates

    def test_breast_general_not_before_40_without_history(self) -> None:
        assert "breast_general" not in _candidates(PatientProfile(age=35, sex=Sex.FEMALE))

    def test_breast_early_onset_history_lowers_start_age(self) -> None:
        """Test a relative diagnosed at 33 makes a 26-year-old eligible."""
        # Arrange
        profile = PatientProfile(
            age=26, sex=Sex.FEMALE, family_history=_history(DiseaseCondition.BREAST_CANCER, 33)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["breast_general"].reason_key == "breast_general_high_risk_reason_age"
        assert candidates["breast_general"].high_risk is True
        assert "breast_cbe" not in candidates

    def test_breast_late_onset_history(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=35, sex=Sex.FEMALE, family_history=_history(DiseaseCondition.OVARIAN_CANCER, 60)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["breast_general"].reason_key == "breast_general_high_risk_reason"

    def test_breast_history_ignored_when_unsure(self) -> None:
        profile = PatientProfile(
            age=35,
            sex=Sex.FEMALE,
            family_history=_history(DiseaseCondition.BREAST_CANCER, 40),
            family_history_unsure=True,
        )
        assert "breast_general" not in _candidates(profile)


class TestProstateAndColon:
    """Test hereditary-aware prostate and colon rules."""

    def test_prostate_average_risk_from_45(self) -> None:
        # Act & Assert
        assert "prostate" not in _candidates(PatientProfile(age=44, sex=Sex.MALE))
        candidates = _candidates(PatientProfile(age=45, sex=Sex.MALE))
        assert candidates["prostate"].reason_key == "prostate_reason"

    def test_prostate_family_history(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=41, sex=Sex.MALE, family_history=_history(DiseaseCondition.PROSTATE_CANCER, 60)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["prostate"].reason_key == "prostate_high_risk_reason"
        assert candidates["prostate"].high_risk is True

    def test_no_prostate_for_women(self) -> None:
        assert "prostate" not in _candidates(PatientProfile(age=60, sex=Sex.FEMALE))

    def test_colon_general_window(self) -> None:
        # Act & Assert
        assert "colon_general" not in _candidates(PatientProfile(age=44))
        assert _candidates(PatientProfile(age=45))["colon_general"].reason_key == (
            "colon_general_reason"
        )
        assert "colon_general" in _candidates(PatientProfile(age=75))
        assert "colon_general" not in _candidates(PatientProfile(age=76))

    def test_colon_early_onset_history(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=42,
            sex=Sex.MALE,
            family_history=(
                FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 45),
                FamilyHistoryCondition(DiseaseCondition.UTERINE_CANCER, 50),
            ),
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["colon_general"].reason_key == "colon_general_high_risk_reason_age"
        assert candidates["colon_general"].high_risk is True

    def test_colon_uterine_history_only(self) -> None:
        """Test uterine cancer history flags colon risk from the default high-risk age."""
        # Arrange
        profile = PatientProfile(
            age=42, sex=Sex.MALE, family_history=_history(DiseaseCondition.UTERINE_CANCER, 55)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["colon_general"].reason_key == "colon_general_high_risk_reason_uterine"

    def test_colon_late_onset_history(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=46, family_history=_history(DiseaseCondition.COLON_CANCER, 65)
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert candidates["colon_general"].reason_key == "colon_general_high_risk_reason"


class TestLungPathwayRules:
    """Test occupational lung and pulmonologist rules."""

    def test_exposures_trigger_both(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=30, cooking_fuel_type=CookingFuel.BIOMASS, marble_mining_exposure=True
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert "occupational_lung" in candidates
        assert "pulmonologist_consult" in candidates

    def test_single_factor_no_pulmonologist(self) -> None:
        # Arrange
        profile = PatientProfile(age=30, cooking_fuel_type=CookingFuel.BIOMASS)

        # Act
        candidates = _candidates(profile)

        # Assert
        assert "occupational_lung" in candidates
        assert "pulmonologist_consult" not in candidates

    def test_pulmonologist_skipped_when_lung_eligible(self) -> None:
        """Test a patient on the CT pathway is not also sent for a consult."""
        # Arrange
        profile = PatientProfile(
            age=60,
            sex=Sex.MALE,
            smoking_status=SmokingStatus.FORMER,
            smoking_sticks_per_day=20,
            smoking_years=25,
            quit_smoking_year=2015,
            cooking_fuel_type=CookingFuel.BIOMASS,
        )

        # Act
        candidates = _candidates(profile)

        # Assert
        assert "lung" in candidates
        assert "pulmonologist_consult" not in candidates


class TestRuleOrder:
    """Test the derivation order of the rule table."""

    def test_table_order(self) -> None:
        assert [rule.key for rule in SCREENING_RULES] == [
            "bp",
            "sugar",
            "diabetic_retinopathy",
            "diabetic_foot",
            "diabetic_kidney",
            "oral",
            "lung",
            "cervix",
            "breast_general",
            "breast_cbe",
            "prostate",
            "colon_general",
            "occupational_lung",
            "pulmonologist_consult",
            "gastric_screening",
            "liver_hep",
            "hpv_prevention",
            "lifestyle",
        ]


class TestPriority:
    """Test priority assignment."""

    @pytest.mark.parametrize("key", ["bp", "sugar", "oral", "cervix", "breast_general", "breast_cbe"])
    def test_score_escalation(self, key: str) -> None:
        # Arrange
        candidate = RecommendationCandidate(key, f"{key}_reason")

        # Act & Assert
        assert assign_priority(candidate, 4) is Priority.HIGH

    def test_below_threshold_stays_normal(self) -> None:
        candidate = RecommendationCandidate("bp", "bp_reason")
        assert assign_priority(candidate, 3) is Priority.NORMAL

    @pytest.mark.parametrize(
        "key",
        [
            "lung",
            "liver_hep",
            "occupational_lung",
            "oral",
            "diabetic_retinopathy",
            "diabetic_foot",
            "diabetic_kidney",
        ],
    )
    def test_always_high(self, key: str) -> None:
        assert assign_priority(RecommendationCandidate(key, "x"), 0) is Priority.HIGH

    def test_high_risk_branch_is_high(self) -> None:
        candidate = RecommendationCandidate("prostate", "prostate_high_risk_reason", True)
        assert assign_priority(candidate, 0) is Priority.HIGH

    def test_lifestyle_never_escalated(self) -> None:
        candidate = RecommendationCandidate("lifestyle", "lifestyle_reason")
        assert assign_priority(candidate, 10) is Priority.NORMAL


class TestBuildRecommendation:
    """Test content resolution for candidates."""

    def test_bp_frequency_follows_score(self) -> None:
        # Arrange
        candidate = RecommendationCandidate("bp", "bp_reason")
        resolver = default_resolver()

        # Act
        high = build_recommendation(candidate, 4, resolver)
        normal = build_recommendation(candidate, 3, resolver)

        # Assert
        assert high.frequency == "Every 6 months"
        assert normal.frequency == "Every year"

    def test_content_resolved(self) -> None:
        # Act
        rec = build_recommendation(
            RecommendationCandidate("lung", "lung_reason"), 0, default_resolver()
        )

        # Assert
        assert rec.category == "Cancer Screening"
        assert rec.test == "Low-Dose CT Chest"
        assert rec.reason_key == "lung_reason"
        assert rec.is_high_priority


class TestLifestyleRiskAlert:
    """Test the early-warning lifestyle alert."""

    def _alert(self, profile: PatientProfile) -> bool:
        return lifestyle_risk_alert(profile, pack_years(profile))

    def test_heavy_young_smoker(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=35,
            smoking_status=SmokingStatus.CURRENT,
            smoking_sticks_per_day=20,
            smoking_years=16,
        )

        # Act & Assert
        assert self._alert(profile) is True

    def test_exposure_must_exceed_15_pack_years(self) -> None:
        profile = PatientProfile(
            age=35,
            smoking_status=SmokingStatus.FORMER,
            smoking_sticks_per_day=20,
            smoking_years=15,
        )
        assert self._alert(profile) is False

    def test_smoker_and_heavy_drinker(self) -> None:
        profile = PatientProfile(
            age=25,
            smoking_status=SmokingStatus.CURRENT,
            alcohol_frequency=AlcoholFrequency.HIGH,
        )
        assert self._alert(profile) is True

    def test_early_onset_heart_disease_in_family(self) -> None:
        # Arrange
        profile = PatientProfile(
            age=30, family_history=_history(DiseaseCondition.HEART_DISEASE, 45)
        )

        # Act & Assert
        assert self._alert(profile) is True

    def test_unsure_family_history_does_not_alert(self) -> None:
        profile = PatientProfile(
            age=30,
            family_history=_history(DiseaseCondition.HEART_DISEASE, 45),
            family_history_unsure=True,
        )
        assert self._alert(profile) is False

    def test_early_onset_non_alert_condition(self) -> None:
        profile = PatientProfile(
            age=30, family_history=_history(DiseaseCondition.DIABETES_TYPE_2, 40)
        )
        assert self._alert(profile) is False

    def test_age_40_and_over_never_alerts(self) -> None:
        profile = PatientProfile(
            age=45,
            smoking_status=SmokingStatus.CURRENT,
            alcohol_frequency=AlcoholFrequency.HIGH,
        )
        assert self._alert(profile) is False

    def test_missing_age_never_alerts(self) -> None:
        profile = PatientProfile(
            smoking_status=SmokingStatus.CURRENT, alcohol_frequency=AlcoholFrequency.HIGH
        )
        assert self._alert(profile) is False

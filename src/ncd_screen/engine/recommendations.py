"""Recommendation deriver.

Each screening rule is a pure function of the profile and a set of derived
facts, returning the reason key it fired with (and whether it fired on a
high-risk branch) or None. Rules are evaluated in table order; the order is
the tie-break of the final priority sort, so new rules go where their
recommendation should appear.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ncd_screen.content import ContentResolver
from ncd_screen.engine import thresholds as th
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.analysis import BiometricAnalysis, Priority, Recommendation
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

logger = get_logger(__name__)

# Escalated to high priority when the CBAC score reaches HIGH_SCORE_THRESHOLD
SCORE_ESCALATED_KEYS = frozenset(
    {"bp", "sugar", "oral", "cervix", "breast_general", "breast_cbe"}
)

ALWAYS_HIGH_PRIORITY_KEYS = frozenset(
    {
        "lung",
        "liver_hep",
        "occupational_lung",
        "oral",
        "diabetic_retinopathy",
        "diabetic_foot",
        "diabetic_kidney",
    }
)


@dataclass(frozen=True)
class ScreeningFacts:
    """Values derived once per analysis and shared by all rules.

    Attributes:
        age: Age in years, 0 when unknown
        pack_years: Smoking exposure, 0 for never-smokers
        years_since_quit: Years since a former smoker quit, 0 otherwise
        is_diabetic: Personal type-2 diabetes diagnosis
        family_history: Family history after the unsure override
        biometrics: BMI and waist analysis
        score: CBAC score
        lung_eligible: Whether low-dose CT lung screening applies
    """

    age: int
    pack_years: float
    years_since_quit: int
    is_diabetic: bool
    family_history: tuple[FamilyHistoryCondition, ...]
    biometrics: BiometricAnalysis
    score: int
    lung_eligible: bool


@dataclass(frozen=True)
class RuleOutcome:
    """What a rule returns when it fires."""

    reason_key: str
    high_risk: bool = False


@dataclass(frozen=True)
class RecommendationCandidate:
    """A fired rule before priority and content resolution."""

    key: str
    reason_key: str
    high_risk: bool = False


@dataclass(frozen=True)
class ScreeningRule:
    """One row of the rule table."""

    key: str
    evaluate: Callable[[PatientProfile, ScreeningFacts], Optional[RuleOutcome]]


def pack_years(profile: PatientProfile) -> float:
    """Pack-years = (sticks per day / 20) x years smoked; 0 for never-smokers."""
    if profile.smoking_status is SmokingStatus.NEVER:
        return 0.0
    packs_per_day = (profile.smoking_sticks_per_day or 0) / th.STICKS_PER_PACK
    return packs_per_day * (profile.smoking_years or 0)


def years_since_quit(profile: PatientProfile, reference_year: int) -> int:
    if profile.is_former_smoker and profile.quit_smoking_year:
        return reference_year - profile.quit_smoking_year
    return 0


def is_lung_screening_eligible(
    profile: PatientProfile, age: int, exposure: float, quit_years: int
) -> bool:
    """USPSTF low-dose CT criteria: age window, pack-years, and recency of smoking."""
    meets_criteria = (
        th.LUNG_SCREENING_MIN_AGE <= age <= th.LUNG_SCREENING_MAX_AGE
        and exposure >= th.LUNG_SCREENING_MIN_PACK_YEARS
    )
    recent_smoker = profile.is_current_smoker or (
        profile.is_former_smoker
        and profile.quit_smoking_year is not None
        and quit_years <= th.LUNG_SCREENING_YEARS_SINCE_QUIT
    )
    return meets_criteria and recent_smoker


def build_facts(
    profile: PatientProfile,
    biometrics: BiometricAnalysis,
    score: int,
    reference_year: int,
) -> ScreeningFacts:
    age = profile.age or 0
    exposure = pack_years(profile)
    quit_years = years_since_quit(profile, reference_year)
    return ScreeningFacts(
        age=age,
        pack_years=exposure,
        years_since_quit=quit_years,
        is_diabetic=th.DiseaseCondition.DIABETES_TYPE_2 in profile.personal_conditions,
        family_history=profile.effective_family_history(),
        biometrics=biometrics,
        score=score,
        lung_eligible=is_lung_screening_eligible(profile, age, exposure, quit_years),
    )


def _relevant_history(
    facts: ScreeningFacts, conditions: Iterable[str]
) -> list[FamilyHistoryCondition]:
    wanted = frozenset(conditions)
    return [h for h in facts.family_history if h.condition in wanted]


def _has_early_onset(entries: Iterable[FamilyHistoryCondition]) -> bool:
    return any(
        h.relative_age_at_diagnosis and h.relative_age_at_diagnosis < th.EARLY_ONSET_CANCER_AGE
        for h in entries
    )


def high_risk_start_age(entries: Iterable[FamilyHistoryCondition], default_start: int) -> float:
    """Screening start age lowered to ten years before the youngest relative's diagnosis.

    Never later than the default high-risk start and never earlier than the
    absolute floor. Entries without a positive diagnosis age are ignored.
    """
    ages = [
        h.relative_age_at_diagnosis
        for h in entries
        if h.relative_age_at_diagnosis is not None and h.relative_age_at_diagnosis > 0
    ]
    if not ages:
        return default_start
    dynamic_start = min(ages) - th.HIGH_RISK_START_AGE_OFFSET
    return max(th.ABSOLUTE_MIN_HIGH_RISK_SCREENING_AGE, min(default_start, dynamic_start))


# ----------------------------
# Rules
# ----------------------------
def _bp(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if facts.age >= th.BP_SUGAR_MIN_AGE:
        return RuleOutcome("bp_reason")
    return None


def _sugar(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    # Diabetics get the dedicated monitoring rules instead
    if facts.age >= th.BP_SUGAR_MIN_AGE and not facts.is_diabetic:
        return RuleOutcome("sugar_reason")
    return None


def _diabetic(reason_key: str) -> Callable[[PatientProfile, ScreeningFacts], Optional[RuleOutcome]]:
    def rule(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
        return RuleOutcome(reason_key) if facts.is_diabetic else None

    return rule


def _oral(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.uses_smokeless_tobacco or profile.has_oral_signs or profile.is_current_smoker:
        return RuleOutcome("oral_reason")
    return None


def _lung(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    return RuleOutcome("lung_reason") if facts.lung_eligible else None


def _cervix(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if (
        profile.sex is Sex.FEMALE
        and th.CERVICAL_SCREENING_MIN_AGE <= facts.age <= th.CERVICAL_SCREENING_MAX_AGE
    ):
        return RuleOutcome("cervix_reason")
    return None


def _breast_general(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.sex is not Sex.FEMALE:
        return None

    history = _relevant_history(facts, th.BREAST_HIGH_RISK_CONDITIONS)
    high_risk = bool(history)
    start_age = high_risk_start_age(history, th.BREAST_SCREENING_HIGH_RISK_MIN_AGE)

    in_general_window = th.BREAST_SCREENING_MIN_AGE <= facts.age <= th.BREAST_SCREENING_MAX_AGE
    in_high_risk_window = high_risk and start_age <= facts.age <= th.BREAST_SCREENING_MAX_AGE
    if not (in_general_window or in_high_risk_window):
        return None

    if not high_risk:
        return RuleOutcome("breast_general_reason")
    if _has_early_onset(history):
        return RuleOutcome("breast_general_high_risk_reason_age", high_risk=True)
    return RuleOutcome("breast_general_high_risk_reason", high_risk=True)


def _breast_cbe(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.sex is Sex.FEMALE and facts.age >= th.BREAST_CBE_MIN_AGE:
        return RuleOutcome("breast_cbe_reason")
    return None


def _prostate(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.sex is not Sex.MALE:
        return None

    history = _relevant_history(facts, [th.DiseaseCondition.PROSTATE_CANCER])
    high_risk = bool(history)
    start_age = high_risk_start_age(history, th.PROSTATE_SCREENING_HIGH_RISK_MIN_AGE)

    eligible = facts.age >= th.PROSTATE_SCREENING_MIN_AGE or (
        high_risk and facts.age >= start_age
    )
    if not eligible:
        return None
    if high_risk:
        return RuleOutcome("prostate_high_risk_reason", high_risk=True)
    return RuleOutcome("prostate_reason")


def _colon_general(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    history = _relevant_history(facts, th.COLON_HIGH_RISK_CONDITIONS)
    high_risk = bool(history)
    # Only colon diagnoses move the start age; uterine history flags risk alone
    colon_only = [h for h in history if h.condition == th.DiseaseCondition.COLON_CANCER]
    start_age = high_risk_start_age(colon_only, th.COLON_SCREENING_HIGH_RISK_MIN_AGE)

    in_general_window = th.COLON_SCREENING_MIN_AGE <= facts.age <= th.COLON_SCREENING_MAX_AGE
    in_high_risk_window = high_risk and start_age <= facts.age <= th.COLON_SCREENING_MAX_AGE
    if not (in_general_window or in_high_risk_window):
        return None

    if not high_risk:
        return RuleOutcome("colon_general_reason")
    if _has_early_onset(history):
        return RuleOutcome("colon_general_high_risk_reason_age", high_risk=True)
    if any(h.condition == th.DiseaseCondition.UTERINE_CANCER for h in history):
        return RuleOutcome("colon_general_high_risk_reason_uterine", high_risk=True)
    return RuleOutcome("colon_general_high_risk_reason", high_risk=True)


def _occupational_lung(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.cooking_fuel_type is CookingFuel.BIOMASS or profile.marble_mining_exposure:
        return RuleOutcome("occupational_lung_reason")
    return None


def _pulmonologist_consult(
    profile: PatientProfile, facts: ScreeningFacts
) -> Optional[RuleOutcome]:
    risk_factors = [
        profile.is_former_smoker
        and facts.pack_years >= th.PULMONOLOGIST_CONSULT_MIN_PACK_YEARS,
        profile.marble_mining_exposure,
        profile.cooking_fuel_type is CookingFuel.BIOMASS,
    ]
    if sum(risk_factors) >= th.PULMONOLOGIST_CONSULT_MIN_FACTORS and not facts.lung_eligible:
        return RuleOutcome("pulmonologist_consult_reason")
    return None


def _gastric_screening(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.salt_intake is SaltIntake.HIGH and facts.age >= th.GASTRIC_SCREENING_MIN_AGE:
        return RuleOutcome("gastric_screening_reason")
    return None


def _liver_hep(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if profile.hepatitis_history is not HepatitisHistory.NONE:
        return RuleOutcome("liver_hep_reason")
    return None


def _hpv_prevention(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    if (
        profile.hpv_vaccine_status is not HPVVaccineStatus.COMPLETE
        and facts.age <= th.HPV_PREVENTION_MAX_AGE
    ):
        return RuleOutcome("hpv_prevention_reason")
    return None


def _lifestyle(profile: PatientProfile, facts: ScreeningFacts) -> Optional[RuleOutcome]:
    return RuleOutcome("lifestyle_reason")


SCREENING_RULES: tuple[ScreeningRule, ...] = (
    ScreeningRule("bp", _bp),
    ScreeningRule("sugar", _sugar),
    ScreeningRule("diabetic_retinopathy", _diabetic("reason_diabetic_retinopathy")),
    ScreeningRule("diabetic_foot", _diabetic("reason_diabetic_foot")),
    ScreeningRule("diabetic_kidney", _diabetic("reason_diabetic_kidney")),
    ScreeningRule("oral", _oral),
    ScreeningRule("lung", _lung),
    ScreeningRule("cervix", _cervix),
    ScreeningRule("breast_general", _breast_general),
    ScreeningRule("breast_cbe", _breast_cbe),
    ScreeningRule("prostate", _prostate),
    ScreeningRule("colon_general", _colon_general),
    ScreeningRule("occupational_lung", _occupational_lung),
    ScreeningRule("pulmonologist_consult", _pulmonologist_consult),
    ScreeningRule("gastric_screening", _gastric_screening),
    ScreeningRule("liver_hep", _liver_hep),
    ScreeningRule("hpv_prevention", _hpv_prevention),
    ScreeningRule("lifestyle", _lifestyle),
)


def derive_candidates(
    profile: PatientProfile,
    biometrics: BiometricAnalysis,
    score: int,
    reference_year: int,
) -> list[RecommendationCandidate]:
    """Evaluate every screening rule in table order.

    Args:
        profile: Patient profile
        biometrics: Output of the biometric analyzer
        score: CBAC score
        reference_year: Calendar year used for years-since-quit

    Returns:
        One candidate per rule that fired, in rule order
    """
    facts = build_facts(profile, biometrics, score, reference_year)
    candidates = []
    for rule in SCREENING_RULES:
        outcome = rule.evaluate(profile, facts)
        if outcome is None:
            continue
        candidates.append(
            RecommendationCandidate(rule.key, outcome.reason_key, outcome.high_risk)
        )
    logger.debug(
        "Derived %d candidate(s): %s",
        len(candidates),
        ", ".join(c.key for c in candidates),
    )
    return candidates


def assign_priority(candidate: RecommendationCandidate, score: int) -> Priority:
    if (
        (score >= th.HIGH_SCORE_THRESHOLD and candidate.key in SCORE_ESCALATED_KEYS)
        or candidate.high_risk
        or candidate.key in ALWAYS_HIGH_PRIORITY_KEYS
    ):
        return Priority.HIGH
    return Priority.NORMAL


def build_recommendation(
    candidate: RecommendationCandidate, score: int, resolver: ContentResolver
) -> Recommendation:
    """Resolve content and priority for a candidate.

    The bp frequency switches to the high-score variant when the score
    reaches HIGH_SCORE_THRESHOLD.
    """
    content = resolver.recommendation_content(candidate.key, candidate.reason_key)
    frequency = content.frequency
    if candidate.key == "bp":
        frequency = resolver.text(
            "rec_freq_bp_high" if score >= th.HIGH_SCORE_THRESHOLD else "rec_freq_bp_normal"
        )
    return Recommendation(
        key=candidate.key,
        category_key=content.category_key,
        category=content.category,
        test=content.test,
        frequency=frequency,
        reason=content.reason,
        reason_key=candidate.reason_key,
        priority=assign_priority(candidate, score),
    )


def lifestyle_risk_alert(profile: PatientProfile, exposure: float) -> bool:
    """Early-warning flag for young adults whose risk the age-weighted score understates.

    True when the patient is under LIFESTYLE_ALERT_MAX_AGE and has heavy
    smoking exposure, combined current smoking and heavy drinking, or a
    relative diagnosed with cancer, heart disease or stroke before 50.
    """
    if profile.age is None or profile.age >= th.LIFESTYLE_ALERT_MAX_AGE:
        return False

    early_onset_history = _has_early_onset(
        h
        for h in profile.effective_family_history()
        if h.condition in th.EARLY_ONSET_ALERT_CONDITIONS
    )
    smoker_and_drinker = (
        profile.is_current_smoker and profile.alcohol_frequency is AlcoholFrequency.HIGH
    )
    return (
        exposure > th.LIFESTYLE_ALERT_MIN_PACK_YEARS
        or smoker_and_drinker
        or early_onset_history
    )

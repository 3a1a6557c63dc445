"""CBAC score calculator.

Accumulates an integer score from seven independent, non-negative factors
and clamps it to CBAC_SCORE_MAX. Missing age scores as the youngest bracket.
"""

from ncd_screen.engine import thresholds as th
from ncd_screen.engine.biometrics import waist_cm, waist_threshold_cm
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.analysis import RiskBand
from ncd_screen.models.profile import AlcoholFrequency, PatientProfile, PhysicalActivity

logger = get_logger(__name__)


def age_points(age: int) -> int:
    for min_age, points in th.CBAC_AGE_BRACKETS:
        if age >= min_age:
            return points
    return 0


def tobacco_points(profile: PatientProfile) -> int:
    if profile.is_current_smoker or profile.uses_smokeless_tobacco:
        return 2
    if profile.is_former_smoker:
        return 1
    return 0


def has_ncd_family_history(profile: PatientProfile) -> bool:
    return any(
        entry.condition in th.NCD_CONDITIONS
        for entry in profile.effective_family_history()
    )


def has_personal_ncd(profile: PatientProfile) -> bool:
    return any(c in th.NCD_CONDITIONS for c in profile.personal_conditions)


def score_breakdown(profile: PatientProfile) -> dict[str, int]:
    """Points contributed by each factor, before clamping.

    Args:
        profile: Patient profile

    Returns:
        Ordered mapping of factor name to points
    """
    return {
        "age": age_points(profile.age or 0),
        "tobacco": tobacco_points(profile),
        "alcohol": 1 if profile.alcohol_frequency is AlcoholFrequency.HIGH else 0,
        # Strictly above the threshold; the consolidator's waist check is inclusive
        "waist": 2 if waist_cm(profile) > waist_threshold_cm(profile.sex) else 0,
        "activity": 1 if profile.physical_activity is PhysicalActivity.SEDENTARY else 0,
        "family_history": 1 if has_ncd_family_history(profile) else 0,
        "personal_history": 2 if has_personal_ncd(profile) else 0,
    }


def compute_score(profile: PatientProfile) -> int:
    """Compute the CBAC score for a profile.

    Total function: always returns an integer in [0, CBAC_SCORE_MAX].

    Args:
        profile: Patient profile

    Returns:
        Clamped CBAC score
    """
    breakdown = score_breakdown(profile)
    score = min(sum(breakdown.values()), th.CBAC_SCORE_MAX)
    logger.debug("CBAC score %d from %s", score, breakdown)
    return score


def risk_band(score: int) -> RiskBand:
    """Map a CBAC score to its display band."""
    if score >= 7:
        return RiskBand.HIGH
    if score >= th.HIGH_SCORE_THRESHOLD:
        return RiskBand.MEDIUM
    return RiskBand.LOW

"""Biometric analyzer.

Derives BMI and waist-circumference risk status from raw height, weight and
waist. Degenerate inputs (missing or zero measurements) resolve to healthy
rather than raising.
"""

from typing import Optional

from ncd_screen.content import ContentResolver, default_resolver
from ncd_screen.engine import thresholds as th
from ncd_screen.models.analysis import BiometricAnalysis, BiometricResult, BiometricStatus
from ncd_screen.models.profile import PatientProfile, Sex


def waist_cm(profile: PatientProfile) -> float:
    """Waist circumference converted from inches to centimetres."""
    return (profile.waist_circumference_in or 0.0) * th.CM_PER_INCH


def waist_threshold_cm(sex: Sex) -> int:
    """High-risk waist threshold; female, other and unset share the stricter cut."""
    return th.WAIST_MALE_HIGH_CM if sex is Sex.MALE else th.WAIST_FEMALE_HIGH_CM


def compute_bmi(height_cm: Optional[float], weight_kg: Optional[float]) -> float:
    """Body mass index, or 0 when height or weight is missing.

    A zero result signals insufficient data, not a measured BMI.
    """
    if not height_cm or not weight_kg:
        return 0.0
    height_m = height_cm / 100
    return weight_kg / (height_m ** 2)


def classify(value: float, threshold: float) -> BiometricStatus:
    """Classify a measurement against a hard threshold and its 95% borderline band."""
    if value >= threshold:
        return BiometricStatus.HIGH_RISK
    if value >= threshold * th.BORDERLINE_FRACTION:
        return BiometricStatus.BORDERLINE
    return BiometricStatus.HEALTHY


def analyze_biometrics(
    profile: PatientProfile, resolver: Optional[ContentResolver] = None
) -> BiometricAnalysis:
    """Analyze BMI and waist circumference.

    Args:
        profile: Patient profile
        resolver: Content resolver for borderline notes (English by default)

    Returns:
        BiometricAnalysis with status and notes for both measurements
    """
    resolver = resolver or default_resolver()

    bmi_value = compute_bmi(profile.height_cm, profile.weight_kg)
    bmi_status = classify(bmi_value, th.BMI_NORMAL_UPPER)
    bmi_note = None
    if bmi_status is BiometricStatus.BORDERLINE:
        bmi_note = resolver.text("borderline_note_bmi").replace(
            "{threshold}", str(th.BMI_NORMAL_UPPER)
        )

    waist_value_cm = waist_cm(profile)
    threshold_cm = waist_threshold_cm(profile.sex)
    waist_status = classify(waist_value_cm, threshold_cm)
    waist_note = None
    if waist_status is BiometricStatus.BORDERLINE:
        threshold_in = f"{threshold_cm / th.CM_PER_INCH:.1f}"
        waist_note = resolver.text("borderline_note_waist").replace("{threshold}", threshold_in)

    waist_in = profile.waist_circumference_in or 0.0
    return BiometricAnalysis(
        bmi=BiometricResult(
            value=round(bmi_value, 1),
            display=f"{bmi_value:.1f}",
            status=bmi_status,
            note=bmi_note,
        ),
        waist=BiometricResult(
            value=waist_in,
            display=f"{waist_in:g} inch",
            status=waist_status,
            note=waist_note,
        ),
        waist_cm=waist_value_cm,
        waist_threshold_cm=threshold_cm,
    )

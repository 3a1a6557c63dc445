"""Primary insights for the results summary.

Picks the single strongest positive finding and up to two focus areas from
a profile, in fixed ranked order.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ncd_screen.content import ContentResolver, default_resolver
from ncd_screen.engine import thresholds as th
from ncd_screen.engine.biometrics import compute_bmi, waist_cm, waist_threshold_cm
from ncd_screen.models.profile import (
    AlcoholFrequency,
    CookingFuel,
    PatientProfile,
    PhysicalActivity,
    SaltIntake,
    SmokingStatus,
)

MAX_FOCUS_AREAS = 2


@dataclass(frozen=True)
class Insight:
    key: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "label": self.label}


@dataclass(frozen=True)
class PrimaryInsights:
    """Headline findings for a profile.

    Attributes:
        positive: Strongest positive finding, if any
        focus_areas: Up to two areas to work on, most important first
    """

    positive: Optional[Insight]
    focus_areas: tuple[Insight, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "positive": self.positive.to_dict() if self.positive else None,
            "focus_areas": [f.to_dict() for f in self.focus_areas],
        }


def _positive_findings(profile: PatientProfile, bmi: float) -> list[str]:
    checks = [
        (
            "positive_finding_activity",
            profile.physical_activity in (PhysicalActivity.ACTIVE, PhysicalActivity.MODERATE),
        ),
        (
            "positive_finding_no_smoking",
            profile.smoking_status is SmokingStatus.NEVER and not profile.uses_smokeless_tobacco,
        ),
        ("positive_finding_low_salt", profile.salt_intake is SaltIntake.LOW),
        ("positive_finding_no_alcohol", profile.alcohol_frequency is AlcoholFrequency.NONE),
        (
            "positive_finding_healthy_bmi",
            th.BMI_UNDERWEIGHT_UPPER <= bmi < th.BMI_NORMAL_UPPER,
        ),
    ]
    return [key for key, holds in checks if holds]


def _focus_areas(profile: PatientProfile, bmi: float) -> list[str]:
    checks = [
        (
            "risk_insight_smoking",
            profile.is_current_smoker or profile.uses_smokeless_tobacco,
        ),
        ("risk_insight_obesity", bmi >= th.BMI_OVERWEIGHT_UPPER),
        ("risk_insight_waist", waist_cm(profile) >= waist_threshold_cm(profile.sex)),
        ("risk_insight_sedentary", profile.physical_activity is PhysicalActivity.SEDENTARY),
        ("risk_insight_alcohol", profile.alcohol_frequency is AlcoholFrequency.HIGH),
        ("risk_insight_salt", profile.salt_intake is SaltIntake.HIGH),
        ("risk_insight_family_history", bool(profile.effective_family_history())),
        ("risk_insight_biomass", profile.cooking_fuel_type is CookingFuel.BIOMASS),
    ]
    return [key for key, holds in checks if holds]


def primary_insights(
    profile: PatientProfile, resolver: Optional[ContentResolver] = None
) -> PrimaryInsights:
    """Select the headline positive finding and focus areas for a profile."""
    resolver = resolver or default_resolver()
    bmi = compute_bmi(profile.height_cm, profile.weight_kg)

    positives = _positive_findings(profile, bmi)
    focus = _focus_areas(profile, bmi)[:MAX_FOCUS_AREAS]

    return PrimaryInsights(
        positive=Insight(positives[0], resolver.text(positives[0])) if positives else None,
        focus_areas=tuple(Insight(key, resolver.text(key)) for key in focus),
    )

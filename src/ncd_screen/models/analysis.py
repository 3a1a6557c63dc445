"""Analysis result data models.

This module defines the outputs of the screening engine: biometric status,
recommendations, and the composite AnalysisResult.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Priority(Enum):
    """Recommendation priority tier."""

    HIGH = "high"
    NORMAL = "normal"


class BiometricStatus(Enum):
    """Risk status of a single biometric measurement."""

    HEALTHY = "healthy"
    BORDERLINE = "borderline"
    HIGH_RISK = "high_risk"


class RiskBand(Enum):
    """Display band of the CBAC score (<4 low, 4-6 medium, >=7 high)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class BiometricResult:
    """Status of one biometric measurement.

    Attributes:
        value: Measured value (BMI, or waist in inches as entered)
        display: Formatted value for presentation ("31.1", "40 inch")
        status: Healthy, borderline or high risk
        note: Explanation attached to borderline results
    """

    value: float
    display: str
    status: BiometricStatus
    note: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.display,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class BiometricAnalysis:
    """BMI and waist circumference analysis."""

    bmi: BiometricResult
    waist: BiometricResult
    waist_cm: float
    waist_threshold_cm: float

    @property
    def waist_at_or_above_threshold(self) -> bool:
        return self.waist_cm >= self.waist_threshold_cm

    def to_dict(self) -> dict[str, Any]:
        return {"bmi": self.bmi.to_dict(), "waist": self.waist.to_dict()}


@dataclass(frozen=True)
class Recommendation:
    """A screening recommendation with resolved display content.

    Attributes:
        key: Stable recommendation identifier (bp, sugar, lung, ...)
        category_key: Content key of the category (rec_cat_cardio, ...)
        category: Category display text
        test: Test display text
        frequency: Frequency display text
        reason: Reason display text
        reason_key: Content key the reason was resolved from
        priority: HIGH or NORMAL
    """

    key: str
    category_key: str
    category: str
    test: str
    frequency: str
    reason: str
    reason_key: str
    priority: Priority = Priority.NORMAL

    @property
    def is_high_priority(self) -> bool:
        return self.priority is Priority.HIGH

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "category_key": self.category_key,
            "category": self.category,
            "test": self.test,
            "frequency": self.frequency,
            "reason": self.reason,
            "reason_key": self.reason_key,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Complete output of one screening analysis.

    Attributes:
        cbac_score: Composite CBAC score in [0, 10]
        recommendations: Final recommendations, high priority first
        has_lifestyle_risk_alert: Early-warning flag independent of the score
        disclaimer: Static disclaimer text
        risk_band: Display band of the score
        biometrics: BMI and waist analysis the rules were evaluated against
    """

    cbac_score: int
    recommendations: tuple[Recommendation, ...]
    has_lifestyle_risk_alert: bool
    disclaimer: str
    risk_band: RiskBand
    biometrics: BiometricAnalysis

    @property
    def recommendation_keys(self) -> list[str]:
        return [r.key for r in self.recommendations]

    def get(self, key: str) -> Optional[Recommendation]:
        """Return the recommendation with the given key, if present."""
        for rec in self.recommendations:
            if rec.key == key:
                return rec
        return None

    def to_dict(self) -> dict[str, Any]:
        """Export the result as a JSON-serializable dictionary."""
        return {
            "cbac_score": self.cbac_score,
            "risk_band": self.risk_band.value,
            "has_lifestyle_risk_alert": self.has_lifestyle_risk_alert,
            "biometrics": self.biometrics.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "disclaimer": self.disclaimer,
        }

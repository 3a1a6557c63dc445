"""Models module.

This module provides the patient profile and analysis result dataclasses.
"""

from ncd_screen.models.analysis import (
    AnalysisResult,
    BiometricAnalysis,
    BiometricResult,
    BiometricStatus,
    Priority,
    Recommendation,
    RiskBand,
)
from ncd_screen.models.profile import (
    AlcoholFrequency,
    CookingFuel,
    FamilyHistoryCondition,
    HepatitisHistory,
    HPVVaccineStatus,
    PatientProfile,
    PhysicalActivity,
    Relationship,
    SaltIntake,
    Sex,
    SmokingStatus,
)

__all__ = [
    "AlcoholFrequency",
    "AnalysisResult",
    "BiometricAnalysis",
    "BiometricResult",
    "BiometricStatus",
    "CookingFuel",
    "FamilyHistoryCondition",
    "HepatitisHistory",
    "HPVVaccineStatus",
    "PatientProfile",
    "PhysicalActivity",
    "Priority",
    "Recommendation",
    "Relationship",
    "RiskBand",
    "SaltIntake",
    "Sex",
    "SmokingStatus",
]

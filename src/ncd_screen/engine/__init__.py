"""Engine module.

This module provides the screening engine: biometric analysis, CBAC scoring,
recommendation derivation and consolidation.
"""

from ncd_screen.engine.biometrics import analyze_biometrics, compute_bmi
from ncd_screen.engine.consolidation import consolidate
from ncd_screen.engine.insights import Insight, PrimaryInsights, primary_insights
from ncd_screen.engine.pipeline import analyze
from ncd_screen.engine.recommendations import (
    RecommendationCandidate,
    assign_priority,
    derive_candidates,
    lifestyle_risk_alert,
    pack_years,
)
from ncd_screen.engine.scoring import compute_score, risk_band, score_breakdown

__all__ = [
    "analyze",
    "analyze_biometrics",
    "assign_priority",
    "compute_bmi",
    "compute_score",
    "consolidate",
    "derive_candidates",
    "Insight",
    "lifestyle_risk_alert",
    "pack_years",
    "PrimaryInsights",
    "primary_insights",
    "RecommendationCandidate",
    "risk_band",
    "score_breakdown",
]

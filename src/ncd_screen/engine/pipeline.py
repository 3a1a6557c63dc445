"""Screening pipeline.

Composes biometric analysis, scoring, recommendation derivation and
consolidation into a single pure call.
"""

from datetime import date
from typing import Optional

from ncd_screen.content import ContentResolver, default_resolver
from ncd_screen.engine.biometrics import analyze_biometrics
from ncd_screen.engine.consolidation import consolidate
from ncd_screen.engine.recommendations import (
    build_recommendation,
    derive_candidates,
    lifestyle_risk_alert,
    pack_years,
)
from ncd_screen.engine.scoring import compute_score, risk_band
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.analysis import AnalysisResult
from ncd_screen.models.profile import PatientProfile

logger = get_logger(__name__)


def analyze(
    profile: PatientProfile,
    reference_year: Optional[int] = None,
    resolver: Optional[ContentResolver] = None,
) -> AnalysisResult:
    """Run the full screening analysis for a profile.

    Never raises for any profile value and never mutates the input. Calling
    twice with equal profiles and the same reference year yields equal results.

    Args:
        profile: Patient profile
        reference_year: Calendar year for years-since-quit (defaults to the current year)
        resolver: Content resolver (English by default)

    Returns:
        AnalysisResult with score, ordered recommendations and lifestyle alert

    Example:
        >>> result = analyze(PatientProfile(age=45, sex=Sex.MALE), reference_year=2025)
        >>> result.cbac_score
        2
    """
    resolver = resolver or default_resolver()
    year = reference_year if reference_year is not None else date.today().year

    biometrics = analyze_biometrics(profile, resolver)
    score = compute_score(profile)
    candidates = derive_candidates(profile, biometrics, score, year)
    recommendations = [build_recommendation(c, score, resolver) for c in candidates]
    final = consolidate(recommendations, profile, score, resolver, biometrics)

    result = AnalysisResult(
        cbac_score=score,
        recommendations=tuple(final),
        has_lifestyle_risk_alert=lifestyle_risk_alert(profile, pack_years(profile)),
        disclaimer=resolver.disclaimer(),
        risk_band=risk_band(score),
        biometrics=biometrics,
    )
    logger.debug(
        "Analysis complete: score=%d band=%s recommendations=%d alert=%s",
        result.cbac_score,
        result.risk_band.value,
        len(result.recommendations),
        result.has_lifestyle_risk_alert,
    )
    return result

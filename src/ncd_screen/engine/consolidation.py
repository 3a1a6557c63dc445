"""Recommendation consolidator.

Merges overlapping recommendations into composite pathway recommendations
and orders the final list high priority first.
"""

from typing import Optional

from ncd_screen.content import ContentResolver, default_resolver
from ncd_screen.engine import thresholds as th
from ncd_screen.engine.biometrics import analyze_biometrics
from ncd_screen.logging_audit import get_logger
from ncd_screen.models.analysis import BiometricAnalysis, Priority, Recommendation
from ncd_screen.models.profile import PatientProfile

logger = get_logger(__name__)

LUNG_PATHWAY_MEMBERS = ("occupational_lung", "pulmonologist_consult")


def _composite(key: str, resolver: ContentResolver) -> Recommendation:
    reason_key = f"{key}_reason"
    content = resolver.recommendation_content(key, reason_key)
    return Recommendation(
        key=key,
        category_key=content.category_key,
        category=content.category,
        test=content.test,
        frequency=content.frequency,
        reason=content.reason,
        reason_key=reason_key,
        priority=Priority.HIGH,
    )


def consolidate(
    recommendations: list[Recommendation],
    profile: PatientProfile,
    score: int,
    resolver: Optional[ContentResolver] = None,
    biometrics: Optional[BiometricAnalysis] = None,
) -> list[Recommendation]:
    """Merge pathway recommendations and sort by priority.

    Lung pathway: when both occupational_lung and pulmonologist_consult are
    present they are replaced by a single comprehensive_lung_assessment.

    Metabolic pathway: when the score reaches HIGH_SCORE_THRESHOLD, bp and
    sugar are both present and the waist is at or above the sex-specific
    threshold, metabolic_syndrome_protocol is added alongside them.

    Args:
        recommendations: Prioritized recommendations in derivation order
        profile: Patient profile
        score: CBAC score
        resolver: Content resolver for the composite entries
        biometrics: Precomputed biometric analysis, computed from the profile if omitted

    Returns:
        New list, high priority first, derivation order kept within each tier
    """
    resolver = resolver or default_resolver()
    biometrics = biometrics or analyze_biometrics(profile, resolver)
    result = list(recommendations)
    keys = {r.key for r in result}

    if all(member in keys for member in LUNG_PATHWAY_MEMBERS):
        result = [r for r in result if r.key not in LUNG_PATHWAY_MEMBERS]
        result.append(_composite("comprehensive_lung_assessment", resolver))
        logger.debug("Merged lung pathway into comprehensive_lung_assessment")

    if (
        score >= th.HIGH_SCORE_THRESHOLD
        and "bp" in keys
        and "sugar" in keys
        and biometrics.waist_at_or_above_threshold
    ):
        result.append(_composite("metabolic_syndrome_protocol", resolver))
        logger.debug("Added metabolic_syndrome_protocol")

    # sorted() is stable, so derivation order survives within each tier
    return sorted(result, key=lambda r: 0 if r.is_high_priority else 1)

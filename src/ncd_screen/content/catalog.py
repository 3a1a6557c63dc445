"""Recommendation content catalog.

Maps the keys produced by the screening engine (recommendation keys, reason
keys, note and label keys) to English display text. The engine only ever
hands keys to a ContentResolver; swapping the resolver localizes the output
without touching any rule.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from ncd_screen.logging_audit import get_logger
from ncd_screen.utils.exceptions import ContentError

logger = get_logger(__name__)

INTERACTIVE_COMPONENTS = frozenset({"AnimatedHeart", "AnimatedBloodSugar"})

FALLBACK_CATEGORY_KEY = "info"
FALLBACK_REASON = "Consult your doctor for personalized advice."


@dataclass(frozen=True)
class RecommendationContent:
    """Display strings for one recommendation."""

    category_key: str
    category: str
    test: str
    frequency: str
    reason: str


@dataclass(frozen=True)
class DetailBlock:
    """One block of the recommendation detail view.

    A block is either a title/body pair or a marker for an interactive
    visual aid rendered by the presentation layer.
    """

    title: Optional[str] = None
    body: Optional[str] = None
    interactive_component: Optional[str] = None

    def __post_init__(self) -> None:
        if self.interactive_component is not None:
            if self.interactive_component not in INTERACTIVE_COMPONENTS:
                raise ContentError(
                    f"Unknown interactive component: {self.interactive_component}. "
                    f"Must be one of: {', '.join(sorted(INTERACTIVE_COMPONENTS))}"
                )
        elif not self.title:
            raise ContentError("Detail block needs a title or an interactive component")

    @property
    def is_interactive(self) -> bool:
        return self.interactive_component is not None


class ContentResolver(Protocol):
    """Interface of the localization collaborator."""

    def text(self, key: str) -> str: ...

    def recommendation_content(self, key: str, reason_key: str) -> RecommendationContent: ...

    def recommendation_details(self, key: str) -> list[DetailBlock]: ...

    def disclaimer(self) -> str: ...


# key -> (category key, test key, frequency key)
RECOMMENDATION_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "bp": ("rec_cat_cardio", "rec_test_bp", "rec_freq_bp_normal"),
    "sugar": ("rec_cat_metabolic", "rec_test_sugar", "rec_freq_sugar"),
    "oral": ("rec_cat_cancer", "rec_test_oral", "rec_freq_oral"),
    "cervix": ("rec_cat_womens", "rec_test_cervix", "rec_freq_cervix"),
    "lung": ("rec_cat_cancer", "rec_test_lung", "rec_freq_lung"),
    "liver_hep": ("rec_cat_liver", "rec_test_liver_hep", "rec_freq_liver_hep"),
    "hpv_prevention": (
        "rec_cat_preventive", "rec_test_hpv_prevention", "rec_freq_hpv_prevention"
    ),
    "gastric_screening": (
        "rec_cat_digestive", "rec_test_gastric_screening", "rec_freq_gastric_screening"
    ),
    "occupational_lung": (
        "rec_cat_respiratory", "rec_test_occupational_lung", "rec_freq_occupational_lung"
    ),
    "breast_cbe": ("rec_cat_womens", "rec_test_breast_cbe", "rec_freq_breast_cbe"),
    "breast_general": ("rec_cat_womens", "rec_test_breast_general", "rec_freq_breast_general"),
    "colon_general": ("rec_cat_digestive", "rec_test_colon_general", "rec_freq_colon_general"),
    "prostate": ("rec_cat_mens", "rec_test_prostate", "rec_freq_prostate"),
    "lifestyle": ("rec_cat_wellbeing", "rec_test_lifestyle", "rec_freq_lifestyle"),
    "diabetic_retinopathy": (
        "rec_cat_metabolic", "rec_test_diabetic_retinopathy", "rec_freq_diabetic_retinopathy"
    ),
    "diabetic_foot": ("rec_cat_metabolic", "rec_test_diabetic_foot", "rec_freq_diabetic_foot"),
    "diabetic_kidney": (
        "rec_cat_metabolic", "rec_test_diabetic_kidney", "rec_freq_diabetic_kidney"
    ),
    "pulmonologist_consult": (
        "rec_cat_respiratory",
        "rec_test_pulmonologist_consult",
        "rec_freq_pulmonologist_consult",
    ),
    "comprehensive_lung_assessment": (
        "rec_cat_respiratory",
        "rec_test_comprehensive_lung_assessment",
        "rec_freq_comprehensive_lung_assessment",
    ),
    "metabolic_syndrome_protocol": (
        "rec_cat_metabolic",
        "rec_test_metabolic_syndrome_protocol",
        "rec_freq_metabolic_syndrome_protocol",
    ),
}

TEXT: dict[str, str] = {
    # Categories
    "info": "Info",
    "rec_cat_cardio": "Heart & Circulation",
    "rec_cat_metabolic": "Metabolic Health",
    "rec_cat_cancer": "Cancer Screening",
    "rec_cat_womens": "Women's Health",
    "rec_cat_mens": "Men's Health",
    "rec_cat_liver": "Liver Health",
    "rec_cat_preventive": "Preventive Care",
    "rec_cat_digestive": "Digestive Health",
    "rec_cat_respiratory": "Respiratory Health",
    "rec_cat_wellbeing": "General Wellbeing",
    # Tests
    "rec_test_bp": "Blood Pressure Check",
    "rec_test_sugar": "Blood Sugar Test (FBS / HbA1c)",
    "rec_test_oral": "Oral Cavity Examination",
    "rec_test_cervix": "Cervical Screening (VIA / Pap / HPV test)",
    "rec_test_lung": "Low-Dose CT Chest",
    "rec_test_liver_hep": "Liver Function Test & Ultrasound",
    "rec_test_hpv_prevention": "HPV Vaccination",
    "rec_test_gastric_screening": "Gastric Health Check (H. pylori test)",
    "rec_test_occupational_lung": "Lung Function Test (Spirometry)",
    "rec_test_breast_cbe": "Clinical Breast Examination",
    "rec_test_breast_general": "Mammogram",
    "rec_test_colon_general": "Colorectal Screening (FIT / Colonoscopy)",
    "rec_test_prostate": "PSA Test Discussion",
    "rec_test_lifestyle": "Lifestyle Counselling",
    "rec_test_diabetic_retinopathy": "Dilated Eye Examination",
    "rec_test_diabetic_foot": "Diabetic Foot Examination",
    "rec_test_diabetic_kidney": "Urine Albumin & Kidney Function Test",
    "rec_test_pulmonologist_consult": "Pulmonologist Consultation",
    "rec_test_comprehensive_lung_assessment": "Comprehensive Lung Assessment",
    "rec_test_metabolic_syndrome_protocol": "Metabolic Syndrome Protocol",
    # Frequencies
    "rec_freq_bp_normal": "Every year",
    "rec_freq_bp_high": "Every 6 months",
    "rec_freq_sugar": "Every year",
    "rec_freq_oral": "Every year",
    "rec_freq_cervix": "Every 5 years",
    "rec_freq_lung": "Every year",
    "rec_freq_liver_hep": "Every 6 months",
    "rec_freq_hpv_prevention": "As per vaccination schedule",
    "rec_freq_gastric_screening": "Once (baseline)",
    "rec_freq_occupational_lung": "Every 1-2 years",
    "rec_freq_breast_cbe": "Every year",
    "rec_freq_breast_general": "Every 1-2 years",
    "rec_freq_colon_general": "FIT every year or colonoscopy every 10 years",
    "rec_freq_prostate": "Discuss with your doctor",
    "rec_freq_lifestyle": "Ongoing",
    "rec_freq_diabetic_retinopathy": "Every year",
    "rec_freq_diabetic_foot": "Every year",
    "rec_freq_diabetic_kidney": "Every year",
    "rec_freq_pulmonologist_consult": "Once, then as advised",
    "rec_freq_comprehensive_lung_assessment": "Once, then as advised",
    "rec_freq_metabolic_syndrome_protocol": "Every 3 months",
    # Biometric notes
    "borderline_note_bmi": "Your BMI is close to the high-risk threshold of {threshold}.",
    "borderline_note_waist": (
        "Your waist is close to the high-risk threshold of {threshold} inches."
    ),
    # Risk bands
    "cbac_low": "Low Risk",
    "cbac_medium": "Moderate Risk",
    "cbac_high": "High Risk",
    # Insights
    "positive_finding_activity": "You stay physically active",
    "positive_finding_no_smoking": "You are tobacco-free",
    "positive_finding_low_salt": "You keep your salt intake low",
    "positive_finding_no_alcohol": "You avoid alcohol",
    "positive_finding_healthy_bmi": "Your weight is in the healthy range",
    "risk_insight_smoking": "Quit tobacco",
    "risk_insight_obesity": "Reduce body weight",
    "risk_insight_waist": "Reduce waist size",
    "risk_insight_sedentary": "Move more every day",
    "risk_insight_alcohol": "Cut down on alcohol",
    "risk_insight_salt": "Reduce salt intake",
    "risk_insight_family_history": "Family history needs watching",
    "risk_insight_biomass": "Switch to clean cooking fuel",
}

REASONS: dict[str, str] = {
    "colon_general_reason": "Recommended for adults aged 45-75 to screen for colorectal cancer.",
    "colon_general_high_risk_reason": (
        "Earlier screening is recommended due to a family history of colon cancer."
    ),
    "colon_general_high_risk_reason_age": (
        "Earlier screening is critical due to a close relative being diagnosed under age 50."
    ),
    "colon_general_high_risk_reason_uterine": (
        "Earlier screening is recommended. A family history of uterine cancer can "
        "increase colorectal cancer risk (Lynch syndrome)."
    ),
    "breast_general_reason": "Recommended for women aged 40-74 to screen for breast cancer.",
    "breast_general_high_risk_reason": (
        "Earlier screening is recommended due to a family history of breast, "
        "ovarian or pancreatic cancer."
    ),
    "breast_general_high_risk_reason_age": (
        "Earlier screening is critical due to a close relative being diagnosed under age 50."
    ),
    "breast_cbe_reason": "Recommended as part of an annual check-up for women over 30.",
    "cervix_reason": "Recommended for women aged 30-65 to screen for cervical cancer.",
    "lung_reason": (
        "Recommended for current or former heavy smokers aged 50-80 to screen for lung cancer."
    ),
    "bp_reason": "Recommended for all adults over 30 to monitor for high blood pressure.",
    "sugar_reason": "Recommended for all adults over 30 to screen for diabetes and pre-diabetes.",
    "oral_reason": "High risk due to tobacco use or observed oral patches.",
    "prostate_reason": (
        "Recommended for men to discuss with their doctor, typically starting at age 45."
    ),
    "prostate_high_risk_reason": (
        "Earlier screening is critical due to a family history of prostate cancer."
    ),
    "liver_hep_reason": (
        "Regular monitoring is crucial for individuals with a history of Hepatitis B or C."
    ),
    "hpv_prevention_reason": (
        "Vaccination can prevent HPV-related cancers. Recommended if not fully vaccinated."
    ),
    "gastric_screening_reason": (
        "A baseline check is advised due to a high-salt diet, a risk factor for stomach issues."
    ),
    "occupational_lung_reason": (
        "Recommended due to exposure to dust and smoke (biomass fuel, marble/mining)."
    ),
    "lifestyle_reason": (
        "General advice for improving diet, activity, and habits to reduce long-term health risks."
    ),
    "reason_diabetic_retinopathy": (
        "Essential for detecting diabetic retinopathy, a leading cause of vision loss."
    ),
    "reason_diabetic_foot": "Crucial for early detection of ulcers and nerve damage.",
    "reason_diabetic_kidney": (
        "Necessary to monitor for diabetic nephropathy, a major cause of kidney failure."
    ),
    "pulmonologist_consult_reason": "Multiple risk factors warrant a pulmonologist evaluation.",
    "comprehensive_lung_assessment_reason": (
        "Combined occupational and domestic exposure requires specialist assessment."
    ),
    "metabolic_syndrome_protocol_reason": (
        "Multiple metabolic risk factors require a holistic lifestyle-based approach."
    ),
}

DETAILS: dict[str, tuple[DetailBlock, ...]] = {
    "bp": (DetailBlock(interactive_component="AnimatedHeart"),),
    "sugar": (DetailBlock(interactive_component="AnimatedBloodSugar"),),
    "lung": (
        DetailBlock(
            title="What to expect",
            body="A low-dose CT scan takes a few minutes and needs no injection.",
        ),
        DetailBlock(
            title="Why yearly",
            body="Lung cancer found early is far more treatable than when symptoms appear.",
        ),
    ),
    "oral": (
        DetailBlock(
            title="Self-check",
            body="Look for white or red patches and sores that do not heal within two weeks.",
        ),
    ),
    "metabolic_syndrome_protocol": (
        DetailBlock(
            title="What it covers",
            body="Blood pressure, fasting sugar, lipid profile and waist tracking together.",
        ),
    ),
}

DISCLAIMER = (
    "Privacy First: No data is stored. This screening does not replace a medical "
    "diagnosis. Consult a nearby doctor for clinical advice."
)


class EnglishContentCatalog:
    """English implementation of ContentResolver."""

    def text(self, key: str) -> str:
        """Translate a key, falling back to the key itself."""
        return TEXT.get(key, key)

    def recommendation_content(self, key: str, reason_key: str) -> RecommendationContent:
        """Resolve display strings for a recommendation key and reason key.

        Args:
            key: Recommendation key
            reason_key: Reason key chosen by the rule that fired

        Returns:
            RecommendationContent; unknown keys resolve to a generic Info entry
        """
        template = RECOMMENDATION_TEMPLATES.get(key)
        if template is None:
            logger.warning("No content template for recommendation key %s", key)
            return RecommendationContent(
                category_key=FALLBACK_CATEGORY_KEY,
                category=self.text(FALLBACK_CATEGORY_KEY),
                test=key,
                frequency="",
                reason="Reason not available",
            )

        category_key, test_key, frequency_key = template
        return RecommendationContent(
            category_key=category_key,
            category=self.text(category_key),
            test=self.text(test_key),
            frequency=self.text(frequency_key),
            reason=REASONS.get(reason_key, FALLBACK_REASON),
        )

    def recommendation_details(self, key: str) -> list[DetailBlock]:
        return list(DETAILS.get(key, ()))

    def disclaimer(self) -> str:
        return DISCLAIMER


_default_resolver = EnglishContentCatalog()


def default_resolver() -> ContentResolver:
    """Return the shared English content resolver."""
    return _default_resolver

"""Clinical threshold table and disease vocabulary.

Single source of truth for every numeric cutoff the screening rules use:
age brackets, waist thresholds by sex, pack-year minimums and screening
age windows. Pure data, no behavior.
"""

from typing import Final


class DiseaseCondition:
    """Fixed disease vocabulary shared by family and personal history."""

    DIABETES_TYPE_2: Final = "Diabetes (Type 2)"
    HIGH_BLOOD_PRESSURE: Final = "High Blood Pressure"
    HIGH_CHOLESTEROL: Final = "High Cholesterol"
    HEART_DISEASE: Final = "Heart Disease"
    STROKE: Final = "Stroke"
    OBESITY: Final = "Obesity"
    CHRONIC_KIDNEY_DISEASE: Final = "Chronic Kidney Disease"

    BREAST_CANCER: Final = "Breast Cancer"
    MALE_BREAST_CANCER: Final = "Male Breast Cancer"
    COLON_CANCER: Final = "Colon Cancer"
    PROSTATE_CANCER: Final = "Prostate Cancer"
    OVARIAN_CANCER: Final = "Ovarian Cancer"
    PANCREATIC_CANCER: Final = "Pancreatic Cancer"
    MELANOMA: Final = "Melanoma"
    UTERINE_CANCER: Final = "Uterine Cancer"


# Lifestyle NCD family used by the score and by personal-history weighting
NCD_CONDITIONS: Final = frozenset(
    {
        DiseaseCondition.HEART_DISEASE,
        DiseaseCondition.STROKE,
        DiseaseCondition.HIGH_BLOOD_PRESSURE,
        DiseaseCondition.DIABETES_TYPE_2,
        DiseaseCondition.HIGH_CHOLESTEROL,
        DiseaseCondition.OBESITY,
        DiseaseCondition.CHRONIC_KIDNEY_DISEASE,
    }
)

CANCER_CONDITIONS: Final = (
    DiseaseCondition.BREAST_CANCER,
    DiseaseCondition.MALE_BREAST_CANCER,
    DiseaseCondition.COLON_CANCER,
    DiseaseCondition.PROSTATE_CANCER,
    DiseaseCondition.OVARIAN_CANCER,
    DiseaseCondition.PANCREATIC_CANCER,
    DiseaseCondition.MELANOMA,
    DiseaseCondition.UTERINE_CANCER,
)

KNOWN_CONDITIONS: Final = NCD_CONDITIONS | frozenset(CANCER_CONDITIONS)

BREAST_HIGH_RISK_CONDITIONS: Final = frozenset(
    {
        DiseaseCondition.BREAST_CANCER,
        DiseaseCondition.OVARIAN_CANCER,
        DiseaseCondition.MALE_BREAST_CANCER,
        DiseaseCondition.PANCREATIC_CANCER,
    }
)

COLON_HIGH_RISK_CONDITIONS: Final = frozenset(
    {DiseaseCondition.COLON_CANCER, DiseaseCondition.UTERINE_CANCER}
)

# Conditions whose early onset in a relative raises the lifestyle alert
EARLY_ONSET_ALERT_CONDITIONS: Final = frozenset(CANCER_CONDITIONS) | {
    DiseaseCondition.HEART_DISEASE,
    DiseaseCondition.STROKE,
}

# CBAC score
CBAC_SCORE_MAX: Final = 10
CBAC_AGE_BRACKETS: Final = ((60, 4), (50, 3), (40, 2), (30, 1))

# Unit conversion
CM_PER_INCH: Final = 2.54
STICKS_PER_PACK: Final = 20

# Waist circumference thresholds in cm (Asian standards)
WAIST_MALE_HIGH_CM: Final = 90
WAIST_FEMALE_HIGH_CM: Final = 80

# BMI thresholds for Asian populations
BMI_UNDERWEIGHT_UPPER: Final = 18.5
BMI_NORMAL_UPPER: Final = 23
BMI_OVERWEIGHT_UPPER: Final = 25

# Borderline band starts at this fraction of a hard threshold
BORDERLINE_FRACTION: Final = 0.95

# Lung cancer screening (USPSTF)
LUNG_SCREENING_MIN_AGE: Final = 50
LUNG_SCREENING_MAX_AGE: Final = 80
LUNG_SCREENING_MIN_PACK_YEARS: Final = 20
LUNG_SCREENING_YEARS_SINCE_QUIT: Final = 15

# Screening age windows
BP_SUGAR_MIN_AGE: Final = 30
CERVICAL_SCREENING_MIN_AGE: Final = 30
CERVICAL_SCREENING_MAX_AGE: Final = 65
BREAST_SCREENING_MIN_AGE: Final = 40
BREAST_SCREENING_MAX_AGE: Final = 74
BREAST_SCREENING_HIGH_RISK_MIN_AGE: Final = 30
BREAST_CBE_MIN_AGE: Final = 30
COLON_SCREENING_MIN_AGE: Final = 45
COLON_SCREENING_MAX_AGE: Final = 75
COLON_SCREENING_HIGH_RISK_MIN_AGE: Final = 40
PROSTATE_SCREENING_MIN_AGE: Final = 45
PROSTATE_SCREENING_HIGH_RISK_MIN_AGE: Final = 40
GASTRIC_SCREENING_MIN_AGE: Final = 35
HPV_PREVENTION_MAX_AGE: Final = 45

# Risk-adjusted start ages: relative's diagnosis age minus this, never below the floor
HIGH_RISK_START_AGE_OFFSET: Final = 10
ABSOLUTE_MIN_HIGH_RISK_SCREENING_AGE: Final = 25
EARLY_ONSET_CANCER_AGE: Final = 50

# Lifestyle and genetic risk alert
LIFESTYLE_ALERT_MAX_AGE: Final = 40
LIFESTYLE_ALERT_MIN_PACK_YEARS: Final = 15

# Holistic lung health pathway
PULMONOLOGIST_CONSULT_MIN_PACK_YEARS: Final = 10
PULMONOLOGIST_CONSULT_MIN_FACTORS: Final = 2

# Priority escalation
HIGH_SCORE_THRESHOLD: Final = 4

# Plausibility bounds used by input validation
MINIMUM_PATIENT_AGE: Final = 18
MAXIMUM_PATIENT_AGE: Final = 120

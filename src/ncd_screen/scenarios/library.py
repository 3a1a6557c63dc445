"""Reference screening scenarios.

Ten hand-built profiles that exercise the main clinical pathways: metabolic
syndrome, occupational lung disease, hereditary cancer risk, diabetic
follow-up and so on. Used for demonstrations and regression checks.
"""

from dataclasses import dataclass, replace

from ncd_screen.engine.thresholds import DiseaseCondition
from ncd_screen.models.profile import (
    AlcoholFrequency,
    CookingFuel,
    FamilyHistoryCondition,
    HepatitisHistory,
    PatientProfile,
    SaltIntake,
    Sex,
    SmokingStatus,
)
from ncd_screen.utils.exceptions import ValidationError


@dataclass(frozen=True)
class Scenario:
    """A named reference profile.

    Attributes:
        id: Two-digit identifier ("01" to "10")
        name: Short title
        description: What the scenario is expected to trigger
        profile: The patient profile
    """

    id: str
    name: str
    description: str
    profile: PatientProfile


BASE_PROFILE = PatientProfile(
    age=30,
    sex=Sex.MALE,
    height_cm=170,
    weight_kg=65,
    waist_circumference_in=32,
    smoking_sticks_per_day=0,
    smoking_years=0,
)


def _scenario(scenario_id: str, title: str, description: str, **fields) -> Scenario:
    return Scenario(scenario_id, title, description, replace(BASE_PROFILE, **fields))


SCENARIOS: tuple[Scenario, ...] = (
    _scenario(
        "01",
        "Metabolic Syndrome Protocol",
        "Male, 45, obese, high BP, smoker. Should trigger the metabolic protocol.",
        name="Rajesh Metabolic",
        age=45,
        weight_kg=90,
        waist_circumference_in=40,
        smoking_status=SmokingStatus.CURRENT,
        smoking_sticks_per_day=20,
        smoking_years=20,
        personal_conditions=(DiseaseCondition.HIGH_BLOOD_PRESSURE,),
    ),
    _scenario(
        "02",
        "Occupational Lung Risk",
        "Miner, biomass fuel. Should trigger the comprehensive lung assessment.",
        name="Kishan Miner",
        age=52,
        cooking_fuel_type=CookingFuel.BIOMASS,
        marble_mining_exposure=True,
        smoking_status=SmokingStatus.FORMER,
        smoking_sticks_per_day=20,
        smoking_years=15,
        quit_smoking_year=2020,
    ),
    _scenario(
        "03",
        "Hereditary Breast Risk",
        "Female, 32, mother had breast cancer at 40. Early screening check.",
        name="Anjali Genetic",
        age=32,
        sex=Sex.FEMALE,
        family_history=(FamilyHistoryCondition(DiseaseCondition.BREAST_CANCER, 40),),
    ),
    _scenario(
        "04",
        "Lynch Syndrome Suspect",
        "Male, 42, family colon and uterine cancer. Early colon screening.",
        name="Vikram Lynch",
        age=42,
        family_history=(
            FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 45),
            FamilyHistoryCondition(DiseaseCondition.UTERINE_CANCER, 50),
        ),
    ),
    _scenario(
        "05",
        "Diabetic Management",
        "Female, 55, diabetic. Eye, foot and kidney checks.",
        name="Sunita Diabetic",
        age=55,
        sex=Sex.FEMALE,
        height_cm=160,
        weight_kg=80,
        personal_conditions=(DiseaseCondition.DIABETES_TYPE_2,),
    ),
    _scenario(
        "06",
        "Oral Cancer High Risk",
        "Male, 28, gutka, oral patches. Immediate screening.",
        name="Rahul Gutka",
        age=28,
        uses_smokeless_tobacco=True,
        smokeless_tobacco_products=("gutka",),
        has_oral_signs=True,
    ),
    _scenario(
        "07",
        "Liver & Alcohol",
        "Male, 38, hepatitis B, high alcohol.",
        name="Suresh Liver",
        age=38,
        alcohol_frequency=AlcoholFrequency.HIGH,
        hepatitis_history=HepatitisHistory.HEP_B,
    ),
    _scenario(
        "08",
        "Lung CT Eligible (USPSTF)",
        "Male, 60, heavy smoker (30 pack-years). Low-dose CT trigger.",
        name="Bheru Smoker",
        age=60,
        smoking_status=SmokingStatus.CURRENT,
        smoking_sticks_per_day=40,
        smoking_years=30,
    ),
    _scenario(
        "09",
        "Borderline Risk",
        "Female, 45, borderline BMI and waist, high salt.",
        name="Meena Borderline",
        age=45,
        sex=Sex.FEMALE,
        height_cm=160,
        weight_kg=60,
        waist_circumference_in=32,
        salt_intake=SaltIntake.HIGH,
    ),
    _scenario(
        "10",
        "Multi-Morbid",
        "Male, 72, many conditions and exposures. Maximum recommendation load.",
        name="Daulat Senior",
        age=72,
        smoking_status=SmokingStatus.CURRENT,
        alcohol_frequency=AlcoholFrequency.HIGH,
        waist_circumference_in=42,
        personal_conditions=(
            DiseaseCondition.DIABETES_TYPE_2,
            DiseaseCondition.HIGH_BLOOD_PRESSURE,
            DiseaseCondition.HEART_DISEASE,
        ),
        family_history=(FamilyHistoryCondition(DiseaseCondition.COLON_CANCER, 60),),
        cooking_fuel_type=CookingFuel.BIOMASS,
        marble_mining_exposure=True,
    ),
)


def list_scenarios() -> list[Scenario]:
    return list(SCENARIOS)


def get_scenario(scenario_id: str) -> Scenario:
    """Look up a scenario by id; "1" and "01" are equivalent.

    Raises:
        ValidationError: If no scenario has that id
    """
    wanted = scenario_id.strip().zfill(2)
    for scenario in SCENARIOS:
        if scenario.id == wanted:
            return scenario
    raise ValidationError(
        f"Unknown scenario id: {scenario_id}. "
        f"Available: {', '.join(s.id for s in SCENARIOS)}"
    )

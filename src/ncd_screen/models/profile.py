"""Patient profile data model.

This module defines the immutable PatientProfile consumed by the screening
engine together with the categorical vocabularies of its fields.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ncd_screen.utils.exceptions import ValidationError


class Sex(Enum):
    """Administrative sex used for sex-specific thresholds and screenings."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNSET = ""


class SmokingStatus(Enum):
    """Cigarette/bidi smoking status."""

    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class AlcoholFrequency(Enum):
    """Alcohol consumption frequency."""

    NONE = "none"
    MODERATE = "moderate"
    HIGH = "high"


class SaltIntake(Enum):
    """Dietary salt intake."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class PhysicalActivity(Enum):
    """Habitual physical activity level."""

    SEDENTARY = "sedentary"
    MODERATE = "moderate"
    ACTIVE = "active"


class CookingFuel(Enum):
    """Primary household cooking fuel."""

    LPG = "lpg"
    BIOMASS = "biomass"
    ELECTRIC = "electric"


class HPVVaccineStatus(Enum):
    """HPV vaccination status."""

    NONE = "none"
    PARTIAL = "partial"
    COMPLETE = "complete"


class HepatitisHistory(Enum):
    """History of viral hepatitis."""

    NONE = "none"
    HEP_B = "hep_b"
    HEP_C = "hep_c"
    BOTH = "both"


class Relationship(Enum):
    """Relationship of an affected relative to the patient."""

    PARENT = "parent"
    SIBLING = "sibling"
    CHILD = "child"
    EXTENDED = "extended"


@dataclass(frozen=True)
class FamilyHistoryCondition:
    """A condition diagnosed in a relative.

    Attributes:
        condition: Condition name from the disease vocabulary. Unknown names
            are carried through but match no screening rule.
        relative_age_at_diagnosis: Age of the relative at diagnosis, if known
        relationship: Relationship of the relative, if known
    """

    condition: str
    relative_age_at_diagnosis: Optional[float] = None
    relationship: Optional[Relationship] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition": self.condition,
            "relative_age_at_diagnosis": self.relative_age_at_diagnosis,
            "relationship": self.relationship.value if self.relationship else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FamilyHistoryCondition":
        if not isinstance(data, dict) or not data.get("condition"):
            raise ValidationError(
                f"Invalid family history entry: {data!r}. "
                f"Each entry needs at least a 'condition' name."
            )
        return cls(
            condition=str(data["condition"]),
            relative_age_at_diagnosis=_optional_float(
                data.get("relative_age_at_diagnosis"), "relative_age_at_diagnosis"
            ),
            relationship=_optional_enum(
                Relationship, data.get("relationship"), "relationship"
            ),
        )


@dataclass(frozen=True)
class PatientProfile:
    """Immutable screening input for one patient.

    Optional numerics are None when absent; the engine never treats absence
    as a measured zero except where a rule says so explicitly.

    Attributes:
        name: Patient name (display only, never used by rules)
        age: Age in whole years
        sex: Administrative sex
        height_cm: Height in centimetres
        weight_kg: Weight in kilograms
        waist_circumference_in: Waist circumference in inches
        smoking_status: Smoking status
        smoking_sticks_per_day: Cigarettes/bidis per day (20 sticks = 1 pack)
        smoking_years: Years smoked
        quit_smoking_year: Calendar year of quitting (former smokers)
        uses_smokeless_tobacco: Whether smokeless tobacco is used
        smokeless_tobacco_products: Product identifiers (gutka, khaini, ...)
        alcohol_frequency: Alcohol use
        salt_intake: Salt intake
        physical_activity: Activity level
        cooking_fuel_type: Household cooking fuel
        marble_mining_exposure: Occupational marble/mining dust exposure
        hpv_vaccine_status: HPV vaccination status
        hepatitis_history: Hepatitis B/C history
        has_oral_signs: Observed white/red oral patches
        family_history: Conditions diagnosed in relatives
        family_history_unsure: Patient is unsure of family history; the
            engine then ignores family_history entirely
        personal_conditions: The patient's own diagnoses
        womens_health_status: default, pregnant or menopause (informational)
    """

    name: str = ""
    age: Optional[int] = None
    sex: Sex = Sex.UNSET
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    waist_circumference_in: float = 0.0
    smoking_status: SmokingStatus = SmokingStatus.NEVER
    smoking_sticks_per_day: Optional[float] = None
    smoking_years: Optional[float] = None
    quit_smoking_year: Optional[int] = None
    uses_smokeless_tobacco: bool = False
    smokeless_tobacco_products: tuple[str, ...] = ()
    alcohol_frequency: AlcoholFrequency = AlcoholFrequency.NONE
    salt_intake: SaltIntake = SaltIntake.MODERATE
    physical_activity: PhysicalActivity = PhysicalActivity.MODERATE
    cooking_fuel_type: CookingFuel = CookingFuel.LPG
    marble_mining_exposure: bool = False
    hpv_vaccine_status: HPVVaccineStatus = HPVVaccineStatus.NONE
    hepatitis_history: HepatitisHistory = HepatitisHistory.NONE
    has_oral_signs: bool = False
    family_history: tuple[FamilyHistoryCondition, ...] = field(default_factory=tuple)
    family_history_unsure: bool = False
    personal_conditions: tuple[str, ...] = ()
    womens_health_status: Optional[str] = None

    @property
    def is_current_smoker(self) -> bool:
        return self.smoking_status is SmokingStatus.CURRENT

    @property
    def is_former_smoker(self) -> bool:
        return self.smoking_status is SmokingStatus.FORMER

    def effective_family_history(self) -> tuple[FamilyHistoryCondition, ...]:
        """Family history as the rules must see it.

        Returns:
            An empty tuple when the patient is unsure of their family history,
            otherwise the recorded entries.
        """
        if self.family_history_unsure:
            return ()
        return self.family_history

    def to_dict(self) -> dict[str, Any]:
        """Export the profile as a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "age": self.age,
            "sex": self.sex.value,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
            "waist_circumference_in": self.waist_circumference_in,
            "smoking_status": self.smoking_status.value,
            "smoking_sticks_per_day": self.smoking_sticks_per_day,
            "smoking_years": self.smoking_years,
            "quit_smoking_year": self.quit_smoking_year,
            "uses_smokeless_tobacco": self.uses_smokeless_tobacco,
            "smokeless_tobacco_products": list(self.smokeless_tobacco_products),
            "alcohol_frequency": self.alcohol_frequency.value,
            "salt_intake": self.salt_intake.value,
            "physical_activity": self.physical_activity.value,
            "cooking_fuel_type": self.cooking_fuel_type.value,
            "marble_mining_exposure": self.marble_mining_exposure,
            "hpv_vaccine_status": self.hpv_vaccine_status.value,
            "hepatitis_history": self.hepatitis_history.value,
            "has_oral_signs": self.has_oral_signs,
            "family_history": [h.to_dict() for h in self.family_history],
            "family_history_unsure": self.family_history_unsure,
            "personal_conditions": list(self.personal_conditions),
            "womens_health_status": self.womens_health_status,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PatientProfile":
        """Build a profile from a dictionary, validating every field strictly.

        Missing keys take the field defaults. Use
        ``ncd_screen.persistence.sanitize_stored_profile`` first for lenient
        loading of stored or legacy data.

        Args:
            data: Dictionary keyed by PatientProfile field names

        Returns:
            PatientProfile instance

        Raises:
            ValidationError: If a value has the wrong type or an unknown
                categorical value
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"Patient profile must be a JSON object, got {type(data).__name__}"
            )

        age = _optional_float(data.get("age"), "age")
        if age is not None and age < 0:
            raise ValidationError(f"Invalid age: {data.get('age')}. Must be non-negative.")

        family_history = tuple(
            entry if isinstance(entry, FamilyHistoryCondition)
            else FamilyHistoryCondition.from_dict(entry)
            for entry in _list_field(data, "family_history")
        )

        return cls(
            name=str(data.get("name") or ""),
            age=int(age) if age is not None else None,
            sex=_optional_enum(Sex, data.get("sex"), "sex") or Sex.UNSET,
            height_cm=_optional_float(data.get("height_cm"), "height_cm"),
            weight_kg=_optional_float(data.get("weight_kg"), "weight_kg"),
            waist_circumference_in=_optional_float(
                data.get("waist_circumference_in"), "waist_circumference_in"
            ) or 0.0,
            smoking_status=_enum(SmokingStatus, data, "smoking_status", SmokingStatus.NEVER),
            smoking_sticks_per_day=_optional_float(
                data.get("smoking_sticks_per_day"), "smoking_sticks_per_day"
            ),
            smoking_years=_optional_float(data.get("smoking_years"), "smoking_years"),
            quit_smoking_year=_optional_int(data.get("quit_smoking_year"), "quit_smoking_year"),
            uses_smokeless_tobacco=bool(data.get("uses_smokeless_tobacco", False)),
            smokeless_tobacco_products=tuple(
                str(p) for p in _list_field(data, "smokeless_tobacco_products")
            ),
            alcohol_frequency=_enum(
                AlcoholFrequency, data, "alcohol_frequency", AlcoholFrequency.NONE
            ),
            salt_intake=_enum(SaltIntake, data, "salt_intake", SaltIntake.MODERATE),
            physical_activity=_enum(
                PhysicalActivity, data, "physical_activity", PhysicalActivity.MODERATE
            ),
            cooking_fuel_type=_enum(CookingFuel, data, "cooking_fuel_type", CookingFuel.LPG),
            marble_mining_exposure=bool(data.get("marble_mining_exposure", False)),
            hpv_vaccine_status=_enum(
                HPVVaccineStatus, data, "hpv_vaccine_status", HPVVaccineStatus.NONE
            ),
            hepatitis_history=_enum(
                HepatitisHistory, data, "hepatitis_history", HepatitisHistory.NONE
            ),
            has_oral_signs=bool(data.get("has_oral_signs", False)),
            family_history=family_history,
            family_history_unsure=bool(data.get("family_history_unsure", False)),
            personal_conditions=tuple(
                str(c) for c in _list_field(data, "personal_conditions")
            ),
            womens_health_status=data.get("womens_health_status") or None,
        )


def _list_field(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"Invalid {key}: expected a list, got {type(value).__name__}")
    return list(value)


def _optional_float(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: {value!r}. Expected a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {name}: {value!r}. Expected a number.") from e
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {name}: {value!r}. Expected a finite number.")
    return number


def _optional_int(value: Any, name: str) -> Optional[int]:
    number = _optional_float(value, name)
    return int(number) if number is not None else None


def _optional_enum(enum_cls: type[Enum], value: Any, name: str) -> Optional[Any]:
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        valid = ", ".join(repr(m.value) for m in enum_cls)
        raise ValidationError(
            f"Invalid {name}: {value!r}. Must be one of: {valid}"
        ) from e


def _enum(enum_cls: type[Enum], data: dict[str, Any], key: str, default: Enum) -> Any:
    value = _optional_enum(enum_cls, data.get(key), key)
    return default if value is None else value

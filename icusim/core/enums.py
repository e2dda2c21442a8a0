from enum import Enum
from typing import Optional


class VentilatorMode(Enum):
    """Ventilator Modes"""
    VOLUME_CONTROL_AC = "Volume Control (AC)"
    PRESSURE_CONTROL_AC = "Pressure Control (AC)"
    SIMV = "SIMV"
    PSV = "PSV"
    CPAP = "CPAP"


class ShockType(Enum):
    HYPOVOLEMIC = "Hypovolemic"
    CARDIOGENIC = "Cardiogenic"
    DISTRIBUTIVE = "Distributive (Septic)"
    OBSTRUCTIVE = "Obstructive"
    NONE = "None"


class ShockSeverity(Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class AcidBaseDisturbance(Enum):
    NORMAL = "Normal"
    METABOLIC_ACIDOSIS = "Metabolic Acidosis"
    METABOLIC_ALKALOSIS = "Metabolic Alkalosis"
    RESPIRATORY_ACIDOSIS = "Respiratory Acidosis"
    RESPIRATORY_ALKALOSIS = "Respiratory Alkalosis"
    MIXED = "Mixed Disorder"


class Compensation(Enum):
    NONE = "None"
    PARTIAL = "Partial"
    COMPLETE = "Complete"


class AnionGapStatus(Enum):
    NORMAL = "Normal"
    HIGH = "High"
    LOW = "Low"


class InterventionType(Enum):
    VENTILATOR = "Ventilator"
    FLUID = "Fluid"
    MEDICATION = "Medication"
    OTHER = "Other"


class FluidType(Enum):
    CRYSTALLOID = "Crystalloid"
    COLLOID = "Colloid"
    BLOOD_PRODUCT = "Blood Product"

    @classmethod
    def parse(cls, value) -> "FluidType":
        """Accept a member or its display value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise ValueError(f"Unknown fluid type: {value!r}")


class MedicationRoute(Enum):
    IV = "IV"
    PO = "PO"
    OTHER = "Other"


class Vasopressor(Enum):
    """Vasoactive drugs understood by the vasopressor simulator."""
    NOREPINEPHRINE = "norepinephrine"
    VASOPRESSIN = "vasopressin"
    EPINEPHRINE = "epinephrine"
    DOBUTAMINE = "dobutamine"

    @classmethod
    def parse(cls, value) -> Optional["Vasopressor"]:
        """
        Resolve a drug name to a member.

        Returns None for names outside the vocabulary; callers treat that
        as "no drug effect".
        """
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        name = _VASOPRESSOR_ALIASES.get(name, name)
        for member in cls:
            if member.value == name:
                return member
        return None


_VASOPRESSOR_ALIASES = {
    "noradrenaline": "norepinephrine",
}

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Union

from .enums import (
    AcidBaseDisturbance,
    AnionGapStatus,
    Compensation,
    FluidType,
    InterventionType,
    MedicationRoute,
    ShockSeverity,
    ShockType,
    VentilatorMode,
)
from .constants import HISTORY_LIMIT


@dataclass
class SimulationConfig:
    """Configuration for the simulation session."""
    # Trend points kept besides the newest one.
    history_limit: int = HISTORY_LIMIT

    # Re-run the renal perfusion model after every hemodynamic intervention.
    couple_renal: bool = False

    default_fluid_type: FluidType = FluidType.CRYSTALLOID
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Build a config from a JSON mapping, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError("Config must be a JSON object")
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "default_fluid_type" in kwargs:
            kwargs["default_fluid_type"] = FluidType.parse(kwargs["default_fluid_type"])
        if "history_limit" in kwargs:
            kwargs["history_limit"] = int(kwargs["history_limit"])
            if kwargs["history_limit"] < 0:
                raise ValueError("history_limit must be >= 0")
        return cls(**kwargs)


# Serialization helpers.
# Records serialize to a JSON-compatible graph with camelCase keys;
# enums become their display value and datetimes ISO-8601 strings.

def _encode(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, _Record):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _list_of(record_cls) -> Callable[[Any], list]:
    def decode(values):
        return [record_cls.from_dict(v) for v in values]
    return decode


class _Record:
    """Mixin providing camelCase dict round-tripping for state records."""
    _json_keys: ClassVar[Dict[str, str]] = {}
    _decoders: ClassVar[Dict[str, Callable[[Any], Any]]] = {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            self._json_keys.get(f.name, f.name): _encode(getattr(self, f.name))
            for f in fields(self)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ValueError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
        kwargs = {}
        for f in fields(cls):
            key = cls._json_keys.get(f.name, f.name)
            if key not in data:
                continue
            raw = data[key]
            decoder = cls._decoders.get(f.name)
            try:
                kwargs[f.name] = decoder(raw) if (decoder and raw is not None) else raw
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid {cls.__name__}.{key}: {e}") from e
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ValueError(f"Incomplete {cls.__name__}: {e}") from e


@dataclass(frozen=True)
class Vitals(_Record):
    """Bedside vitals and hemodynamic profile."""
    heart_rate: float                   # bpm
    systolic_bp: float                  # mmHg
    diastolic_bp: float                 # mmHg
    mean_arterial_pressure: float       # MAP, mmHg
    central_venous_pressure: float      # CVP, mmHg
    pulmonary_artery_pressure: float    # PAP, mmHg
    cardiac_output: float               # L/min
    systemic_vascular_resistance: float  # SVR, dynes*s/cm^5
    temperature: float                  # Celsius
    respiratory_rate: float             # breaths/min
    oxygen_saturation: float            # SpO2, %

    _json_keys: ClassVar[Dict[str, str]] = {
        "heart_rate": "heartRate",
        "systolic_bp": "systolicBP",
        "diastolic_bp": "diastolicBP",
        "mean_arterial_pressure": "meanArterialPressure",
        "central_venous_pressure": "centralVenousPressure",
        "pulmonary_artery_pressure": "pulmonaryArteryPressure",
        "cardiac_output": "cardiacOutput",
        "systemic_vascular_resistance": "systemicVascularResistance",
        "respiratory_rate": "respiratoryRate",
        "oxygen_saturation": "oxygenSaturation",
    }


@dataclass(frozen=True)
class VentilatorSettings(_Record):
    mode: VentilatorMode
    tidal_volume: float          # mL
    respiratory_rate: float      # breaths/min
    fio2: float                  # fraction 0.21-1.0
    peep: float                  # cmH2O
    inspiratory_pressure: float  # cmH2O (pressure control)
    ie_ratio: str                # e.g. "1:2"
    plateau_pressure: Optional[float] = None  # cmH2O
    peak_pressure: Optional[float] = None     # cmH2O

    _json_keys: ClassVar[Dict[str, str]] = {
        "tidal_volume": "tidalVolume",
        "respiratory_rate": "respiratoryRate",
        "fio2": "fiO2",
        "inspiratory_pressure": "inspiratoryPressure",
        "ie_ratio": "iERatio",
        "plateau_pressure": "plateauPressure",
        "peak_pressure": "peakPressure",
    }
    _decoders: ClassVar[Dict[str, Callable]] = {"mode": VentilatorMode}

    @property
    def minute_ventilation(self) -> float:
        """RR x VT in mL/min."""
        return self.respiratory_rate * self.tidal_volume


@dataclass(frozen=True)
class ABG(_Record):
    """Arterial blood gas panel."""
    ph: float
    paco2: float        # mmHg
    pao2: float         # mmHg
    hco3: float         # mEq/L
    base_excess: float  # mEq/L
    lactate: float      # mmol/L
    so2: float          # %

    _json_keys: ClassVar[Dict[str, str]] = {
        "ph": "pH",
        "paco2": "paCO2",
        "pao2": "paO2",
        "base_excess": "baseExcess",
        "so2": "sO2",
    }


@dataclass(frozen=True)
class Electrolytes(_Record):
    sodium: float       # mEq/L
    potassium: float    # mEq/L
    chloride: float     # mEq/L
    bicarbonate: float  # mEq/L
    calcium: float      # mg/dL
    magnesium: float    # mg/dL
    phosphate: float    # mg/dL
    anion_gap: float    # calculated, mEq/L

    _json_keys: ClassVar[Dict[str, str]] = {"anion_gap": "anionGap"}


@dataclass(frozen=True)
class RenalParameters(_Record):
    creatinine: float              # mg/dL
    bun: float                     # mg/dL
    gfr: float                     # mL/min/1.73m^2
    urine_output: float            # mL/hr
    urine_specific_gravity: float
    urine_sodium: float            # mEq/L
    fractional_excretion_na: float  # %

    _json_keys: ClassVar[Dict[str, str]] = {
        "urine_output": "urineOutput",
        "urine_specific_gravity": "urineSpecificGravity",
        "urine_sodium": "urineSodium",
        "fractional_excretion_na": "fractionalExcretionNa",
    }


@dataclass(frozen=True)
class ShockState(_Record):
    type: ShockType
    severity: ShockSeverity
    lactate: float                 # mmol/L
    markers: List[str] = field(default_factory=list)
    scvo2: Optional[float] = None  # central venous O2 saturation, %

    _json_keys: ClassVar[Dict[str, str]] = {"scvo2": "scvO2"}
    _decoders: ClassVar[Dict[str, Callable]] = {
        "type": ShockType,
        "severity": ShockSeverity,
        "markers": list,
    }


@dataclass(frozen=True)
class FluidAdministration(_Record):
    type: FluidType
    name: str       # e.g. "Normal Saline"
    volume: float   # mL
    rate: float     # mL/hr

    _decoders: ClassVar[Dict[str, Callable]] = {"type": FluidType}


@dataclass(frozen=True)
class Medication(_Record):
    name: str
    dose: float
    unit: str  # e.g. "mcg/kg/min"
    route: MedicationRoute = MedicationRoute.IV

    _decoders: ClassVar[Dict[str, Callable]] = {"route": MedicationRoute}


@dataclass(frozen=True)
class Intervention(_Record):
    """Append-only audit log entry."""
    id: str
    type: InterventionType
    description: str
    timestamp: datetime
    parameters: Dict[str, Union[float, str]] = field(default_factory=dict)

    _decoders: ClassVar[Dict[str, Callable]] = {
        "type": InterventionType,
        "timestamp": _parse_datetime,
        "parameters": dict,
    }


@dataclass(frozen=True)
class PatientState(_Record):
    """Snapshot of the whole patient; replaced wholesale on every intervention."""
    id: str
    timestamp: datetime
    vitals: Vitals
    ventilator: VentilatorSettings
    abg: ABG
    electrolytes: Electrolytes
    renal: RenalParameters
    shock: ShockState
    fluids: List[FluidAdministration] = field(default_factory=list)
    medications: List[Medication] = field(default_factory=list)

    _decoders: ClassVar[Dict[str, Callable]] = {
        "timestamp": _parse_datetime,
        "vitals": Vitals.from_dict,
        "ventilator": VentilatorSettings.from_dict,
        "abg": ABG.from_dict,
        "electrolytes": Electrolytes.from_dict,
        "renal": RenalParameters.from_dict,
        "shock": ShockState.from_dict,
        "fluids": _list_of(FluidAdministration),
        "medications": _list_of(Medication),
    }


@dataclass(frozen=True)
class ExpectedCompensation(_Record):
    parameter: str  # "HCO3" or "PaCO2"
    expected_value: float
    actual_value: float

    _json_keys: ClassVar[Dict[str, str]] = {
        "expected_value": "expectedValue",
        "actual_value": "actualValue",
    }


@dataclass(frozen=True)
class AcidBaseAnalysis(_Record):
    primary: AcidBaseDisturbance
    compensation: Compensation
    anion_gap: AnionGapStatus
    expected_compensation: Optional[ExpectedCompensation] = None

    _json_keys: ClassVar[Dict[str, str]] = {
        "anion_gap": "anionGap",
        "expected_compensation": "expectedCompensation",
    }
    _decoders: ClassVar[Dict[str, Callable]] = {
        "primary": AcidBaseDisturbance,
        "compensation": Compensation,
        "anion_gap": AnionGapStatus,
        "expected_compensation": ExpectedCompensation.from_dict,
    }

# ICUSim physiology engine
from .core.enums import (
    AcidBaseDisturbance, AnionGapStatus, Compensation, FluidType, InterventionType,
    MedicationRoute, ShockSeverity, ShockType, Vasopressor, VentilatorMode,
)
from .core.state import (
    ABG, AcidBaseAnalysis, Electrolytes, FluidAdministration, Intervention, Medication,
    PatientState, RenalParameters, ShockState, SimulationConfig, VentilatorSettings, Vitals,
)
from .core.engine import SimulationEngine
from .patient.baseline import create_normal_patient_state
from .physiology.hemodynamics import (
    calculate_cardiac_output, calculate_map, calculate_svr,
    simulate_fluid_bolus, simulate_peep_effect, simulate_vasopressor,
)
from .physiology.respiration import calculate_pf_ratio, simulate_ventilator_change
from .physiology.acid_base import analyze_acid_base, calculate_anion_gap
from .physiology.renal import simulate_renal_perfusion
from .physiology.shock import assess_shock_state

__all__ = [
    'calculate_map',
    'calculate_cardiac_output',
    'calculate_svr',
    'calculate_anion_gap',
    'calculate_pf_ratio',
    'analyze_acid_base',
    'assess_shock_state',
    'simulate_ventilator_change',
    'simulate_fluid_bolus',
    'simulate_vasopressor',
    'simulate_peep_effect',
    'simulate_renal_perfusion',
    'create_normal_patient_state',
    'SimulationEngine',
    'SimulationConfig',
    'PatientState',
    'Vitals',
    'VentilatorSettings',
    'ABG',
    'Electrolytes',
    'RenalParameters',
    'ShockState',
    'FluidAdministration',
    'Medication',
    'Intervention',
    'AcidBaseAnalysis',
    'AcidBaseDisturbance',
    'AnionGapStatus',
    'Compensation',
    'FluidType',
    'InterventionType',
    'MedicationRoute',
    'ShockSeverity',
    'ShockType',
    'Vasopressor',
    'VentilatorMode',
]

"""
Physiological bounds and model coefficients for ICUSim.

This module centralizes magic numbers used throughout the simulation.

NOTE: Only add constants here that are ACTIVELY IMPORTED elsewhere.
"""

from dataclasses import dataclass

# Physiological clamp ranges (low, high).
# Every simulator bounds the fields it writes to these ranges.

MAP_RANGE = (50.0, 130.0)         # mmHg
SBP_RANGE = (70.0, 200.0)         # mmHg
DBP_RANGE = (40.0, 120.0)         # mmHg
CVP_RANGE = (0.0, 20.0)           # mmHg
CO_RANGE = (2.0, 12.0)            # L/min
SVR_RANGE = (800.0, 2000.0)       # dynes*s/cm^5
HR_RANGE = (40.0, 160.0)          # bpm

PH_RANGE = (7.0, 7.6)
PACO2_RANGE = (20.0, 80.0)        # mmHg
PAO2_RANGE = (40.0, 600.0)        # mmHg

GFR_RANGE = (10.0, 120.0)         # mL/min/1.73m^2
CREATININE_RANGE = (0.5, 8.0)     # mg/dL
URINE_OUTPUT_RANGE = (10.0, 200.0)  # mL/hr

# Blood pressure components are derived from MAP with a fixed pulse shape.
SBP_OFFSET_FROM_MAP = 40.0
DBP_OFFSET_FROM_MAP = -20.0

# Wood units -> dynes*s/cm^5
SVR_UNIT_FACTOR = 80.0

# Acid-base reference values.
PH_ACIDEMIA = 7.35
PH_ALKALEMIA = 7.45
NORMAL_PACO2 = 40.0
NORMAL_HCO3 = 24.0
ANION_GAP_HIGH = 12.0
ANION_GAP_LOW = 8.0

# Shock thresholds.
SHOCK_MAP_THRESHOLD = 65.0
SHOCK_LACTATE_THRESHOLD = 2.0
SHOCK_LOW_CO = 4.0
SHOCK_HIGH_CO = 6.0
SHOCK_HIGH_SVR = 1200.0
SHOCK_LOW_SVR = 800.0
SHOCK_LOW_CVP = 8.0
SHOCK_HIGH_CVP = 15.0

# Renal autoregulation.
RENAL_AUTOREG_MAP = 65.0
RENAL_CO_REFERENCE = 4.0
URINE_OUTPUT_PER_GFR = 0.8
CREATININE_GFR_PRODUCT = 100.0

# Number of trend points kept besides the newest one.
HISTORY_LIMIT = 50


@dataclass(frozen=True)
class VentilationTuning:
    """Gas-exchange response to ventilator changes."""
    ph_per_paco2: float = 0.008       # pH units per mmHg PaCO2
    pao2_per_fio2: float = 500.0      # mmHg per unit FiO2
    pao2_per_peep: float = 10.0       # mmHg per cmH2O

    # Two-piece oxyhemoglobin approximation.
    so2_knee_pao2: float = 60.0
    so2_low_base: float = 75.0
    so2_low_ref_pao2: float = 40.0
    so2_low_slope: float = 0.75
    so2_high_base: float = 97.0
    so2_high_slope: float = 0.01


@dataclass(frozen=True)
class FluidTuning:
    """Hemodynamic response to a fluid bolus, per liter infused."""
    sv_gain_ml_per_l: float = 5.0
    map_per_sv_ml: float = 0.5
    cvp_per_l: float = 2.0


@dataclass(frozen=True)
class PeepTuning:
    """Hemodynamic response per cmH2O of PEEP change."""
    co_per_cmh2o: float = 0.15
    map_per_cmh2o: float = 2.0
    cvp_per_cmh2o: float = 0.5


@dataclass(frozen=True)
class ElectrolyteTuning:
    """Acid-base response to a bicarbonate change."""
    ph_per_hco3: float = 0.012

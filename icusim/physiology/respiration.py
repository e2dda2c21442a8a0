"""
Gas exchange response to ventilator changes.

CO2 clearance scales with minute ventilation (RR x VT); oxygenation
responds linearly to FiO2 and PEEP.
"""

from dataclasses import replace
from typing import Optional

from icusim.core.constants import PACO2_RANGE, PAO2_RANGE, PH_RANGE, VentilationTuning
from icusim.core.state import ABG, VentilatorSettings
from icusim.core.utils import clamp_to, safe_divide

VENT_TUNING = VentilationTuning()

# P/F ratio cut-offs (Berlin definition).
PF_ARDS = 300.0
PF_MODERATE = 200.0
PF_SEVERE = 100.0


def calculate_pf_ratio(pao2: float, fio2: float) -> float:
    """PaO2/FiO2 ratio; 0 when FiO2 is 0."""
    return safe_divide(pao2, fio2)


def classify_ards(pf_ratio: float) -> Optional[str]:
    """Berlin severity for a P/F ratio, or None when >= 300."""
    if pf_ratio >= PF_ARDS:
        return None
    if pf_ratio < PF_SEVERE:
        return "Severe"
    if pf_ratio < PF_MODERATE:
        return "Moderate"
    return "Mild"


def estimate_so2(pao2: float) -> float:
    """
    Arterial saturation (%) from PaO2 using a two-piece fit of the
    oxyhemoglobin dissociation curve (linear below the 60 mmHg knee,
    nearly flat above it).
    """
    t = VENT_TUNING
    if pao2 < t.so2_knee_pao2:
        return t.so2_low_base + (pao2 - t.so2_low_ref_pao2) * t.so2_low_slope
    return min(t.so2_high_base + (pao2 - t.so2_knee_pao2) * t.so2_high_slope, 100.0)


def simulate_ventilator_change(
    current_abg: ABG,
    current_vent: VentilatorSettings,
    new_vent: VentilatorSettings,
) -> ABG:
    """
    Predict the blood gas after moving from ``current_vent`` to ``new_vent``.

    PaCO2 scales with the inverse of the minute ventilation ratio and pH
    follows a simplified Henderson-Hasselbalch slope. PaO2 shifts with
    FiO2 and PEEP; SO2 is re-derived from the new PaO2.
    """
    t = VENT_TUNING
    paco2 = current_abg.paco2
    ph = current_abg.ph

    old_mv = current_vent.minute_ventilation
    new_mv = new_vent.minute_ventilation
    if new_mv != old_mv:
        if new_mv == 0:
            # Apnea: CO2 retention saturates at the upper bound.
            paco2 = PACO2_RANGE[1]
        else:
            paco2 = clamp_to(current_abg.paco2 * (old_mv / new_mv), PACO2_RANGE)
        delta_co2 = paco2 - current_abg.paco2
        ph = clamp_to(current_abg.ph - delta_co2 * t.ph_per_paco2, PH_RANGE)

    pao2 = clamp_to(
        current_abg.pao2
        + (new_vent.fio2 - current_vent.fio2) * t.pao2_per_fio2
        + (new_vent.peep - current_vent.peep) * t.pao2_per_peep,
        PAO2_RANGE,
    )

    return replace(current_abg, paco2=paco2, ph=ph, pao2=pao2, so2=estimate_so2(pao2))

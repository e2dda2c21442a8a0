"""
Renal perfusion model and bedside renal staging.
"""

from dataclasses import dataclass, replace
from typing import Optional

from icusim.core.constants import (
    CREATININE_GFR_PRODUCT, CREATININE_RANGE, GFR_RANGE, RENAL_AUTOREG_MAP,
    RENAL_CO_REFERENCE, URINE_OUTPUT_PER_GFR, URINE_OUTPUT_RANGE,
)
from icusim.core.state import RenalParameters
from icusim.core.utils import clamp_to, safe_divide

OLIGURIA_THRESHOLD = 30.0  # mL/hr


@dataclass(frozen=True)
class GFRStage:
    category: str  # KDIGO G1..G5
    label: str


def calculate_fena(urine_na: float, plasma_cr: float, plasma_na: float, urine_cr: float) -> float:
    """
    Fractional excretion of sodium (%).

    FENa = (UNa x PCr) / (PNa x UCr) x 100; 0 when the denominator is 0.
    """
    return safe_divide(urine_na * plasma_cr, plasma_na * urine_cr) * 100.0


def calculate_bun_creatinine_ratio(bun: float, creatinine: float) -> float:
    return safe_divide(bun, creatinine)


def gfr_multiplier(map: float, cardiac_output: float) -> float:
    """
    Fraction of baseline GFR preserved at the given perfusion.

    Autoregulation holds GFR constant for any MAP >= 65; below that GFR
    falls linearly. A CO below 4 L/min scales it down further.
    """
    multiplier = map / RENAL_AUTOREG_MAP if map < RENAL_AUTOREG_MAP else 1.0
    if cardiac_output < RENAL_CO_REFERENCE:
        multiplier *= cardiac_output / RENAL_CO_REFERENCE
    return multiplier


def simulate_renal_perfusion(
    current_renal: RenalParameters,
    map: float,
    cardiac_output: float,
) -> RenalParameters:
    """
    Update GFR, urine output and creatinine for the current MAP and CO.

    Creatinine is recomputed from the new GFR on each call rather than
    accumulated.
    """
    gfr = clamp_to(current_renal.gfr * gfr_multiplier(map, cardiac_output), GFR_RANGE)
    return replace(
        current_renal,
        gfr=gfr,
        urine_output=clamp_to(gfr * URINE_OUTPUT_PER_GFR, URINE_OUTPUT_RANGE),
        creatinine=clamp_to(CREATININE_GFR_PRODUCT / gfr, CREATININE_RANGE),
    )


def stage_gfr(gfr: float) -> GFRStage:
    if gfr >= 90:
        return GFRStage("G1", "Normal")
    if gfr >= 60:
        return GFRStage("G2", "Mild CKD")
    if gfr >= 45:
        return GFRStage("G3a", "Moderate CKD")
    if gfr >= 30:
        return GFRStage("G3b", "Moderate CKD")
    if gfr >= 15:
        return GFRStage("G4", "Severe CKD")
    return GFRStage("G5", "Kidney Failure")


def stage_aki(renal: RenalParameters) -> Optional[str]:
    """AKI stage from creatinine and hourly urine output, or None."""
    if renal.creatinine >= 3.0 or renal.urine_output < 20:
        return "AKI Stage 3"
    if renal.creatinine >= 2.0 or renal.urine_output < 30:
        return "AKI Stage 2"
    if renal.creatinine >= 1.5 or renal.urine_output < 40:
        return "AKI Stage 1"
    return None


def is_oliguric(renal: RenalParameters) -> bool:
    return renal.urine_output < OLIGURIA_THRESHOLD

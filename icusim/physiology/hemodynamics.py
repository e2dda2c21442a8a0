"""
Hemodynamic formulas and intervention responses.

Units:
    - MAP, SBP, DBP, CVP: mmHg
    - HR: bpm
    - SV: mL
    - CO: L/min
    - SVR: dynes*s/cm^5

Every simulator takes a Vitals snapshot and returns a new one; the input
is never modified.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Union

from icusim.core.constants import (
    CO_RANGE, CVP_RANGE, DBP_OFFSET_FROM_MAP, DBP_RANGE, HR_RANGE, MAP_RANGE,
    SBP_OFFSET_FROM_MAP, SBP_RANGE, SVR_RANGE, SVR_UNIT_FACTOR,
    FluidTuning, PeepTuning,
)
from icusim.core.enums import FluidType, Vasopressor
from icusim.core.state import Vitals
from icusim.core.utils import clamp_to, safe_divide

logger = logging.getLogger(__name__)

FLUID_TUNING = FluidTuning()
PEEP_TUNING = PeepTuning()


def calculate_map(systolic: float, diastolic: float) -> float:
    """Mean arterial pressure from cuff pressures."""
    return diastolic + (systolic - diastolic) / 3.0


def calculate_cardiac_output(heart_rate: float, stroke_volume: float) -> float:
    """Cardiac output (L/min) from HR (bpm) and SV (mL)."""
    return (heart_rate * stroke_volume) / 1000.0


def calculate_stroke_volume(cardiac_output: float, heart_rate: float) -> float:
    """Stroke volume (mL) from CO (L/min) and HR; 0 when HR is 0."""
    return safe_divide(cardiac_output * 1000.0, heart_rate)


def calculate_svr(map: float, cvp: float, cardiac_output: float) -> float:
    """
    Systemic vascular resistance in dynes*s/cm^5.

    Returns 0 when cardiac output is 0.
    """
    return safe_divide((map - cvp) * SVR_UNIT_FACTOR, cardiac_output)


def _with_pressures_from_map(vitals: Vitals, clamp_components: bool) -> Vitals:
    """Rebuild SBP/DBP from MAP using the fixed pulse shape."""
    sbp = vitals.mean_arterial_pressure + SBP_OFFSET_FROM_MAP
    dbp = vitals.mean_arterial_pressure + DBP_OFFSET_FROM_MAP
    if clamp_components:
        sbp = clamp_to(sbp, SBP_RANGE)
        dbp = clamp_to(dbp, DBP_RANGE)
    return replace(vitals, systolic_bp=sbp, diastolic_bp=dbp)


def simulate_fluid_bolus(
    current_vitals: Vitals,
    volume_ml: float,
    fluid_type: Union[FluidType, str] = FluidType.CRYSTALLOID,
) -> Vitals:
    """
    Apply a fluid bolus.

    Assumes a moderate, fixed position on the Frank-Starling curve: each
    liter adds 5 mL of stroke volume. ``fluid_type`` is validated but all
    fluid types currently share the same response.
    """
    FluidType.parse(fluid_type)
    volume_l = volume_ml / 1000.0

    sv = calculate_stroke_volume(current_vitals.cardiac_output, current_vitals.heart_rate)
    sv_increase = volume_l * FLUID_TUNING.sv_gain_ml_per_l
    co = clamp_to(calculate_cardiac_output(current_vitals.heart_rate, sv + sv_increase), CO_RANGE)

    map_ = clamp_to(
        current_vitals.mean_arterial_pressure + sv_increase * FLUID_TUNING.map_per_sv_ml,
        MAP_RANGE,
    )
    cvp = clamp_to(
        current_vitals.central_venous_pressure + volume_l * FLUID_TUNING.cvp_per_l,
        CVP_RANGE,
    )

    new_vitals = replace(
        current_vitals,
        cardiac_output=co,
        mean_arterial_pressure=map_,
        central_venous_pressure=cvp,
        systemic_vascular_resistance=clamp_to(calculate_svr(map_, cvp, co), SVR_RANGE),
    )
    return _with_pressures_from_map(new_vitals, clamp_components=True)


@dataclass(frozen=True)
class PressorEffect:
    """Per unit dose (mcg/kg/min) change of each hemodynamic variable."""
    svr: float = 0.0
    map: float = 0.0
    hr: float = 0.0
    co: float = 0.0


PRESSOR_EFFECTS: Dict[Vasopressor, PressorEffect] = {
    # Alpha-1 dominant: SVR and MAP, minimal HR effect.
    Vasopressor.NOREPINEPHRINE: PressorEffect(svr=100.0, map=5.0),
    # V1 pure vasoconstriction.
    Vasopressor.VASOPRESSIN: PressorEffect(svr=200.0, map=8.0),
    # Beta-1 and alpha: HR, contractility and SVR. MAP is not driven directly.
    Vasopressor.EPINEPHRINE: PressorEffect(svr=80.0, hr=10.0, co=0.5),
    # Inodilator.
    Vasopressor.DOBUTAMINE: PressorEffect(svr=-20.0, co=0.3),
}


def _apply_pressor(vitals: Vitals, effect: PressorEffect, dose: float) -> Vitals:
    # Only variables the drug acts on are written (and therefore clamped).
    updates = {}
    if effect.svr:
        updates["systemic_vascular_resistance"] = clamp_to(
            vitals.systemic_vascular_resistance + dose * effect.svr, SVR_RANGE)
    if effect.map:
        updates["mean_arterial_pressure"] = clamp_to(
            vitals.mean_arterial_pressure + dose * effect.map, MAP_RANGE)
    if effect.hr:
        updates["heart_rate"] = clamp_to(vitals.heart_rate + dose * effect.hr, HR_RANGE)
    if effect.co:
        updates["cardiac_output"] = clamp_to(vitals.cardiac_output + dose * effect.co, CO_RANGE)
    return replace(vitals, **updates)


def simulate_vasopressor(
    current_vitals: Vitals,
    medication: Union[Vasopressor, str],
    dose_mcg_kg_min: float,
) -> Vitals:
    """
    Apply a vasoactive drug at the given dose.

    ``medication`` is a Vasopressor or a case-insensitive drug name
    ("noradrenaline" is accepted). A name outside the vocabulary has no
    drug effect. In every case SBP/DBP are rebuilt from MAP without
    clamping.
    """
    drug: Optional[Vasopressor] = Vasopressor.parse(medication)
    if drug is None:
        logger.warning("Unknown vasopressor %r; no hemodynamic effect applied", medication)
        new_vitals = current_vitals
    else:
        new_vitals = _apply_pressor(current_vitals, PRESSOR_EFFECTS[drug], dose_mcg_kg_min)
    # TODO: decide whether SBP/DBP should be clamped here as in the fluid and PEEP paths.
    return _with_pressures_from_map(new_vitals, clamp_components=False)


def simulate_peep_effect(current_vitals: Vitals, current_peep: float, new_peep: float) -> Vitals:
    """
    Hemodynamic consequence of a PEEP change.

    Higher PEEP raises intrathoracic pressure, reducing venous return:
    CO and MAP fall while CVP rises. Lowering PEEP reverses this.
    """
    delta = new_peep - current_peep
    new_vitals = current_vitals
    if delta != 0:
        # Signed so that a PEEP decrease mirrors an increase.
        new_vitals = replace(
            current_vitals,
            cardiac_output=clamp_to(
                current_vitals.cardiac_output - delta * PEEP_TUNING.co_per_cmh2o, CO_RANGE),
            mean_arterial_pressure=clamp_to(
                current_vitals.mean_arterial_pressure - delta * PEEP_TUNING.map_per_cmh2o, MAP_RANGE),
            central_venous_pressure=clamp_to(
                current_vitals.central_venous_pressure + delta * PEEP_TUNING.cvp_per_cmh2o, CVP_RANGE),
        )
    return _with_pressures_from_map(new_vitals, clamp_components=True)

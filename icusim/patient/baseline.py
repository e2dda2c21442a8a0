from datetime import datetime
from typing import Optional

from icusim.core.enums import ShockSeverity, ShockType, VentilatorMode
from icusim.core.state import (
    ABG, Electrolytes, PatientState, RenalParameters, ShockState,
    VentilatorSettings, Vitals,
)

BASELINE_ID = "normal-baseline"


def create_normal_patient_state(timestamp: Optional[datetime] = None) -> PatientState:
    """
    Hemodynamically, respiratorily and metabolically normal ventilated adult.

    All values are fixed; only the timestamp varies between calls unless
    one is supplied.
    """
    return PatientState(
        id=BASELINE_ID,
        timestamp=timestamp or datetime.now(),
        vitals=Vitals(
            heart_rate=75.0,
            systolic_bp=120.0,
            diastolic_bp=80.0,
            mean_arterial_pressure=93.0,
            central_venous_pressure=8.0,
            pulmonary_artery_pressure=25.0,
            cardiac_output=5.0,
            systemic_vascular_resistance=1000.0,
            temperature=37.0,
            respiratory_rate=16.0,
            oxygen_saturation=98.0,
        ),
        ventilator=VentilatorSettings(
            mode=VentilatorMode.VOLUME_CONTROL_AC,
            tidal_volume=500.0,
            respiratory_rate=16.0,
            fio2=0.4,
            peep=5.0,
            inspiratory_pressure=20.0,
            ie_ratio="1:2",
            plateau_pressure=20.0,
            peak_pressure=25.0,
        ),
        abg=ABG(
            ph=7.40,
            paco2=40.0,
            pao2=95.0,
            hco3=24.0,
            base_excess=0.0,
            lactate=1.2,
            so2=98.0,
        ),
        electrolytes=Electrolytes(
            sodium=140.0,
            potassium=4.0,
            chloride=104.0,
            bicarbonate=24.0,
            calcium=9.0,
            magnesium=2.0,
            phosphate=3.5,
            anion_gap=12.0,
        ),
        renal=RenalParameters(
            creatinine=1.0,
            bun=15.0,
            gfr=90.0,
            urine_output=60.0,
            urine_specific_gravity=1.010,
            urine_sodium=40.0,
            fractional_excretion_na=1.0,
        ),
        shock=ShockState(
            type=ShockType.NONE,
            severity=ShockSeverity.MILD,
            lactate=1.2,
            markers=[],
        ),
        fluids=[],
        medications=[],
    )

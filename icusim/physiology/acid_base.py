"""
Rule-based arterial blood gas interpretation and electrolyte adjustment.

Compensation rules (acute):
    - Respiratory acidosis: HCO3 rises 1 mEq/L per 10 mmHg PaCO2 above 40.
    - Metabolic acidosis (Winter's): PaCO2 = 40 - 1.2 x (24 - HCO3), +/- 2.
    - Respiratory alkalosis: HCO3 falls 2 mEq/L per 10 mmHg PaCO2 below 40.
    - Metabolic alkalosis: PaCO2 rises 0.7 mmHg per mEq/L HCO3 above 24.
"""

from dataclasses import replace
from typing import Optional, Tuple

from icusim.core.constants import (
    ANION_GAP_HIGH, ANION_GAP_LOW, NORMAL_HCO3, NORMAL_PACO2, PH_ACIDEMIA,
    PH_ALKALEMIA, PH_RANGE, ElectrolyteTuning,
)
from icusim.core.enums import AcidBaseDisturbance, AnionGapStatus, Compensation
from icusim.core.state import ABG, AcidBaseAnalysis, Electrolytes, ExpectedCompensation
from icusim.core.utils import clamp_to

ELECTROLYTE_TUNING = ElectrolyteTuning()


def calculate_anion_gap(sodium: float, chloride: float, bicarbonate: float) -> float:
    """Anion gap = Na - (Cl + HCO3)."""
    return sodium - (chloride + bicarbonate)


def classify_anion_gap(gap: float) -> AnionGapStatus:
    if gap > ANION_GAP_HIGH:
        return AnionGapStatus.HIGH
    if gap < ANION_GAP_LOW:
        return AnionGapStatus.LOW
    return AnionGapStatus.NORMAL


def _is_mixed(ph: float, paco2: float, hco3: float) -> bool:
    """Both the respiratory and metabolic components push pH the same way."""
    return (
        (ph < PH_ACIDEMIA and paco2 > 45 and hco3 < 22)
        or (ph > PH_ALKALEMIA and paco2 < 35 and hco3 > 26)
    )


def analyze_acid_base(abg: ABG) -> AcidBaseAnalysis:
    """
    Interpret a blood gas into primary disorder, compensation and anion gap.

    Compensation is only graded once the compensating parameter has moved
    in the expected direction; otherwise it stays None. A mixed disorder
    overrides the primary label but keeps the compensation already graded.

    The anion gap category here is computed from HCO3 alone (Na and Cl
    taken as 0) because a blood gas does not carry the electrolyte panel.
    Use calculate_anion_gap() with real electrolytes for the full gap.
    """
    ph, paco2, hco3 = abg.ph, abg.paco2, abg.hco3

    primary = AcidBaseDisturbance.NORMAL
    compensation = Compensation.NONE
    expected: Optional[ExpectedCompensation] = None

    if ph < PH_ACIDEMIA:
        if paco2 > 45:
            primary = AcidBaseDisturbance.RESPIRATORY_ACIDOSIS
            expected_hco3 = NORMAL_HCO3 + (paco2 - NORMAL_PACO2) / 10.0
            expected = ExpectedCompensation("HCO3", expected_hco3, hco3)
            if hco3 > NORMAL_HCO3:
                compensation = Compensation.COMPLETE if hco3 >= expected_hco3 else Compensation.PARTIAL
        elif hco3 < 22:
            primary = AcidBaseDisturbance.METABOLIC_ACIDOSIS
            expected_co2 = NORMAL_PACO2 - 1.2 * (NORMAL_HCO3 - hco3)
            expected = ExpectedCompensation("PaCO2", expected_co2, paco2)
            if paco2 < NORMAL_PACO2:
                compensation = Compensation.COMPLETE if paco2 <= expected_co2 + 2 else Compensation.PARTIAL
    elif ph > PH_ALKALEMIA:
        if paco2 < 35:
            primary = AcidBaseDisturbance.RESPIRATORY_ALKALOSIS
            expected_hco3 = NORMAL_HCO3 - ((NORMAL_PACO2 - paco2) / 10.0) * 2
            expected = ExpectedCompensation("HCO3", expected_hco3, hco3)
            if hco3 < NORMAL_HCO3:
                compensation = Compensation.COMPLETE if hco3 <= expected_hco3 else Compensation.PARTIAL
        elif hco3 > 26:
            primary = AcidBaseDisturbance.METABOLIC_ALKALOSIS
            expected_co2 = NORMAL_PACO2 + 0.7 * (hco3 - NORMAL_HCO3)
            expected = ExpectedCompensation("PaCO2", expected_co2, paco2)
            if paco2 > NORMAL_PACO2:
                compensation = Compensation.COMPLETE if paco2 >= expected_co2 - 2 else Compensation.PARTIAL

    if _is_mixed(ph, paco2, hco3):
        primary = AcidBaseDisturbance.MIXED

    gap = calculate_anion_gap(0, 0, hco3)

    return AcidBaseAnalysis(
        primary=primary,
        compensation=compensation,
        anion_gap=classify_anion_gap(gap),
        expected_compensation=expected,
    )


def simulate_electrolyte_change(
    current_electrolytes: Electrolytes,
    current_abg: ABG,
    sodium: Optional[float] = None,
    potassium: Optional[float] = None,
    chloride: Optional[float] = None,
    bicarbonate: Optional[float] = None,
) -> Tuple[Electrolytes, ABG]:
    """
    Apply new electrolyte values and propagate bicarbonate into the gas.

    Omitted values keep their current level. The full anion gap is
    recomputed. A HCO3 change moves pH by ~0.012 per mEq/L and resets the
    base excess to HCO3 - 24.
    """
    e = current_electrolytes
    new_na = e.sodium if sodium is None else sodium
    new_k = e.potassium if potassium is None else potassium
    new_cl = e.chloride if chloride is None else chloride
    new_hco3 = e.bicarbonate if bicarbonate is None else bicarbonate

    new_electrolytes = replace(
        e,
        sodium=new_na,
        potassium=new_k,
        chloride=new_cl,
        bicarbonate=new_hco3,
        anion_gap=calculate_anion_gap(new_na, new_cl, new_hco3),
    )

    new_abg = current_abg
    if new_hco3 != e.bicarbonate:
        delta = new_hco3 - e.bicarbonate
        new_abg = replace(
            current_abg,
            ph=clamp_to(current_abg.ph + delta * ELECTROLYTE_TUNING.ph_per_hco3, PH_RANGE),
            hco3=new_hco3,
            base_excess=new_hco3 - NORMAL_HCO3,
        )
    return new_electrolytes, new_abg

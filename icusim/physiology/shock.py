"""
Shock recognition from the hemodynamic profile and lactate.
"""

from typing import List, Optional

from icusim.core.constants import (
    SHOCK_HIGH_CO, SHOCK_HIGH_CVP, SHOCK_HIGH_SVR, SHOCK_LACTATE_THRESHOLD,
    SHOCK_LOW_CO, SHOCK_LOW_CVP, SHOCK_LOW_SVR, SHOCK_MAP_THRESHOLD,
)
from icusim.core.enums import ShockSeverity, ShockType
from icusim.core.state import ShockState, Vitals

MARKER_HYPOTENSION = "Hypotension"
MARKER_LACTATE = "Elevated lactate"
MARKER_LOW_CO = "Low cardiac output"


def collect_shock_markers(vitals: Vitals, lactate: float) -> List[str]:
    markers = []
    if vitals.mean_arterial_pressure < SHOCK_MAP_THRESHOLD:
        markers.append(MARKER_HYPOTENSION)
    if lactate > SHOCK_LACTATE_THRESHOLD:
        markers.append(MARKER_LACTATE)
    if vitals.cardiac_output < SHOCK_LOW_CO:
        markers.append(MARKER_LOW_CO)
    return markers


def classify_shock_type(vitals: Vitals) -> ShockType:
    """
    First matching hemodynamic profile wins.

    The hypovolemic rule sits behind the cardiogenic rule and its guard
    is narrower (same CO and SVR conditions plus CVP < 8), so it never
    matches: low-output, high-SVR states are always reported as
    cardiogenic. The order is kept as the reference behavior.
    """
    co = vitals.cardiac_output
    svr = vitals.systemic_vascular_resistance
    cvp = vitals.central_venous_pressure

    if co < SHOCK_LOW_CO and svr > SHOCK_HIGH_SVR:
        return ShockType.CARDIOGENIC
    if co < SHOCK_LOW_CO and cvp < SHOCK_LOW_CVP and svr > SHOCK_HIGH_SVR:
        return ShockType.HYPOVOLEMIC
    if co > SHOCK_HIGH_CO and svr < SHOCK_LOW_SVR:
        return ShockType.DISTRIBUTIVE
    if cvp > SHOCK_HIGH_CVP and co < SHOCK_LOW_CO:
        return ShockType.OBSTRUCTIVE
    return ShockType.NONE


def grade_shock_severity(map: float, lactate: float) -> ShockSeverity:
    if lactate > 4 or map < 55:
        return ShockSeverity.SEVERE
    if lactate > 2.5 or map < 60:
        return ShockSeverity.MODERATE
    return ShockSeverity.MILD


def assess_shock_state(
    vitals: Vitals,
    lactate: float,
    clinical_context: Optional[str] = None,
) -> ShockState:
    """
    Classify shock type and severity.

    Type and severity are only assigned when at least one marker is
    present; a marker-positive state may still have type NONE when no
    profile matches. ``clinical_context`` is accepted for callers that
    carry a free-text history; it does not affect the result.
    """
    markers = collect_shock_markers(vitals, lactate)
    shock_type = ShockType.NONE
    severity = ShockSeverity.MILD

    if markers:
        shock_type = classify_shock_type(vitals)
        severity = grade_shock_severity(vitals.mean_arterial_pressure, lactate)

    return ShockState(type=shock_type, severity=severity, lactate=lactate, markers=markers)

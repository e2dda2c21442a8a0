from datetime import datetime, timedelta
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from icusim.core.engine import SimulationEngine
from icusim.core.state import SimulationConfig
from icusim.patient.baseline import create_normal_patient_state


T0 = datetime(2024, 1, 1, 8, 0, 0)


@pytest.fixture
def clock():
    """Deterministic clock advancing one second per call."""
    ticks = {"n": 0}

    def _now():
        ticks["n"] += 1
        return T0 + timedelta(seconds=ticks["n"])

    return _now


@pytest.fixture
def baseline():
    """Normal baseline patient with a fixed timestamp."""
    return create_normal_patient_state(T0)


@pytest.fixture
def vitals(baseline):
    return baseline.vitals


@pytest.fixture
def engine(clock):
    """Fresh session at baseline."""
    return SimulationEngine(SimulationConfig(), clock=clock)


@pytest.fixture
def coupled_engine(clock):
    """Session that re-runs renal perfusion after hemodynamic changes."""
    return SimulationEngine(SimulationConfig(couple_renal=True), clock=clock)

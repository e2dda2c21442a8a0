from collections import deque
from dataclasses import asdict, dataclass
from typing import Dict, List

import numpy as np

from .state import PatientState

TREND_CHANNELS = ("map", "co", "svr", "hr", "ph", "paco2", "pao2", "lactate")


@dataclass(frozen=True)
class HistoryPoint:
    """One charted sample of the hemodynamic and blood-gas trend."""
    time: float  # seconds of simulated time
    map: float
    co: float
    svr: float
    hr: float
    ph: float
    paco2: float
    pao2: float
    lactate: float

    @classmethod
    def from_state(cls, time: float, state: PatientState) -> "HistoryPoint":
        v, abg = state.vitals, state.abg
        return cls(
            time=time,
            map=v.mean_arterial_pressure,
            co=v.cardiac_output,
            svr=v.systemic_vascular_resistance,
            hr=v.heart_rate,
            ph=abg.ph,
            paco2=abg.paco2,
            pao2=abg.pao2,
            lactate=abg.lactate,
        )

    def to_dict(self) -> dict:
        return asdict(self)


class TrendBuffer:
    """
    Bounded history of state samples.

    Keeps the newest ``limit`` points plus the one being added, so a
    limit of 50 holds at most 51 samples.
    """
    def __init__(self, limit: int = 50):
        self.limit = max(0, int(limit))
        self._points = deque(maxlen=self.limit + 1)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, idx: int) -> HistoryPoint:
        return self._points[idx]

    def record(self, time: float, state: PatientState) -> HistoryPoint:
        point = HistoryPoint.from_state(time, state)
        self._points.append(point)
        return point

    def clear(self):
        self._points.clear()

    def points(self) -> List[HistoryPoint]:
        return list(self._points)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays keyed by 'time' and each trend channel."""
        keys = ("time",) + TREND_CHANNELS
        if not self._points:
            return {k: np.zeros(0) for k in keys}
        return {k: np.array([getattr(p, k) for p in self._points], dtype=float) for k in keys}


def summarize_trends(buffer: TrendBuffer) -> Dict[str, Dict[str, float]]:
    """
    Per-channel first/last/min/max/delta over the buffered window.

    Returns an empty dict when nothing has been recorded.
    """
    if len(buffer) == 0:
        return {}
    arrays = buffer.as_arrays()
    summary = {}
    for name in TREND_CHANNELS:
        values = arrays[name]
        summary[name] = {
            "first": float(values[0]),
            "last": float(values[-1]),
            "min": float(np.min(values)),
            "max": float(np.max(values)),
            "delta": float(values[-1] - values[0]),
        }
    return summary

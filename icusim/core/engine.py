import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from .enums import FluidType, InterventionType, MedicationRoute, Vasopressor, VentilatorMode
from .state import (
    AcidBaseAnalysis, FluidAdministration, Intervention, Medication,
    PatientState, ShockState, SimulationConfig,
)
from .trends import TrendBuffer, summarize_trends
from icusim.patient.baseline import create_normal_patient_state
from icusim.physiology.acid_base import (
    analyze_acid_base, calculate_anion_gap, simulate_electrolyte_change,
)
from icusim.physiology.hemodynamics import (
    simulate_fluid_bolus, simulate_peep_effect, simulate_vasopressor,
)
from icusim.physiology.renal import (
    is_oliguric, simulate_renal_perfusion, stage_aki, stage_gfr,
)
from icusim.physiology.respiration import (
    calculate_pf_ratio, classify_ards, simulate_ventilator_change,
)
from icusim.physiology.shock import assess_shock_state

logger = logging.getLogger(__name__)

VENT_SETTING_FIELDS = ("mode", "tidal_volume", "respiratory_rate", "fio2", "peep",
                       "inspiratory_pressure", "ie_ratio")


class SimulationEngine:
    """
    Simulation session: owns the current patient state, the intervention
    log and the trend history.

    The physiology functions are pure; this class is the single place
    where their outputs are composed into a new PatientState. Each
    intervention:
      1. runs the relevant simulator(s) on the current slices,
      2. re-assesses shock (and renal perfusion when coupled),
      3. replaces the state wholesale and appends a log entry.

    Create one per learner session and pass it to whatever needs it.
    """
    def __init__(self, config: Optional[SimulationConfig] = None,
                 initial_state: Optional[PatientState] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.config = config or SimulationConfig()
        self.clock = clock
        self.history = TrendBuffer(self.config.history_limit)
        self.state: Optional[PatientState] = None
        self.interventions: List[Intervention] = []
        self.time_elapsed = 0.0
        self._intervention_seq = 0
        if initial_state is None:
            self.reset()
        else:
            self.load_state(initial_state)

    # Session lifecycle.

    def reset(self):
        """Discard the log and history and return to the normal baseline."""
        self.state = create_normal_patient_state(self.clock())
        self.interventions = []
        self.time_elapsed = 0.0
        self._intervention_seq = 0
        self.history.clear()
        self.history.record(self.time_elapsed, self.state)
        logger.info("Simulation reset to baseline")

    def load_state(self, state: PatientState):
        """Replace the current patient, e.g. with a case scenario's initial state."""
        self.state = state
        self.history.record(self.time_elapsed, self.state)
        logger.info("Loaded patient state %s", state.id)

    def advance_time(self, seconds: float):
        if seconds < 0:
            raise ValueError(f"Cannot advance time by a negative amount: {seconds}")
        self.time_elapsed += seconds

    def get_latest_state(self) -> PatientState:
        return self.state

    # Interventions.

    def give_fluid_bolus(self, volume_ml: float,
                         fluid_type: Union[FluidType, str, None] = None,
                         name: Optional[str] = None) -> PatientState:
        fluid = FluidType.parse(fluid_type) if fluid_type is not None else self.config.default_fluid_type
        vitals = simulate_fluid_bolus(self.state.vitals, volume_ml, fluid)
        record = FluidAdministration(type=fluid, name=name or fluid.value, volume=volume_ml, rate=0.0)
        self._commit(
            InterventionType.FLUID,
            "fluid",
            f"{volume_ml:g} mL {fluid.value} bolus",
            {"volume": volume_ml, "type": fluid.value},
            vitals=vitals,
            fluids=self.state.fluids + [record],
        )
        return self.state

    def give_vasopressor(self, medication: Union[Vasopressor, str], dose: float) -> PatientState:
        """Start (or re-titrate) a vasoactive infusion in mcg/kg/min."""
        vitals = simulate_vasopressor(self.state.vitals, medication, dose)
        drug = Vasopressor.parse(medication)
        name = drug.value if drug else str(medication)
        medications = self.state.medications
        if drug is not None:
            # One active infusion per drug; re-titration replaces the dose.
            medications = [m for m in medications if m.name != drug.value]
            medications.append(Medication(name=drug.value, dose=dose, unit="mcg/kg/min",
                                          route=MedicationRoute.IV))
        self._commit(
            InterventionType.MEDICATION,
            "vasopressor",
            f"{name} {dose:g} mcg/kg/min",
            {"medication": name, "dose": dose},
            vitals=vitals,
            medications=medications,
        )
        return self.state

    def change_ventilator(self, **settings) -> PatientState:
        """
        Apply new ventilator settings.

        Accepts any of VENT_SETTING_FIELDS as keyword arguments; omitted
        settings are kept. A PEEP change also acts on the hemodynamics.
        """
        unknown = set(settings) - set(VENT_SETTING_FIELDS)
        if unknown:
            raise ValueError(f"Unknown ventilator setting(s): {', '.join(sorted(unknown))}")
        if "mode" in settings and not isinstance(settings["mode"], VentilatorMode):
            settings["mode"] = VentilatorMode(settings["mode"])

        old_vent = self.state.ventilator
        new_vent = replace(old_vent, **settings)
        abg = simulate_ventilator_change(self.state.abg, old_vent, new_vent)
        vitals = self.state.vitals
        if new_vent.peep != old_vent.peep:
            vitals = simulate_peep_effect(vitals, old_vent.peep, new_vent.peep)

        self._commit(
            InterventionType.VENTILATOR,
            "vent",
            (f"Vent: TV {new_vent.tidal_volume:g} mL, RR {new_vent.respiratory_rate:g}, "
             f"FiO2 {new_vent.fio2 * 100:g}%, PEEP {new_vent.peep:g}"),
            {
                "tidalVolume": new_vent.tidal_volume,
                "respiratoryRate": new_vent.respiratory_rate,
                "fiO2": new_vent.fio2,
                "peep": new_vent.peep,
            },
            ventilator=new_vent,
            abg=abg,
            vitals=vitals,
        )
        return self.state

    def change_electrolytes(self, sodium: Optional[float] = None,
                            potassium: Optional[float] = None,
                            chloride: Optional[float] = None,
                            bicarbonate: Optional[float] = None) -> PatientState:
        electrolytes, abg = simulate_electrolyte_change(
            self.state.electrolytes, self.state.abg,
            sodium=sodium, potassium=potassium, chloride=chloride, bicarbonate=bicarbonate,
        )
        e = electrolytes
        self._commit(
            InterventionType.OTHER,
            "electrolytes",
            (f"Electrolyte adjustment: Na {e.sodium:g}, K {e.potassium:g}, "
             f"Cl {e.chloride:g}, HCO3 {e.bicarbonate:g}"),
            {"sodium": e.sodium, "potassium": e.potassium,
             "chloride": e.chloride, "bicarbonate": e.bicarbonate},
            electrolytes=electrolytes,
            abg=abg,
        )
        return self.state

    def update_renal_perfusion(self) -> PatientState:
        """Re-derive renal function from the current MAP and CO (no log entry)."""
        vitals = self.state.vitals
        renal = simulate_renal_perfusion(self.state.renal, vitals.mean_arterial_pressure,
                                         vitals.cardiac_output)
        self._replace_state(renal=renal)
        return self.state

    # Interpretation.

    def analyze_acid_base(self) -> AcidBaseAnalysis:
        return analyze_acid_base(self.state.abg)

    def assess_shock(self, clinical_context: Optional[str] = None) -> ShockState:
        return assess_shock_state(self.state.vitals, self.state.abg.lactate, clinical_context)

    def summary(self) -> Dict[str, Any]:
        """Flat report of the current state and its interpretation."""
        s = self.state
        analysis = self.analyze_acid_base()
        pf = calculate_pf_ratio(s.abg.pao2, s.ventilator.fio2)
        gfr_stage = stage_gfr(s.renal.gfr)
        return {
            "timeElapsed": self.time_elapsed,
            "interventions": len(self.interventions),
            "vitals": s.vitals.to_dict(),
            "abg": s.abg.to_dict(),
            "acidBase": analysis.to_dict(),
            "anionGap": calculate_anion_gap(s.electrolytes.sodium, s.electrolytes.chloride,
                                            s.electrolytes.bicarbonate),
            "shock": s.shock.to_dict(),
            "pfRatio": pf,
            "ards": classify_ards(pf),
            "gfrStage": gfr_stage.category,
            "aki": stage_aki(s.renal),
            "oliguric": is_oliguric(s.renal),
            "trends": summarize_trends(self.history),
        }

    # Snapshots.

    def snapshot(self) -> Dict[str, Any]:
        """JSON-compatible snapshot of the session."""
        return {
            "patientState": self.state.to_dict(),
            "interventions": [i.to_dict() for i in self.interventions],
            "timeElapsed": self.time_elapsed,
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any],
                      config: Optional[SimulationConfig] = None,
                      clock: Callable[[], datetime] = datetime.now) -> "SimulationEngine":
        if not isinstance(data, dict) or "patientState" not in data:
            raise ValueError("Snapshot must contain a 'patientState' entry")
        engine = cls(config=config, clock=clock)
        engine.time_elapsed = float(data.get("timeElapsed", 0.0))
        engine.interventions = [Intervention.from_dict(i) for i in data.get("interventions", [])]
        engine._intervention_seq = len(engine.interventions)
        engine.history.clear()
        engine.load_state(PatientState.from_dict(data["patientState"]))
        return engine

    # Internals.

    def _replace_state(self, **updates):
        self.state = replace(self.state, timestamp=self.clock(), **updates)
        self.history.record(self.time_elapsed, self.state)

    def _commit(self, kind: InterventionType, prefix: str, description: str,
                parameters: Dict[str, Union[float, str]], **updates):
        vitals = updates.get("vitals", self.state.vitals)
        abg = updates.get("abg", self.state.abg)

        if self.config.couple_renal and "vitals" in updates:
            updates["renal"] = simulate_renal_perfusion(
                self.state.renal, vitals.mean_arterial_pressure, vitals.cardiac_output)
        updates["shock"] = assess_shock_state(vitals, abg.lactate)

        self._replace_state(**updates)

        self._intervention_seq += 1
        entry = Intervention(
            id=f"{prefix}-{self._intervention_seq}",
            type=kind,
            description=description,
            timestamp=self.state.timestamp,
            parameters=dict(parameters),
        )
        self.interventions.append(entry)
        logger.info("%s: %s (shock=%s)", entry.id, description, self.state.shock.type.value)

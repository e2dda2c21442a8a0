import json
import pytest
from datetime import datetime
from dataclasses import FrozenInstanceError

from icusim.core.enums import FluidType, InterventionType, ShockType, Vasopressor, VentilatorMode
from icusim.core.state import (
    Intervention, PatientState, SimulationConfig, VentilatorSettings, Vitals,
)
from icusim.patient.baseline import BASELINE_ID, create_normal_patient_state


class TestBaseline:

    def test_values(self, baseline):
        v, abg, e, r = baseline.vitals, baseline.abg, baseline.electrolytes, baseline.renal
        assert baseline.id == BASELINE_ID
        assert v.heart_rate == 75
        assert v.mean_arterial_pressure == 93
        assert v.central_venous_pressure == 8
        assert v.cardiac_output == 5.0
        assert v.systemic_vascular_resistance == 1000
        assert abg.ph == 7.40
        assert abg.paco2 == 40
        assert abg.pao2 == 95
        assert abg.hco3 == 24
        assert abg.lactate == 1.2
        assert e.sodium == 140
        assert e.chloride == 104
        assert e.bicarbonate == 24
        assert e.anion_gap == 12
        assert r.creatinine == 1.0
        assert r.gfr == 90
        assert r.urine_output == 60
        assert baseline.shock.type == ShockType.NONE
        assert baseline.ventilator.mode == VentilatorMode.VOLUME_CONTROL_AC
        assert baseline.fluids == []
        assert baseline.medications == []

    def test_deterministic(self):
        t = datetime(2024, 5, 1)
        assert create_normal_patient_state(t) == create_normal_patient_state(t)

    def test_records_are_frozen(self, baseline):
        with pytest.raises(FrozenInstanceError):
            baseline.vitals.heart_rate = 120


class TestSerialization:

    def test_camel_case_keys(self, baseline):
        data = baseline.to_dict()
        assert data["vitals"]["meanArterialPressure"] == 93
        assert data["abg"]["paCO2"] == 40
        assert data["ventilator"]["iERatio"] == "1:2"
        assert data["ventilator"]["fiO2"] == 0.4
        assert data["ventilator"]["mode"] == "Volume Control (AC)"
        assert data["shock"]["type"] == "None"
        assert data["timestamp"] == "2024-01-01T08:00:00"

    def test_json_round_trip(self, baseline):
        text = json.dumps(baseline.to_dict())
        assert PatientState.from_dict(json.loads(text)) == baseline

    def test_intervention_round_trip(self):
        entry = Intervention(
            id="fluid-1", type=InterventionType.FLUID, description="500 mL Crystalloid bolus",
            timestamp=datetime(2024, 1, 1, 9, 30), parameters={"volume": 500, "type": "Crystalloid"},
        )
        data = entry.to_dict()
        assert data["type"] == "Fluid"
        assert data["timestamp"] == "2024-01-01T09:30:00"
        assert Intervention.from_dict(data) == entry

    def test_missing_field_rejected(self, baseline):
        data = baseline.vitals.to_dict()
        del data["heartRate"]
        with pytest.raises(ValueError):
            Vitals.from_dict(data)

    def test_bad_enum_rejected(self, baseline):
        data = baseline.ventilator.to_dict()
        data["mode"] = "Oscillator"
        with pytest.raises(ValueError):
            VentilatorSettings.from_dict(data)

    def test_optional_pressures(self, baseline):
        data = baseline.ventilator.to_dict()
        del data["plateauPressure"]
        data["peakPressure"] = None
        vent = VentilatorSettings.from_dict(data)
        assert vent.plateau_pressure is None
        assert vent.peak_pressure is None


class TestEnums:

    def test_fluid_type_parse(self):
        assert FluidType.parse("colloid") == FluidType.COLLOID
        assert FluidType.parse(FluidType.BLOOD_PRODUCT) == FluidType.BLOOD_PRODUCT
        with pytest.raises(ValueError):
            FluidType.parse("plasma")

    def test_vasopressor_parse(self):
        assert Vasopressor.parse("NORADRENALINE") == Vasopressor.NOREPINEPHRINE
        assert Vasopressor.parse(" norepinephrine ") is None
        assert Vasopressor.parse("Dobutamine") == Vasopressor.DOBUTAMINE
        assert Vasopressor.parse("dopamine") is None


class TestConfig:

    def test_defaults(self):
        cfg = SimulationConfig()
        assert cfg.history_limit == 50
        assert cfg.couple_renal is False

    def test_from_dict(self):
        cfg = SimulationConfig.from_dict({
            "couple_renal": True, "default_fluid_type": "Colloid",
            "history_limit": "10", "interventions": [],
        })
        assert cfg.couple_renal is True
        assert cfg.default_fluid_type == FluidType.COLLOID
        assert cfg.history_limit == 10

    def test_negative_history_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"history_limit": -1})

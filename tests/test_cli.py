import json
import pytest

from icusim.cli import main


def run_cli(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code, capsys.readouterr().out


def test_text_report(capsys):
    code, out = run_cli(["--fluid", "500"], capsys)
    assert code == 0
    assert "Interventions: 1" in out
    assert "MAP 94" in out
    assert "Shock: None / Mild" in out


def test_json_report(capsys):
    code, out = run_cli(["--pressor", "norepinephrine", "0.2", "--peep", "10", "--json"], capsys)
    assert code == 0
    report = json.loads(out)
    assert report["interventions"] == 2
    assert report["vitals"]["meanArterialPressure"] == pytest.approx(84.0)


def test_config_script(tmp_path, capsys):
    config = {
        "couple_renal": True,
        "log_level": "ERROR",
        "interventions": [
            {"kind": "ventilator", "peep": 20},
            {"kind": "wait", "seconds": 300},
            {"kind": "fluid", "volume": 1000, "type": "Colloid"},
        ],
    }
    path = tmp_path / "case.json"
    path.write_text(json.dumps(config))

    code, out = run_cli(["--config", str(path), "--json", "--snapshot"], capsys)
    assert code == 0
    snapshot = json.loads(out)
    assert snapshot["timeElapsed"] == 300
    assert [i["type"] for i in snapshot["interventions"]] == ["Ventilator", "Fluid"]
    assert snapshot["patientState"]["renal"]["gfr"] < 90


def test_fluid_flag_uses_config_default_type(tmp_path, capsys):
    path = tmp_path / "colloid.json"
    path.write_text(json.dumps({"default_fluid_type": "Colloid"}))
    code, out = run_cli(["--config", str(path), "--fluid", "500", "--json", "--snapshot"], capsys)
    assert code == 0
    snapshot = json.loads(out)
    assert snapshot["patientState"]["fluids"][0]["type"] == "Colloid"


def test_fluid_type_flag_overrides_config(tmp_path, capsys):
    path = tmp_path / "colloid.json"
    path.write_text(json.dumps({"default_fluid_type": "Colloid"}))
    code, out = run_cli(["--config", str(path), "--fluid", "500", "--fluid-type", "Blood Product",
                         "--json", "--snapshot"], capsys)
    assert code == 0
    assert json.loads(out)["patientState"]["fluids"][0]["type"] == "Blood Product"


def test_missing_config(tmp_path, capsys):
    code, out = run_cli(["--config", str(tmp_path / "nope.json")], capsys)
    assert code == 1
    assert "Error loading config" in out


def test_bad_intervention(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"interventions": [{"kind": "defibrillate"}]}))
    code, out = run_cli(["--config", str(path)], capsys)
    assert code == 1
    assert "Invalid intervention" in out

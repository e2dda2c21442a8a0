import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from icusim.core.engine import SimulationEngine
from icusim.core.state import SimulationConfig


def apply_step(engine: SimulationEngine, step: Dict[str, Any]):
    """Apply one scripted intervention from a config file."""
    step = dict(step)
    kind = step.pop("kind", None)
    if kind == "fluid":
        engine.give_fluid_bolus(step["volume"], step.get("type"), step.get("name"))
    elif kind == "vasopressor":
        engine.give_vasopressor(step["medication"], step["dose"])
    elif kind == "ventilator":
        engine.change_ventilator(**step)
    elif kind == "electrolytes":
        engine.change_electrolytes(**step)
    elif kind == "renal":
        engine.update_renal_perfusion()
    elif kind == "wait":
        engine.advance_time(step["seconds"])
    else:
        raise ValueError(f"Unknown intervention kind: {kind!r}")


def build_steps(args, config_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    steps = list(config_data.get("interventions", []))
    if args.fluid:
        steps.append({"kind": "fluid", "volume": args.fluid, "type": args.fluid_type})
    if args.pressor:
        name, dose = args.pressor
        steps.append({"kind": "vasopressor", "medication": name, "dose": float(dose)})
    vent = {}
    for key in ("peep", "fio2", "respiratory_rate", "tidal_volume"):
        value = getattr(args, key)
        if value is not None:
            vent[key] = value
    if vent:
        steps.append({"kind": "ventilator", **vent})
    return steps


def print_summary(report: Dict[str, Any]):
    v, abg, shock, ab = report["vitals"], report["abg"], report["shock"], report["acidBase"]
    print(f"Interventions: {report['interventions']} | Time: {report['timeElapsed']:.0f}s")
    print(f"HR: {v['heartRate']:.0f} | BP: {v['systolicBP']:.0f}/{v['diastolicBP']:.0f} "
          f"(MAP {v['meanArterialPressure']:.0f}) | CVP: {v['centralVenousPressure']:.1f} | "
          f"CO: {v['cardiacOutput']:.2f} | SVR: {v['systemicVascularResistance']:.0f}")
    print(f"pH: {abg['pH']:.2f} | PaCO2: {abg['paCO2']:.1f} | PaO2: {abg['paO2']:.0f} | "
          f"HCO3: {abg['hco3']:.1f} | SO2: {abg['sO2']:.1f} | P/F: {report['pfRatio']:.0f}")
    print(f"Acid-base: {ab['primary']} (compensation: {ab['compensation']}, "
          f"AG: {ab['anionGap']}, measured AG {report['anionGap']:.0f})")
    markers = ", ".join(shock["markers"]) or "none"
    print(f"Shock: {shock['type']} / {shock['severity']} | markers: {markers}")
    print(f"Renal: {report['gfrStage']} | AKI: {report['aki'] or 'none'} | "
          f"oliguric: {'yes' if report['oliguric'] else 'no'}")


def run(args) -> int:
    config_data: Dict[str, Any] = {}
    if args.config:
        try:
            with open(args.config, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error loading config: {e}")
            return 1

    try:
        config = SimulationConfig.from_dict(config_data)
    except (TypeError, ValueError) as e:
        print(f"Invalid config: {e}")
        return 1
    if args.couple_renal:
        config.couple_renal = True

    logging.basicConfig(level=getattr(logging, str(config.log_level).upper(), logging.WARNING),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    engine = SimulationEngine(config)
    try:
        for step in build_steps(args, config_data):
            apply_step(engine, step)
    except (KeyError, TypeError, ValueError) as e:
        print(f"Invalid intervention: {e}")
        return 1

    report = engine.summary()
    if args.json:
        print(json.dumps(engine.snapshot() if args.snapshot else report, indent=2))
    else:
        print_summary(report)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="ICUSim - ICU Physiology Simulator")
    parser.add_argument("--config", type=str, help="Path to JSON configuration / intervention script")
    parser.add_argument("--fluid", type=float, help="Fluid bolus volume (mL)")
    parser.add_argument("--fluid-type", type=str, default=None,
                        help="Crystalloid, Colloid or Blood Product (defaults to the config)")
    parser.add_argument("--pressor", nargs=2, metavar=("NAME", "DOSE"), help="Vasopressor and dose (mcg/kg/min)")
    parser.add_argument("--peep", type=float, help="New PEEP (cmH2O)")
    parser.add_argument("--fio2", type=float, help="New FiO2 (fraction)")
    parser.add_argument("--rr", dest="respiratory_rate", type=float, help="New ventilator rate (breaths/min)")
    parser.add_argument("--vt", dest="tidal_volume", type=float, help="New tidal volume (mL)")
    parser.add_argument("--couple-renal", action="store_true", help="Update renal perfusion after hemodynamic changes")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--snapshot", action="store_true", help="With --json, print the full session snapshot")

    args = parser.parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()

"""CLI for replaying dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from fleet import (
    BuildingConfig,
    DispatchCoordinator,
    Person,
    build_coordinator,
    event_to_dict,
)


def build_dispatch(config: Dict) -> DispatchCoordinator:
    building_config = BuildingConfig.from_dict(config)
    return build_coordinator(building_config)


def run_steps(coordinator: DispatchCoordinator, steps: Iterable[Dict]) -> List[Dict]:
    log: List[Dict] = []
    for step in steps:
        kind = step.get("type")
        if kind == "request":
            person = Person(str(step["person_id"]), step.get("name", str(step["person_id"])))
            assignment = coordinator.assign(person, step["origin"], step["destination"])
            entry = {"type": "request", "ok": assignment.ok, "message": assignment.message}
            if assignment.request is not None:
                entry["request"] = assignment.request.to_dict()
            if assignment.reason is not None:
                entry["reason"] = assignment.reason.value
            print(f"  [Floor {step['origin']} Panel] {person} -> {assignment.message}")
        elif kind == "dispatch":
            events = [event_to_dict(event) for event in coordinator.dispatch_all()]
            entry = {"type": "dispatch", "events": events}
            for event in events:
                print(f"    {_describe(event)}")
        elif kind == "maintenance":
            coordinator.set_maintenance(str(step["car_id"]), bool(step.get("enabled", True)))
            entry = {"type": "maintenance", "car_id": step["car_id"], "enabled": step.get("enabled", True)}
        else:
            raise ValueError(f"Unknown step type '{kind}'")
        log.append(entry)
    return log


def _describe(event: Dict) -> str:
    car = event["car_id"]
    if event["kind"] == "car_moved":
        return f"[{car}] Moving {event['direction']}: Floor {event['from_floor']} -> Floor {event['to_floor']}"
    person = event["person"]
    action = "Picked up" if event["kind"] == "passenger_picked_up" else "Dropped off"
    return f"[{car}] {action} {person['name']} [{person['person_id']}] at Floor {event['floor']}"


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the step log as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    coordinator = build_dispatch(config)
    print(coordinator.status_display())

    steps = run_steps(coordinator, config.get("steps", []))

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "steps": steps,
        "final_status": [status.to_dict() for status in coordinator.status()],
    }
    save_results(args.output, results)

    print()
    print(coordinator.status_display())
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()

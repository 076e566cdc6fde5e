from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from selection import get_policy

from .car import CarController
from .coordinator import DispatchCoordinator
from .errors import ConfigurationError


@dataclass
class CarConfig:
    """One car of the fleet."""

    car_id: str
    capacity: int = 8

    @classmethod
    def from_dict(cls, data: Dict) -> "CarConfig":
        return cls(car_id=str(data["car_id"]), capacity=int(data.get("capacity", 8)))


@dataclass
class BuildingConfig:
    """Setup-time description of a building and its fleet.

    Cars are added in the order listed, which is also the order used to break
    cost ties during selection.
    """

    name: str = "Building"
    total_floors: int = 10
    cars: List[CarConfig] = field(default_factory=list)
    policy_name: str = "cost"
    policy_options: Dict[str, object] = field(default_factory=dict)
    maintenance: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "BuildingConfig":
        building_cfg = data.get("building", {})
        policy_cfg = data.get("policy", {})
        return cls(
            name=building_cfg.get("name", "Building"),
            total_floors=building_cfg.get("total_floors", 10),
            cars=[CarConfig.from_dict(car) for car in data.get("cars", [])],
            policy_name=policy_cfg.get("name", "cost"),
            policy_options=policy_cfg.get("options", {}),
            maintenance=[str(car_id) for car_id in data.get("maintenance", [])],
        )

    def to_dict(self) -> Dict:
        return {
            "building": {"name": self.name, "total_floors": self.total_floors},
            "cars": [{"car_id": car.car_id, "capacity": car.capacity} for car in self.cars],
            "policy": {"name": self.policy_name, "options": dict(self.policy_options)},
            "maintenance": list(self.maintenance),
        }

    def validate(self) -> None:
        if self.total_floors < 0:
            raise ConfigurationError(f"total_floors must be >= 0, got {self.total_floors}")
        seen = set()
        for car in self.cars:
            if car.capacity < 1:
                raise ConfigurationError(f"Car {car.car_id} needs a capacity of at least 1")
            if car.car_id in seen:
                raise ConfigurationError(f"Duplicate car id '{car.car_id}'")
            seen.add(car.car_id)
        unknown = [car_id for car_id in self.maintenance if car_id not in seen]
        if unknown:
            raise ConfigurationError(f"Maintenance listed for unknown cars: {', '.join(unknown)}")


def load_building_config(file_path: Union[str, Path]) -> BuildingConfig:
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    config = BuildingConfig.from_dict(json.loads(file_path.read_text(encoding="utf-8")))
    config.validate()
    return config


def build_coordinator(config: BuildingConfig) -> DispatchCoordinator:
    config.validate()
    try:
        policy = get_policy(config.policy_name, **config.policy_options)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc

    coordinator = DispatchCoordinator(
        total_floors=config.total_floors,
        policy=policy,
        building_name=config.name,
    )
    for car in config.cars:
        coordinator.add_car(CarController(car.car_id, capacity=car.capacity))
    for car_id in config.maintenance:
        coordinator.set_maintenance(car_id, True)
    return coordinator

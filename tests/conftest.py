from __future__ import annotations

import pytest

from fleet import CarController, DispatchCoordinator, Person
from selection import CarMode, CarSnapshot, CostBasedPolicy, Direction


def make_fleet(*capacities: int, total_floors: int = 10, policy=None) -> DispatchCoordinator:
    coordinator = DispatchCoordinator(total_floors=total_floors, policy=policy or CostBasedPolicy())
    for index, capacity in enumerate(capacities):
        coordinator.add_car(CarController(chr(ord("A") + index), capacity=capacity))
    return coordinator


def snapshot(
    car_id: str = "A",
    floor: int = 0,
    mode: CarMode = CarMode.IDLE,
    direction: Direction = Direction.NONE,
    onboard: int = 0,
    capacity: int = 5,
    pending=(),
) -> CarSnapshot:
    return CarSnapshot(
        car_id=car_id,
        current_floor=floor,
        mode=mode,
        direction=direction,
        onboard=onboard,
        capacity=capacity,
        pending_origins=tuple(pending),
    )


@pytest.fixture
def alice() -> Person:
    return Person("P1", "Alice")


@pytest.fixture
def people():
    return [Person(f"P{i}", name) for i, name in enumerate(["Alice", "Bob", "Charlie", "Diana", "Eve"], start=1)]

"""Records emitted by cars during a batch and read by status displays."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import ClassVar, Union

from selection import CarMode, Direction

from .request import Person


@dataclass(frozen=True)
class CarMoved:
    kind: ClassVar[str] = "car_moved"

    car_id: str
    from_floor: int
    to_floor: int
    direction: Direction


@dataclass(frozen=True)
class PassengerPickedUp:
    kind: ClassVar[str] = "passenger_picked_up"

    car_id: str
    person: Person
    floor: int
    request_id: str


@dataclass(frozen=True)
class PassengerDroppedOff:
    kind: ClassVar[str] = "passenger_dropped_off"

    car_id: str
    person: Person
    floor: int
    request_id: str


CarEvent = Union[CarMoved, PassengerPickedUp, PassengerDroppedOff]


def event_to_dict(event: CarEvent) -> dict:
    payload = asdict(event)
    payload["kind"] = event.kind
    if isinstance(event, CarMoved):
        payload["direction"] = event.direction.value
    return payload


@dataclass(frozen=True)
class CarStatus:
    """Telemetry view of one car for displays."""

    car_id: str
    current_floor: int
    mode: CarMode
    direction: Direction
    onboard: int
    capacity: int
    pending: int

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["mode"] = self.mode.value
        payload["direction"] = self.direction.value
        return payload

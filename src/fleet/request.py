from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from selection import Direction

from .errors import DispatchError, InvalidRequestError


@dataclass(frozen=True)
class Person:
    """Opaque identity of a rider."""

    person_id: str
    name: str

    def __str__(self) -> str:
        return f"{self.name} [{self.person_id}]"


@dataclass(eq=False)
class Request:
    """A pickup from ``origin`` to ``destination`` for one rider.

    Everything but the assigned car is fixed at construction. The car is set
    once, when the coordinator accepts the request, and never changes.
    """

    request_id: str
    person: Person
    origin: int
    destination: int
    direction: Direction = field(init=False)
    _assigned_car: Optional[str] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.origin == self.destination:
            raise InvalidRequestError("Source and destination floors cannot be the same")
        self.direction = Direction.between(self.origin, self.destination)

    @property
    def assigned_car(self) -> Optional[str]:
        return self._assigned_car

    def assign_car(self, car_id: str) -> None:
        if self._assigned_car is not None:
            raise DispatchError(
                f"Request {self.request_id} is already assigned to {self._assigned_car}"
            )
        self._assigned_car = car_id

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "person_id": self.person.person_id,
            "name": self.person.name,
            "origin": self.origin,
            "destination": self.destination,
            "direction": self.direction.value,
            "assigned_car": self._assigned_car,
        }

    def __str__(self) -> str:
        text = (
            f"Request[{self.request_id}] {self.person}: "
            f"Floor {self.origin} -> Floor {self.destination} ({self.direction.value})"
        )
        if self._assigned_car is not None:
            text += f" via {self._assigned_car}"
        return text

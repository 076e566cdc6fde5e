from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    NONE = "NONE"

    @classmethod
    def between(cls, origin: int, destination: int) -> "Direction":
        return cls.UP if origin < destination else cls.DOWN


class CarMode(str, Enum):
    IDLE = "IDLE"
    MOVING = "MOVING"
    MAINTENANCE = "MAINTENANCE"


@dataclass(frozen=True)
class CarSnapshot:
    """Read-only view of one car at the moment of a selection decision."""

    car_id: str
    current_floor: int
    mode: CarMode
    direction: Direction
    onboard: int
    capacity: int
    pending_origins: Tuple[int, ...] = ()

    @property
    def pending_count(self) -> int:
        return len(self.pending_origins)

    @property
    def load(self) -> int:
        """Occupied plus reserved places."""
        return self.onboard + self.pending_count

    def is_available(self) -> bool:
        return self.mode != CarMode.MAINTENANCE and self.load < self.capacity

    def has_pending_pickup_at(self, floor: int) -> bool:
        return floor in self.pending_origins

    def distance_to(self, floor: int) -> int:
        return abs(self.current_floor - floor)

    def is_ahead(self, floor: int, direction: Direction) -> bool:
        """True when ``floor`` lies at or beyond the car in ``direction``."""
        if direction == Direction.UP:
            return self.current_floor <= floor
        if direction == Direction.DOWN:
            return self.current_floor >= floor
        return False

    def can_serve(self, floor: int, direction: Direction) -> bool:
        if not self.is_available():
            return False
        if self.mode == CarMode.IDLE:
            return True
        return self.direction == direction and self.is_ahead(floor, direction)


class SelectionPolicy(Protocol):
    """Strategy interface for choosing the car that serves a pickup."""

    def choose(
        self,
        fleet: Sequence[CarSnapshot],
        floor: int,
        direction: Direction,
    ) -> Optional[CarSnapshot]:
        """
        Return the car that should serve a pickup at ``floor`` heading
        ``direction``, or None when no car is eligible.

        Implementations must be pure: they only read the snapshots they are
        given and keep no state between calls.
        """
        ...

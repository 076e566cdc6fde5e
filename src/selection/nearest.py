from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .interface import CarSnapshot, Direction
from .utils import first_minimum


class NearestCarPolicy:
    """Picks the closest car already able to serve the call's direction.

    Falls back to the closest available car when no car is idle or heading
    toward the floor in the requested direction. No grouping is attempted.
    """

    def choose(
        self,
        fleet: Sequence[CarSnapshot],
        floor: int,
        direction: Direction,
    ) -> Optional[CarSnapshot]:
        cars = list(fleet)
        matching = [car for car in cars if car.can_serve(floor, direction)]
        nearest = self._closest(matching, floor)
        if nearest is not None:
            return nearest
        return self._closest((car for car in cars if car.is_available()), floor)

    def _closest(self, cars: Iterable[CarSnapshot], floor: int) -> Optional[CarSnapshot]:
        return first_minimum(cars, key=lambda car: car.distance_to(floor))

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .interface import CarMode, CarSnapshot, Direction
from .utils import first_minimum

logger = logging.getLogger(__name__)


class CostBasedPolicy:
    """Chooses the car with the lowest estimated cost to take a pickup.

    Cost per car (lower is better):

    * a pending pickup already queued at the floor costs 0, so grouping riders
      that board together always wins
    * an idle car costs ``distance + 1``
    * a moving car heading the same way with the floor ahead costs
      ``distance + 1``
    * a moving car heading the same way with the floor behind costs
      ``3 * distance + 1``
    * a moving car heading the opposite way costs ``2 * distance + 1``

    Cars in maintenance or without a free place are excluded. Equal costs go
    to the car listed first in the fleet.
    """

    def __init__(self, behind_penalty: int = 3, opposite_penalty: int = 2) -> None:
        self.behind_penalty = behind_penalty
        self.opposite_penalty = opposite_penalty

    def choose(
        self,
        fleet: Sequence[CarSnapshot],
        floor: int,
        direction: Direction,
    ) -> Optional[CarSnapshot]:
        return first_minimum(fleet, key=lambda car: self.cost(car, floor, direction))

    def cost(self, car: CarSnapshot, floor: int, direction: Direction) -> float:
        if car.mode == CarMode.MAINTENANCE or not car.is_available():
            return math.inf

        if car.has_pending_pickup_at(floor):
            cost = 0
        else:
            distance = car.distance_to(floor)
            if car.mode == CarMode.IDLE:
                cost = distance + 1
            elif car.direction == direction:
                if car.is_ahead(floor, direction):
                    cost = distance + 1
                else:
                    cost = self.behind_penalty * distance + 1
            else:
                cost = self.opposite_penalty * distance + 1

        logger.debug("cost car=%s floor=%d direction=%s -> %s", car.car_id, floor, direction.value, cost)
        return cost

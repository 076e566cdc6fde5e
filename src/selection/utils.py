from __future__ import annotations

import math
from typing import Callable, Iterable, Optional

from .interface import CarSnapshot


def first_minimum(
    cars: Iterable[CarSnapshot], key: Callable[[CarSnapshot], float]
) -> Optional[CarSnapshot]:
    """Return the car with the lowest finite key.

    Ties go to the car seen first, so fleet order is the tie-break. Cars
    whose key is infinite are never returned.
    """

    best: Optional[CarSnapshot] = None
    best_key = math.inf
    for car in cars:
        value = key(car)
        if value < best_key:
            best_key = value
            best = car
    return best

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List

from selection import CarMode, CarSnapshot, Direction

from .errors import CapacityExceededError, ConfigurationError
from .events import CarEvent, CarMoved, CarStatus, PassengerDroppedOff, PassengerPickedUp
from .request import Request

logger = logging.getLogger(__name__)


@dataclass
class CarState:
    """Mutable record of one car. Only its CarController writes to it."""

    car_id: str
    capacity: int
    current_floor: int = 0
    mode: CarMode = CarMode.IDLE
    direction: Direction = Direction.NONE
    onboard: int = 0
    pending: List[Request] = field(default_factory=list)

    @property
    def load(self) -> int:
        return self.onboard + len(self.pending)


class CarController:
    """Owns one car's state and serializes every change to it.

    Requests are queued by ``enqueue`` without moving the car; ``execute_batch``
    later serves everything queued so far in a single pass.

    The single-value properties are point reads; use ``status()`` or
    ``snapshot()`` when several values must come from the same moment.
    """

    def __init__(self, car_id: str, capacity: int = 8, ground_floor: int = 0) -> None:
        if capacity < 1:
            raise ConfigurationError(f"Car {car_id} needs a capacity of at least 1, got {capacity}")
        self._state = CarState(car_id=car_id, capacity=capacity, current_floor=ground_floor)
        self._lock = threading.Lock()

    @property
    def car_id(self) -> str:
        return self._state.car_id

    @property
    def capacity(self) -> int:
        return self._state.capacity

    @property
    def current_floor(self) -> int:
        return self._state.current_floor

    @property
    def mode(self) -> CarMode:
        return self._state.mode

    @property
    def direction(self) -> Direction:
        return self._state.direction

    @property
    def onboard(self) -> int:
        return self._state.onboard

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._state.pending)

    def pending_requests(self) -> List[Request]:
        with self._lock:
            return list(self._state.pending)

    def is_available(self) -> bool:
        with self._lock:
            return self._is_available()

    def has_pending_pickup_at(self, floor: int) -> bool:
        with self._lock:
            return any(request.origin == floor for request in self._state.pending)

    def distance_to(self, floor: int) -> int:
        return abs(self._state.current_floor - floor)

    def can_serve(self, floor: int, direction: Direction) -> bool:
        return self.snapshot().can_serve(floor, direction)

    def snapshot(self) -> CarSnapshot:
        with self._lock:
            state = self._state
            return CarSnapshot(
                car_id=state.car_id,
                current_floor=state.current_floor,
                mode=state.mode,
                direction=state.direction,
                onboard=state.onboard,
                capacity=state.capacity,
                pending_origins=tuple(request.origin for request in state.pending),
            )

    def status(self) -> CarStatus:
        with self._lock:
            state = self._state
            return CarStatus(
                car_id=state.car_id,
                current_floor=state.current_floor,
                mode=state.mode,
                direction=state.direction,
                onboard=state.onboard,
                capacity=state.capacity,
                pending=len(state.pending),
            )

    def status_display(self) -> str:
        status = self.status()
        return (
            f"Elevator {status.car_id}: Floor {status.current_floor}, {status.mode.value}, "
            f"Passengers: {status.onboard}/{status.capacity}"
        )

    def enqueue(self, request: Request) -> None:
        """Reserve a place for ``request`` without moving the car."""
        with self._lock:
            if self._state.mode == CarMode.MAINTENANCE:
                raise CapacityExceededError(f"Elevator {self.car_id} is under maintenance")
            if self._state.load + 1 > self._state.capacity:
                raise CapacityExceededError(f"Elevator {self.car_id} is at full capacity")
            self._state.pending.append(request)

    def set_maintenance(self, enabled: bool) -> None:
        """Take the car out of service, or return it to idle.

        Queued requests stay queued and are served by the first batch after the
        car is back in service.
        """
        with self._lock:
            self._state.mode = CarMode.MAINTENANCE if enabled else CarMode.IDLE
            self._state.direction = Direction.NONE
            pending = len(self._state.pending)
        logger.info("car %s maintenance=%s (pending=%d)", self.car_id, enabled, pending)

    def execute_batch(self) -> List[CarEvent]:
        """Serve every request queued before this call and return the events.

        Origins are visited in ascending floor order. At each origin every
        waiting rider boards, then the car visits those riders' destinations in
        ascending floor order before moving on to the next origin. Ascending
        order stands in for a full SCAN sweep; it ignores the direction the car
        was travelling in.

        Requests queued while a batch runs wait for the next batch.
        """
        events: List[CarEvent] = []
        with self._lock:
            if self._state.mode == CarMode.MAINTENANCE:
                logger.debug("car %s in maintenance, holding %d requests", self.car_id, len(self._state.pending))
                return events
            batch = list(self._state.pending)
            self._state.pending.clear()
            if not batch:
                return events

            for origin, boarding in self._group_by(batch, lambda request: request.origin):
                self._move_to(origin, events)
                for request in boarding:
                    self._state.onboard += 1
                    events.append(PassengerPickedUp(self.car_id, request.person, origin, request.request_id))

                for destination, alighting in self._group_by(boarding, lambda request: request.destination):
                    self._move_to(destination, events)
                    for request in alighting:
                        self._state.onboard -= 1
                        events.append(
                            PassengerDroppedOff(self.car_id, request.person, destination, request.request_id)
                        )

            if self._state.onboard == 0:
                self._state.mode = CarMode.IDLE
                self._state.direction = Direction.NONE

        logger.info("car %s served %d requests, now at floor %d", self.car_id, len(batch), self.current_floor)
        return events

    def _is_available(self) -> bool:
        return self._state.mode != CarMode.MAINTENANCE and self._state.load < self._state.capacity

    def _move_to(self, floor: int, events: List[CarEvent]) -> None:
        state = self._state
        if floor == state.current_floor:
            return
        direction = Direction.UP if floor > state.current_floor else Direction.DOWN
        event = CarMoved(self.car_id, state.current_floor, floor, direction)
        state.direction = direction
        state.mode = CarMode.MOVING
        state.current_floor = floor
        logger.debug("car %s moving %s: floor %d -> floor %d", self.car_id, direction.value, event.from_floor, floor)
        events.append(event)

    @staticmethod
    def _group_by(requests, key) -> List[tuple]:
        groups: Dict[int, List[Request]] = {}
        for request in requests:
            groups.setdefault(key(request), []).append(request)
        return sorted(groups.items())

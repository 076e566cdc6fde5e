from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from selection import SelectionPolicy, policy_name

from .car import CarController
from .errors import ConfigurationError, InvalidRequestError, UnknownCarError
from .events import CarEvent, CarStatus
from .request import Person, Request

logger = logging.getLogger(__name__)


class AssignmentFailure(str, Enum):
    INVALID_REQUEST = "invalid_request"
    NO_CAR_AVAILABLE = "no_car_available"


@dataclass(frozen=True)
class Assignment:
    """Outcome of a pickup call: the queued request, or why there is none."""

    request: Optional[Request] = None
    reason: Optional[AssignmentFailure] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def car_id(self) -> Optional[str]:
        return self.request.assigned_car if self.request is not None else None

    def __bool__(self) -> bool:
        return self.ok


class DispatchCoordinator:
    """Fleet-wide entry point for pickup calls.

    ``assign`` only books a car and returns straight away; cars move when
    ``dispatch_all`` runs their queued batches.
    """

    def __init__(
        self,
        total_floors: int,
        policy: Optional[SelectionPolicy] = None,
        building_name: str = "Building",
    ) -> None:
        if total_floors < 0:
            raise ConfigurationError(f"total_floors must be >= 0, got {total_floors}")
        self.building_name = building_name
        self.total_floors = total_floors
        self.policy = policy
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._cars: Dict[str, CarController] = {}
        self._lock = threading.Lock()
        self._request_ids = itertools.count(1)

    @property
    def cars(self) -> List[CarController]:
        return list(self._cars.values())

    def get_car(self, car_id: str) -> CarController:
        car = self._cars.get(car_id)
        if car is None:
            raise UnknownCarError(car_id)
        return car

    def add_car(self, car: CarController) -> None:
        with self._lock:
            if car.car_id in self._cars:
                raise ConfigurationError(f"Car '{car.car_id}' is already part of this fleet")
            self._cars[car.car_id] = car
        logger.info("added car %s (capacity %d) to %s", car.car_id, car.capacity, self.building_name)

    def set_policy(self, policy: SelectionPolicy) -> None:
        with self._lock:
            self.policy = policy
        logger.info("selection policy for %s set to %s", self.building_name, policy_name(policy))

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def assign(self, person: Person, origin: int, destination: int) -> Assignment:
        """Book a car for ``person`` and queue the request on it.

        Invalid floors and a fleet with no free car are reported through the
        returned Assignment; no car is touched in either case.
        """
        with self._lock:
            if self.policy is None:
                raise ConfigurationError("Elevator selection policy not set")
            try:
                self._validate_floor(origin)
                self._validate_floor(destination)
                if origin == destination:
                    raise InvalidRequestError("Source and destination floors cannot be the same")
                request = Request(self._next_request_id(), person, origin, destination)
            except InvalidRequestError as exc:
                logger.info("rejected pickup for %s: %s", person, exc)
                return Assignment(reason=AssignmentFailure.INVALID_REQUEST, message=str(exc))

            fleet = [car.snapshot() for car in self._cars.values()]
            chosen = self.policy.choose(fleet, origin, request.direction)
            if chosen is None:
                message = f"No available elevator for {request}"
                logger.warning(message)
                assignment = Assignment(
                    request=request, reason=AssignmentFailure.NO_CAR_AVAILABLE, message=message
                )
            else:
                request.assign_car(chosen.car_id)
                self._cars[chosen.car_id].enqueue(request)
                logger.info("assigned %s", request)
                assignment = Assignment(request=request, message=f"Go to {chosen.car_id}")

        self._emit("assigned" if assignment.ok else "unassigned", assignment)
        return assignment

    def dispatch_all(self) -> List[CarEvent]:
        """Run one batch on every car and return the events in order."""
        events: List[CarEvent] = []
        for car in self.cars:
            events.extend(self._run_batch(car))
        return events

    def dispatch_car(self, car_id: str) -> List[CarEvent]:
        return self._run_batch(self.get_car(car_id))

    def set_maintenance(self, car_id: str, enabled: bool) -> None:
        with self._lock:
            car = self.get_car(car_id)
            car.set_maintenance(enabled)
        self._emit("maintenance", {"car_id": car_id, "enabled": enabled})

    def status(self) -> List[CarStatus]:
        return [car.status() for car in self.cars]

    def status_display(self) -> str:
        lines = [f"=== {self.building_name} Elevator System ==="]
        lines.extend(f"  {car.status_display()}" for car in self.cars)
        return "\n".join(lines) + "\n"

    def _run_batch(self, car: CarController) -> List[CarEvent]:
        events = car.execute_batch()
        for event in events:
            self._emit(event.kind, event)
        return events

    def _validate_floor(self, floor: int) -> None:
        if floor < 0 or floor > self.total_floors:
            raise InvalidRequestError(
                f"Invalid floor {floor}. Building has floors 0 to {self.total_floors}"
            )

    def _next_request_id(self) -> str:
        return f"REQ-{next(self._request_ids)}"

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)

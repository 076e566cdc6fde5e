"""Elevator cars, pickup requests and the dispatch coordinator."""

from selection import CarMode, Direction

from .car import CarController, CarState
from .config import BuildingConfig, CarConfig, build_coordinator, load_building_config
from .coordinator import Assignment, AssignmentFailure, DispatchCoordinator
from .errors import (
    CapacityExceededError,
    ConfigurationError,
    DispatchError,
    InvalidRequestError,
    UnknownCarError,
)
from .events import CarEvent, CarMoved, CarStatus, PassengerDroppedOff, PassengerPickedUp, event_to_dict
from .request import Person, Request

__all__ = [
    "Assignment",
    "AssignmentFailure",
    "BuildingConfig",
    "CapacityExceededError",
    "CarConfig",
    "CarController",
    "CarEvent",
    "CarMode",
    "CarMoved",
    "CarState",
    "CarStatus",
    "ConfigurationError",
    "Direction",
    "DispatchCoordinator",
    "DispatchError",
    "InvalidRequestError",
    "PassengerDroppedOff",
    "PassengerPickedUp",
    "Person",
    "Request",
    "UnknownCarError",
    "build_coordinator",
    "event_to_dict",
    "load_building_config",
]

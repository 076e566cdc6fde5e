from __future__ import annotations


class DispatchError(Exception):
    """Base class for dispatch failures."""


class InvalidRequestError(DispatchError, ValueError):
    """A pickup request that can never be served as asked."""


class CapacityExceededError(DispatchError):
    """A car was asked to reserve a place it does not have."""


class ConfigurationError(DispatchError):
    """The fleet was set up wrongly; raised at setup or first use."""


class UnknownCarError(ConfigurationError, KeyError):
    def __init__(self, car_id: str) -> None:
        super().__init__(car_id)
        self.car_id = car_id

    def __str__(self) -> str:
        return f"Car '{self.car_id}' is not part of this fleet"

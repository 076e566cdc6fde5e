from __future__ import annotations

from typing import Dict, Type

from .cost_based import CostBasedPolicy
from .interface import CarMode, CarSnapshot, Direction, SelectionPolicy
from .nearest import NearestCarPolicy

__all__ = [
    "CarMode",
    "CarSnapshot",
    "CostBasedPolicy",
    "Direction",
    "NearestCarPolicy",
    "SelectionPolicy",
    "get_policy",
    "policy_name",
]


POLICY_REGISTRY: Dict[str, Type[SelectionPolicy]] = {
    "nearest": NearestCarPolicy,
    "cost": CostBasedPolicy,
    "smart": CostBasedPolicy,
}


def get_policy(name: str, **kwargs) -> SelectionPolicy:
    cls = POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown selection policy '{name}'. Available: {', '.join(POLICY_REGISTRY)}")
    return cls(**kwargs)


def policy_name(policy: SelectionPolicy) -> str:
    for name, cls in POLICY_REGISTRY.items():
        if type(policy) is cls:
            return name
    return type(policy).__name__

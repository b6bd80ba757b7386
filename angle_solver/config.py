"""Configuration helpers for the angle solver."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Tunables shared by the solver loop, the guard and the rules."""

    tolerance: float = 0.5
    max_iterations: int = 100
    value_decimals: int = 1
    reason_max_length: int = 35
    lock_supplied_values: bool = False


_SOLVER_CONFIG = SolverConfig()


def get_solver_config() -> SolverConfig:
    return copy.deepcopy(_SOLVER_CONFIG)


def set_solver_config(config: SolverConfig) -> None:
    global _SOLVER_CONFIG
    _SOLVER_CONFIG = copy.deepcopy(config)


def resolve_config(config: SolverConfig | None) -> SolverConfig:
    if config is None:
        return get_solver_config()
    return config

"""Convergence rules and outcome of the confinement fixed-point iteration."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ConfinementConvergence:
    tolerance: float = 0.01  # MPa
    max_iterations: int = 20

    def __post_init__(self):
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")

    def converged(self, delta_1: float, delta_2: float) -> bool:
        return abs(float(delta_1)) <= self.tolerance and abs(float(delta_2)) <= self.tolerance


@dataclass(frozen=True)
class ConfinementResult:
    """Outcome of one confinement solve."""

    iterations: int
    converged: bool
    residual: float

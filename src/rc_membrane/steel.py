"""Uniaxial steel law for smeared web reinforcement.

Elastic-perfectly plastic in compression, elastic-plastic with an optional
linear hardening branch in tension. Bars are considered fractured (zero
stress) once ``|eps| >= eps_u``. Units: MPa.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


def steel_stress_1d(
    eps: float,
    f_y: float,
    E: float,
    eps_u: float,
    E_h: Optional[float] = None,
    eps_h: Optional[float] = None,
) -> float:
    """Stress of the steel law at total strain ``eps``.

    Parameters
    ----------
    eps : float
        Axial strain (non-finite values are taken as zero)
    f_y : float
        Yield stress [MPa]
    E : float
        Young's modulus [MPa]
    eps_u : float
        Ultimate (fracture) strain
    E_h, eps_h : float, optional
        Hardening modulus [MPa] and strain at the onset of hardening.
        Hardening is active only when both are given.

    Returns
    -------
    sigma : float
        Stress [MPa]
    """
    if not math.isfinite(eps):
        eps = 0.0
    eps_y = f_y / E

    if abs(eps) >= eps_u:
        return 0.0
    if -eps_y <= eps <= eps_y:
        return E * eps
    if eps < 0.0:
        return -f_y
    if E_h is None or eps_h is None or eps < eps_h:
        return f_y
    return f_y + E_h * (eps - eps_h)


@dataclass
class Steel:
    """Steel law plus the last evaluated strain/stress.

    Attributes
    ----------
    f_y : float
        Yield stress [MPa]
    E : float
        Young's modulus [MPa]
    eps_u : float
        Ultimate strain
    E_h : float, optional
        Hardening modulus [MPa]
    eps_h : float, optional
        Strain at the onset of hardening
    """

    f_y: float
    E: float = 210000.0
    eps_u: float = 0.01
    E_h: Optional[float] = None
    eps_h: Optional[float] = None
    strain: float = 0.0
    stress: float = 0.0

    def __post_init__(self):
        if not self.f_y > 0:
            raise ValueError(f"Steel yield stress must be positive, got f_y={self.f_y}")
        if not self.E > 0:
            raise ValueError(f"Steel modulus must be positive, got E={self.E}")
        if not self.eps_u > 0:
            raise ValueError(f"Ultimate strain must be positive, got eps_u={self.eps_u}")
        if (self.E_h is None) != (self.eps_h is None):
            raise ValueError("Hardening needs both E_h and eps_h")
        if self.eps_h is not None and self.eps_h < self.yield_strain:
            raise ValueError(
                f"Hardening strain eps_h={self.eps_h} is below the yield strain {self.yield_strain}"
            )

    @property
    def consider_hardening(self) -> bool:
        return self.E_h is not None

    @property
    def yield_strain(self) -> float:
        return self.f_y / self.E

    @property
    def yielded(self) -> bool:
        return abs(self.strain) >= self.yield_strain

    @property
    def secant_modulus(self) -> float:
        if abs(self.strain) <= 1e-12:
            return self.E
        return self.stress / self.strain

    def calculate_stress(self, eps: float) -> float:
        return steel_stress_1d(eps, self.f_y, self.E, self.eps_u, self.E_h, self.eps_h)

    def set_strain_and_stress(self, eps: float) -> None:
        eps = float(eps) if math.isfinite(eps) else 0.0
        self.strain = eps
        self.stress = self.calculate_stress(eps)

    def approaches(self, other: "Steel", tolerance: float = 1e-3) -> bool:
        if not isinstance(other, Steel):
            return False
        basic = (
            abs(self.f_y - other.f_y) <= tolerance
            and abs(self.E - other.E) <= tolerance
            and math.isclose(self.eps_u, other.eps_u)
        )
        if not other.consider_hardening:
            return basic
        return (
            basic
            and self.consider_hardening
            and abs(self.E_h - other.E_h) <= tolerance
            and math.isclose(self.eps_h, other.eps_h)
        )

    def copy(self) -> "Steel":
        """Fresh law with the same parameters (state reset)."""
        return Steel(f_y=self.f_y, E=self.E, eps_u=self.eps_u, E_h=self.E_h, eps_h=self.eps_h)

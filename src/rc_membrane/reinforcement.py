"""Smeared web reinforcement for membrane elements.

A :class:`WebReinforcement` holds up to two :class:`ReinforcementDirection`
objects. Either direction may be ``None``; every aggregate quantity treats a
missing direction as a zero contribution, so a reinforcement with no
direction (or no reinforcement at all, ``None``) yields exact zeros.

Units: mm and MPa. Angles in radians from the horizontal axis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from rc_membrane.states import StrainState, StressState, rotate_stiffness
from rc_membrane.steel import Steel


# geometric tolerance [mm]
LENGTH_TOLERANCE = 1e-6
# angle tolerance for horizontal/vertical checks [rad]
ANGLE_TOLERANCE = 1e-3


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class ReinforcementDirection:
    """Bars of one direction, smeared over the element.

    Attributes
    ----------
    bar_diameter : float
        Bar diameter [mm]
    bar_spacing : float
        Bar spacing [mm]
    steel : Steel
        Steel law (owned by this direction)
    width : float
        Element width / thickness [mm]
    angle : float
        Bar direction from the horizontal axis [rad]
    legs : int
        Number of bar legs per spacing (stirrups have 2)
    """

    bar_diameter: float
    bar_spacing: float
    steel: Steel
    width: float
    angle: float = 0.0
    legs: int = 2

    def __post_init__(self):
        if self.bar_diameter < 0:
            raise ValueError(f"bar_diameter must be non-negative, got {self.bar_diameter}")
        if self.bar_spacing < 0:
            raise ValueError(f"bar_spacing must be non-negative, got {self.bar_spacing}")
        if self.width < 0:
            raise ValueError(f"width must be non-negative, got {self.width}")
        if self.legs < 1:
            raise ValueError(f"legs must be at least 1, got {self.legs}")

    @classmethod
    def create(
        cls,
        bar_diameter: float,
        bar_spacing: float,
        steel: Steel,
        width: float,
        angle: float = 0.0,
        legs: int = 2,
    ) -> Optional["ReinforcementDirection"]:
        """Direction, or ``None`` when the diameter or the spacing is zero."""
        if abs(bar_diameter) <= LENGTH_TOLERANCE or abs(bar_spacing) <= LENGTH_TOLERANCE:
            return None
        return cls(float(bar_diameter), float(bar_spacing), steel, float(width), float(angle), int(legs))

    @property
    def area(self) -> float:
        return 0.25 * self.legs * math.pi * self.bar_diameter ** 2

    @property
    def ratio(self) -> float:
        if abs(self.bar_spacing) <= LENGTH_TOLERANCE or abs(self.width) <= LENGTH_TOLERANCE:
            return 0.0
        return self.area / (self.bar_spacing * self.width)

    @property
    def stress(self) -> float:
        return self.ratio * self.steel.stress

    @property
    def stiffness(self) -> float:
        return self.ratio * self.steel.secant_modulus

    @property
    def initial_stiffness(self) -> float:
        return self.ratio * self.steel.E

    @property
    def yield_stress(self) -> float:
        return self.ratio * self.steel.f_y

    @property
    def capacity_reserve(self) -> float:
        return self.yield_stress - abs(self.stress)

    @property
    def yielded(self) -> bool:
        return self.steel.yielded

    @property
    def is_horizontal(self) -> bool:
        return abs(self.angle) <= ANGLE_TOLERANCE

    @property
    def is_vertical(self) -> bool:
        return abs(self.angle - 0.5 * math.pi) <= ANGLE_TOLERANCE

    def calculate(self, strain: float) -> None:
        self.steel.set_strain_and_stress(strain)

    def crack_spacing(self) -> float:
        """Average crack spacing [mm] (Kaklauskas et al., 2019)."""
        rho = self.ratio
        if self.bar_diameter <= LENGTH_TOLERANCE or rho <= 0.0:
            return 21.0
        return 21.0 + 0.155 * self.bar_diameter / rho

    def approaches(self, other: Optional["ReinforcementDirection"], tolerance: float = LENGTH_TOLERANCE) -> bool:
        return (
            other is not None
            and self.legs == other.legs
            and abs(self.bar_diameter - other.bar_diameter) <= tolerance
            and abs(self.bar_spacing - other.bar_spacing) <= tolerance
        )

    def copy(self) -> "ReinforcementDirection":
        return ReinforcementDirection(
            self.bar_diameter, self.bar_spacing, self.steel.copy(), self.width, self.angle, self.legs
        )


@dataclass
class WebReinforcement:
    """Orthogonal (or single-direction) web reinforcement.

    ``direction_x`` is the first direction and ``direction_y`` the second one.
    When only ``direction_y`` exists, its angle is the reference (minus
    pi/2) for transformations.
    """

    direction_x: Optional[ReinforcementDirection] = None
    direction_y: Optional[ReinforcementDirection] = None
    strains: StrainState = field(default_factory=StrainState.zero)

    @classmethod
    def both(
        cls,
        bar_diameter: float,
        bar_spacing: float,
        steel: Steel,
        width: float,
        angle_x: float = 0.0,
        legs: int = 2,
    ) -> "WebReinforcement":
        """Same bars in both directions (the second at ``angle_x + pi/2``)."""
        return cls(
            ReinforcementDirection.create(bar_diameter, bar_spacing, steel, width, angle_x, legs),
            ReinforcementDirection.create(bar_diameter, bar_spacing, steel.copy(), width, angle_x + 0.5 * math.pi, legs),
        )

    @classmethod
    def x_only(cls, bar_diameter: float, bar_spacing: float, steel: Steel, width: float,
               angle: float = 0.0) -> "WebReinforcement":
        return cls(ReinforcementDirection.create(bar_diameter, bar_spacing, steel, width, angle), None)

    @classmethod
    def y_only(cls, bar_diameter: float, bar_spacing: float, steel: Steel, width: float,
               angle: float = 0.5 * math.pi) -> "WebReinforcement":
        return cls(None, ReinforcementDirection.create(bar_diameter, bar_spacing, steel, width, angle))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def directions(self) -> Tuple[ReinforcementDirection, ...]:
        return tuple(d for d in (self.direction_x, self.direction_y) if d is not None)

    @property
    def x_reinforced(self) -> bool:
        return self.direction_x is not None and self.direction_x.ratio > 0.0

    @property
    def y_reinforced(self) -> bool:
        return self.direction_y is not None and self.direction_y.ratio > 0.0

    @property
    def reference_angle(self) -> float:
        """Angle of the reinforcement frame (x direction) from the horizontal axis."""
        if self.direction_x is not None:
            return self.direction_x.angle
        if self.direction_y is not None:
            return self.direction_y.angle - 0.5 * math.pi
        return 0.0

    @property
    def _aligned(self) -> bool:
        return (self.direction_x is None or self.direction_x.is_horizontal) and (
            self.direction_y is None or self.direction_y.is_vertical
        )

    def angles(self, theta1: float) -> Tuple[float, float]:
        """Angles between the principal tensile direction and each bar direction."""
        angle_x = self.direction_x.angle if self.direction_x is not None else 0.0
        angle_y = self.direction_y.angle if self.direction_y is not None else 0.5 * math.pi
        return theta1 - angle_x, theta1 - angle_y

    # ------------------------------------------------------------------
    # Response
    # ------------------------------------------------------------------

    def calculate_stresses(self, strains: StrainState) -> None:
        """Set the steel strains/stresses from membrane strains (any frame)."""
        self.strains = strains.to_horizontal()
        local = self.strains.transform(self.reference_angle)
        if self.direction_x is not None:
            self.direction_x.calculate(local.epsilon_x)
        if self.direction_y is not None:
            self.direction_y.calculate(local.epsilon_y)

    @property
    def stresses(self) -> StressState:
        """Smeared reinforcement stresses in the horizontal frame."""
        fsx = self.direction_x.stress if self.direction_x is not None else 0.0
        fsy = self.direction_y.stress if self.direction_y is not None else 0.0
        if self._aligned:
            return StressState(fsx, fsy, 0.0)
        return StressState(fsx, fsy, 0.0, self.reference_angle).to_horizontal()

    def _stiffness(self, dx: float, dy: float) -> np.ndarray:
        Ds = np.zeros((3, 3), dtype=float)
        Ds[0, 0] = dx
        Ds[1, 1] = dy
        if self._aligned:
            return Ds
        return rotate_stiffness(Ds, self.reference_angle)

    @property
    def stiffness(self) -> np.ndarray:
        return self._stiffness(
            self.direction_x.stiffness if self.direction_x is not None else 0.0,
            self.direction_y.stiffness if self.direction_y is not None else 0.0,
        )

    @property
    def initial_stiffness(self) -> np.ndarray:
        return self._stiffness(
            self.direction_x.initial_stiffness if self.direction_x is not None else 0.0,
            self.direction_y.initial_stiffness if self.direction_y is not None else 0.0,
        )

    def maximum_principal_tensile_stress(self, theta1: float) -> float:
        """Largest principal tensile stress the bars can transmit across a crack."""
        if not self.directions:
            return 0.0
        theta_nx, theta_ny = self.angles(theta1)
        fcx = self.direction_x.capacity_reserve if self.direction_x is not None else 0.0
        fcy = self.direction_y.capacity_reserve if self.direction_y is not None else 0.0
        return fcx * math.cos(theta_nx) ** 2 + fcy * math.cos(theta_ny) ** 2

    def tension_stiffening_coefficient(self, theta1: float) -> float:
        """Bond factor ``m`` of the DSFM tension-stiffening law [mm]."""
        if not self.directions:
            return 0.0
        theta_nx, theta_ny = self.angles(theta1)
        den = 0.0
        for direction, theta_n in ((self.direction_x, theta_nx), (self.direction_y, theta_ny)):
            if direction is None or direction.bar_diameter <= LENGTH_TOLERANCE:
                continue
            den += direction.ratio / direction.bar_diameter * abs(math.cos(theta_n))
        if den <= 0.0:
            return 0.0
        return 0.25 / den

    def yielded_tensile_strain(self) -> float:
        """Largest tensile strain among yielded directions (0 if none yielded)."""
        strains = [d.steel.strain for d in self.directions if d.yielded and d.steel.strain > 0.0]
        return max(strains, default=0.0)

    def approaches(self, other: Optional["WebReinforcement"], tolerance: float = LENGTH_TOLERANCE) -> bool:
        if other is None:
            return False

        def _same(a, b):
            if a is None or b is None:
                return a is None and b is None
            return a.approaches(b, tolerance)

        return _same(self.direction_x, other.direction_x) and _same(self.direction_y, other.direction_y)

    def copy(self) -> "WebReinforcement":
        return WebReinforcement(
            self.direction_x.copy() if self.direction_x is not None else None,
            self.direction_y.copy() if self.direction_y is not None else None,
        )


# helpers for the ``reinforcement=None`` path of the constitutive laws


def maximum_principal_tensile_stress(reinforcement: Optional[WebReinforcement], theta1: float) -> float:
    return 0.0 if reinforcement is None else reinforcement.maximum_principal_tensile_stress(theta1)


def tension_stiffening_coefficient(reinforcement: Optional[WebReinforcement], theta1: float) -> float:
    return 0.0 if reinforcement is None else reinforcement.tension_stiffening_coefficient(theta1)

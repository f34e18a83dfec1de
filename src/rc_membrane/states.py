"""Plane strain/stress states and their principal decompositions.

Vectors use the Voigt ordering ``[xx, yy, xy]`` with engineering shear
strain (``gamma_xy = du/dy + dv/dx``). Every state records the angle
``theta`` of the reference axes it is expressed in, measured from the
horizontal axis, counter-clockwise positive.

Principal states keep ``1 >= 2`` and store ``theta_1``, the angle from the
horizontal axis to the direction of the larger component.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np


# below this magnitude a component is treated as zero
ZERO_TOLERANCE = 1e-12


def transformation_matrix(theta: float) -> np.ndarray:
    """Strain transformation matrix ``T`` for a rotation of the axes by ``theta``.

    ``eps' = T @ eps`` for engineering strain vectors. Stresses transform with
    ``inv(T).T`` and stiffness matrices with ``T.T @ D' @ T``.
    """
    c = math.cos(theta)
    s = math.sin(theta)
    cs = c * s
    c2 = c * c
    s2 = s * s
    return np.array(
        [
            [c2, s2, cs],
            [s2, c2, -cs],
            [-2.0 * cs, 2.0 * cs, c2 - s2],
        ],
        dtype=float,
    )


def stress_transformation_matrix(theta: float) -> np.ndarray:
    c = math.cos(theta)
    s = math.sin(theta)
    cs = c * s
    c2 = c * c
    s2 = s * s
    return np.array(
        [
            [c2, s2, 2.0 * cs],
            [s2, c2, -2.0 * cs],
            [-cs, cs, c2 - s2],
        ],
        dtype=float,
    )


def rotate_stiffness(D: np.ndarray, theta: float) -> np.ndarray:
    """Bring a stiffness expressed in axes at ``theta`` back to the horizontal axes."""
    T = transformation_matrix(theta)
    return T.T @ np.asarray(D, dtype=float) @ T


def wrap_angle(theta: float) -> float:
    """Map an axis direction to (-pi/2, pi/2]."""
    t = math.fmod(theta, math.pi)
    if t > 0.5 * math.pi:
        t -= math.pi
    elif t <= -0.5 * math.pi:
        t += math.pi
    return t


def _is_zero(*values: float) -> bool:
    return all(abs(v) <= ZERO_TOLERANCE for v in values)


class PrincipalCase(str, Enum):
    """Strain case of a principal strain pair."""

    TENSION_COMPRESSION = "tension-compression"
    PURE_TENSION = "pure-tension"
    PURE_COMPRESSION = "pure-compression"
    ZERO = "zero"


# ----------------------------
# Strains
# ----------------------------


@dataclass(frozen=True)
class PrincipalStrainState:
    epsilon_1: float
    epsilon_2: float
    theta_1: float = 0.0

    @classmethod
    def ordered(cls, epsilon_1: float, epsilon_2: float, theta_1: float = 0.0) -> "PrincipalStrainState":
        """Build with ``epsilon_1 >= epsilon_2``, rotating theta_1 when swapping."""
        if epsilon_1 < epsilon_2:
            epsilon_1, epsilon_2 = epsilon_2, epsilon_1
            theta_1 += 0.5 * math.pi
        return cls(float(epsilon_1), float(epsilon_2), wrap_angle(float(theta_1)))

    @classmethod
    def zero(cls) -> "PrincipalStrainState":
        return cls(0.0, 0.0, 0.0)

    @property
    def is_zero(self) -> bool:
        return _is_zero(self.epsilon_1, self.epsilon_2)

    @property
    def theta_2(self) -> float:
        return self.theta_1 + 0.5 * math.pi

    @property
    def case(self) -> PrincipalCase:
        e1, e2 = self.epsilon_1, self.epsilon_2
        if self.is_zero:
            return PrincipalCase.ZERO
        if e1 > 0.0:
            return PrincipalCase.TENSION_COMPRESSION if e2 < 0.0 else PrincipalCase.PURE_TENSION
        if e2 < 0.0:
            return PrincipalCase.PURE_COMPRESSION
        return PrincipalCase.ZERO

    def to_strain_state(self) -> "StrainState":
        """Cartesian strains in the horizontal axes."""
        c = math.cos(self.theta_1)
        s = math.sin(self.theta_1)
        e1, e2 = self.epsilon_1, self.epsilon_2
        return StrainState(
            epsilon_x=e1 * c * c + e2 * s * s,
            epsilon_y=e1 * s * s + e2 * c * c,
            gamma_xy=2.0 * (e1 - e2) * c * s,
        )


@dataclass(frozen=True)
class StrainState:
    epsilon_x: float
    epsilon_y: float
    gamma_xy: float
    theta: float = 0.0

    @classmethod
    def from_vector(cls, eps: np.ndarray, theta: float = 0.0) -> "StrainState":
        e = np.asarray(eps, dtype=float).reshape(3)
        return cls(float(e[0]), float(e[1]), float(e[2]), float(theta))

    @classmethod
    def zero(cls) -> "StrainState":
        return cls(0.0, 0.0, 0.0)

    def as_vector(self) -> np.ndarray:
        return np.array([self.epsilon_x, self.epsilon_y, self.gamma_xy], dtype=float)

    @property
    def is_zero(self) -> bool:
        return _is_zero(self.epsilon_x, self.epsilon_y, self.gamma_xy)

    def transform(self, angle: float) -> "StrainState":
        """Express the strains in axes rotated by ``angle`` from the current ones."""
        if angle == 0.0:
            return self
        v = transformation_matrix(angle) @ self.as_vector()
        return StrainState.from_vector(v, self.theta + angle)

    def to_horizontal(self) -> "StrainState":
        return self.transform(-self.theta)

    def to_principal(self) -> PrincipalStrainState:
        if self.is_zero:
            return PrincipalStrainState.zero()
        ex, ey, g = self.epsilon_x, self.epsilon_y, self.gamma_xy
        avg = 0.5 * (ex + ey)
        radius = math.hypot(0.5 * (ex - ey), 0.5 * g)
        theta_local = 0.5 * math.atan2(g, ex - ey)
        return PrincipalStrainState.ordered(avg + radius, avg - radius, self.theta + theta_local)


# ----------------------------
# Stresses
# ----------------------------


@dataclass(frozen=True)
class PrincipalStressState:
    sigma_1: float
    sigma_2: float
    theta_1: float = 0.0

    @classmethod
    def ordered(cls, sigma_1: float, sigma_2: float, theta_1: float = 0.0) -> "PrincipalStressState":
        """Build with ``sigma_1 >= sigma_2``, rotating theta_1 when swapping."""
        if sigma_1 < sigma_2:
            sigma_1, sigma_2 = sigma_2, sigma_1
            theta_1 += 0.5 * math.pi
        return cls(float(sigma_1), float(sigma_2), wrap_angle(float(theta_1)))

    @classmethod
    def zero(cls, theta_1: float = 0.0) -> "PrincipalStressState":
        return cls(0.0, 0.0, theta_1)

    @property
    def is_zero(self) -> bool:
        return _is_zero(self.sigma_1, self.sigma_2)

    @property
    def theta_2(self) -> float:
        return self.theta_1 + 0.5 * math.pi

    def to_stress_state(self) -> "StressState":
        """Cartesian stresses in the horizontal axes."""
        c = math.cos(self.theta_1)
        s = math.sin(self.theta_1)
        s1, s2 = self.sigma_1, self.sigma_2
        return StressState(
            sigma_x=s1 * c * c + s2 * s * s,
            sigma_y=s1 * s * s + s2 * c * c,
            tau_xy=(s1 - s2) * c * s,
        )


@dataclass(frozen=True)
class StressState:
    sigma_x: float
    sigma_y: float
    tau_xy: float
    theta: float = 0.0

    @classmethod
    def from_vector(cls, sig: np.ndarray, theta: float = 0.0) -> "StressState":
        s = np.asarray(sig, dtype=float).reshape(3)
        return cls(float(s[0]), float(s[1]), float(s[2]), float(theta))

    @classmethod
    def zero(cls) -> "StressState":
        return cls(0.0, 0.0, 0.0)

    def as_vector(self) -> np.ndarray:
        return np.array([self.sigma_x, self.sigma_y, self.tau_xy], dtype=float)

    @property
    def is_zero(self) -> bool:
        return _is_zero(self.sigma_x, self.sigma_y, self.tau_xy)

    def transform(self, angle: float) -> "StressState":
        """Express the stresses in axes rotated by ``angle`` from the current ones."""
        if angle == 0.0:
            return self
        v = stress_transformation_matrix(angle) @ self.as_vector()
        return StressState.from_vector(v, self.theta + angle)

    def to_horizontal(self) -> "StressState":
        return self.transform(-self.theta)

    def to_principal(self) -> PrincipalStressState:
        if self.is_zero:
            return PrincipalStressState.zero()
        sx, sy, t = self.sigma_x, self.sigma_y, self.tau_xy
        avg = 0.5 * (sx + sy)
        radius = math.hypot(0.5 * (sx - sy), t)
        theta_local = 0.5 * math.atan2(2.0 * t, sx - sy)
        return PrincipalStressState.ordered(avg + radius, avg - radius, self.theta + theta_local)

    @staticmethod
    def from_principal(principal: PrincipalStressState) -> "StressState":
        return principal.to_stress_state()

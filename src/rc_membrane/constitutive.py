"""Constitutive laws for cracked reinforced-concrete membranes.

A law maps a principal strain pair ``(eps1, eps2)`` to a principal stress
pair ``(sig1, sig2)`` acting in the same directions. The laws hold no
history: the crack state is passed in and the updated state is returned in
the :class:`StressResult`, so repeated evaluations with the same inputs give
the same output.

This module provides:
  - MCFT: Modified Compression Field Theory (Vecchio & Collins, 1986)
  - DSFM: Disturbed Stress Field Model (Vecchio, 2000), with tension
    softening, tension stiffening and crack-slip dependent softening
  - SMM: Softened Membrane Model (Hsu & Zhu, 2002), with Poisson coupling
    and the deviation angle between applied and concrete principal axes

Strain cases
------------
The principal pair falls in exactly one case, and every law dispatches the
cases through the same table:

  ===========================  ==========================================
  tension-compression          tensile law on eps1, compressive on eps2
  pure tension                 tensile law on both
  pure compression             compressive law on both
  confined compression         fixed-point confinement iteration
  zero strain                  zero stress
  ===========================  ==========================================

Units: MPa, mm. Compression negative.
"""

from __future__ import annotations

import copy
import logging
import math
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple

from rc_membrane.convergence import ConfinementConvergence, ConfinementResult
from rc_membrane.crack_criteria import cracking_stress, is_cracking
from rc_membrane.material_point import CrackState
from rc_membrane.parameters import ConcreteParameters
from rc_membrane.reinforcement import (
    WebReinforcement,
    maximum_principal_tensile_stress,
    tension_stiffening_coefficient,
)
from rc_membrane.states import PrincipalCase, PrincipalStrainState, PrincipalStressState

logger = logging.getLogger(__name__)


# stress magnitude below which the secant modulus falls back to Ec [MPa]
STRESS_TOLERANCE = 1e-3
STRAIN_TOLERANCE = 1e-9

# SMM reference deviation angle (24 degrees) [rad]
SMM_REFERENCE_ANGLE = 0.418879


class ConstitutiveModel(str, Enum):
    MCFT = "mcft"
    DSFM = "dsfm"
    SMM = "smm"


class StrainCase(str, Enum):
    TENSION_COMPRESSION = "tension-compression"
    PURE_TENSION = "pure-tension"
    PURE_COMPRESSION = "pure-compression"
    CONFINED_COMPRESSION = "confined-compression"
    ZERO = "zero"


def strain_case(principal_strains: PrincipalStrainState, consider_confinement: bool) -> StrainCase:
    case = principal_strains.case
    if case == PrincipalCase.TENSION_COMPRESSION:
        return StrainCase.TENSION_COMPRESSION
    if case == PrincipalCase.PURE_TENSION:
        return StrainCase.PURE_TENSION
    if case == PrincipalCase.PURE_COMPRESSION:
        return StrainCase.CONFINED_COMPRESSION if consider_confinement else StrainCase.PURE_COMPRESSION
    return StrainCase.ZERO


def _finite(x: float) -> float:
    return x if math.isfinite(x) else 0.0


def _has_bars(reinforcement: Optional[WebReinforcement]) -> bool:
    return reinforcement is not None and bool(reinforcement.directions)


@dataclass(frozen=True)
class StressResult:
    """Principal stresses of one evaluation plus the updated crack state."""

    principal_stresses: PrincipalStressState
    crack_state: CrackState
    case: StrainCase
    confinement: Optional[ConfinementResult] = None

    @property
    def cracked(self) -> bool:
        return self.crack_state.cracked


@dataclass
class _Evaluation:
    """Inputs and running crack state of one ``calculate_stresses`` call."""

    crack_state: CrackState
    theta1: float
    reinforcement: Optional[WebReinforcement] = None
    reference_length: Optional[float] = None
    deviation_angle: float = 0.0
    confinement: Optional[ConfinementResult] = None


class ConstitutiveLaw:
    """Shared dispatch and helpers. Subclasses provide the branch formulas."""

    model: ClassVar[ConstitutiveModel]

    # strain case -> branch
    _DECISION_TABLE: ClassVar[Dict[StrainCase, str]] = {
        StrainCase.TENSION_COMPRESSION: "_tension_compression",
        StrainCase.PURE_TENSION: "_pure_tension",
        StrainCase.PURE_COMPRESSION: "_pure_compression",
        StrainCase.CONFINED_COMPRESSION: "_confined_compression",
        StrainCase.ZERO: "_zero",
    }

    def __init__(
        self,
        parameters: ConcreteParameters,
        cs: float = 0.55,
        consider_crack_slip: bool = False,
        convergence: Optional[ConfinementConvergence] = None,
    ):
        if not cs > 0:
            raise ValueError(f"Softening coefficient cs must be positive, got {cs}")
        self.parameters = parameters
        self.cs = float(cs)
        self.consider_crack_slip = bool(consider_crack_slip)
        self.convergence = convergence or ConfinementConvergence()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def calculate_stresses(
        self,
        principal_strains: PrincipalStrainState,
        crack_state: CrackState = CrackState.UNCRACKED,
        reinforcement: Optional[WebReinforcement] = None,
        reference_length: Optional[float] = None,
        deviation_angle: float = 0.0,
    ) -> StressResult:
        """Principal stresses for ``principal_strains`` (same directions)."""
        case = strain_case(principal_strains, self.parameters.consider_confinement)
        ctx = _Evaluation(
            crack_state=crack_state,
            theta1=principal_strains.theta_1,
            reinforcement=reinforcement,
            reference_length=reference_length,
            deviation_angle=float(deviation_angle),
        )
        e1 = _finite(principal_strains.epsilon_1)
        e2 = _finite(principal_strains.epsilon_2)

        branch = getattr(self, self._DECISION_TABLE[case])
        fc1, fc2 = branch(e1, e2, ctx)

        return StressResult(
            principal_stresses=PrincipalStressState.ordered(fc1, fc2, principal_strains.theta_1),
            crack_state=ctx.crack_state,
            case=case,
            confinement=ctx.confinement,
        )

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def _tension_compression(self, e1: float, e2: float, ctx: _Evaluation) -> Tuple[float, float]:
        fc1 = self._tensile_stress(e1, e2, ctx)
        fc2 = self.compressive_stress(e2, e1, deviation_angle=ctx.deviation_angle)
        return fc1, fc2

    def _pure_tension(self, e1: float, e2: float, ctx: _Evaluation) -> Tuple[float, float]:
        fc1 = self._tensile_stress(e1, e2, ctx)
        fc2 = self._tensile_stress(e2, e1, ctx)
        return fc1, fc2

    def _pure_compression(self, e1: float, e2: float, ctx: _Evaluation) -> Tuple[float, float]:
        fc1 = self.compressive_stress(e1, e2, deviation_angle=ctx.deviation_angle)
        fc2 = self.compressive_stress(e2, e1, deviation_angle=ctx.deviation_angle)
        return fc1, fc2

    def _confined_compression(self, e1: float, e2: float, ctx: _Evaluation) -> Tuple[float, float]:
        """Kupfer-type confinement: each stress raises the other's strength."""
        conv = self.convergence
        delta = ctx.deviation_angle
        plain_1 = self.compressive_stress(e1, e2, deviation_angle=delta)
        plain_2 = self.compressive_stress(e2, e1, deviation_angle=delta)
        fc1, fc2 = plain_1, plain_2

        converged = False
        residual = math.inf
        it = 0
        for it in range(1, conv.max_iterations + 1):
            beta_1 = self.confinement_factor(fc2)
            beta_2 = self.confinement_factor(fc1)
            # a scaled peak strain can lower the pre-peak stress (DSFM):
            # confinement never weakens the unconfined pair
            fc1_it = min(self.compressive_stress(e1, e2, beta_1, delta), plain_1)
            fc2_it = min(self.compressive_stress(e2, e1, beta_2, delta), plain_2)

            d1 = fc1 - fc1_it
            d2 = fc2 - fc2_it
            residual = max(abs(d1), abs(d2))
            if conv.converged(d1, d2):
                converged = True
                break
            fc1, fc2 = fc1_it, fc2_it

        ctx.confinement = ConfinementResult(iterations=it, converged=converged, residual=residual)
        logger.debug("confinement: iterations=%d converged=%s residual=%.3e MPa", it, converged, residual)
        if not converged:
            warnings.warn(
                f"Confinement iteration did not converge in {conv.max_iterations} iterations "
                f"(residual {residual:.3e} MPa > {conv.tolerance} MPa); using the last iterate.",
                RuntimeWarning,
                stacklevel=3,
            )
        return fc1, fc2

    def _zero(self, e1: float, e2: float, ctx: _Evaluation) -> Tuple[float, float]:
        return 0.0, 0.0

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def secant_modulus(self, stress: float, strain: float) -> float:
        if abs(stress) <= STRESS_TOLERANCE or abs(strain) <= STRAIN_TOLERANCE:
            return self.parameters.Ec
        return stress / strain

    def confinement_factor(self, transverse_stress: float) -> float:
        ratio = abs(transverse_stress / self.parameters.fc)
        c = 1.0 + 0.92 * ratio - 0.76 * ratio * ratio
        if math.isfinite(c) and 1.0 < c < 2.0:
            return c
        return 1.0

    def _check_cracked(self, fc1: float, e2: float, ctx: _Evaluation) -> None:
        if ctx.crack_state.cracked:
            return
        p = self.parameters
        if is_cracking(fc1, e2, p.ft, p.ec):
            ctx.crack_state = CrackState.CRACKED
            logger.debug(
                "%s: concrete cracked (fc1=%.4g MPa >= fcr=%.4g MPa)",
                self.model.value, fc1, cracking_stress(p.ft, p.ec, e2),
            )

    def _uncracked_stress(self, strain: float, transverse: float, ctx: _Evaluation) -> float:
        if ctx.crack_state.cracked:
            return 0.0
        fc1 = strain * self.parameters.Ec
        self._check_cracked(fc1, transverse, ctx)
        if not _has_bars(ctx.reinforcement):
            return fc1
        return min(fc1, ctx.reinforcement.maximum_principal_tensile_stress(ctx.theta1))

    def _tensile_stress(self, strain: float, transverse: float, ctx: _Evaluation) -> float:
        if not math.isfinite(strain) or strain <= 0.0:
            return 0.0
        fc1 = self._uncracked_stress(strain, transverse, ctx)
        if not ctx.crack_state.cracked:
            return fc1
        return self.cracked_stress(strain, ctx)

    # ------------------------------------------------------------------
    # Variant formulas
    # ------------------------------------------------------------------

    def compressive_stress(
        self,
        strain: float,
        transverse_strain: float,
        confinement_factor: float = 1.0,
        deviation_angle: float = 0.0,
    ) -> float:
        raise NotImplementedError

    def cracked_stress(self, strain: float, ctx: _Evaluation) -> float:
        raise NotImplementedError

    # ------------------------------------------------------------------

    def copy(self) -> "ConstitutiveLaw":
        return copy.copy(self)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConstitutiveLaw):
            return NotImplemented
        return self.model == other.model

    def __hash__(self) -> int:
        return hash(self.model)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fc={self.parameters.fc}, cs={self.cs}, crack_slip={self.consider_crack_slip})"


class MCFT(ConstitutiveLaw):
    """Vecchio & Collins (1986)."""

    model = ConstitutiveModel.MCFT

    def compressive_stress(self, strain, transverse_strain, confinement_factor=1.0, deviation_angle=0.0):
        if not math.isfinite(strain) or not math.isfinite(transverse_strain) or strain >= 0.0:
            return 0.0
        p = self.parameters
        fc, ec = p.fc, p.ec
        e1 = transverse_strain

        f2max_a = -fc / (0.8 - 0.34 * e1 / ec) if e1 > 0.0 else -fc
        if math.isfinite(f2max_a) and f2max_a < 0.0:
            f2max = max(f2max_a, -fc) * confinement_factor
        else:
            f2max = -fc * confinement_factor

        n = strain / ec
        # beyond 2*ec the parabola changes sign: no compressive strength left
        return min(f2max * _finite(2.0 * n - n * n), 0.0)

    def cracked_stress(self, strain, ctx):
        return self.parameters.ft / (1.0 + math.sqrt(500.0 * strain))


class DSFM(ConstitutiveLaw):
    """Vecchio (2000). Crack slip is considered by default."""

    model = ConstitutiveModel.DSFM

    def __init__(self, parameters, cs=0.55, consider_crack_slip=True, convergence=None):
        super().__init__(parameters, cs, consider_crack_slip, convergence)

    @property
    def effective_cs(self) -> float:
        return self.cs if self.consider_crack_slip else 1.0

    def softening_factor(self, strain: float, transverse_strain: float) -> float:
        """Compression softening factor beta_d."""
        r = min(-transverse_strain / strain, 400.0)
        if not math.isfinite(r) or r < 0.28:
            return 1.0
        cd = _finite(0.35 * (r - 0.28) ** 0.8)
        return min(1.0 / (1.0 + self.effective_cs * cd), 1.0)

    def compressive_stress(self, strain, transverse_strain, confinement_factor=1.0, deviation_angle=0.0):
        if not math.isfinite(strain) or strain >= 0.0:
            return 0.0
        p = self.parameters
        beta_d = self.softening_factor(strain, transverse_strain)

        fp = -beta_d * p.fc * confinement_factor
        ep = beta_d * p.ec * confinement_factor

        k = 1.0 if ep <= strain else 0.67 - fp / 62.0
        n = 0.8 - fp / 17.0
        x = strain / ep
        return _finite(fp * n * x / (n - 1.0 + x ** (n * k)))

    def tension_softening(self, strain: float, reference_length: Optional[float]) -> float:
        """Fracture-energy based descending branch, limited to ``[0, ft]``.

        0 without a reference length, and 0 (brittle) when the element is so
        long that the terminal strain ``2 Gf / (ft L)`` does not exceed the
        cracking strain.
        """
        if reference_length is None or reference_length <= 0.0:
            return 0.0
        p = self.parameters
        ecr = p.cracking_strain
        ets = 2.0 * p.Gf / (p.ft * reference_length)
        if ets <= ecr:
            return 0.0
        fc1a = _finite(p.ft * (1.0 - (strain - ecr) / (ets - ecr)))
        return min(max(fc1a, 0.0), p.ft)

    def tension_stiffening(self, strain: float, theta1: float, reinforcement: Optional[WebReinforcement]) -> float:
        m = tension_stiffening_coefficient(reinforcement, theta1)
        if m <= 0.0:
            return 0.0
        return self.parameters.ft / (1.0 + math.sqrt(2.2 * m * strain))

    def cracked_stress(self, strain, ctx):
        fc1a = self.tension_softening(strain, ctx.reference_length)
        fc1b = self.tension_stiffening(strain, ctx.theta1, ctx.reinforcement)
        fc1 = max(fc1a, fc1b, 0.0)
        if _has_bars(ctx.reinforcement):
            fc1 = min(fc1, maximum_principal_tensile_stress(ctx.reinforcement, ctx.theta1))
        return max(fc1, 0.0)


class SMM(ConstitutiveLaw):
    """Hsu & Zhu (2002).

    Strains passed to :meth:`calculate_stresses` must already be free of the
    Poisson effect (see :meth:`decouple_strains`) and expressed in the applied
    principal-stress directions.
    """

    model = ConstitutiveModel.SMM

    def __init__(self, parameters, cs=0.55, consider_crack_slip=False, convergence=None):
        super().__init__(parameters, cs, consider_crack_slip, convergence)
        self._strength_function = min(5.8 / math.sqrt(parameters.fc), 0.9)

    @staticmethod
    def deviation_function(deviation_angle: float) -> float:
        return max(1.0 - abs(deviation_angle) / SMM_REFERENCE_ANGLE, 0.0)

    @staticmethod
    def tensile_strain_function(epsilon_1: float) -> float:
        if epsilon_1 <= 0.0:
            return 1.0
        return 1.0 / math.sqrt(1.0 + 400.0 * epsilon_1)

    def softening_coefficient(self, epsilon_1: float, deviation_angle: float = 0.0) -> float:
        """zeta = f(eps1) * g(fc) * h(delta)."""
        zeta = (
            self.tensile_strain_function(epsilon_1)
            * self._strength_function
            * self.deviation_function(deviation_angle)
        )
        return _finite(zeta)

    def compressive_stress(self, strain, transverse_strain, confinement_factor=1.0, deviation_angle=0.0):
        if not math.isfinite(strain) or strain >= 0.0:
            return 0.0
        p = self.parameters
        zeta = self.softening_coefficient(transverse_strain, deviation_angle)
        if zeta <= 0.0:
            return 0.0

        fp = -zeta * p.fc
        ep = zeta * p.ec
        x = _finite(strain / ep)

        if x < 0.0:
            return 0.0
        if x <= 1.0:
            return fp * (2.0 * x - x * x) * confinement_factor
        post = fp * (1.0 - ((x - 1.0) / (4.0 / zeta - 1.0)) ** 2)
        # residual strength: never below half the peak in magnitude
        return min(post, 0.5 * fp) * confinement_factor

    def cracked_stress(self, strain, ctx):
        p = self.parameters
        fc1 = p.ft * (p.cracking_strain / strain) ** 0.4
        if _has_bars(ctx.reinforcement):
            fc1 = min(fc1, maximum_principal_tensile_stress(ctx.reinforcement, ctx.theta1))
        return max(fc1, 0.0)

    # ------------------------------------------------------------------
    # Poisson effect and shear
    # ------------------------------------------------------------------

    @staticmethod
    def poisson_ratios(crack_state: CrackState, reinforcement: Optional[WebReinforcement] = None) -> Tuple[float, float]:
        """Hsu/Zhu ratios ``(v12, v21)``."""
        esf = reinforcement.yielded_tensile_strain() if reinforcement is not None else 0.0
        v12 = 0.2 + 850.0 * esf if esf > 0.0 else 0.2
        v21 = 0.0 if crack_state.cracked else 0.2
        return v12, v21

    def decouple_strains(
        self,
        epsilon_1: float,
        epsilon_2: float,
        crack_state: CrackState,
        reinforcement: Optional[WebReinforcement] = None,
    ) -> Tuple[float, float]:
        """Uniaxial strains free of the Poisson effect."""
        v12, v21 = self.poisson_ratios(crack_state, reinforcement)
        v1 = 1.0 / (1.0 - v12 * v21)
        v2 = v21 * v1
        return v1 * epsilon_1 + v2 * epsilon_2, v2 * epsilon_1 + v1 * epsilon_2

    @staticmethod
    def shear_stress(gamma_12: float, sigma_1: float, sigma_2: float, epsilon_1: float, epsilon_2: float) -> float:
        de = epsilon_1 - epsilon_2
        if abs(de) <= 1e-15:
            return 0.0
        return 0.5 * gamma_12 * (sigma_1 - sigma_2) / de

    @staticmethod
    def deviation_angle(epsilon_1: float, epsilon_2: float, gamma_12: float) -> float:
        """Angle between the applied and the concrete principal directions."""
        de = epsilon_1 - epsilon_2
        if abs(de) <= 1e-15:
            return 0.0
        return 0.5 * math.atan(gamma_12 / de)

"""Biaxial concrete for membrane elements.

:class:`BiaxialConcrete` is the per-point entry object. One call to
:meth:`BiaxialConcrete.calculate` per load step:

  1. decompose the strains in principal form
  2. evaluate the constitutive law for the strain case
  3. rotate the principal stresses back to the horizontal axes
  4. store the crack state and the secant stiffness

For the SMM the law is evaluated in the applied principal-stress
directions of the previous step (the principal strain directions until a
stress state exists) after removing the Poisson effect, and the concrete
shear stress is rebuilt from the principal stress/strain differences.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from rc_membrane.constitutive import SMM, ConstitutiveLaw, ConstitutiveModel, StressResult
from rc_membrane.convergence import ConfinementConvergence, ConfinementResult
from rc_membrane.material_factory import make_constitutive
from rc_membrane.material_point import CrackState, MembranePoint
from rc_membrane.model import MembraneModel
from rc_membrane.parameters import ConcreteParameters
from rc_membrane.reinforcement import WebReinforcement
from rc_membrane.states import (
    PrincipalStrainState,
    PrincipalStressState,
    StrainState,
    StressState,
    rotate_stiffness,
    wrap_angle,
)


StrainInput = Union[StrainState, np.ndarray, Sequence[float]]


def _as_strain_state(strain: StrainInput) -> StrainState:
    if isinstance(strain, StrainState):
        return strain.to_horizontal()
    return StrainState.from_vector(np.asarray(strain, dtype=float))


class BiaxialConcrete:
    """Concrete state of one membrane integration point.

    Parameters
    ----------
    parameters : ConcreteParameters
        Concrete parameters (shared, immutable)
    model : MembraneModel | ConstitutiveModel | str
        Constitutive law selector, ``"mcft"`` by default
    """

    def __init__(
        self,
        parameters: ConcreteParameters,
        model: Union[MembraneModel, ConstitutiveModel, str, None] = None,
    ):
        self.parameters = parameters
        self.law: ConstitutiveLaw = make_constitutive(parameters, model)
        self.state = MembranePoint()
        self.state.stiffness = self.initial_stiffness

    @classmethod
    def from_model(
        cls,
        parameters: ConcreteParameters,
        model: Union[ConstitutiveModel, str] = ConstitutiveModel.MCFT,
        cs: float = 0.55,
        consider_crack_slip: Optional[bool] = None,
        confinement: Optional[ConfinementConvergence] = None,
    ) -> "BiaxialConcrete":
        options = MembraneModel(
            constitutive_model=model,
            cs=cs,
            consider_crack_slip=consider_crack_slip,
            confinement=confinement or ConfinementConvergence(),
        )
        return cls(parameters, options)

    # ------------------------------------------------------------------
    # State read-out
    # ------------------------------------------------------------------

    @property
    def model(self) -> ConstitutiveModel:
        return self.law.model

    @property
    def strains(self) -> StrainState:
        return self.state.strains

    @property
    def principal_strains(self) -> PrincipalStrainState:
        return self.state.principal_strains

    @property
    def stresses(self) -> StressState:
        return self.state.stresses

    @property
    def principal_stresses(self) -> PrincipalStressState:
        return self.state.principal_stresses

    @property
    def crack_state(self) -> CrackState:
        return self.state.crack_state

    @property
    def cracked(self) -> bool:
        return self.state.crack_state.cracked

    @property
    def stiffness(self) -> np.ndarray:
        return self.state.stiffness

    @property
    def deviation_angle(self) -> float:
        return self.state.deviation_angle

    @property
    def confinement(self) -> Optional[ConfinementResult]:
        """Outcome of the last confinement solve (None if none ran)."""
        return self.state.confinement

    @property
    def crushed(self) -> bool:
        return self.state.principal_strains.epsilon_2 <= self.parameters.ecu

    @property
    def yielded(self) -> bool:
        return self.state.principal_strains.epsilon_2 <= self.parameters.ec

    @property
    def consider_crack_slip(self) -> bool:
        return self.law.consider_crack_slip

    @consider_crack_slip.setter
    def consider_crack_slip(self, value: bool) -> None:
        self.law.consider_crack_slip = bool(value)

    @property
    def cs(self) -> float:
        return self.law.cs

    @cs.setter
    def cs(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"cs must be positive, got {value}")
        self.law.cs = float(value)

    @property
    def initial_stiffness(self) -> np.ndarray:
        Ec = self.parameters.Ec
        D = np.diag([Ec, Ec, 0.5 * Ec])
        return rotate_stiffness(D, 0.25 * math.pi)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def calculate(
        self,
        strain: StrainInput,
        reinforcement: Optional[WebReinforcement] = None,
        reference_length: Optional[float] = None,
    ) -> None:
        """Update stresses, crack state and stiffness for ``strain``."""
        strains = _as_strain_state(strain)
        self.state.strains = strains
        self.state.principal_strains = strains.to_principal()

        if isinstance(self.law, SMM):
            self._calculate_smm(strains, reinforcement, reference_length)
        else:
            result = self.law.calculate_stresses(
                self.state.principal_strains,
                self.state.crack_state,
                reinforcement,
                reference_length,
            )
            self._store(result)
            self.state.stresses = result.principal_stresses.to_stress_state()
            self.state.principal_stresses = result.principal_stresses

        self.state.stiffness = self._secant_stiffness()

    def _calculate_smm(
        self,
        strains: StrainState,
        reinforcement: Optional[WebReinforcement],
        reference_length: Optional[float],
    ) -> None:
        law: SMM = self.law
        alpha = self.state.applied_angle
        if alpha is None:
            alpha = self.state.principal_strains.theta_1
        applied = strains.transform(alpha)
        e1i, e2i, g12 = applied.epsilon_x, applied.epsilon_y, applied.gamma_xy

        delta = law.deviation_angle(e1i, e2i, g12)
        e1, e2 = law.decouple_strains(e1i, e2i, self.state.crack_state, reinforcement)

        pair = PrincipalStrainState.ordered(e1, e2, alpha)
        # shear strain flips sign in the axes rotated by pi/2
        gamma = g12 if e1 >= e2 else -g12

        result = law.calculate_stresses(pair, self.state.crack_state, reinforcement, reference_length, delta)
        self._store(result)

        ps = result.principal_stresses
        if abs(wrap_angle(ps.theta_1 - pair.theta_1)) <= 1e-9:
            sa, sb = ps.sigma_1, ps.sigma_2
        else:
            sa, sb = ps.sigma_2, ps.sigma_1
        tau = law.shear_stress(gamma, sa, sb, pair.epsilon_1, pair.epsilon_2)

        stresses = StressState(sa, sb, tau, pair.theta_1).to_horizontal()
        principal = stresses.to_principal()

        self.state.deviation_angle = delta
        self.state.stresses = stresses
        self.state.principal_stresses = principal
        if not principal.is_zero:
            self.state.applied_angle = principal.theta_1

    def _store(self, result: StressResult) -> None:
        self.state.crack_state = self.state.crack_state.update(result.cracked)
        if result.confinement is not None:
            self.state.confinement = result.confinement

    def _secant_stiffness(self) -> np.ndarray:
        ps = self.state.principal_stresses
        theta = ps.theta_1 if not ps.is_zero else self.state.principal_strains.theta_1
        local = self.state.strains.transform(theta)

        Ec1 = self.law.secant_modulus(ps.sigma_1, local.epsilon_x)
        Ec2 = self.law.secant_modulus(ps.sigma_2, local.epsilon_y)
        den = Ec1 + Ec2
        Gc = Ec1 * Ec2 / den if abs(den) > 1e-12 else 0.0

        D = np.diag([Ec1, Ec2, Gc])
        return rotate_stiffness(D, theta)

    def set_tensile_stress(self, fc1: float) -> None:
        """Replace the principal tensile stress (e.g. after a crack check)."""
        ps = self.state.principal_stresses
        principal = PrincipalStressState.ordered(fc1, ps.sigma_2, ps.theta_1)
        self.state.principal_stresses = principal
        self.state.stresses = principal.to_stress_state()

    # ------------------------------------------------------------------

    def copy(self) -> "BiaxialConcrete":
        """Independent instance (law options and state) for trial evaluations."""
        other = BiaxialConcrete.__new__(BiaxialConcrete)
        other.parameters = self.parameters
        other.law = self.law.copy()
        other.state = self.state.copy_shallow()
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, BiaxialConcrete):
            return NotImplemented
        return self.law == other.law and self.parameters == other.parameters

    def __hash__(self) -> int:
        return hash((self.law.model, self.parameters.fc))

    def __repr__(self) -> str:
        return f"BiaxialConcrete(model={self.model.value}, fc={self.parameters.fc}, crack_state={self.crack_state.value})"

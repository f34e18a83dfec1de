"""Membrane material-point state.

One :class:`MembranePoint` per integration point holds everything a
:class:`~rc_membrane.biaxial.BiaxialConcrete` evaluation produces. The crack
state is the only history variable carried between calls; the SMM also
carries the applied principal-stress direction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

import numpy as np

from rc_membrane.convergence import ConfinementResult
from rc_membrane.states import (
    PrincipalStrainState,
    PrincipalStressState,
    StrainState,
    StressState,
)


class CrackState(str, Enum):
    """Irreversible cracking state. UNCRACKED -> CRACKED only."""

    UNCRACKED = "uncracked"
    CRACKED = "cracked"

    @property
    def cracked(self) -> bool:
        return self is CrackState.CRACKED

    def update(self, cracks: bool) -> "CrackState":
        if self is CrackState.CRACKED or cracks:
            return CrackState.CRACKED
        return CrackState.UNCRACKED


@dataclass
class MembranePoint:
    """Current strains, stresses and history of one membrane point."""

    strains: StrainState = field(default_factory=StrainState.zero)
    principal_strains: PrincipalStrainState = field(default_factory=PrincipalStrainState.zero)
    stresses: StressState = field(default_factory=StressState.zero)
    principal_stresses: PrincipalStressState = field(default_factory=PrincipalStressState.zero)
    crack_state: CrackState = CrackState.UNCRACKED
    stiffness: np.ndarray = field(default_factory=lambda: np.zeros((3, 3), dtype=float))

    # SMM only. applied_angle is the last principal-stress direction
    # (None until a non-zero stress state has been computed).
    deviation_angle: float = 0.0
    applied_angle: Optional[float] = None

    confinement: Optional[ConfinementResult] = None

    def copy_shallow(self) -> "MembranePoint":
        """Copy with the stiffness array duplicated (safe for trial/commit workflows)."""
        return replace(self, stiffness=np.array(self.stiffness, copy=True))

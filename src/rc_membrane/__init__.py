"""rc_membrane package (biaxial reinforced-concrete membrane laws)."""

from .convergence import ConfinementConvergence, ConfinementResult
from .crack_criteria import cracking_stress, is_cracking
from .material_point import CrackState, MembranePoint
from .parameters import AggregateType, ConcreteParameters, ParameterModel
from .states import (
    PrincipalCase,
    PrincipalStrainState,
    PrincipalStressState,
    StrainState,
    StressState,
    transformation_matrix,
)
from .steel import Steel
from .reinforcement import ReinforcementDirection, WebReinforcement
from .constitutive import (
    ConstitutiveLaw,
    ConstitutiveModel,
    StrainCase,
    StressResult,
    MCFT,
    DSFM,
    SMM,
)
from .model import MembraneModel
from .material_factory import make_constitutive
from .biaxial import BiaxialConcrete

__all__ = [
    "ConfinementConvergence", "ConfinementResult",
    "cracking_stress", "is_cracking",
    "CrackState", "MembranePoint",
    "AggregateType", "ConcreteParameters", "ParameterModel",
    "PrincipalCase", "PrincipalStrainState", "PrincipalStressState",
    "StrainState", "StressState", "transformation_matrix",
    "Steel",
    "ReinforcementDirection", "WebReinforcement",
    "ConstitutiveLaw", "ConstitutiveModel", "StrainCase", "StressResult",
    "MCFT", "DSFM", "SMM",
    "MembraneModel",
    "make_constitutive",
    "BiaxialConcrete",
]

"""Constitutive law factory.

Callers select the law with `MembraneModel.constitutive_model`.
This module centralizes that mapping.
"""

from __future__ import annotations

from typing import Union

from rc_membrane.constitutive import DSFM, MCFT, SMM, ConstitutiveLaw, ConstitutiveModel
from rc_membrane.model import MembraneModel
from rc_membrane.parameters import ConcreteParameters


def make_constitutive(parameters: ConcreteParameters, model: Union[MembraneModel, ConstitutiveModel, str, None] = None) -> ConstitutiveLaw:
    """Instantiate the law selected in `model` (a MembraneModel or a model name)."""
    if not isinstance(model, MembraneModel):
        model = MembraneModel(constitutive_model=model or "mcft")

    kwargs = dict(cs=float(model.cs), convergence=model.confinement)
    if model.consider_crack_slip is not None:
        kwargs["consider_crack_slip"] = bool(model.consider_crack_slip)

    cm = model.model
    if cm == ConstitutiveModel.DSFM:
        return DSFM(parameters, **kwargs)
    if cm == ConstitutiveModel.SMM:
        return SMM(parameters, **kwargs)
    return MCFT(parameters, **kwargs)

"""Model/option container for the membrane concrete laws."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rc_membrane.constitutive import ConstitutiveModel
from rc_membrane.convergence import ConfinementConvergence


@dataclass
class MembraneModel:
    # Constitutive law selector
    constitutive_model: str = "mcft"  # mcft | dsfm | smm

    # Compression softening coefficient for crack slip (DSFM)
    cs: float = 0.55
    # None -> law default (DSFM considers crack slip, MCFT/SMM do not)
    consider_crack_slip: Optional[bool] = None

    # Confinement fixed-point iteration
    confinement: ConfinementConvergence = field(default_factory=ConfinementConvergence)

    def __post_init__(self):
        """Normalize the model selector."""

        name = self.constitutive_model
        if isinstance(name, ConstitutiveModel):
            name = name.value
        name = (name or "mcft").strip().lower()
        aliases = {
            "mcft": "mcft",
            "modified-compression-field": "mcft",
            "modified_compression_field": "mcft",
            "modified-compression-field-theory": "mcft",
            "dsfm": "dsfm",
            "disturbed-stress-field": "dsfm",
            "disturbed_stress_field": "dsfm",
            "disturbed-stress-field-model": "dsfm",
            "smm": "smm",
            "softened-membrane": "smm",
            "softened_membrane": "smm",
            "softened-membrane-model": "smm",
        }
        name = aliases.get(name, name)
        if name not in ("mcft", "dsfm", "smm"):
            raise ValueError(
                f"Unknown constitutive_model='{self.constitutive_model}'. Use 'mcft', 'dsfm' or 'smm'."
            )
        self.constitutive_model = name

        if not self.cs > 0:
            raise ValueError(f"cs must be positive, got {self.cs}")

    @property
    def model(self) -> ConstitutiveModel:
        return ConstitutiveModel(self.constitutive_model)

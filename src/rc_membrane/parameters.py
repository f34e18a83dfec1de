"""Concrete material parameters for membrane analysis.

Strength-based calculators derive the full parameter set (tensile strength,
initial modulus, peak and ultimate strains) from the compressive strength
``fc`` and the aggregate. Units: MPa and mm. Strains are negative in
compression.

Available calculators
---------------------
- DEFAULT / DSFM: ft = 0.65 fc^(1/3), Ec = -2 fc / ec, ec = -0.002
- MCFT:           ft = 0.33 sqrt(fc), same strains
- MC2010:         fib Model Code 2010 (fctm, Eci, ec1, ecu table)
- NBR6118:        Brazilian code NBR 6118 (fctm, Eci, ec2, ecu)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict

import numpy as np
from scipy.interpolate import Akima1DInterpolator


# fracture parameter used by all calculators [N/mm]
FRACTURE_PARAMETER = 0.075


class ParameterModel(str, Enum):
    DEFAULT = "default"
    MCFT = "mcft"
    DSFM = "dsfm"
    MC2010 = "mc2010"
    NBR6118 = "nbr6118"
    CUSTOM = "custom"


class AggregateType(str, Enum):
    BASALT = "basalt"
    QUARTZITE = "quartzite"
    LIMESTONE = "limestone"
    SANDSTONE = "sandstone"


# MC2010 ultimate strain per strength class (fc >= 50 MPa)
_MC2010_CLASSES = np.array([50.0, 55.0, 60.0, 70.0, 80.0, 90.0])
_MC2010_ULTIMATE = np.array([-0.0034, -0.0034, -0.0033, -0.0032, -0.0031, -0.003])


def default_properties(fc: float) -> Dict[str, float]:
    """Default calculator (also used by the DSFM)."""
    ec = -0.002
    return {
        "ft": 0.65 * fc ** (1.0 / 3.0),
        "Ec": -2.0 * fc / ec,
        "ec": ec,
        "ecu": -0.0035,
    }


def mcft_properties(fc: float) -> Dict[str, float]:
    """Vecchio & Collins (1986) parameters."""
    ec = -0.002
    return {
        "ft": 0.33 * math.sqrt(fc),
        "Ec": -2.0 * fc / ec,
        "ec": ec,
        "ecu": -0.0035,
    }


def mc2010_properties(fc: float, aggregate_type: AggregateType = AggregateType.QUARTZITE) -> Dict[str, float]:
    """
    fib Model Code 2010 parameters.

    Args:
        fc: Mean compressive strength [MPa]
        aggregate_type: Aggregate type (sets the modulus factor alpha_E)

    Returns:
        dict: ft, Ec (tangent modulus Eci), ec (ec1) and ecu
    """
    alpha_E = {
        AggregateType.BASALT: 1.2,
        AggregateType.QUARTZITE: 1.0,
    }.get(AggregateType(aggregate_type), 0.9)

    if fc <= 50:
        ft = 0.3 * fc ** (2.0 / 3.0)
    else:
        ft = 2.12 * math.log(1 + 0.1 * fc)

    return {
        "ft": ft,
        "Ec": 21500.0 * alpha_E * (0.1 * fc) ** (1.0 / 3.0),
        "ec": -1.6e-3 * (0.1 * fc) ** 0.25,
        "ecu": mc2010_ultimate_strain(fc),
    }


def mc2010_ultimate_strain(fc: float) -> float:
    """Ultimate strain from the MC2010 class table (Akima interpolation)."""
    if fc < 50:
        return -0.0035
    if fc >= 90:
        return -0.003
    spline = Akima1DInterpolator(_MC2010_CLASSES, _MC2010_ULTIMATE)
    return float(spline(fc))


def nbr6118_properties(fc: float, aggregate_type: AggregateType = AggregateType.QUARTZITE) -> Dict[str, float]:
    """
    NBR 6118 (2014) parameters.

    Args:
        fc: Characteristic compressive strength [MPa]
        aggregate_type: Aggregate type (sets the modulus factor alpha_E)

    Returns:
        dict: ft, Ec (initial modulus Eci), ec (ec2), ecu and alpha_i (secant factor)
    """
    alpha_E = {
        AggregateType.BASALT: 1.2,
        AggregateType.QUARTZITE: 1.0,
        AggregateType.LIMESTONE: 0.9,
    }.get(AggregateType(aggregate_type), 0.7)

    if fc <= 50:
        ft = 0.3 * fc ** (2.0 / 3.0)
        Eci = alpha_E * 5600.0 * math.sqrt(fc)
        ec = -0.002
        ecu = -0.0035
    else:
        ft = 2.12 * math.log(1 + 0.11 * fc)
        Eci = 21500.0 * alpha_E * (0.1 * fc + 1.25) ** (1.0 / 3.0)
        ec = -0.002 - 0.000085 * (fc - 50) ** 0.53
        ecu = -0.0026 - 0.035 * (0.01 * (90 - fc)) ** 4

    return {
        "ft": ft,
        "Ec": Eci,
        "ec": ec,
        "ecu": ecu,
        "alpha_i": min(0.8 + 0.2 * fc / 80.0, 1.0),
    }


def calculate_properties(
    fc: float,
    model: ParameterModel = ParameterModel.DEFAULT,
    aggregate_type: AggregateType = AggregateType.QUARTZITE,
) -> Dict[str, float]:
    """Dispatch to the calculator selected by ``model``."""
    model = ParameterModel(model)
    if model == ParameterModel.MCFT:
        return mcft_properties(fc)
    if model == ParameterModel.MC2010:
        return mc2010_properties(fc, aggregate_type)
    if model == ParameterModel.NBR6118:
        return nbr6118_properties(fc, aggregate_type)
    if model == ParameterModel.CUSTOM:
        raise ValueError("CUSTOM parameters have no calculator; use ConcreteParameters.custom(...)")
    return default_properties(fc)


@dataclass(frozen=True)
class ConcreteParameters:
    """Concrete parameters shared by all constitutive laws.

    Attributes
    ----------
    fc : float
        Compressive strength, positive magnitude [MPa]
    ft : float
        Tensile strength [MPa]
    Ec : float
        Initial elastic modulus [MPa]
    ec : float
        Strain at peak compressive stress (negative)
    ecu : float
        Ultimate compressive strain (negative)
    aggregate_diameter : float
        Maximum aggregate diameter [mm]
    Gf : float
        Fracture parameter [N/mm]
    """

    fc: float
    ft: float
    Ec: float
    ec: float = -0.002
    ecu: float = -0.0035
    aggregate_diameter: float = 20.0
    Gf: float = FRACTURE_PARAMETER
    model: ParameterModel = ParameterModel.CUSTOM
    aggregate_type: AggregateType = AggregateType.QUARTZITE
    consider_confinement: bool = False
    secant_factor: float = 1.0

    def __post_init__(self):
        if not self.fc > 0:
            raise ValueError(f"fc must be a positive magnitude, got {self.fc}")
        if self.ft < 0:
            raise ValueError(f"ft must be non-negative, got {self.ft}")
        if not self.Ec > 0:
            raise ValueError(f"Ec must be positive, got {self.Ec}")
        if not self.ec < 0:
            raise ValueError(f"ec must be negative (compression), got {self.ec}")
        if not self.ecu < 0:
            raise ValueError(f"ecu must be negative (compression), got {self.ecu}")
        if self.aggregate_diameter < 0:
            raise ValueError(f"aggregate_diameter must be non-negative, got {self.aggregate_diameter}")

    @classmethod
    def from_strength(
        cls,
        fc: float,
        aggregate_diameter: float = 20.0,
        model: ParameterModel = ParameterModel.DEFAULT,
        aggregate_type: AggregateType = AggregateType.QUARTZITE,
        consider_confinement: bool = False,
    ) -> "ConcreteParameters":
        """Build the parameter set from ``fc`` with one of the calculators."""
        props = calculate_properties(float(fc), model, aggregate_type)
        return cls(
            fc=float(fc),
            ft=float(props["ft"]),
            Ec=float(props["Ec"]),
            ec=float(props["ec"]),
            ecu=float(props["ecu"]),
            aggregate_diameter=float(aggregate_diameter),
            model=ParameterModel(model),
            aggregate_type=AggregateType(aggregate_type),
            consider_confinement=bool(consider_confinement),
            secant_factor=float(props.get("alpha_i", 1.0)),
        )

    @classmethod
    def custom(cls, fc: float, ft: float, Ec: float, ec: float = -0.002, ecu: float = -0.0035,
               aggregate_diameter: float = 20.0, consider_confinement: bool = False) -> "ConcreteParameters":
        return cls(fc=float(fc), ft=float(ft), Ec=float(Ec), ec=float(ec), ecu=float(ecu),
                   aggregate_diameter=float(aggregate_diameter),
                   consider_confinement=bool(consider_confinement))

    @classmethod
    def c30(cls, aggregate_diameter: float = 20.0, model: ParameterModel = ParameterModel.MC2010) -> "ConcreteParameters":
        return cls.from_strength(30.0, aggregate_diameter, model)

    @property
    def cracking_strain(self) -> float:
        return self.ft / self.Ec

    @property
    def transverse_modulus(self) -> float:
        return self.Ec / 2.4

    @property
    def secant_modulus(self) -> float:
        """Secant modulus at peak (NBR6118 uses alpha_i * Eci)."""
        if self.model == ParameterModel.NBR6118:
            return self.secant_factor * self.Ec
        return self.fc / abs(self.ec)

    def approaches(self, other: "ConcreteParameters", tolerance: float = 1e-9) -> bool:
        """Same calculator and strength within ``tolerance`` [MPa]."""
        if not isinstance(other, ConcreteParameters):
            return False
        return self.model == other.model and abs(self.fc - other.fc) <= tolerance

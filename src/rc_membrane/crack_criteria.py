"""Crack initiation helpers (Gupta & Rangan, 1998)."""

from __future__ import annotations


def cracking_stress(ft: float, ec: float, e2: float) -> float:
    """Principal tensile stress that cracks concrete under transverse strain ``e2``.

    ``fcr = ft * (1 - e2/ec)`` limited to ``[0.25 ft, ft]``. Transverse
    compression lowers the cracking stress.
    """
    fcr = ft * (1.0 - e2 / ec)
    return float(min(max(fcr, 0.25 * ft), ft))


def is_cracking(fc1: float, e2: float, ft: float, ec: float) -> bool:
    return fc1 >= cracking_stress(ft, ec, e2)

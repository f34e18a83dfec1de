"""Uniaxial steel law."""

import math

import pytest


def test_elastic_and_yield_branches():
    from rc_membrane.steel import Steel

    s = Steel(f_y=500.0)
    assert s.E == 210000.0
    assert s.yield_strain == pytest.approx(500.0 / 210000.0)

    assert s.calculate_stress(0.001) == pytest.approx(210.0)
    assert s.calculate_stress(-0.001) == pytest.approx(-210.0)
    assert s.calculate_stress(0.005) == 500.0
    assert s.calculate_stress(-0.005) == -500.0


def test_fracture_beyond_ultimate_strain():
    from rc_membrane.steel import Steel

    s = Steel(f_y=500.0, eps_u=0.01)
    assert s.calculate_stress(0.01) == 0.0
    assert s.calculate_stress(-0.02) == 0.0


def test_hardening_branch():
    from rc_membrane.steel import Steel

    s = Steel(f_y=500.0, E_h=2000.0, eps_h=0.005)
    assert s.consider_hardening
    assert s.calculate_stress(0.004) == 500.0
    assert s.calculate_stress(0.007) == pytest.approx(500.0 + 2000.0 * 0.002)
    # compression stays perfectly plastic
    assert s.calculate_stress(-0.007) == -500.0


def test_state_and_secant_modulus():
    from rc_membrane.steel import Steel

    s = Steel(f_y=500.0)
    assert s.secant_modulus == s.E
    assert not s.yielded

    s.set_strain_and_stress(0.005)
    assert s.strain == 0.005
    assert s.stress == 500.0
    assert s.secant_modulus == pytest.approx(100000.0)
    assert s.yielded

    s.set_strain_and_stress(math.nan)
    assert s.strain == 0.0
    assert s.stress == 0.0

    s.set_strain_and_stress(0.003)
    c = s.copy()
    assert c.strain == 0.0 and c.stress == 0.0
    assert c.approaches(s)


def test_validation():
    from rc_membrane.steel import Steel

    with pytest.raises(ValueError, match="yield"):
        Steel(f_y=0.0)
    with pytest.raises(ValueError, match="modulus"):
        Steel(f_y=500.0, E=-1.0)
    with pytest.raises(ValueError, match="both"):
        Steel(f_y=500.0, E_h=1000.0)
    with pytest.raises(ValueError, match="below the yield strain"):
        Steel(f_y=500.0, E_h=1000.0, eps_h=0.001)

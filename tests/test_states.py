"""Strain/stress states, principal decompositions and transformations."""

import math

import numpy as np
import pytest


def test_transformation_matrix_identity_and_inverse():
    from rc_membrane.states import transformation_matrix, stress_transformation_matrix

    assert np.allclose(transformation_matrix(0.0), np.eye(3))

    theta = 0.37
    T = transformation_matrix(theta)
    Ts = stress_transformation_matrix(theta)
    # stresses transform with inv(T).T
    assert np.allclose(Ts, np.linalg.inv(T).T), "Stress matrix should be the inverse transpose of T"
    assert np.allclose(transformation_matrix(-theta) @ T, np.eye(3))


def test_principal_strains_axis_aligned():
    from rc_membrane.states import StrainState

    p = StrainState(0.001, -0.002, 0.0).to_principal()
    assert p.epsilon_1 == pytest.approx(0.001)
    assert p.epsilon_2 == pytest.approx(-0.002)
    assert p.theta_1 == pytest.approx(0.0)

    # larger strain along y -> theta_1 = pi/2
    p = StrainState(-0.002, 0.001, 0.0).to_principal()
    assert p.epsilon_1 == pytest.approx(0.001)
    assert p.epsilon_2 == pytest.approx(-0.002)
    assert p.theta_1 == pytest.approx(0.5 * math.pi)


def test_principal_strains_pure_shear():
    from rc_membrane.states import StrainState

    p = StrainState(0.0, 0.0, 0.002).to_principal()
    assert p.epsilon_1 == pytest.approx(0.001)
    assert p.epsilon_2 == pytest.approx(-0.001)
    assert p.theta_1 == pytest.approx(0.25 * math.pi)


def test_strain_transform_to_principal_axes_removes_shear():
    from rc_membrane.states import StrainState

    s = StrainState(0.0008, -0.0011, 0.0015)
    p = s.to_principal()
    local = s.transform(p.theta_1)

    assert local.gamma_xy == pytest.approx(0.0, abs=1e-15)
    assert local.epsilon_x == pytest.approx(p.epsilon_1, rel=1e-12)
    assert local.epsilon_y == pytest.approx(p.epsilon_2, rel=1e-12)
    # first invariant
    assert local.epsilon_x + local.epsilon_y == pytest.approx(s.epsilon_x + s.epsilon_y)


def test_principal_strain_round_trip():
    from rc_membrane.states import PrincipalStrainState

    p = PrincipalStrainState(0.001, -0.002, 0.3)
    back = p.to_strain_state().to_principal()
    assert back.epsilon_1 == pytest.approx(p.epsilon_1, rel=1e-9)
    assert back.epsilon_2 == pytest.approx(p.epsilon_2, rel=1e-9)
    assert back.theta_1 == pytest.approx(p.theta_1, rel=1e-9)


def test_stress_round_trip_through_principal():
    from rc_membrane.states import StressState

    for sig in [(2.0, -5.0, 3.0), (-12.0, -4.0, -1.5), (1.0, 1.0, 0.5), (0.0, 0.0, 7.0)]:
        s = StressState(*sig)
        p = s.to_principal()
        assert p.sigma_1 >= p.sigma_2

        # independent check with the eigenvalues of the stress tensor
        vals = np.linalg.eigvalsh(np.array([[s.sigma_x, s.tau_xy], [s.tau_xy, s.sigma_y]]))[::-1]
        assert np.allclose([p.sigma_1, p.sigma_2], vals, rtol=1e-9, atol=1e-12)

        back = StressState.from_principal(p)
        assert np.allclose(back.as_vector(), s.as_vector(), rtol=1e-9, atol=1e-12), f"Round trip failed for {sig}"


def test_stress_transform_and_back():
    from rc_membrane.states import StressState

    s = StressState(3.0, -7.0, 2.0)
    r = s.transform(0.6)
    assert r.theta == pytest.approx(0.6)
    h = r.to_horizontal()
    assert h.theta == pytest.approx(0.0)
    assert np.allclose(h.as_vector(), s.as_vector())


def test_ordered_principal_swaps_and_rotates():
    from rc_membrane.states import PrincipalStressState, PrincipalStrainState

    p = PrincipalStressState.ordered(-5.0, 2.0, 0.0)
    assert (p.sigma_1, p.sigma_2) == (2.0, -5.0)
    assert p.theta_1 == pytest.approx(0.5 * math.pi)

    e = PrincipalStrainState.ordered(-0.002, 0.001, 0.2)
    assert e.epsilon_1 == 0.001
    assert e.theta_1 == pytest.approx(0.2 + 0.5 * math.pi - math.pi)


def test_principal_case_classification():
    from rc_membrane.states import PrincipalStrainState, PrincipalCase

    assert PrincipalStrainState(0.001, -0.002).case == PrincipalCase.TENSION_COMPRESSION
    assert PrincipalStrainState(0.001, 0.0).case == PrincipalCase.PURE_TENSION
    assert PrincipalStrainState(0.002, 0.001).case == PrincipalCase.PURE_TENSION
    assert PrincipalStrainState(0.0, -0.001).case == PrincipalCase.PURE_COMPRESSION
    assert PrincipalStrainState(-0.001, -0.002).case == PrincipalCase.PURE_COMPRESSION
    assert PrincipalStrainState(0.0, 0.0).case == PrincipalCase.ZERO
    assert PrincipalStrainState.zero().is_zero


def test_rotate_stiffness_keeps_symmetry():
    from rc_membrane.states import rotate_stiffness

    D = np.diag([25000.0, 12000.0, 8000.0])
    Dr = rotate_stiffness(D, 0.45)
    assert np.allclose(Dr, Dr.T)
    # isotropic (nu = 0) stiffness is invariant under rotation
    E = 30000.0
    Diso = np.diag([E, E, 0.5 * E])
    assert np.allclose(rotate_stiffness(Diso, 0.8), Diso)

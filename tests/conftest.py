"""
Pytest configuration for rc-membrane tests.

Automatically adds src/ to sys.path so tests can import rc_membrane
without PYTHONPATH, and provides shared concrete/steel fixtures.
"""

import sys
import os

import pytest

repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(repo_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)


@pytest.fixture
def concrete():
    """fc = 30 MPa, ft = 3 MPa, ec = -0.002, Ec = 30000 MPa."""
    from rc_membrane.parameters import ConcreteParameters
    return ConcreteParameters.custom(fc=30.0, ft=3.0, Ec=30000.0, ec=-0.002, ecu=-0.0035)


@pytest.fixture
def confined_concrete():
    from rc_membrane.parameters import ConcreteParameters
    return ConcreteParameters.custom(fc=30.0, ft=3.0, Ec=30000.0, ec=-0.002, ecu=-0.0035,
                                     consider_confinement=True)


@pytest.fixture
def web():
    """phi 10 mm @ 100 mm both ways, 2 legs, width 200 mm, fy = 500 MPa."""
    from rc_membrane.reinforcement import WebReinforcement
    from rc_membrane.steel import Steel
    return WebReinforcement.both(10.0, 100.0, Steel(f_y=500.0), 200.0)

"""Model selection: aliases, validation and the law factory."""

import pytest


def test_model_aliases_are_normalized():
    from rc_membrane.constitutive import ConstitutiveModel
    from rc_membrane.model import MembraneModel

    assert MembraneModel().constitutive_model == "mcft"
    assert MembraneModel(constitutive_model="Modified-Compression-Field").model == ConstitutiveModel.MCFT
    assert MembraneModel(constitutive_model=" DSFM ").constitutive_model == "dsfm"
    assert MembraneModel(constitutive_model="disturbed_stress_field").model == ConstitutiveModel.DSFM
    assert MembraneModel(constitutive_model="softened-membrane-model").model == ConstitutiveModel.SMM
    assert MembraneModel(constitutive_model=ConstitutiveModel.SMM).constitutive_model == "smm"


def test_unknown_model_and_bad_cs_raise():
    from rc_membrane.model import MembraneModel

    with pytest.raises(ValueError, match="Unknown constitutive_model"):
        MembraneModel(constitutive_model="cdp")
    with pytest.raises(ValueError, match="cs"):
        MembraneModel(cs=0.0)


def test_factory_returns_selected_law(concrete):
    from rc_membrane.constitutive import DSFM, MCFT, SMM, ConstitutiveModel
    from rc_membrane.material_factory import make_constitutive
    from rc_membrane.model import MembraneModel

    assert isinstance(make_constitutive(concrete), MCFT)
    assert isinstance(make_constitutive(concrete, "dsfm"), DSFM)
    assert isinstance(make_constitutive(concrete, ConstitutiveModel.SMM), SMM)
    assert isinstance(make_constitutive(concrete, MembraneModel(constitutive_model="smm")), SMM)

    with pytest.raises(ValueError):
        make_constitutive(concrete, "unknown")


def test_crack_slip_defaults_and_overrides(concrete):
    from rc_membrane.convergence import ConfinementConvergence
    from rc_membrane.material_factory import make_constitutive
    from rc_membrane.model import MembraneModel

    assert not make_constitutive(concrete, "mcft").consider_crack_slip
    assert make_constitutive(concrete, "dsfm").consider_crack_slip
    assert not make_constitutive(concrete, "smm").consider_crack_slip

    conv = ConfinementConvergence(tolerance=0.001, max_iterations=50)
    law = make_constitutive(
        concrete,
        MembraneModel(constitutive_model="dsfm", cs=0.7, consider_crack_slip=False, confinement=conv),
    )
    assert not law.consider_crack_slip
    assert law.cs == 0.7
    assert law.effective_cs == 1.0
    assert law.convergence is conv

    assert make_constitutive(concrete, MembraneModel(consider_crack_slip=True)).consider_crack_slip


def test_convergence_rules_validate():
    from rc_membrane.convergence import ConfinementConvergence

    c = ConfinementConvergence()
    assert c.tolerance == 0.01 and c.max_iterations == 20
    assert c.converged(-30.0, -30.2)
    assert not c.converged(-30.0, -31.0)

    with pytest.raises(ValueError):
        ConfinementConvergence(tolerance=0.0)
    with pytest.raises(ValueError):
        ConfinementConvergence(max_iterations=0)

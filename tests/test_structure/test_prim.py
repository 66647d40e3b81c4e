import numpy as np
import numpy.testing as npt
import pytest
from pymatgen.core import Lattice, Structure

from symcanon import constants
from symcanon.structure import Prim, Vacancy
from tests.conftest import factor_group_orders
from tests.utils import assert_msonable, assert_pickles


def test_factor_group(prim, prim_name):
    assert len(prim.factor_group) == factor_group_orders[prim_name]
    assert prim.factor_group.identity is not None
    for op in prim.factor_group:
        # fractional rotations of lattice symmetries are integer
        npt.assert_allclose(op.rotation_matrix, np.round(op.rotation_matrix))


def test_point_group(prim, prim_name):
    rotations = [np.round(op.rotation_matrix) for op in prim.point_group]
    assert len(prim.point_group) == factor_group_orders[prim_name]
    for i, rot in enumerate(rotations):
        assert not any(np.array_equal(rot, other) for other in rotations[i + 1 :])
    # point group ops are factor group ops
    for op in prim.point_group:
        assert prim.factor_group.find(op) is not None


def test_cart_rotation(prim):
    for op in prim.factor_group:
        rotation = prim.cart_rotation(op)
        npt.assert_allclose(rotation @ rotation.T, np.eye(3), atol=1e-8)
        # fractional and cartesian rotations agree on lattice vectors
        frac = np.array([0.1, 0.2, 0.3])
        cart = prim.lattice.get_cartesian_coords(frac)
        npt.assert_allclose(
            rotation @ cart,
            prim.lattice.get_cartesian_coords(op.rotation_matrix @ frac),
            atol=1e-8,
        )


def test_allowed_species(bcc_prim):
    assert len(bcc_prim) == 2
    assert len(bcc_prim.allowed_species[0]) == 2
    assert isinstance(bcc_prim.allowed_species[1][-1], Vacancy)
    assert str(bcc_prim.allowed_species[1][0]) == "Cu"


def test_not_primitive():
    structure = Structure(
        Lattice.cubic(4.0),
        4 * [{"Au": 0.5, "Pd": 0.5}],
        [[0, 0, 0], [0.5, 0.5, 0], [0.5, 0, 0.5], [0, 0.5, 0.5]],
    )
    with pytest.warns(UserWarning):
        prim = Prim(structure)
    assert len(prim) == 4


def test_tolerances(fcc_prim):
    assert fcc_prim.symprec == constants.SYMPREC
    assert fcc_prim.angle_tolerance == constants.ANGLE_TOL
    prim = Prim(fcc_prim.structure, symprec=1e-3, angle_tolerance=1)
    assert prim.symprec == 1e-3
    assert len(prim.factor_group) == 48


def test_msonable(prim):
    _ = repr(prim)
    assert_msonable(prim)
    assert_pickles(prim)

import numpy as np
import pytest
from pymatgen.core import Lattice, Structure

from symcanon.structure import Prim, Supercell
from symcanon.symmetry import Group
from tests.utils import ShiftElement

SEED = None

FCC_MATRIX = [[0.0, 2.0, 2.0], [2.0, 0.0, 2.0], [2.0, 2.0, 0.0]]


def fcc_structure():
    """Disordered binary fcc primitive structure."""
    return Structure(
        Lattice(FCC_MATRIX), [{"Au": 0.5, "Pd": 0.5}], [[0.0, 0.0, 0.0]]
    )


def bcc_structure():
    """CsCl type structure with a binary site and a site with vacancies."""
    return Structure(
        Lattice.cubic(3.0),
        [{"Au": 0.5, "Pd": 0.5}, {"Cu": 0.5}],
        [[0.0, 0.0, 0.0], [0.5, 0.5, 0.5]],
    )


def tetragonal_structure():
    """Disordered binary simple tetragonal structure."""
    return Structure(
        Lattice.tetragonal(3.0, 4.0), [{"Au": 0.5, "Pd": 0.5}], [[0.0, 0.0, 0.0]]
    )


def rocksalt_structure():
    """Rocksalt primitive structure with cation vacancies and mixed anions."""
    return Structure(
        Lattice(FCC_MATRIX),
        [{"Li": 0.5}, {"O": 0.5, "F": 0.5}],
        [[0.0, 0.0, 0.0], [0.5, 0.5, 0.5]],
    )


test_structures = {
    "fcc": fcc_structure(),
    "bcc": bcc_structure(),
    "tetragonal": tetragonal_structure(),
    "rocksalt": rocksalt_structure(),
}

# factor group orders of the test structures
factor_group_orders = {"fcc": 48, "bcc": 48, "tetragonal": 16, "rocksalt": 48}


@pytest.fixture(scope="module")
def rng():
    """Seed and return an RNG for test reproducibility"""
    return np.random.default_rng(SEED)


@pytest.fixture(params=list(test_structures.keys()), scope="package")
def prim_name(request):
    return request.param


@pytest.fixture(scope="package")
def prim(prim_name):
    return Prim(test_structures[prim_name])


@pytest.fixture(scope="package")
def fcc_prim():
    return Prim(fcc_structure())


@pytest.fixture(scope="package")
def bcc_prim():
    return Prim(bcc_structure())


@pytest.fixture(scope="module")
def fcc_supercell(fcc_prim):
    # conventional cubic fcc cell
    return Supercell(fcc_prim, [[-1, 1, 1], [1, -1, 1], [1, 1, -1]])


@pytest.fixture(scope="module")
def cyclic_group():
    """Cyclic group of order 6 acting on necklaces of 6 beads."""
    return Group(ShiftElement(i) for i in range(6))

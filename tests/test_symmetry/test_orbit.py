from itertools import product

import numpy as np
import pytest

from symcanon.structure import Cluster
from symcanon.symmetry import ClusterCompare, OrbitGenerator
from tests.utils import Necklace, NecklaceCompare


@pytest.fixture(scope="module")
def generator(cyclic_group):
    return OrbitGenerator(cyclic_group, NecklaceCompare())


@pytest.mark.parametrize(
    "beads, multiplicity",
    [
        ([0, 0, 0, 0, 0, 0], 1),
        ([1, 0, 1, 0, 1, 0], 2),
        ([1, 1, 0, 1, 1, 0], 3),
        ([1, 0, 0, 0, 0, 0], 6),
        ([1, 1, 0, 1, 0, 0], 6),
    ],
)
def test_generate(generator, beads, multiplicity):
    seed = Necklace(beads)
    orbit = generator.generate(seed)
    assert orbit.multiplicity == multiplicity
    assert len(orbit) == multiplicity
    # orbit stabilizer theorem
    assert orbit.multiplicity * len(orbit.invariant_subgroup) == 6

    compare = generator.sym_compare
    assert compare.equal(orbit[0], orbit.prototype)
    assert compare.equal(orbit.prototype, generator.canonical(seed).form)
    for element, operations in zip(orbit, orbit.equivalence_map):
        for op in operations:
            assert compare.equal(op.apply(orbit.prototype), element)
    # elements are unique and seed is among them
    for el1, el2 in product(orbit, repeat=2):
        assert compare.equal(el1, el2) == (el1 is el2)
    assert any(compare.equal(seed, element) for element in orbit)


def test_generate_from_equivalent_seeds(generator, cyclic_group):
    seed = Necklace([1, 1, 0, 1, 0, 0])
    orbit = generator.generate(seed)
    for op in cyclic_group:
        other = generator.generate(op.apply(seed))
        assert len(other) == len(orbit)
        for el1, el2 in zip(orbit, other):
            np.testing.assert_array_equal(el1.beads, el2.beads)


def test_canonical(generator):
    seed = Necklace([0, 0, 1, 0, 1, 1])
    match = generator.canonical(seed)
    np.testing.assert_array_equal(match.form.beads, [1, 1, 0, 0, 1, 0])
    np.testing.assert_array_equal(match.operation.apply(seed).beads, match.form.beads)
    assert match.operation.index == 2
    assert not generator.is_canonical(seed)
    assert generator.is_canonical(match.form)


def test_ties_keep_first_operation(generator):
    # every rotation by 2 leaves the necklace invariant, first maximal op wins
    seed = Necklace([0, 1, 0, 1, 0, 1])
    assert generator.canonical(seed).operation.index == 1
    assert [op.index for op in generator.invariant_subgroup(seed)] == [0, 2, 4]


@pytest.mark.parametrize(
    "coords, multiplicity",
    [
        ([[0, 0, 0]], 1),
        ([[0, 0, 0], [1, 0, 0]], 6),
        ([[0, 0, 0], [1, 1, -1]], 3),
        ([[0, 0, 0], [1, 0, 0], [0, 1, 0]], 8),
    ],
)
def test_cluster_orbits(fcc_prim, coords, multiplicity):
    cluster = Cluster.from_prim(fcc_prim, coords)
    factor_group = fcc_prim.factor_group
    orbit = OrbitGenerator(factor_group, ClusterCompare()).generate(cluster)
    assert orbit.multiplicity == multiplicity
    assert orbit.multiplicity * len(orbit.invariant_subgroup) == len(factor_group)
    assert ClusterCompare().equal(orbit.prototype, cluster.canonical_form(factor_group))

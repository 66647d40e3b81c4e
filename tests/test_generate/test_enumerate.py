import logging

import numpy as np
import numpy.testing as npt
import pytest

from symcanon.database import ConfigurationDatabase, SupercellDatabase
from symcanon.generate import (
    enumerate_configurations,
    enumerate_configurations_into,
    enumerate_supercell_matrices,
    enumerate_supercells,
)

# number of symmetrically distinct fcc superlattices of each size
FCC_SUPERCELL_COUNTS = {1: 1, 2: 2, 3: 3, 4: 7}
# number of primitive binary fcc configurations of each size
FCC_CONFIGURATION_COUNTS = {1: 2, 2: 2, 3: 3, 4: 12}


@pytest.fixture(scope="module")
def fcc_supercells(fcc_prim):
    return list(enumerate_supercells(fcc_prim, 4))


def test_enumerate_supercells(fcc_supercells):
    sizes = [supercell.num_prims for supercell in fcc_supercells]
    assert sizes == sorted(sizes)
    for size, count in FCC_SUPERCELL_COUNTS.items():
        assert sizes.count(size) == count

    keys = [(s.num_prims, s.hnf_key) for s in fcc_supercells]
    assert keys == sorted(keys)
    for supercell in fcc_supercells:
        assert supercell.is_canonical()
        npt.assert_array_equal(supercell.matrix, supercell.hnf.T)

    # no two supercells are equivalent
    for i, supercell in enumerate(fcc_supercells):
        for other in fcc_supercells[i + 1 :]:
            assert not supercell.is_equivalent(other)


def test_enumerate_supercells_range(fcc_prim):
    supercells = list(enumerate_supercells(fcc_prim, 3, min_size=2))
    assert [s.num_prims for s in supercells] == [2, 2, 3, 3, 3]
    with pytest.raises(ValueError):
        list(enumerate_supercells(fcc_prim, 2, min_size=3))
    with pytest.raises(ValueError):
        list(enumerate_supercells(fcc_prim, 2, min_size=0))


@pytest.mark.parametrize("size", range(2, 7, 2))
def test_enumerate_supercell_matrices(prim, size):
    scms = enumerate_supercell_matrices(prim, size)

    # assert determinants are correct
    for scm in scms:
        assert np.linalg.det(scm) == pytest.approx(size)

    # make sure that all the scms are unique
    assert len(np.unique(scms, axis=0)) == len(scms)

    # check that no two matrices are related by symmetry
    for scm in scms:
        for symop in prim.point_group:
            rot = np.linalg.inv(scm.T) @ symop.rotation_matrix
            equiv = [(abs(rot @ m.T - np.round(rot @ m.T)) < 1e-5).all() for m in scms]
            assert sum(equiv) <= 1  # at most one matrix is equivalent (ie itself)
            if sum(equiv) == 1:  # make sure the equivalent is actually the same
                equiv_scm = scms[equiv.index(True)]
                npt.assert_allclose(scm, equiv_scm)


def test_enumerate_configurations(fcc_supercells):
    counts = {size: 0 for size in FCC_CONFIGURATION_COUNTS}
    for supercell in fcc_supercells:
        configs = list(enumerate_configurations(supercell, primitive_only=True))
        counts[supercell.num_prims] += len(configs)
        for config in configs:
            assert config.is_canonical()
            assert config.is_primitive()
    assert counts == FCC_CONFIGURATION_COUNTS


def test_enumerate_configurations_all(fcc_supercells):
    # all configurations of a diagonal size 4 supercell
    supercell = next(
        s for s in fcc_supercells if s.num_prims == 4 and not any(s.hnf_key[3:])
    )
    configs = list(enumerate_configurations(supercell))
    occupations = [tuple(config.occupation) for config in configs]
    assert occupations == sorted(occupations)
    assert (0, 0, 0, 0) in occupations
    assert (1, 1, 1, 1) in occupations
    # every occupation is equivalent to exactly one enumerated configuration
    for config in configs:
        equivalent = [c for c in configs if c.is_equivalent(config)]
        assert equivalent == [config]


def test_enumerate_configurations_filter(fcc_supercells):
    supercell = fcc_supercells[-1]
    configs = list(
        enumerate_configurations(
            supercell, filter_func=lambda c: c.occupation.sum() == 2, progress=True
        )
    )
    assert len(configs) > 0
    assert all(config.occupation.sum() == 2 for config in configs)


def test_enumerate_configurations_into(fcc_supercells, caplog):
    supercell_db = SupercellDatabase()
    config_db = ConfigurationDatabase()
    with caplog.at_level(logging.INFO):
        num_new = enumerate_configurations_into(
            fcc_supercells, supercell_db, config_db, primitive_only=True
        )
    assert num_new == sum(FCC_CONFIGURATION_COUNTS.values())
    assert len(config_db) == num_new
    assert len(supercell_db) == len(fcc_supercells)
    assert not config_db.is_dirty and not supercell_db.is_dirty
    assert len(config_db.committed) == num_new
    assert "# new configurations" in caplog.text

    for config in config_db:
        assert config.is_canonical()
        assert config.is_primitive()
        assert config.supercell is supercell_db.find(config.supercell.name)

    # a second pass finds nothing new
    assert (
        enumerate_configurations_into(
            fcc_supercells, supercell_db, config_db, primitive_only=True
        )
        == 0
    )


def test_enumerate_configurations_into_options(fcc_supercells):
    supercell_db = SupercellDatabase()
    config_db = ConfigurationDatabase()
    supercells = fcc_supercells[:3]
    num_new = enumerate_configurations_into(
        supercells, supercell_db, config_db, dry_run=True
    )
    # non primitive configurations are inserted as well
    assert num_new > sum(FCC_CONFIGURATION_COUNTS[size] for size in (1, 2))
    assert config_db.is_dirty and supercell_db.is_dirty
    assert config_db.committed == []

    config_db = ConfigurationDatabase()
    num_new = enumerate_configurations_into(
        supercells,
        SupercellDatabase(),
        config_db,
        filter_func=lambda c: c.occupation.sum() == 0,
        primitive_only=True,
    )
    assert num_new == 1
    npt.assert_array_equal(next(iter(config_db)).occupation, [0])

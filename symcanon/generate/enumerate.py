"""Exhaustive enumeration of symmetrically distinct supercells and configurations.

Supercells are enumerated as hermite normal forms of each size, keeping the
ones that are canonical under the prim point group. Configurations are
enumerated by iterating over all occupations of a supercell, keeping the ones
that are canonical under the supercell permutation group.
"""

__author__ = "Luis Barroso-Luque"

import logging
from itertools import product

import numpy as np

from symcanon.database import make_canonical_and_insert
from symcanon.structure.configuration import Configuration
from symcanon.structure.supercell import Supercell
from symcanon.utils.math import yield_hermite_normal_forms
from symcanon.utils.progressbar import progress_bar

logger = logging.getLogger(__name__)


def enumerate_supercells(prim, max_size, min_size=1):
    """Generate all symmetrically distinct supercells within a range of sizes.

    Supercells are yielded in increasing size, and within a size in
    increasing order of their hermite normal forms. Matrices are given in
    Hermite normal form following the following work:

    * https://link.aps.org/doi/10.1103/PhysRevB.77.224115
    * https://link.aps.org/doi/10.1103/PhysRevB.80.014120

    Args:
        prim (Prim):
            the parent prim.
        max_size (int):
            largest supercell size in multiples of the prim cell.
        min_size (int): optional
            smallest supercell size in multiples of the prim cell.

    Yields:
        Supercell: canonical supercells, with the hnf as transformation matrix
    """
    if min_size < 1 or max_size < min_size:
        raise ValueError(f"Invalid range of supercell sizes [{min_size}, {max_size}].")

    for size in range(min_size, max_size + 1):
        count = 0
        for hnf in yield_hermite_normal_forms(size):
            # supercells in pmg are transpose of hnf
            supercell = Supercell(prim, hnf.T)
            if supercell.is_canonical():
                count += 1
                yield supercell
        logger.info("Enumerated %i supercells of size %i.", count, size)


def enumerate_supercell_matrices(prim, size):
    """Generate all symmetrically distinct supercell matrices of a given size.

    Args:
        prim (Prim):
            the parent prim.
        size (int):
            size of the supercell in multiples of the primitive cell

    Returns:
        list of ndarray: list of supercell matrices with given size
    """
    return [supercell.matrix for supercell in enumerate_supercells(prim, size, size)]


def enumerate_configurations(
    supercell, primitive_only=False, filter_func=None, progress=False
):
    """Generate all symmetrically distinct occupations of a supercell.

    The permutation group of the supercell is computed once and reused to
    check canonicity of every occupation.

    Args:
        supercell (Supercell):
            supercell to enumerate configurations of.
        primitive_only (bool): optional
            only yield configurations that are primitive.
        filter_func (Callable): optional
            function taking a Configuration and returning True if it should
            be yielded.
        progress (bool): optional
            if true will show a progress bar over all occupations.

    Yields:
        Configuration: canonical configurations in lexicographic order of
            their occupation
    """
    operations = supercell.permutation_group
    num_species = supercell.num_species
    total = int(np.prod(num_species))
    with progress_bar(progress, total, f"Enumerating {supercell.name}") as bar:
        for occupation in product(*(range(n) for n in num_species)):
            bar.update()
            configuration = Configuration(supercell, occupation)
            if not configuration.is_canonical(operations):
                continue
            if primitive_only and not configuration.is_primitive():
                continue
            if filter_func is not None and not filter_func(configuration):
                continue
            yield configuration


def enumerate_configurations_into(
    supercells,
    supercell_db,
    config_db,
    filter_func=None,
    primitive_only=False,
    dry_run=False,
    progress=False,
):
    """Enumerate configurations of several supercells and insert them in a database.

    Every enumerated configuration passing the filter is made canonical and
    inserted in the configuration database, with its supercell inserted in the
    supercell database. Both databases are committed at the end unless dry_run
    is set.

    Args:
        supercells (Iterable of Supercell):
            supercells to enumerate configurations of.
        supercell_db (SupercellDatabase):
            database of canonical supercells.
        config_db (ConfigurationDatabase):
            database of canonical configurations.
        filter_func (Callable): optional
            function taking a Configuration and returning True if it should
            be inserted.
        primitive_only (bool): optional
            only insert primitive configurations.
        dry_run (bool): optional
            if true the databases are not committed.
        progress (bool): optional
            if true will show a progress bar for each supercell.

    Returns:
        int: number of new configurations inserted
    """
    dry_run_msg = "(dry run) " if dry_run else ""
    initial = len(config_db)
    logger.info("%s# configurations in database: %i", dry_run_msg, initial)

    for supercell in supercells:
        supercell = make_canonical_and_insert(supercell, supercell_db)[0]
        count, count_filtered = 0, 0
        num_before = len(config_db)
        for configuration in enumerate_configurations(supercell, progress=progress):
            if filter_func is not None and not filter_func(configuration):
                count_filtered += 1
                continue
            count += 1
            make_canonical_and_insert(
                configuration, supercell_db, config_db, primitive_only=primitive_only
            )
        logger.info(
            "%sEnumerated %i configurations of %s (%i new, %i excluded by filter).",
            dry_run_msg,
            count,
            supercell.name,
            len(config_db) - num_before,
            count_filtered,
        )

    num_new = len(config_db) - initial
    logger.info("%s# new configurations: %i", dry_run_msg, num_new)
    logger.info("%s# configurations in database: %i", dry_run_msg, len(config_db))

    if not dry_run:
        supercell_db.commit()
        config_db.commit()

    return num_new

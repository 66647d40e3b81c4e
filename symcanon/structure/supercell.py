"""Implementation of the Supercell class.

A supercell is defined by an integer transformation matrix of the prim
lattice. Supercells have no degrees of freedom beyond their lattice, so they
are canonicalized by their superlattice under the prim point group. A
supercell also owns the site ordering and the permutation group used to
canonicalize configurations.
"""

__author__ = "Luis Barroso-Luque"

import logging
from functools import cached_property

import numpy as np
from monty.json import MSONable
from pymatgen.core import Lattice, Structure
from pymatgen.util.coord import coord_list_mapping_pbc, lattice_points_in_supercell

from symcanon import constants
from symcanon.structure.prim import Prim
from symcanon.symmetry.canonical import CanonicalForm
from symcanon.symmetry.compare import SupercellCompare
from symcanon.symmetry.group import Group, PermuteOperation, SymOpElement
from symcanon.utils.exceptions import (
    SYMMETRY_ERROR_MESSAGE,
    StructureMatchError,
    SymmetryError,
)
from symcanon.utils.math import hermite_normal_form, round_to_integer

logger = logging.getLogger(__name__)


class Supercell(MSONable):
    """A supercell of a prim structure.

    The rows of the transformation matrix are the supercell lattice vectors in
    fractional coordinates of the prim lattice, following the pymatgen
    convention: supercell lattice matrix = matrix @ prim lattice matrix.

    Sites are ordered by sublattice first, site l = b * num_prims + i is the
    prim site b translated by the i-th lattice translation of the supercell.

    Attributes:
        prim (Prim):
            the parent prim.
        matrix (ndarray):
            3 x 3 integer transformation matrix.
    """

    def __init__(self, prim, matrix):
        """Initialize a Supercell.

        Args:
            prim (Prim):
                parent prim.
            matrix (ArrayLike):
                3 x 3 integer transformation matrix, or a single integer for
                a diagonal scaling.
        """
        matrix = np.asarray(matrix)
        if matrix.ndim == 0:
            matrix = matrix * np.eye(3)
        matrix = round_to_integer(matrix)
        if matrix.shape != (3, 3):
            raise ValueError(f"Supercell matrix must be 3 x 3, got {matrix.shape}.")
        if round(np.linalg.det(matrix)) == 0:
            raise ValueError(f"Supercell matrix {matrix.tolist()} is singular.")

        self.prim = prim
        self.matrix = matrix
        self.matrix.setflags(write=False)

    @property
    def num_prims(self):
        """Get number of prim cells in the supercell."""
        return int(round(abs(np.linalg.det(self.matrix))))

    @property
    def num_sites(self):
        """Get number of sites in the supercell."""
        return self.num_prims * len(self.prim)

    @cached_property
    def lattice(self):
        """Get the supercell lattice."""
        return Lattice(self.matrix @ self.prim.lattice.matrix)

    @cached_property
    def hnf(self):
        """Get the hermite normal form identifying the superlattice.

        Lower triangular matrix H such that H.T generates the same superlattice
        as the transformation matrix.
        """
        return hermite_normal_form(self.matrix.T)

    @property
    def hnf_key(self):
        """Get the ordering key of the superlattice, diagonal entries first."""
        h = self.hnf
        return h[0, 0], h[1, 1], h[2, 2], h[1, 0], h[2, 0], h[2, 1]

    @property
    def name(self):
        """Get a unique name of the superlattice."""
        return f"SCEL{self.num_prims}_" + "_".join(str(i) for i in self.hnf_key)

    @cached_property
    def translations(self):
        """Get the prim lattice translations inside the supercell.

        Integer vectors in fractional coordinates of the prim lattice.
        """
        points = lattice_points_in_supercell(self.matrix)
        return np.round(points @ self.matrix).astype(int)

    @cached_property
    def prim_frac_coords(self):
        """Get site coordinates in fractional coordinates of the prim lattice."""
        return np.concatenate(
            [coords + self.translations for coords in self.prim.frac_coords]
        )

    @cached_property
    def frac_coords(self):
        """Get site coordinates in fractional coordinates of the supercell."""
        frac_coords = np.mod(self.prim_frac_coords @ np.linalg.inv(self.matrix), 1.0)
        frac_coords[np.isclose(frac_coords, 1.0, atol=constants.SITE_TOL)] = 0.0
        return frac_coords

    @property
    def sublattices(self):
        """Get the prim site index of each supercell site."""
        return np.repeat(np.arange(len(self.prim)), self.num_prims)

    @property
    def allowed_species(self):
        """Get the allowed species of each supercell site."""
        return [self.prim.allowed_species[b] for b in self.sublattices]

    @property
    def num_species(self):
        """Get the number of allowed species of each supercell site."""
        return np.array([len(species) for species in self.allowed_species], dtype=int)

    @cached_property
    def structure(self):
        """Get the disordered supercell structure."""
        return Structure(
            self.lattice,
            [self.prim.structure[b].species for b in self.sublattices],
            self.frac_coords,
        )

    def site_indices(self, prim_frac_coords):
        """Get the indices of supercell sites at the given coordinates.

        Coordinates are matched modulo the supercell lattice.

        Args:
            prim_frac_coords (ArrayLike):
                N x 3 coordinates in fractional coordinates of the prim.

        Returns:
            ndarray: site indices
        """
        coords = np.asarray(prim_frac_coords) @ np.linalg.inv(self.matrix)
        try:
            return coord_list_mapping_pbc(
                coords, self.frac_coords, atol=constants.SITE_TOL
            )
        except ValueError as value_error:
            raise StructureMatchError(
                "Some coordinates could not be matched to sites in supercell "
                f"{self.name}."
            ) from value_error

    @cached_property
    def factor_group(self):
        """Get the prim factor group operations that leave the superlattice invariant.

        Returns:
            list of SymOpElement: with their prim factor group indices
        """
        return self.invariant_subgroup(self.prim.factor_group)

    @cached_property
    def translation_permutations(self):
        """Get the site permutations of each lattice translation.

        Returns:
            list of ndarray: permutation for each translation, such that the
                values after translation are values[permutation]
        """
        return [
            np.argsort(self.site_indices(self.prim_frac_coords + translation))
            for translation in self.translations
        ]

    @cached_property
    def permutation_group(self):
        """Get the permutation group of the supercell sites.

        Operations are ordered by factor group operation first, then by lattice
        translation. The group is computed once and cached, it can be passed
        (or sliced) to canonicalize many configurations of this supercell.

        Returns:
            Group: of PermuteOperation
        """
        logger.debug(
            "Generating permutation group of supercell %s with %i operations.",
            self.name,
            len(self.factor_group) * self.num_prims,
        )
        translation_maps = [np.argsort(perm) for perm in self.translation_permutations]
        operations = []
        for op in self.factor_group:
            try:
                site_map = self.site_indices(op.operate_multi(self.prim_frac_coords))
            except StructureMatchError as match_error:
                raise SymmetryError(SYMMETRY_ERROR_MESSAGE) from match_error
            cart_rotation = self.prim.cart_rotation(op)
            for j, (translation, translation_map) in enumerate(
                zip(self.translations, translation_maps)
            ):
                operations.append(
                    PermuteOperation(
                        np.argsort(translation_map[site_map]),
                        SymOpElement.from_rotation_and_translation(
                            op.rotation_matrix, op.translation_vector + translation
                        ),
                        cart_rotation,
                        factor_group_index=op.index,
                        translation_index=j,
                    )
                )
        return Group(operations)

    def copy_apply(self, op):
        """Apply the rotation of an operation to the superlattice.

        Args:
            op (SymOpElement or PermuteOperation):
                operation with a fractional rotation matrix.

        Returns:
            Supercell: supercell with the rotated superlattice
        """
        rotation = np.round(op.rotation_matrix).astype(int)
        return Supercell(self.prim, self.matrix @ rotation.T)

    @property
    def _canonical(self):
        return CanonicalForm(self.prim.point_group, SupercellCompare())

    def is_canonical(self):
        """Check if the superlattice is canonical under the prim point group."""
        return self._canonical.is_canonical(self)

    def to_canonical(self):
        """Get the point group operation mapping this supercell to canonical form."""
        return self._canonical.to_canonical(self)

    def from_canonical(self):
        """Get the point group operation mapping the canonical form to this one."""
        return self._canonical.from_canonical(self)

    def canonical_form(self):
        """Get the canonical supercell.

        The returned supercell is a new object with the hermite normal form of
        the canonical superlattice as transformation matrix. To get a unique
        shared instance use SupercellDatabase.resolve_canonical.
        """
        canonical = self._canonical.canonical_form(self)
        return Supercell(self.prim, canonical.hnf.T)

    def is_equivalent(self, other):
        """Check if two supercells have symmetrically equivalent superlattices."""
        return self._canonical.is_equivalent(self, other)

    def invariant_subgroup(self, operations=None):
        """Get the operations that leave the superlattice invariant.

        Args:
            operations (Sequence of GroupElement): optional
                operations with a rotation matrix, for example the permutation
                group of a parent supercell or a range of it. Defaults to the
                prim point group.

        Returns:
            list of GroupElement
        """
        if operations is None:
            operations = self.prim.point_group
        return CanonicalForm(operations, SupercellCompare()).invariant_subgroup(self)

    def is_supercell_of(self, other):
        """Check if the superlattice is a superlattice of another supercell's."""
        transformation = self.matrix @ np.linalg.inv(other.matrix)
        return np.allclose(transformation, np.round(transformation), atol=1e-8)

    def __eq__(self, other):
        """Check if two supercells have the same prim and transformation matrix."""
        if not isinstance(other, Supercell):
            return NotImplemented
        return self.prim is other.prim and np.array_equal(self.matrix, other.matrix)

    def __hash__(self):
        """Hash the transformation matrix."""
        return hash(self.matrix.tobytes())

    def __str__(self):
        """Pretty print a supercell."""
        outs = [
            f"Supercell {self.name}",
            f"No. prims : {self.num_prims}",
            f"No. sites : {self.num_sites}",
            "Matrix : ",
            "  | " + "\n  | ".join(str(row) for row in self.matrix.tolist()),
        ]
        return "\n".join(outs)

    def __repr__(self):
        """Get Supercell summary."""
        return f"Supercell({self.name}, matrix={self.matrix.tolist()})"

    def as_dict(self):
        """Get json-serialization dict representation.

        Returns:
            MSONable dict
        """
        return {
            "@module": self.__class__.__module__,
            "@class": self.__class__.__name__,
            "prim": self.prim.as_dict(),
            "matrix": self.matrix.tolist(),
        }

    @classmethod
    def from_dict(cls, d):
        """Create a Supercell from serialized dict."""
        return cls(Prim.from_dict(d["prim"]), d["matrix"])

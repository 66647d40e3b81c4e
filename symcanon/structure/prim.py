"""Implementation of the Prim class.

A Prim holds the primitive parent structure of an enumeration, its factor
group and point group. All supercells, configurations and clusters are
defined with respect to a Prim.
"""

__author__ = "Luis Barroso-Luque"

import warnings
from functools import cached_property

import numpy as np
from monty.json import MSONable
from pymatgen.core import Structure
from pymatgen.symmetry.analyzer import SpacegroupAnalyzer

from symcanon import constants
from symcanon.structure.domain import get_allowed_species
from symcanon.symmetry.group import Group
from symcanon.utils.exceptions import SYMMETRY_ERROR_MESSAGE, SymmetryError


class Prim(MSONable):
    """Primitive parent structure and its symmetry.

    The factor group is given in fractional coordinates of the prim lattice,
    in the order returned by spglib. The point group is made of the first
    factor group operation found for each distinct rotation, so its elements
    are full space group operations (including their fractional translation)
    that act on lattices through their rotation only.

    Attributes:
        structure (Structure):
            the (possibly disordered) primitive structure.
        symprec (float):
            symmetry precision used by spglib.
        angle_tolerance (float):
            angle tolerance used by spglib.
    """

    def __init__(self, structure, symprec=None, angle_tolerance=None):
        """Initialize a Prim.

        Args:
            structure (Structure):
                a pymatgen Structure. Disordered sites define the allowed
                species at each site.
            symprec (float): optional
                symmetry precision, defaults to constants.SYMPREC
            angle_tolerance (float): optional
                angle tolerance in degrees, defaults to constants.ANGLE_TOL
        """
        self.structure = structure
        self.symprec = constants.SYMPREC if symprec is None else symprec
        self.angle_tolerance = (
            constants.ANGLE_TOL if angle_tolerance is None else angle_tolerance
        )

        analyzer = SpacegroupAnalyzer(
            structure, symprec=self.symprec, angle_tolerance=self.angle_tolerance
        )
        symmops = analyzer.get_symmetry_operations(cartesian=False)
        self._factor_group = Group.from_symmops(symmops)
        if self._factor_group.identity is None:
            raise SymmetryError(SYMMETRY_ERROR_MESSAGE)

        primitive = analyzer.find_primitive()
        if primitive is not None and len(primitive) < len(structure):
            warnings.warn(
                f"The given structure with {len(structure)} sites is not primitive, "
                f"a primitive cell has {len(primitive)} sites. Supercells and "
                "configurations will miss translational symmetry.",
                UserWarning,
            )

        self._allowed_species = get_allowed_species(structure)

    @property
    def lattice(self):
        """Get the prim lattice."""
        return self.structure.lattice

    @property
    def frac_coords(self):
        """Get fractional coordinates of the prim sites."""
        return self.structure.frac_coords

    @property
    def allowed_species(self):
        """Get the allowed species for each prim site."""
        return self._allowed_species

    @property
    def factor_group(self):
        """Get the factor group as a Group of SymOpElement."""
        return self._factor_group

    @cached_property
    def point_group(self):
        """Get the point group as a Group of SymOpElement.

        The first factor group operation with each distinct rotation.
        """
        rotations, elements = [], []
        for element in self._factor_group:
            rotation = np.round(element.rotation_matrix).astype(int)
            if not any(np.array_equal(rotation, rot) for rot in rotations):
                rotations.append(rotation)
                elements.append(element)
        return Group(elements)

    def cart_rotation(self, op):
        """Get the cartesian rotation matrix of a fractional operation.

        Args:
            op (SymOpElement):
                operation in fractional coordinates of the prim lattice.

        Returns:
            ndarray: 3 x 3 rotation acting on cartesian column vectors
        """
        lattice_columns = self.lattice.matrix.T
        return lattice_columns @ op.rotation_matrix @ np.linalg.inv(lattice_columns)

    def __len__(self):
        """Get number of prim sites."""
        return len(self.structure)

    def __repr__(self):
        """Get Prim summary."""
        return (
            f"Prim({self.structure.composition.reduced_formula}, "
            f"sites={len(self)}, factor group order={len(self.factor_group)}, "
            f"point group order={len(self.point_group)})"
        )

    def as_dict(self):
        """Get json-serialization dict representation.

        Returns:
            MSONable dict
        """
        return {
            "@module": self.__class__.__module__,
            "@class": self.__class__.__name__,
            "structure": self.structure.as_dict(),
            "symprec": self.symprec,
            "angle_tolerance": self.angle_tolerance,
        }

    @classmethod
    def from_dict(cls, d):
        """Create a Prim from serialized dict."""
        return cls(
            Structure.from_dict(d["structure"]),
            symprec=d["symprec"],
            angle_tolerance=d["angle_tolerance"],
        )

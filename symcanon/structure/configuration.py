"""Implementation of the Configuration class.

A configuration is an assignment of values to the sites of a supercell: an
occupation code for each site and, optionally, a cartesian displacement
vector for each site. Configurations are canonicalized with the site
permutation group of their supercell, or any caller provided range of it.
"""

__author__ = "Luis Barroso-Luque, Fengyu Xie"

from functools import cached_property

import numpy as np
from monty.json import MSONable
from pymatgen.core import Structure

from symcanon import constants
from symcanon.structure.domain import Vacancy
from symcanon.structure.supercell import Supercell
from symcanon.symmetry.canonical import CanonicalForm
from symcanon.symmetry.compare import ConfigurationCompare
from symcanon.utils.math import hermite_normal_form


class Configuration(MSONable):
    """Values of the degrees of freedom of all sites in a supercell.

    Attributes:
        supercell (Supercell):
            supercell the configuration is defined on.
        occupation (ndarray):
            integer code of the species at each site, indexing the allowed
            species of that site.
        displacement (ndarray):
            N x 3 cartesian displacements of each site, or None.
    """

    def __init__(self, supercell, occupation, displacement=None):
        """Initialize a Configuration.

        Args:
            supercell (Supercell):
                supercell of the configuration.
            occupation (ArrayLike):
                integer occupation code for each supercell site.
            displacement (ArrayLike): optional
                cartesian displacement vector for each supercell site.
        """
        occupation = np.array(occupation, dtype=int)
        if occupation.shape != (supercell.num_sites,):
            raise ValueError(
                f"Occupation with shape {occupation.shape} does not match the "
                f"{supercell.num_sites} sites of supercell {supercell.name}."
            )
        if np.any(occupation < 0) or np.any(occupation >= supercell.num_species):
            raise ValueError(
                "Occupation codes must be within the range of allowed species of "
                "each site."
            )

        if displacement is not None:
            displacement = np.array(displacement, dtype=float)
            if displacement.shape != (supercell.num_sites, 3):
                raise ValueError(
                    f"Displacement with shape {displacement.shape} does not match "
                    f"({supercell.num_sites}, 3)."
                )
            displacement.setflags(write=False)

        occupation.setflags(write=False)
        self.supercell = supercell
        self.occupation = occupation
        self.displacement = displacement

    @property
    def name(self):
        """Get a name identifying the configuration within its supercell.

        Displacements are rounded to the constants.SITE_TOL grid, with negative
        zeros removed, so values that only differ by numerical noise give the
        same name.
        """
        name = f"{self.supercell.name}/" + ".".join(str(o) for o in self.occupation)
        if self.displacement is not None:
            tol = constants.SITE_TOL
            # adding 0.0 turns -0.0 into 0.0
            rounded = np.round(self.displacement.flatten() / tol) * tol + 0.0
            name += "/" + ".".join(f"{d:.6f}" for d in rounded)
        return name

    @property
    def species(self):
        """Get the species at each site."""
        return [
            allowed[code]
            for allowed, code in zip(self.supercell.allowed_species, self.occupation)
        ]

    def copy_apply(self, op):
        """Apply a site permutation operation.

        Args:
            op (PermuteOperation):
                permutation of the sites of this configuration's supercell.

        Returns:
            Configuration: permuted configuration
        """
        displacement = None
        if self.displacement is not None:
            displacement = op.permute(self.displacement) @ op.cart_rotation.T
        return Configuration(self.supercell, op.permute(self.occupation), displacement)

    def _canonical(self, operations=None):
        if operations is None:
            operations = self.supercell.permutation_group
        return CanonicalForm(operations, ConfigurationCompare())

    def is_canonical(self, operations=None):
        """Check if the configuration is canonical.

        Args:
            operations (Sequence of PermuteOperation): optional
                operations to check against. Defaults to the full permutation
                group of the supercell.
        """
        return self._canonical(operations).is_canonical(self)

    def canonical_form(self, operations=None):
        """Get the canonical form of the configuration in the same supercell."""
        return self._canonical(operations).canonical_form(self)

    def to_canonical(self, operations=None):
        """Get the operation that maps this configuration to its canonical form."""
        return self._canonical(operations).to_canonical(self)

    def from_canonical(self, operations=None):
        """Get the operation that maps the canonical form to this configuration."""
        return self._canonical(operations).from_canonical(self)

    def is_equivalent(self, other, operations=None):
        """Check if two configurations of the same supercell are equivalent."""
        if other.supercell != self.supercell:
            raise ValueError(
                f"Configurations in supercells {self.supercell.name} and "
                f"{other.supercell.name} can not be compared, use "
                "fill_supercell to bring them to the same supercell."
            )
        return self._canonical(operations).is_equivalent(self, other)

    def invariant_subgroup(self, operations=None):
        """Get the permutations that leave the configuration invariant."""
        return self._canonical(operations).invariant_subgroup(self)

    @cached_property
    def _invariant_translations(self):
        """Get the lattice translations that leave the configuration invariant."""
        compare = ConfigurationCompare()
        translations = []
        for translation, permutation in zip(
            self.supercell.translations, self.supercell.translation_permutations
        ):
            displacement = None
            if self.displacement is not None:
                displacement = self.displacement[permutation]
            translated = Configuration(
                self.supercell, self.occupation[permutation], displacement
            )
            if compare.equal(translated, self):
                translations.append(translation)
        return np.array(translations, dtype=int)

    def is_primitive(self):
        """Check if only the identity translation leaves it invariant."""
        return len(self._invariant_translations) == 1

    def primitive(self):
        """Get the configuration in the smallest supercell that reproduces it.

        Returns:
            Configuration: configuration in a supercell with the primitive
                periodicity of the site values
        """
        if self.is_primitive():
            return self

        generators = np.concatenate(
            [self.supercell.matrix, self._invariant_translations]
        )
        matrix = hermite_normal_form(generators.T).T
        supercell = Supercell(self.supercell.prim, matrix)
        indices = self.supercell.site_indices(supercell.prim_frac_coords)
        displacement = None
        if self.displacement is not None:
            displacement = self.displacement[indices]
        return Configuration(supercell, self.occupation[indices], displacement)

    def fill_supercell(self, supercell, op=None):
        """Copy the transformed configuration into another supercell.

        The superlattice of the given supercell must be a superlattice of the
        transformed superlattice of this configuration.

        Args:
            supercell (Supercell):
                supercell to fill.
            op (SymOpElement): optional
                prim factor group operation applied to the configuration.
                Defaults to the identity.

        Returns:
            Configuration: configuration in the given supercell
        """
        if supercell.prim is not self.supercell.prim:
            raise ValueError("Supercells must share the same prim to be filled.")

        if op is None:
            source_coords = supercell.prim_frac_coords
            cart_rotation = np.eye(3)
            transformed = self.supercell
        else:
            source_coords = op.inverse().operate_multi(supercell.prim_frac_coords)
            cart_rotation = self.supercell.prim.cart_rotation(op)
            transformed = self.supercell.copy_apply(op)

        if not supercell.is_supercell_of(transformed):
            raise ValueError(
                f"Supercell {supercell.name} is not a supercell of the transformed "
                f"configuration supercell {transformed.name}."
            )

        indices = self.supercell.site_indices(source_coords)
        displacement = None
        if self.displacement is not None:
            displacement = self.displacement[indices] @ cart_rotation.T
        return Configuration(supercell, self.occupation[indices], displacement)

    def to_structure(self):
        """Get the ordered structure of the configuration.

        Vacancies are removed and displacements are added to the site positions.

        Returns:
            Structure
        """
        lattice = self.supercell.lattice
        coords = lattice.get_cartesian_coords(self.supercell.frac_coords)
        if self.displacement is not None:
            coords = coords + self.displacement
        keep = [i for i, sp in enumerate(self.species) if not isinstance(sp, Vacancy)]
        return Structure(
            lattice,
            [self.species[i] for i in keep],
            coords[keep],
            coords_are_cartesian=True,
        )

    def __eq__(self, other):
        """Check equality of supercell and site values."""
        if not isinstance(other, Configuration):
            return NotImplemented
        return self.supercell == other.supercell and ConfigurationCompare().equal(
            self, other
        )

    def __hash__(self):
        """Hash the supercell and occupation."""
        return hash((self.supercell, self.occupation.tobytes()))

    def __repr__(self):
        """Get Configuration summary."""
        return f"Configuration({self.name})"

    def as_dict(self):
        """Get json-serialization dict representation.

        Returns:
            MSONable dict
        """
        return {
            "@module": self.__class__.__module__,
            "@class": self.__class__.__name__,
            "supercell": self.supercell.as_dict(),
            "occupation": self.occupation.tolist(),
            "displacement": None
            if self.displacement is None
            else self.displacement.tolist(),
        }

    @classmethod
    def from_dict(cls, d):
        """Create a Configuration from serialized dict."""
        return cls(
            Supercell.from_dict(d["supercell"]), d["occupation"], d["displacement"]
        )

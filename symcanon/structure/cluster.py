"""Implementation of the Cluster class.

Represents a group of sites of a prim lattice. Clusters are compared modulo
lattice translations, so a cluster and all its periodic images are the same
object for the purpose of canonical forms and orbits.
"""

__author__ = "Luis Barroso-Luque, William Davidson Richard"

from functools import cached_property

import numpy as np
from monty.json import MSONable
from pymatgen.core import Lattice, Site
from pymatgen.util.coord import coord_list_mapping_pbc, is_coord_subset

from symcanon import constants
from symcanon.symmetry.canonical import CanonicalForm
from symcanon.symmetry.compare import ClusterCompare
from symcanon.utils.exceptions import StructureMatchError


class Cluster(MSONable):
    """An undecorated (no occupancies) cluster.

    Represented simply by a list of sites, its centroid, and the underlying
    lattice. The cluster is shifted so that its centroid lies in the home
    unit cell.

    Attributes:
        frac_coords (ndarray): fractional coordinates of each site.
        lattice (Lattice): Underlying lattice of cluster.
        centroid (ndarray): Geometric centroid of included sites.
    """

    def __init__(self, species, frac_coords, lattice):
        """Initialize Cluster.

        Args:
            species (list):
                species (or disordered compositions) of each site
            frac_coords (Sequence):
                Sequence of frac coords for the sites
            lattice (Lattice):
                pymatgen Lattice object
        """
        frac_coords = np.array(frac_coords, dtype=float).reshape(-1, 3)
        if len(species) != len(frac_coords):
            raise ValueError(
                f"Got {len(species)} species for {len(frac_coords)} cluster sites."
            )
        if len(frac_coords) == 0:
            raise ValueError("A cluster must have at least one site.")
        centroid = np.average(frac_coords, axis=0)
        shift = np.floor(centroid + constants.SITE_TOL)
        self._centroid = centroid - shift
        self._frac_coords = frac_coords - shift
        self._sites = tuple(
            Site(sp, coords)
            for sp, coords in zip(
                species, lattice.get_cartesian_coords(self._frac_coords)
            )
        )
        self._lattice = lattice

    @classmethod
    def from_prim(cls, prim, frac_coords):
        """Create a cluster of prim sites.

        Args:
            prim (Prim):
                the parent prim.
            frac_coords (ArrayLike):
                fractional coordinates of prim sites, in any unit cell.

        Returns:
            Cluster
        """
        frac_coords = np.array(frac_coords, dtype=float).reshape(-1, 3)
        try:
            indices = coord_list_mapping_pbc(
                frac_coords, prim.frac_coords, atol=constants.SITE_TOL
            )
        except ValueError as value_error:
            raise StructureMatchError(
                "Cluster coordinates do not correspond to prim sites."
            ) from value_error
        species = [prim.structure[i].species for i in indices]
        return cls(species, frac_coords, prim.lattice)

    @property
    def centroid(self):
        """Return the centroid of cluster."""
        return self._centroid

    @property
    def frac_coords(self):
        """Return the fractional coordinates of cluster w.r.t the underlying lattice."""
        return self._frac_coords

    @property
    def lattice(self):
        """Return the underlying lattice."""
        return self._lattice

    @property
    def sites(self):
        """Return the list of sites."""
        return self._sites

    @property
    def species(self):
        """Return the species of each site."""
        return [site.species for site in self._sites]

    @cached_property
    def diameter(self):
        """Get maximum distance between any 2 sites in the cluster."""
        if len(self) < 2:
            return 0.0
        coords = self.lattice.get_cartesian_coords(self.frac_coords)
        all_d2 = np.sum((coords[None, :, :] - coords[:, None, :]) ** 2, axis=-1)
        return np.max(all_d2) ** 0.5

    @property
    def radius(self):
        """Get half the maximum distance between any 2 sites in the cluster."""
        return self.diameter / 2.0

    def copy_apply(self, op):
        """Apply a fractional symmetry operation to the cluster sites.

        Args:
            op (SymOpElement):
                operation in fractional coordinates of the cluster lattice.

        Returns:
            Cluster: the transformed cluster
        """
        return Cluster(self.species, op.operate_multi(self.frac_coords), self.lattice)

    def is_canonical(self, operations):
        """Check if the cluster is canonical under the given operations."""
        return CanonicalForm(operations, ClusterCompare()).is_canonical(self)

    def canonical_form(self, operations):
        """Get the canonical form of the cluster under the given operations."""
        return CanonicalForm(operations, ClusterCompare()).canonical_form(self)

    def invariant_subgroup(self, operations):
        """Get the operations mapping the cluster onto a translation of itself."""
        return CanonicalForm(operations, ClusterCompare()).invariant_subgroup(self)

    def orbit(self, operations):
        """Generate the orbit of the cluster.

        Args:
            operations (Sequence of SymOpElement):
                usually the prim factor group.

        Returns:
            Orbit: of clusters, with the canonical cluster as prototype
        """
        return CanonicalForm(operations, ClusterCompare()).orbit(self)

    def __len__(self):
        """Get number of sites."""
        return len(self._sites)

    def __iter__(self):
        """Iterate over sites."""
        return iter(self._sites)

    def __getitem__(self, index):
        """Get a site."""
        return self._sites[index]

    def __eq__(self, other):
        """Check equivalency of clusters up to a lattice translation."""
        if not isinstance(other, Cluster):
            return NotImplemented
        if self.frac_coords.shape != other.frac_coords.shape:
            return False
        othersites = other.frac_coords + np.round(self.centroid - other.centroid)
        return is_coord_subset(self.frac_coords, othersites, atol=constants.SITE_TOL)

    def __hash__(self):
        """Hash the number of sites."""
        return hash(len(self))

    def __str__(self):
        """Pretty print a cluster."""
        centroid_str = " ".join(f"{j:0.6f}".rjust(12) for j in self.centroid)
        outs = [
            f"Diameter : {self.diameter:0.4f}",
            f"Centroid : {centroid_str}",
            f"Sites ({len(self)})",
        ]
        for i, (site, coords) in enumerate(zip(self, self.frac_coords)):
            outs.append(
                " ".join(
                    [
                        str(i),
                        site.species_string,
                        " ".join(f"{j:0.6f}".rjust(12) for j in coords),
                    ]
                )
            )
        return "\n".join(outs)

    def __repr__(self):
        """Get cluster summary."""
        centroid_str = "[{:.4f}, {:.4f}, {:.4f}]".format(*self.centroid)
        return (
            f"Cluster(sites={len(self)}, diameter={self.diameter:0.4f}, "
            f"centroid={centroid_str})"
        )

    def as_dict(self):
        """Get json-serialization dict representation.

        Returns:
            MSONable dict
        """
        return {
            "@module": self.__class__.__module__,
            "@class": self.__class__.__name__,
            "lattice": self.lattice.as_dict(),
            "species": [site.species.as_dict() for site in self._sites],
            "frac_coords": self.frac_coords.tolist(),
        }

    @classmethod
    def from_dict(cls, d):
        """Create a Cluster from serialized dict."""
        return cls(d["species"], d["frac_coords"], Lattice.from_dict(d["lattice"]))

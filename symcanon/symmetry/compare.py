"""Comparators defining equality and order of symmetrically related objects.

A comparator is a policy bound to one object type. It provides a tolerance
based equality and a strict order consistent with it: for any two objects
exactly one of less(a, b), less(b, a) or equal(a, b) holds. The maximal
object under the order is the canonical representative of an orbit.
"""

__author__ = "Luis Barroso-Luque"

from abc import ABC, abstractmethod

import numpy as np

from symcanon import constants


class SymCompare(ABC):
    """Abstract comparator for objects acted on by group elements.

    Attributes:
        tol (float):
            absolute numerical tolerance used in comparisons.
    """

    def __init__(self, tol=None):
        """Initialize a comparator.

        Args:
            tol (float): optional
                absolute tolerance, defaults to constants.SITE_TOL.
        """
        self.tol = constants.SITE_TOL if tol is None else tol

    @abstractmethod
    def equal(self, obj1, obj2):
        """Check if two objects are the same within tolerance."""

    @abstractmethod
    def less(self, obj1, obj2):
        """Check if obj1 is strictly ordered before obj2."""

    def _less_array(self, arr1, arr2):
        """Lexicographic tolerance based comparison of two flat arrays."""
        diff = np.flatnonzero(np.abs(arr1 - arr2) > self.tol)
        if len(diff) == 0:
            return False
        return arr1[diff[0]] < arr2[diff[0]]


class SupercellCompare(SymCompare):
    """Compare supercells of the same prim by their superlattice.

    Two supercells are equal if their transformation matrices generate the
    same superlattice, i.e. they have the same hermite normal form. Order is
    lexicographic on the hnf entries, diagonal entries first.
    """

    def equal(self, supercell1, supercell2):
        """Check if two supercells have the same superlattice."""
        if supercell1.prim is not supercell2.prim:
            return False
        return np.array_equal(supercell1.hnf, supercell2.hnf)

    def less(self, supercell1, supercell2):
        """Compare the ordering keys of the superlattice hnfs."""
        return supercell1.hnf_key < supercell2.hnf_key


class ClusterCompare(SymCompare):
    """Compare clusters up to lattice translations and site ordering.

    Clusters are translated so that their centroid lies in the home unit
    cell, sites are sorted and their fractional coordinates compared within
    tolerance. Clusters with fewer sites are ordered first. Clusters with the
    same sites are then compared by the species string of each sorted site, so
    clusters of different species at the same positions are not equal.
    """

    def _normalized(self, cluster):
        coords = cluster.frac_coords - np.floor(cluster.centroid + self.tol)
        keys = np.round(coords / self.tol).astype(np.int64)
        order = np.lexsort(keys.T[::-1])
        species = [cluster.sites[i].species_string for i in order]
        return coords[order].flatten(), species

    def equal(self, cluster1, cluster2):
        """Check if two clusters are translationally equivalent."""
        if len(cluster1) != len(cluster2):
            return False
        coords1, species1 = self._normalized(cluster1)
        coords2, species2 = self._normalized(cluster2)
        return species1 == species2 and np.allclose(
            coords1, coords2, rtol=0.0, atol=self.tol
        )

    def less(self, cluster1, cluster2):
        """Compare number of sites, sorted site coordinates, then species."""
        if len(cluster1) != len(cluster2):
            return len(cluster1) < len(cluster2)
        coords1, species1 = self._normalized(cluster1)
        coords2, species2 = self._normalized(cluster2)
        if not np.allclose(coords1, coords2, rtol=0.0, atol=self.tol):
            return self._less_array(coords1, coords2)
        return species1 < species2


class ConfigurationCompare(SymCompare):
    """Compare configurations of the same supercell.

    Occupations are compared exactly and lexicographically. Configurations
    with the same occupation are then compared by their local continuous
    degrees of freedom (displacements) within tolerance.
    """

    def equal(self, config1, config2):
        """Check if two configurations have the same site values."""
        if not np.array_equal(config1.occupation, config2.occupation):
            return False
        if config1.displacement is None or config2.displacement is None:
            return config1.displacement is None and config2.displacement is None
        return np.allclose(
            config1.displacement, config2.displacement, rtol=0.0, atol=self.tol
        )

    def less(self, config1, config2):
        """Compare occupations then displacements lexicographically."""
        diff = np.flatnonzero(config1.occupation != config2.occupation)
        if len(diff) > 0:
            return config1.occupation[diff[0]] < config2.occupation[diff[0]]
        if config1.displacement is None or config2.displacement is None:
            return config1.displacement is None and config2.displacement is not None
        return self._less_array(
            config1.displacement.flatten(), config2.displacement.flatten()
        )

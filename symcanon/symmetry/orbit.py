"""Implementation of orbit generation.

An orbit is the set of objects obtained by applying every element of a group
to a seed object, deduplicated with a comparator. The OrbitGenerator scans a
group in its fixed order to find the canonical (maximal) element of an orbit,
the operation producing it, the invariant subgroup of an object and, when
requested, the full orbit.
"""

__author__ = "Luis Barroso-Luque, William Davidson Richard"

from collections import namedtuple
from collections.abc import Sequence

# the canonical form of a seed and the operation that maps the seed to it
CanonicalMatch = namedtuple("CanonicalMatch", ["form", "operation"])


class OrbitGenerator:
    """Generate canonical forms and orbits by scanning a group.

    The operations are walked exhaustively in their given order, no element
    is skipped since the comparator order is not assumed to correlate with
    group structure. Ties are resolved in favor of the first operation found.

    Attributes:
        operations (Sequence of GroupElement):
            group, or range of group elements, acting on seed objects.
        sym_compare (SymCompare):
            comparator for the objects in the orbit.
    """

    def __init__(self, operations, sym_compare):
        """Initialize an OrbitGenerator.

        Args:
            operations (Sequence of GroupElement):
                non-empty sequence of group elements. Should include the
                identity.
            sym_compare (SymCompare):
                comparator used to deduplicate and order objects.
        """
        self.operations = operations
        self.sym_compare = sym_compare

    def canonical(self, seed):
        """Find the canonical form of a seed and the operation producing it.

        Args:
            seed:
                object implementing copy_apply.

        Returns:
            CanonicalMatch: named tuple of canonical form and operation
        """
        operations = iter(self.operations)
        best_op = next(operations)
        best = best_op.apply(seed)
        for op in operations:
            candidate = op.apply(seed)
            if self.sym_compare.less(best, candidate):
                best, best_op = candidate, op
        return CanonicalMatch(best, best_op)

    def is_canonical(self, seed):
        """Check that no operation yields an object greater than the seed."""
        return not any(
            self.sym_compare.less(seed, op.apply(seed)) for op in self.operations
        )

    def invariant_subgroup(self, seed):
        """Get the operations that leave the seed unchanged.

        Returns:
            list of GroupElement: operations g such that g(seed) == seed, in
                group order.
        """
        return [
            op for op in self.operations if self.sym_compare.equal(op.apply(seed), seed)
        ]

    def generate(self, seed):
        """Generate the full orbit of a seed.

        The orbit is generated from the canonical form of the seed, so orbits
        generated from any two equivalent seeds are identical.

        Args:
            seed:
                object implementing copy_apply.

        Returns:
            Orbit
        """
        prototype = self.canonical(seed).form
        elements, equivalence_map = [], []
        for op in self.operations:
            equiv = op.apply(prototype)
            for i, element in enumerate(elements):
                if self.sym_compare.equal(element, equiv):
                    equivalence_map[i].append(op)
                    break
            else:
                elements.append(equiv)
                equivalence_map.append([op])

        # place the prototype first, the first element is the prototype
        # whenever the identity is the first operation
        for i, element in enumerate(elements):
            if self.sym_compare.equal(element, prototype):
                elements.insert(0, elements.pop(i))
                equivalence_map.insert(0, equivalence_map.pop(i))
                break

        return Orbit(prototype, elements, equivalence_map)


class Orbit(Sequence):
    """A set of symmetrically equivalent objects.

    Attributes:
        prototype:
            the canonical form of the orbit.
        elements (list):
            the deduplicated equivalent objects, the prototype first.
        equivalence_map (list of list of GroupElement):
            for each element the operations g with g(prototype) == element.
    """

    def __init__(self, prototype, elements, equivalence_map):
        """Initialize an Orbit.

        You probably never need to instantiate this class directly. Look at
        OrbitGenerator.generate.

        Args:
            prototype:
                canonical form of the orbit.
            elements (list):
                equivalent objects.
            equivalence_map (list of list of GroupElement):
                operations mapping the prototype to each element.
        """
        self.prototype = prototype
        self.elements = elements
        self.equivalence_map = equivalence_map

    @property
    def multiplicity(self):
        """Get number of distinct objects in the orbit."""
        return len(self.elements)

    @property
    def invariant_subgroup(self):
        """Get the operations leaving the prototype invariant."""
        return self.equivalence_map[0]

    def __getitem__(self, index):
        """Get an element of the orbit."""
        return self.elements[index]

    def __len__(self):
        """Get the multiplicity of the orbit."""
        return len(self.elements)

    def __repr__(self):
        """Get Orbit summary."""
        return (
            f"Orbit(multiplicity={self.multiplicity}, "
            f"invariant subgroup order={len(self.invariant_subgroup)})"
        )

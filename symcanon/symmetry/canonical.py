"""Generic canonical form algorithm.

The functions here work for any object type given two capabilities: the
object can be transformed by a group element (``copy_apply``), and a
comparator (SymCompare) defines equality and order for the object type.

Operations can be given either as a full Group, or as any caller owned
sequence of group elements, for example a slice of the precomputed
permutation group of a supercell, that is reused across many calls.
"""

__author__ = "Luis Barroso-Luque"

from symcanon.symmetry.orbit import OrbitGenerator


def is_canonical(obj, operations, sym_compare):
    """Check if an object is in canonical form.

    An object is canonical if no operation maps it to a greater object.

    Args:
        obj:
            object implementing copy_apply.
        operations (Sequence of GroupElement):
            group or range of group elements.
        sym_compare (SymCompare):
            comparator for the object type.

    Returns:
        bool
    """
    return OrbitGenerator(operations, sym_compare).is_canonical(obj)


def canonical_form(obj, operations, sym_compare):
    """Get the canonical form of an object.

    The canonical form is the maximal object, under the comparator order,
    among all the images of the object under the given operations.

    Args:
        obj:
            object implementing copy_apply.
        operations (Sequence of GroupElement):
            group or range of group elements.
        sym_compare (SymCompare):
            comparator for the object type.

    Returns:
        a new object in canonical form
    """
    return OrbitGenerator(operations, sym_compare).canonical(obj).form


def to_canonical(obj, operations, sym_compare):
    """Get the operation that maps an object to its canonical form.

    Returns:
        GroupElement: g such that g.apply(obj) is the canonical form
    """
    return OrbitGenerator(operations, sym_compare).canonical(obj).operation


def from_canonical(obj, operations, sym_compare):
    """Get the operation that maps the canonical form back to an object.

    Returns:
        GroupElement: g such that g.apply(canonical_form(obj)) == obj
    """
    return to_canonical(obj, operations, sym_compare).inverse()


def is_equivalent(obj, other, operations, sym_compare):
    """Check if two objects have the same canonical form."""
    generator = OrbitGenerator(operations, sym_compare)
    return sym_compare.equal(
        generator.canonical(obj).form, generator.canonical(other).form
    )


def invariant_subgroup(obj, operations, sym_compare):
    """Get the operations that leave an object invariant.

    Returns:
        list of GroupElement: in the given operation order
    """
    return OrbitGenerator(operations, sym_compare).invariant_subgroup(obj)


class CanonicalForm:
    """Canonical form policy binding a set of operations and a comparator.

    Useful to reuse the same operations (e.g. the permutation group of a
    supercell) and comparator when canonicalizing many objects.
    """

    def __init__(self, operations, sym_compare):
        """Initialize CanonicalForm.

        Args:
            operations (Sequence of GroupElement):
                group or range of group elements.
            sym_compare (SymCompare):
                comparator for the object type.
        """
        self._generator = OrbitGenerator(operations, sym_compare)

    @property
    def operations(self):
        """Get the operations."""
        return self._generator.operations

    @property
    def sym_compare(self):
        """Get the comparator."""
        return self._generator.sym_compare

    def is_canonical(self, obj):
        """Check if an object is in canonical form."""
        return self._generator.is_canonical(obj)

    def canonical_form(self, obj):
        """Get the canonical form of an object."""
        return self._generator.canonical(obj).form

    def to_canonical(self, obj):
        """Get the operation that maps an object to its canonical form."""
        return self._generator.canonical(obj).operation

    def from_canonical(self, obj):
        """Get the operation that maps the canonical form to an object."""
        return self.to_canonical(obj).inverse()

    def is_equivalent(self, obj, other):
        """Check if two objects have the same canonical form."""
        return self.sym_compare.equal(
            self.canonical_form(obj), self.canonical_form(other)
        )

    def invariant_subgroup(self, obj):
        """Get the operations that leave an object invariant."""
        return self._generator.invariant_subgroup(obj)

    def orbit(self, obj):
        """Generate the full orbit of an object."""
        return self._generator.generate(obj)

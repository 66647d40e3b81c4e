"""Implementation of group elements and finite ordered groups.

A group element is an invertible transformation that acts on an object by
returning a transformed copy. Two kinds are implemented: crystallographic
operations (a rotation and a translation in fractional coordinates of the
parent lattice) and site permutations of a specific supercell.

A Group is a fixed, ordered sequence of elements. The order is significant:
canonical forms are chosen by scanning a group in order, so ties are broken
deterministically by the position of an element in its group.
"""

__author__ = "Luis Barroso-Luque"

from abc import ABC, abstractmethod
from collections.abc import Sequence
from copy import copy

import numpy as np
from pymatgen.core.operations import SymmOp


class GroupElement(ABC):
    """Abstract invertible transformation.

    Objects acted on by a GroupElement must implement a ``copy_apply(op)``
    method returning a new transformed object.

    Attributes:
        index (int):
            position of the element in the group it belongs to, None for
            elements obtained by composition or inversion.
    """

    def __init__(self, index=None):
        """Initialize a GroupElement.

        Args:
            index (int): optional
                index of the element in its group.
        """
        self.index = index

    def apply(self, obj):
        """Return a transformed copy of obj.

        Args:
            obj:
                any object implementing copy_apply.
        Returns:
            the transformed object
        """
        return obj.copy_apply(self)

    @abstractmethod
    def inverse(self):
        """Get the inverse element."""

    @abstractmethod
    def __mul__(self, other):
        """Compose elements such that (a * b).apply(x) == a.apply(b.apply(x))."""

    @property
    @abstractmethod
    def is_identity(self):
        """Check if the element is the identity transformation."""


class SymOpElement(GroupElement):
    """A crystallographic symmetry operation in fractional coordinates.

    Wraps a pymatgen SymmOp whose rotation and translation are expressed in
    fractional coordinates of the prim lattice.
    """

    def __init__(self, symmop, index=None):
        """Initialize a SymOpElement.

        Args:
            symmop (SymmOp):
                pymatgen symmetry operation in fractional coordinates.
            index (int): optional
                index of the element in its group.
        """
        super().__init__(index)
        self._symmop = symmop

    @classmethod
    def from_rotation_and_translation(cls, rotation, translation=(0, 0, 0), index=None):
        """Create a SymOpElement from a fractional rotation and translation."""
        return cls(
            SymmOp.from_rotation_and_translation(rotation, translation), index=index
        )

    @property
    def symmop(self):
        """Get the underlying pymatgen SymmOp."""
        return self._symmop

    @property
    def rotation_matrix(self):
        """Get the fractional rotation matrix."""
        return self._symmop.rotation_matrix

    @property
    def translation_vector(self):
        """Get the fractional translation vector."""
        return self._symmop.translation_vector

    @property
    def is_identity(self):
        """Check if the operation is the identity."""
        return np.allclose(self._symmop.affine_matrix, np.eye(4))

    def operate_multi(self, points):
        """Apply the operation to an array of fractional coordinates."""
        return self._symmop.operate_multi(points)

    def inverse(self):
        """Get the inverse operation."""
        return SymOpElement(self._symmop.inverse)

    def __mul__(self, other):
        """Compose with another SymOpElement."""
        return SymOpElement(self._symmop * other.symmop)

    def __eq__(self, other):
        """Check if two operations have the same affine matrix."""
        if not isinstance(other, SymOpElement):
            return NotImplemented
        return np.allclose(self._symmop.affine_matrix, other.symmop.affine_matrix)

    def __hash__(self):
        """Hash on the rounded rotation only, translations are tolerance based."""
        return hash(tuple(np.round(self.rotation_matrix).astype(int).flatten()))

    def __repr__(self):
        """Get SymOpElement summary."""
        return (
            f"SymOpElement(index={self.index}, "
            f"rotation={np.round(self.rotation_matrix, 6).tolist()}, "
            f"translation={np.round(self.translation_vector, 6).tolist()})"
        )


class PermuteOperation(GroupElement):
    """A permutation of the sites of a supercell.

    A PermuteOperation results from applying a factor group operation of the
    prim followed by a lattice translation, and records how the sites of one
    supercell are permuted. Applied to an array of site values v the new
    values are ``v[permutation]``.

    Attributes:
        permutation (ndarray):
            site permutation, the value at site permutation[i] moves to site i.
        factor_group_op (SymOpElement):
            fractional factor group operation of the prim.
        cart_rotation (ndarray):
            cartesian rotation matrix used to transform vector site values.
        factor_group_index (int):
            index of the factor group operation in the prim factor group.
        translation_index (int):
            index of the lattice translation in the supercell.
    """

    def __init__(
        self,
        permutation,
        factor_group_op,
        cart_rotation,
        factor_group_index=None,
        translation_index=None,
        index=None,
    ):
        """Initialize a PermuteOperation.

        Args:
            permutation (ArrayLike):
                site permutation array.
            factor_group_op (SymOpElement):
                factor group operation of the prim.
            cart_rotation (ArrayLike):
                cartesian rotation matrix of the factor group operation.
            factor_group_index (int): optional
                index of the factor group operation.
            translation_index (int): optional
                index of the supercell lattice translation.
            index (int): optional
                index of the element in its group.
        """
        super().__init__(index)
        self.permutation = np.asarray(permutation, dtype=int)
        self.permutation.setflags(write=False)
        self.factor_group_op = factor_group_op
        self.cart_rotation = np.asarray(cart_rotation)
        self.factor_group_index = factor_group_index
        self.translation_index = translation_index

    @property
    def rotation_matrix(self):
        """Get the fractional rotation matrix of the factor group operation."""
        return self.factor_group_op.rotation_matrix

    @property
    def is_identity(self):
        """Check if the permutation and the rotation are the identity."""
        return np.array_equal(
            self.permutation, np.arange(len(self.permutation))
        ) and np.allclose(self.cart_rotation, np.eye(3))

    def permute(self, values):
        """Permute an array of site values along its first axis."""
        return np.asarray(values)[self.permutation]

    def inverse(self):
        """Get the inverse permutation operation."""
        return PermuteOperation(
            np.argsort(self.permutation),
            self.factor_group_op.inverse(),
            self.cart_rotation.T,
        )

    def __mul__(self, other):
        """Compose with another PermuteOperation of the same supercell."""
        return PermuteOperation(
            other.permutation[self.permutation],
            self.factor_group_op * other.factor_group_op,
            self.cart_rotation @ other.cart_rotation,
        )

    def __eq__(self, other):
        """Check if two operations have the same permutation and rotation."""
        if not isinstance(other, PermuteOperation):
            return NotImplemented
        return np.array_equal(self.permutation, other.permutation) and np.allclose(
            self.cart_rotation, other.cart_rotation
        )

    def __hash__(self):
        """Hash the permutation."""
        return hash(self.permutation.tobytes())

    def __repr__(self):
        """Get PermuteOperation summary."""
        return (
            f"PermuteOperation(index={self.index}, "
            f"factor_group_index={self.factor_group_index}, "
            f"translation_index={self.translation_index})"
        )


class Group(Sequence):
    """An ordered finite group of GroupElements.

    The group is not checked for closure, it is assumed valid by whoever
    constructs it. The group holds shallow copies of the given elements with
    their index set to their position in the group.
    """

    def __init__(self, elements):
        """Initialize a Group.

        Args:
            elements (Sequence of GroupElement):
                group elements in a fixed order. Must not be empty.
        """
        elements = [copy(element) for element in elements]
        if len(elements) == 0:
            raise ValueError("A group must have at least one element.")
        for i, element in enumerate(elements):
            element.index = i
        self._elements = tuple(elements)

    @classmethod
    def from_symmops(cls, symmops):
        """Create a group of SymOpElements from fractional pymatgen SymmOps."""
        return cls(SymOpElement(symmop) for symmop in symmops)

    @property
    def identity(self):
        """Get the first identity element in the group."""
        for element in self._elements:
            if element.is_identity:
                return element
        return None

    def find(self, element):
        """Get the group member equal to the given element, None if not present."""
        for member in self._elements:
            if member == element:
                return member
        return None

    def subgroup(self, indices):
        """Get the elements at the given indices as a list, keeping their indices."""
        return [self._elements[i] for i in indices]

    def __getitem__(self, index):
        """Get an element or a tuple of elements for a slice."""
        return self._elements[index]

    def __len__(self):
        """Get the order of the group."""
        return len(self._elements)

    def __iter__(self):
        """Iterate over elements in group order."""
        return iter(self._elements)

    def __repr__(self):
        """Get Group summary."""
        return f"{self.__class__.__name__}(order={len(self)})"

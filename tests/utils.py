"""
A few testing utilities that may be useful to just import and run.
Some of these are borrowed from pymatgen test scripts.
"""

import json
import pickle

import numpy as np
from monty.json import MontyDecoder, MSONable

from symcanon.symmetry import GroupElement, SymCompare


def assert_msonable(obj, skip_keys=None, test_if_subclass=True):
    """
    Tests if obj is MSONable and tries to verify whether the contract is
    fulfilled.
    By default, the method tests whether obj is an instance of MSONable.
    This check can be deactivated by setting test_if_subclass to False.
    """
    if test_if_subclass:
        assert isinstance(obj, MSONable)

    skip_keys = [] if skip_keys is None else skip_keys
    d1 = obj.as_dict()
    d2 = obj.__class__.from_dict(obj.as_dict()).as_dict()
    for key in d1.keys():
        if key in skip_keys:
            continue
        assert d1[key] == d2[key]

    try:
        _ = json.loads(obj.to_json(), cls=MontyDecoder)
    except Exception as e:
        raise AssertionError(e)


def assert_pickles(obj):
    """Test if obj is picklable."""
    try:
        p = pickle.dumps(obj)
        obj_copy = pickle.loads(p)
    except Exception as e:
        raise AssertionError(e)

    assert isinstance(obj_copy, obj.__class__)

    if isinstance(obj, MSONable):
        d1 = obj.as_dict()
        d2 = obj_copy.as_dict()
        for key in d1.keys():
            assert d1[key] == d2[key]
    else:
        # fallback for objects that are not MSONable
        # not a complete test, since we are only checking that attribute names match
        d1 = obj.__dict__
        d2 = obj_copy.__dict__
        assert d1.keys() == d2.keys()


def assert_equal_under(sym_compare, obj1, obj2):
    """Assert two objects are equal with a comparator, and not ordered."""
    assert sym_compare.equal(obj1, obj2)
    assert not sym_compare.less(obj1, obj2)
    assert not sym_compare.less(obj2, obj1)


class ShiftElement(GroupElement):
    """Toy group element shifting integer valued objects.

    Acts on Value objects by addition and on Necklace objects by a cyclic
    roll of its beads.
    """

    def __init__(self, shift, index=None):
        super().__init__(index)
        self.shift = shift

    def inverse(self):
        return ShiftElement(-self.shift)

    def __mul__(self, other):
        return ShiftElement(self.shift + other.shift)

    @property
    def is_identity(self):
        return self.shift == 0

    def __repr__(self):
        return f"ShiftElement(shift={self.shift}, index={self.index})"


class Value:
    """Toy object holding a single number."""

    def __init__(self, value):
        self.value = value

    def copy_apply(self, op):
        return Value(self.value + op.shift)


class ValueCompare(SymCompare):
    def equal(self, value1, value2):
        return abs(value1.value - value2.value) <= self.tol

    def less(self, value1, value2):
        return value1.value < value2.value - self.tol


class Necklace:
    """Toy object, a ring of beads acted on by the cyclic group of rolls."""

    def __init__(self, beads):
        self.beads = np.array(beads, dtype=int)

    def copy_apply(self, op):
        return Necklace(np.roll(self.beads, op.shift))


class NecklaceCompare(SymCompare):
    def equal(self, necklace1, necklace2):
        return np.array_equal(necklace1.beads, necklace2.beads)

    def less(self, necklace1, necklace2):
        return tuple(necklace1.beads) < tuple(necklace2.beads)

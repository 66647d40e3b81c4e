"""Symmetry groups, comparators and the generic canonical form algorithm.

Contains the machinery shared by supercells, configurations and clusters to
decide canonical forms, mapping operations and invariant subgroups.
"""

from .canonical import (
    CanonicalForm,
    canonical_form,
    from_canonical,
    invariant_subgroup,
    is_canonical,
    is_equivalent,
    to_canonical,
)
from .compare import (
    ClusterCompare,
    ConfigurationCompare,
    SupercellCompare,
    SymCompare,
)
from .group import Group, GroupElement, PermuteOperation, SymOpElement
from .orbit import CanonicalMatch, Orbit, OrbitGenerator

__all__ = [
    "Group",
    "GroupElement",
    "SymOpElement",
    "PermuteOperation",
    "SymCompare",
    "SupercellCompare",
    "ClusterCompare",
    "ConfigurationCompare",
    "OrbitGenerator",
    "Orbit",
    "CanonicalMatch",
    "CanonicalForm",
    "is_canonical",
    "canonical_form",
    "to_canonical",
    "from_canonical",
    "is_equivalent",
    "invariant_subgroup",
]

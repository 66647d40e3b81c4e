"""Definitions of specific exceptions raised elsewhere."""


SYMMETRY_ERROR_MESSAGE = (
    "Error in calculating symmetry operations. "
    "Try using a more symmetrically refined input "
    "structure. "
    "SpacegroupAnalyzer(s).get_refined_structure()"
    ".get_primitive_structure() "
    "usually results in a safe choice"
)


class SymmetryError(ValueError):
    """Exception for incompatibility between structure and given symops.

    Raised when a set of symmetry operations does not map the sites of a
    structure or supercell onto themselves, or is missing the identity.
    """


class StructureMatchError(RuntimeError):
    """Raised when site coordinates can not be matched to a supercell."""

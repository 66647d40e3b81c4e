"""Crystal structure entities acted on by symmetry operations.

The prim (parent structure), its supercells, configurations of site values
in a supercell, and clusters of prim sites.
"""

from .cluster import Cluster
from .configuration import Configuration
from .domain import Vacancy, get_allowed_species
from .prim import Prim
from .supercell import Supercell

__all__ = [
    "Prim",
    "Supercell",
    "Configuration",
    "Cluster",
    "Vacancy",
    "get_allowed_species",
]

"""Symmetry canonical forms of supercells, configurations and clusters."""

from importlib.metadata import PackageNotFoundError, version

from symcanon.database import (
    ConfigurationDatabase,
    SupercellDatabase,
    make_canonical_and_insert,
)
from symcanon.structure import Cluster, Configuration, Prim, Supercell

try:
    __version__ = version("symcanon")
except PackageNotFoundError:
    # package is not installed
    pass

__all__ = [
    "Prim",
    "Supercell",
    "Configuration",
    "Cluster",
    "SupercellDatabase",
    "ConfigurationDatabase",
    "make_canonical_and_insert",
]

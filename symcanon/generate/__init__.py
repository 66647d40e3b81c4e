"""General tools for supercell and configuration enumeration."""

from symcanon.generate.enumerate import (
    enumerate_configurations,
    enumerate_configurations_into,
    enumerate_supercell_matrices,
    enumerate_supercells,
)

__all__ = [
    "enumerate_supercells",
    "enumerate_supercell_matrices",
    "enumerate_configurations",
    "enumerate_configurations_into",
]

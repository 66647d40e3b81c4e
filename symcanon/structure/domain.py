"""Allowed species for the sites of a disordered parent structure.

The allowed species at each site, in a fixed sorted order, define the integer
codes used in configuration occupation arrays. Vacancies are represented
explicitly and always take the last code of a site.
"""

from __future__ import annotations

__author__ = "Luis Barroso-Luque, Fengyu Xie"

from pymatgen.core.periodic_table import DummySpecies, Element, Species


def get_allowed_species(structure) -> list[list[Species | Element | Vacancy]]:
    """Get the allowed species for each site in a disordered structure.

    If the site composition does not add to 1, a Vacancy will be appended to
    the allowed species at that site.

    Args:
        structure (Structure):
            Structure to determine allowed species from.

    Returns:
        list of list: allowed species for each site, sorted
    """
    allowed_species = []
    for site in structure:
        species = sorted(site.species.keys())
        if site.species.num_atoms < 0.99:
            species.append(Vacancy())
        allowed_species.append(species)
    return allowed_species


class Vacancy(DummySpecies):
    """Wrapper class around DummySpecie to treat vacancies as their own species."""

    def __init__(self, symbol: str = "A", oxidation_state: float = 0):
        """Initialize a Vacancy.

        Args:
            symbol (str): an assigned symbol for the vacancy. The vacancy
                symbol cannot have any part of first two letters that will
                constitute an Element symbol. "X" is fine, but "Vac" is not
                because Vac contains V, a valid Element.
            oxidation_state (float): oxidation state for Vacancy. Defaults
                to zero.
        """
        super().__init__(symbol=symbol, oxidation_state=oxidation_state)

    def __eq__(self, other):
        """Test equality, only equal if isinstance."""
        return False if not isinstance(other, Vacancy) else super().__eq__(other)

    def __hash__(self):
        """Get hash, prepend a v to avoid clash with Dummy."""
        return hash("v" + self.symbol)

    def __str__(self):
        """Get string representation, add a v to differentiate."""
        return "vac" + super().__str__()

    def __repr__(self):
        """Get an explicit representation."""
        return "Vacancy " + self.__str__()

    def __copy__(self):
        """Copy the vacancy object."""
        return Vacancy(self.symbol, self.oxi_state)

    def __deepcopy__(self, memo):
        """Deepcopy the vacancy object."""
        return Vacancy(self.symbol, self.oxi_state)

"""Selection strategies over scored populations."""

from evoforge.selection.base import EvaluatedCandidate, Population, SelectionStrategy
from evoforge.selection.tournament import TournamentSelection

__all__ = [
    "EvaluatedCandidate",
    "Population",
    "SelectionStrategy",
    "TournamentSelection",
]

"""
evoforge: Evaluation and selection core for evolutionary computation.

This package implements the two pieces an evolutionary loop calls into:
- Expression tree programs evaluated against parameter vectors
- Fitness-based selection of the next breeding pool (tournament selection)
"""

__version__ = "0.1.0"

from evoforge.errors import (
    EvaluationError,
    InvalidConfigurationError,
    ParameterIndexError,
    TreeStructureError,
)
from evoforge.expression.tree import ExpressionTree, parse_formula
from evoforge.selection.base import EvaluatedCandidate, SelectionStrategy
from evoforge.selection.tournament import TournamentSelection

__all__ = [
    "__version__",
    "EvaluationError",
    "InvalidConfigurationError",
    "ParameterIndexError",
    "TreeStructureError",
    "ExpressionTree",
    "parse_formula",
    "EvaluatedCandidate",
    "SelectionStrategy",
    "TournamentSelection",
]

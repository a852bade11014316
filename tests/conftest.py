"""
Pytest fixtures for evoforge tests.

Every random source is seeded so runs are reproducible.
"""

import random

import pytest

from evoforge.expression.nodes import ConstantNode, ParameterNode, is_greater, make_operator
from evoforge.expression.tree import ExpressionTree
from evoforge.selection.base import EvaluatedCandidate


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def sample_tree() -> ExpressionTree:
    """if_then_else(is_greater(p0, 1.5), mul(p0, p1), -1.0)"""
    root = make_operator(
        "if_then_else",
        is_greater(ParameterNode(index=0), ConstantNode(value=1.5)),
        make_operator("mul", ParameterNode(index=0), ParameterNode(index=1)),
        ConstantNode(value=-1.0),
    )
    return ExpressionTree(root=root)


@pytest.fixture
def two_candidate_population() -> list[EvaluatedCandidate[str]]:
    """A weaker candidate A and a fitter candidate B."""
    return [
        EvaluatedCandidate(candidate="A", fitness=10.0),
        EvaluatedCandidate(candidate="B", fitness=20.0),
    ]


@pytest.fixture
def ranked_population() -> list[EvaluatedCandidate[str]]:
    """Ten candidates with distinct fitness 0..9."""
    return [EvaluatedCandidate(candidate=f"c{i}", fitness=float(i)) for i in range(10)]

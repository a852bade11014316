"""Expression tree representation for genetic programming."""

from evoforge.expression.types import NodeType, OperatorSpec, register_operator
from evoforge.expression.nodes import (
    Node,
    OperatorNode,
    ParameterNode,
    ConstantNode,
    is_greater,
    make_operator,
)
from evoforge.expression.evaluator import evaluate
from evoforge.expression.tree import ExpressionTree, parse_formula
from evoforge.expression.compiler import evaluate_batch

__all__ = [
    "NodeType",
    "OperatorSpec",
    "register_operator",
    "Node",
    "OperatorNode",
    "ParameterNode",
    "ConstantNode",
    "is_greater",
    "make_operator",
    "evaluate",
    "ExpressionTree",
    "parse_formula",
    "evaluate_batch",
]

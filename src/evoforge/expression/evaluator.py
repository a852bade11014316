"""Scalar evaluation of expression trees.

Evaluation is a post-order fold driven by an explicit work stack: operands
are pushed as they are produced and each operator pops exactly ``arity``
of them. Nothing is cached between calls, so a tree can be evaluated by
several threads at once.
"""

from typing import Any, Callable, Sequence

from evoforge.errors import ParameterIndexError
from evoforge.expression.nodes import Node, iter_postorder
from evoforge.expression.types import NodeType, OperatorSpec


def fold(
    root: Node,
    on_constant: Callable[[float], Any],
    on_parameter: Callable[[int], Any],
    on_operator: Callable[[OperatorSpec, list[Any]], Any],
) -> Any:
    """Reduce a tree bottom-up.

    Args:
        root: Root of the subtree to reduce
        on_constant: Maps a constant's value to an operand
        on_parameter: Maps a parameter slot index to an operand
        on_operator: Combines an operator with its children's operands

    Returns:
        The operand produced for ``root``
    """
    operands: list[Any] = []
    for node in iter_postorder(root):
        kind = node.node_type
        if kind is NodeType.CONSTANT:
            operands.append(on_constant(node.value))
        elif kind is NodeType.PARAMETER:
            operands.append(on_parameter(node.index))
        elif kind is NodeType.OPERATOR:
            args = operands[-node.arity:]
            del operands[-node.arity:]
            operands.append(on_operator(node.spec, args))
        else:
            raise TypeError(f"Unknown node type: {kind}")
    return operands.pop()


def evaluate(root: Node, parameters: Sequence[float]) -> float:
    """Evaluate a tree against one parameter vector.

    Parameters beyond the highest slot the tree references are ignored.

    Raises:
        ParameterIndexError: If a parameter node reads past the end of ``parameters``
    """
    n_parameters = len(parameters)

    def read_parameter(index: int) -> float:
        if index >= n_parameters:
            raise ParameterIndexError(index, n_parameters)
        return float(parameters[index])

    return float(fold(
        root,
        on_constant=lambda value: value,
        on_parameter=read_parameter,
        on_operator=lambda spec, args: spec.function(*args),
    ))

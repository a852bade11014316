"""Node kinds and the operator registry.

Function nodes are not subclasses per operator: an ``OperatorNode`` carries
the name of an ``OperatorSpec`` and evaluation dispatches on that tag.
Adding an operator means registering a new spec, nothing else changes.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

import numpy as np

from evoforge.errors import InvalidConfigurationError


class NodeType(Enum):
    """Types of nodes in an expression tree."""

    CONSTANT = auto()    # Literal value
    PARAMETER = auto()   # Reference to a parameter slot
    OPERATOR = auto()    # Function with children (arity >= 1)


@dataclass(frozen=True)
class OperatorSpec:
    """Signature and semantics of a function node.

    Attributes:
        name: Registry key, also the name printed in formulas
        arity: Number of children the operator consumes
        symbol: Short display symbol
        function: Scalar implementation, takes ``arity`` floats
        vectorized: numpy implementation, takes ``arity`` arrays
    """

    name: str
    arity: int
    symbol: str
    function: Callable[..., float]
    vectorized: Callable[..., np.ndarray]

    def __post_init__(self) -> None:
        if self.arity < 1:
            raise InvalidConfigurationError(
                f"Operator '{self.name}' must take at least one argument, got arity {self.arity}"
            )
        if not self.name.isidentifier():
            raise InvalidConfigurationError(f"Operator name must be an identifier: {self.name!r}")


def _protected_div(a: float, b: float) -> float:
    return a / b if b != 0 else 1.0


def _vectorized_div(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    zero = b == 0
    return np.where(zero, 1.0, a / np.where(zero, 1.0, b))


def _is_greater(a: float, b: float) -> float:
    # NaN on either side compares false, so the result is 0.0.
    return 1.0 if a > b else 0.0


def _if_then_else(condition: float, then: float, otherwise: float) -> float:
    return then if condition > 0 else otherwise


# Standard operators
OPERATORS: dict[str, OperatorSpec] = {
    # Arithmetic
    "add": OperatorSpec("add", 2, "+", lambda a, b: a + b, np.add),
    "sub": OperatorSpec("sub", 2, "-", lambda a, b: a - b, np.subtract),
    "mul": OperatorSpec("mul", 2, "*", lambda a, b: a * b, np.multiply),
    "div": OperatorSpec("div", 2, "/", _protected_div, _vectorized_div),
    "neg": OperatorSpec("neg", 1, "-", lambda a: -a, np.negative),

    # Comparison (boolean encoded as 1.0 / 0.0)
    "is_greater": OperatorSpec(
        "is_greater", 2, ">", _is_greater,
        lambda a, b: np.where(a > b, 1.0, 0.0),
    ),

    # Conditional
    "if_then_else": OperatorSpec(
        "if_then_else", 3, "?", _if_then_else,
        lambda c, t, e: np.where(c > 0, t, e),
    ),
}


def register_operator(spec: OperatorSpec) -> OperatorSpec:
    """Add a new operator to the registry.

    Raises:
        InvalidConfigurationError: If the name is already registered
    """
    if spec.name in OPERATORS:
        raise InvalidConfigurationError(f"Operator already registered: {spec.name}")
    OPERATORS[spec.name] = spec
    return spec

"""Expression tree nodes for genetic programming.

Implements the node variants a program is built from:
- OperatorNode: Function applied to owned children (e.g., add, is_greater)
- ParameterNode: Reference to a slot of the parameter vector (e.g., p0)
- ConstantNode: Literal value (e.g., 2.5)

Nodes are immutable. Every traversal here uses an explicit stack, so tree
height is never limited by the interpreter's recursion limit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from numbers import Integral
from typing import Iterator, Sequence

from evoforge.errors import TreeStructureError
from evoforge.expression.types import NodeType, OPERATORS, OperatorSpec


@dataclass(frozen=True, eq=False)
class Node(ABC):
    """Abstract base class for expression tree nodes.

    Equality is identity: two structurally equal subtrees are still
    distinct nodes. Compare formulas to compare structure.
    """

    # Terminals own no children; OperatorNode shadows this with a field.
    children = ()

    @property
    @abstractmethod
    def node_type(self) -> NodeType:
        """Get the type of this node."""

    @property
    def arity(self) -> int:
        """Get the number of children this node owns."""
        return len(self.children)

    @abstractmethod
    def label(self) -> str:
        """Text used for this node when printing a formula."""

    def evaluate(self, parameters: Sequence[float]) -> float:
        """Evaluate the subtree rooted here against a parameter vector."""
        from evoforge.expression.evaluator import evaluate

        return evaluate(self, parameters)

    def to_string(self) -> str:
        """Convert the subtree rooted here to its formula."""
        return format_node(self)

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True, eq=False)
class ConstantNode(Node):
    """Terminal holding a literal value."""

    value: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    @property
    def node_type(self) -> NodeType:
        return NodeType.CONSTANT

    def label(self) -> str:
        return repr(self.value)


@dataclass(frozen=True, eq=False)
class ParameterNode(Node):
    """Terminal that reads one slot of the parameter vector."""

    index: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, Integral):
            raise TreeStructureError(f"Parameter index must be an integer, got {self.index!r}")
        if self.index < 0:
            raise TreeStructureError(f"Parameter index must be non-negative, got {self.index}")
        object.__setattr__(self, "index", int(self.index))

    @property
    def node_type(self) -> NodeType:
        return NodeType.PARAMETER

    def label(self) -> str:
        return f"p{self.index}"


@dataclass(frozen=True, eq=False, repr=False)
class OperatorNode(Node):
    """Function node applying a registered operator to its children.

    The child count is checked against the operator's arity here, so a
    constructed node always has exactly the children it needs.
    """

    name: str = ""
    children: tuple[Node, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.name not in OPERATORS:
            raise TreeStructureError(f"Unknown operator: {self.name}")
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Node):
                raise TreeStructureError(
                    f"Children of '{self.name}' must be nodes, got {type(child).__name__}"
                )
        expected = OPERATORS[self.name].arity
        if len(children) != expected:
            raise TreeStructureError(
                f"Operator '{self.name}' takes {expected} children, got {len(children)}"
            )
        object.__setattr__(self, "children", children)

    @property
    def node_type(self) -> NodeType:
        return NodeType.OPERATOR

    @property
    def spec(self) -> OperatorSpec:
        """Get the operator definition."""
        return OPERATORS[self.name]

    def label(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"OperatorNode(name={self.name!r}, arity={self.arity})"


def make_operator(name: str, *children: Node) -> OperatorNode:
    """Build an operator node, e.g. ``make_operator("add", left, right)``."""
    return OperatorNode(name=name, children=children)


def is_greater(left: Node, right: Node) -> OperatorNode:
    """Node evaluating to 1.0 when ``left`` is strictly greater than ``right``, else 0.0."""
    return OperatorNode(name="is_greater", children=(left, right))


def iter_postorder(root: Node) -> Iterator[Node]:
    """Yield nodes children-first, left to right."""
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded or not node.children:
            yield node
        else:
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))


def collect_nodes(root: Node) -> list[Node]:
    """Collect all nodes in a subtree (pre-order traversal)."""
    result = []
    stack = [root]
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(node.children))
    return result


def count_nodes(root: Node) -> int:
    """Count total nodes in a subtree."""
    return len(collect_nodes(root))


def get_depth(root: Node) -> int:
    """Get the depth of a subtree (a lone terminal has depth 1)."""
    depth = 0
    stack = [(root, 1)]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in node.children)
    return depth


def format_node(root: Node) -> str:
    """Render a subtree as ``name(child, ...)`` text."""
    rendered: list[str] = []
    for node in iter_postorder(root):
        if node.children:
            args = rendered[-node.arity:]
            del rendered[-node.arity:]
            rendered.append(f"{node.label()}({', '.join(args)})")
        else:
            rendered.append(node.label())
    return rendered.pop()

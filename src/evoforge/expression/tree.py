"""Expression tree for program representation.

An ExpressionTree wraps a root node and checks the whole program once at
construction, e.g. for:
    if_then_else(is_greater(p0, 1.5), mul(p0, p1), 0.0)

Trees are immutable after construction, so one tree may be evaluated many
times and from many threads.
"""

from dataclasses import dataclass
from typing import Any, Sequence
import hashlib
import re

from evoforge.errors import InvalidConfigurationError, TreeStructureError
from evoforge.expression.nodes import (
    Node,
    ConstantNode,
    OperatorNode,
    ParameterNode,
    collect_nodes,
    count_nodes,
    get_depth,
)
from evoforge.expression.evaluator import evaluate

# Koza's classic depth limit for evolved programs
DEFAULT_MAX_DEPTH = 17
DEFAULT_MAX_SIZE = 1000


@dataclass(frozen=True)
class ExpressionTree:
    """Expression tree representing an evolved program.

    Attributes:
        root: The root node of the tree
        MAX_DEPTH: Deepest allowed root-to-leaf path, counted in nodes
        MAX_SIZE: Largest allowed node count
    """

    root: Node

    # Tree constraints
    MAX_DEPTH: int = DEFAULT_MAX_DEPTH
    MAX_SIZE: int = DEFAULT_MAX_SIZE

    def __post_init__(self) -> None:
        """Validate tree structure."""
        if self.MAX_DEPTH < 1:
            raise InvalidConfigurationError(f"MAX_DEPTH must be at least 1, got {self.MAX_DEPTH}")
        if self.MAX_SIZE < 1:
            raise InvalidConfigurationError(f"MAX_SIZE must be at least 1, got {self.MAX_SIZE}")
        if not isinstance(self.root, Node):
            raise TreeStructureError(f"Root must be a node, got {type(self.root).__name__}")
        self._validate_structure()

    def _validate_structure(self) -> None:
        """Check depth, size and exclusive child ownership in a single pass.

        Stops at the first violation, so oversized inputs are rejected
        without walking them completely.
        """
        seen: set[int] = set()
        stack = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            if id(node) in seen:
                raise TreeStructureError(
                    f"Node {node!r} appears more than once; subtrees may not be shared"
                )
            seen.add(id(node))
            if len(seen) > self.MAX_SIZE:
                raise TreeStructureError(f"Tree exceeds maximum size of {self.MAX_SIZE} nodes")
            if level > self.MAX_DEPTH:
                raise TreeStructureError(f"Tree exceeds maximum depth of {self.MAX_DEPTH}")
            stack.extend((child, level + 1) for child in node.children)

    @classmethod
    def from_formula(cls, formula: str, **limits: Any) -> "ExpressionTree":
        """Parse a formula and wrap it in a validated tree."""
        return cls(root=parse_formula(formula), **limits)

    @property
    def size(self) -> int:
        """Get total number of nodes."""
        return count_nodes(self.root)

    @property
    def depth(self) -> int:
        """Get tree depth."""
        return get_depth(self.root)

    @property
    def formula(self) -> str:
        """Get string representation of the formula."""
        return self.root.to_string()

    @property
    def hash(self) -> str:
        """Get a hash of the formula for deduplication."""
        return hashlib.md5(self.formula.encode()).hexdigest()[:12]

    @property
    def parameter_count(self) -> int:
        """Minimum parameter vector length this tree can be evaluated with."""
        indices = [n.index for n in self.get_nodes() if isinstance(n, ParameterNode)]
        return max(indices) + 1 if indices else 0

    def get_nodes(self) -> list[Node]:
        """Get all nodes in the tree (pre-order)."""
        return collect_nodes(self.root)

    def get_operators(self) -> list[str]:
        """Get list of operator names used in tree."""
        return [n.name for n in self.get_nodes() if isinstance(n, OperatorNode)]

    def evaluate(self, parameters: Sequence[float]) -> float:
        """Evaluate the program against one parameter vector."""
        return evaluate(self.root, parameters)

    def __str__(self) -> str:
        return self.formula

    def __repr__(self) -> str:
        return f"ExpressionTree({self.formula}, size={self.size}, depth={self.depth})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExpressionTree):
            return False
        return self.formula == other.formula

    def __hash__(self) -> int:
        return hash(self.formula)


_TOKEN = re.compile(r"\s*(?:([(),])|([^\s(),]+))")
_PARAMETER = re.compile(r"p(\d+)")


def _tokenize(formula: str) -> list[str]:
    tokens = []
    text = formula.rstrip()
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise TreeStructureError(f"Cannot tokenize formula at position {pos}")
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


def _parse_terminal(token: str) -> Node:
    match = _PARAMETER.fullmatch(token)
    if match:
        return ParameterNode(index=int(match.group(1)))
    try:
        return ConstantNode(value=float(token))
    except ValueError:
        raise TreeStructureError(f"Unknown terminal: {token!r}") from None


def parse_formula(formula: str) -> Node:
    """Parse the text produced by ``Node.to_string`` back into nodes.

    Grammar: ``term := p<int> | <float> | name "(" term ("," term)* ")"``.

    Raises:
        TreeStructureError: On malformed text, unknown names or wrong arity
    """
    tokens = _tokenize(formula)
    # Open calls: operator name plus the arguments parsed so far
    frames: list[tuple[str, list[Node]]] = []
    root: Node | None = None
    i = 0

    while i < len(tokens):
        token = tokens[i]
        if root is not None:
            raise TreeStructureError(f"Unexpected trailing input at {token!r}")
        if token in {"(", ")", ","}:
            raise TreeStructureError(f"Unexpected {token!r} in formula")

        if i + 1 < len(tokens) and tokens[i + 1] == "(":
            i += 2
            if i < len(tokens) and tokens[i] == ")":
                raise TreeStructureError(f"Operator '{token}' called with no arguments")
            frames.append((token, []))
            continue

        node = _parse_terminal(token)
        i += 1

        # Attach the finished node, closing every call it completes
        while True:
            if not frames:
                root = node
                break
            frames[-1][1].append(node)
            if i >= len(tokens):
                raise TreeStructureError("Unexpected end of formula")
            if tokens[i] == ",":
                i += 1
                break
            if tokens[i] == ")":
                i += 1
                name, args = frames.pop()
                node = OperatorNode(name=name, children=tuple(args))
                continue
            raise TreeStructureError(f"Expected ',' or ')' but found {tokens[i]!r}")

    if root is None:
        raise TreeStructureError("Unexpected end of formula" if tokens else "Empty formula")
    return root

"""Vectorized evaluation of expression trees.

Evaluates a program over many parameter vectors at once with numpy, e.g.
to score a candidate against a whole dataset in one call. Each operator's
``vectorized`` implementation mirrors its scalar one element for element,
so ``evaluate_batch(tree, X)[i] == tree.evaluate(X[i])``.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from evoforge.errors import EvaluationError, ParameterIndexError
from evoforge.expression.evaluator import fold
from evoforge.expression.nodes import Node
from evoforge.expression.tree import ExpressionTree

ParameterMatrix = Union[np.ndarray, pd.DataFrame]


def _as_matrix(data: ParameterMatrix) -> np.ndarray:
    """Coerce input to a float matrix of shape (n_rows, n_parameters)."""
    if isinstance(data, pd.DataFrame):
        values = data.to_numpy(dtype=float)
    else:
        values = np.asarray(data, dtype=float)
    if values.ndim == 1:
        values = values.reshape(1, -1)
    if values.ndim != 2:
        raise EvaluationError(f"Expected a 2-D parameter matrix, got shape {values.shape}")
    return values


def _evaluate_matrix(root: Node, matrix: np.ndarray) -> np.ndarray:
    n_rows, n_parameters = matrix.shape

    def read_column(index: int) -> np.ndarray:
        if index >= n_parameters:
            raise ParameterIndexError(index, n_parameters)
        return matrix[:, index]

    # Overflow and 0 * inf are legitimate outcomes for evolved programs
    with np.errstate(all="ignore"):
        result = fold(
            root,
            on_constant=lambda value: np.full(n_rows, value),
            on_parameter=read_column,
            on_operator=lambda spec, args: np.asarray(spec.vectorized(*args), dtype=float),
        )
    return np.broadcast_to(result, (n_rows,)).astype(float)


def evaluate_batch(
    tree: ExpressionTree | Node,
    data: ParameterMatrix,
) -> np.ndarray | pd.Series:
    """Evaluate a program for every row of a parameter matrix.

    Args:
        tree: Tree (or bare root node) to evaluate
        data: Rows are parameter vectors; columns are parameter slots in order.
              A DataFrame's column names are ignored, only their order counts.

    Returns:
        One value per row; a Series aligned to the DataFrame index when
        ``data`` is a DataFrame, an ndarray otherwise.

    Raises:
        ParameterIndexError: If the tree reads a slot past the last column
    """
    root = tree.root if isinstance(tree, ExpressionTree) else tree
    values = _evaluate_matrix(root, _as_matrix(data))
    if isinstance(data, pd.DataFrame):
        return pd.Series(values, index=data.index, name=root.to_string())
    return values

"""Exception types raised by evoforge.

Both components fail fast: configuration problems surface at construction,
evaluation problems surface from the call that hit them.
"""


class InvalidConfigurationError(ValueError):
    """Raised at construction when a configuration value is out of range."""


class TreeStructureError(ValueError):
    """Raised when an expression tree is malformed (arity, depth, sharing)."""


class EvaluationError(RuntimeError):
    """Raised when evaluation or selection cannot complete."""


class ParameterIndexError(EvaluationError, IndexError):
    """Raised by a parameter terminal whose slot is missing from the input."""

    def __init__(self, index: int, n_parameters: int):
        self.index = index
        self.n_parameters = n_parameters
        super().__init__(
            f"Parameter p{index} requested but only {n_parameters} parameter(s) supplied"
        )

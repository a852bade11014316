"""Inbound contract for the evolutionary loop that drives the core.

The loop owns initialization, variation and termination. It scores its
candidates with a fitness function, hands the scored population to a
selection strategy, and breeds from what comes back.
"""

import logging
from typing import Iterable, Protocol, TypeVar, runtime_checkable

import numpy as np

from evoforge.errors import EvaluationError
from evoforge.selection.base import EvaluatedCandidate

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class FitnessFunction(Protocol[T_contra]):
    """Scores a candidate; higher is better."""

    def __call__(self, candidate: T_contra) -> float:
        ...


def score_population(
    candidates: Iterable[T],
    fitness_function: FitnessFunction[T],
) -> list[EvaluatedCandidate[T]]:
    """Pair every candidate with its fitness, preserving order.

    Errors raised by ``fitness_function`` propagate unchanged; no partial
    population is returned.

    Raises:
        ValueError: If there are no candidates
        EvaluationError: If a fitness value is not a real number
    """
    population = []
    for candidate in candidates:
        score = fitness_function(candidate)
        try:
            population.append(EvaluatedCandidate(candidate=candidate, fitness=float(score)))
        except (TypeError, ValueError) as e:
            raise EvaluationError(f"Fitness must be a real number, got {score!r}") from e

    if not population:
        raise ValueError("Cannot score an empty population")

    if logger.isEnabledFor(logging.DEBUG):
        fitness = np.array([c.fitness for c in population])
        logger.debug(
            "Scored %d candidates (best=%.4f, mean=%.4f)",
            len(population), fitness.max(), fitness.mean(),
        )
    return population

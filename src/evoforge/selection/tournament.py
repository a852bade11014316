"""Probabilistic binary tournament selection."""

from __future__ import annotations

import logging
import random
from numbers import Real

from evoforge.errors import EvaluationError, InvalidConfigurationError
from evoforge.selection.base import EvaluatedCandidate, Population, SelectionStrategy, T

logger = logging.getLogger(__name__)


class TournamentSelection(SelectionStrategy[T]):
    """Select by repeatedly pitting two random candidates against each other.

    Each tournament draws two candidates uniformly with replacement, then
    returns the fitter one with probability ``selection_probability`` and the
    weaker one otherwise. Every tournament consumes exactly three values from
    the random source, always in the same order: ``randrange(n)`` for the
    first contestant, ``randrange(n)`` for the second, ``random()`` for the
    outcome. Keep that order to reproduce seeded runs.

    Ties: the second contestant counts as fitter only when its score is
    strictly greater. With equal scores the first contestant is the "fitter"
    one and the second the "weaker" one.
    """

    def __init__(self, selection_probability: float):
        """
        Args:
            selection_probability: Probability that the fitter of the two
                contestants wins. Must lie strictly between 0.5 and 1.0: at or
                below 0.5 weaker candidates would be favoured at least as much
                as strong ones.

        Raises:
            InvalidConfigurationError: If the probability is not a real number
                in range
        """
        if (
            isinstance(selection_probability, bool)
            or not isinstance(selection_probability, Real)
            or not 0.5 < selection_probability < 1.0
        ):
            raise InvalidConfigurationError(
                "Selection probability must be greater than 0.5 and less than 1.0, "
                f"got {selection_probability!r}"
            )
        self._selection_probability = float(selection_probability)

    @property
    def selection_probability(self) -> float:
        return self._selection_probability

    def select(
        self,
        population: Population[T],
        selection_size: int,
        rng: random.Random,
    ) -> list[T]:
        """Run ``selection_size`` tournaments.

        Args:
            population: Scored candidates (not modified)
            selection_size: Number of tournaments, may exceed the population size
            rng: Seeded random source, not shared with concurrent callers

        Returns:
            Winning candidate values, in draw order

        Raises:
            ValueError: On an empty population or non-positive size
            EvaluationError: If the random source fails
        """
        self._check_inputs(population, selection_size)
        n = len(population)
        logger.debug(
            "Tournament selection: %d draws from %d candidates (p=%.3f)",
            selection_size, n, self._selection_probability,
        )

        selection = []
        for _ in range(selection_size):
            candidate1, candidate2, value = self._draw(population, n, rng)
            second_is_fitter = candidate2.fitness > candidate1.fitness
            if value < self._selection_probability:
                # Select the fitter candidate
                winner = candidate2 if second_is_fitter else candidate1
            else:
                # Select the less fit candidate
                winner = candidate1 if second_is_fitter else candidate2
            selection.append(winner.candidate)
        return selection

    @staticmethod
    def _draw(
        population: Population[T],
        n: int,
        rng: random.Random,
    ) -> tuple[EvaluatedCandidate[T], EvaluatedCandidate[T], float]:
        try:
            index1 = rng.randrange(n)
            index2 = rng.randrange(n)
            value = rng.random()
        except Exception as e:
            raise EvaluationError(f"Random source failed during selection: {e}") from e
        return population[index1], population[index2], value

    def __repr__(self) -> str:
        return f"TournamentSelection(selection_probability={self._selection_probability})"

"""Scored candidates and the selection strategy interface."""

from __future__ import annotations

import random
from numbers import Integral
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class EvaluatedCandidate(Generic[T]):
    """A candidate paired with its fitness score (higher is better).

    Identity, not fitness, distinguishes candidates: two candidates with
    equal scores are still different entries.
    """

    candidate: T
    fitness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "fitness", float(self.fitness))


Population = Sequence[EvaluatedCandidate[T]]


class SelectionStrategy(ABC, Generic[T]):
    """Strategy for choosing the next breeding pool from a scored population.

    Implementations draw with replacement, may return more candidates than
    the population holds, and must take all randomness from ``rng`` so a
    fixed seed reproduces the same selection.
    """

    @abstractmethod
    def select(
        self,
        population: Population[T],
        selection_size: int,
        rng: random.Random,
    ) -> list[T]:
        """Select ``selection_size`` candidates, in draw order."""

    @staticmethod
    def _check_inputs(population: Population[T], selection_size: int) -> None:
        if len(population) == 0:
            raise ValueError("Cannot select from an empty population")
        if isinstance(selection_size, bool) or not isinstance(selection_size, Integral):
            raise ValueError(f"selection_size must be an integer, got {selection_size!r}")
        if selection_size < 1:
            raise ValueError(f"selection_size must be positive, got {selection_size}")

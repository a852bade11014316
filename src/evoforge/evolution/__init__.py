"""Contracts between the core and an external evolutionary loop."""

from evoforge.evolution.protocol import FitnessFunction, score_population

__all__ = [
    "FitnessFunction",
    "score_population",
]

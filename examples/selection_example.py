"""Example: one generation of selection over hand-written programs.

Shows how an evolutionary loop composes the two halves of evoforge:
programs are scored against data with the batch evaluator, the scores
become a population, and tournament selection picks the breeding pool.
The loop itself (variation, termination) is left to the caller.
"""

import random

import numpy as np

from evoforge.evolution import score_population
from evoforge.expression import ExpressionTree, evaluate_batch
from evoforge.selection import TournamentSelection


def main():
    """Score a few candidate programs and select from them."""
    rng = np.random.default_rng(42)
    inputs = rng.uniform(-5, 5, size=(200, 2))
    # Target: x * y where x > 1, otherwise 0
    targets = np.where(inputs[:, 0] > 1, inputs[:, 0] * inputs[:, 1], 0.0)

    formulas = [
        "mul(p0, p1)",
        "if_then_else(is_greater(p0, 1.0), mul(p0, p1), 0.0)",
        "if_then_else(is_greater(p0, 0.0), add(p0, p1), 0.0)",
        "is_greater(p0, p1)",
        "0.0",
    ]
    programs = [ExpressionTree.from_formula(f) for f in formulas]

    def fitness(tree: ExpressionTree) -> float:
        errors = evaluate_batch(tree, inputs) - targets
        return -float(np.mean(errors ** 2))

    population = score_population(programs, fitness)
    for scored in population:
        print(f"{scored.fitness:12.4f}  {scored.candidate.formula}")

    strategy = TournamentSelection(selection_probability=0.8)
    pool = strategy.select(population, selection_size=20, rng=random.Random(7))

    print("\nBreeding pool:")
    for formula, count in sorted(
        {t.formula: pool.count(t) for t in pool}.items(), key=lambda item: -item[1]
    ):
        print(f"{count:3d}  {formula}")


if __name__ == "__main__":
    main()

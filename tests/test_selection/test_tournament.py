"""Tests for tournament selection."""

import math
import random

import pytest

from evoforge.errors import EvaluationError, InvalidConfigurationError
from evoforge.selection.base import EvaluatedCandidate, SelectionStrategy
from evoforge.selection.tournament import TournamentSelection


class RecordingRandom:
    """Random source that logs every call made to it."""

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.calls: list[str] = []

    def randrange(self, n: int) -> int:
        self.calls.append("randrange")
        return self._rng.randrange(n)

    def random(self) -> float:
        self.calls.append("random")
        return self._rng.random()


class ScriptedRandom:
    """Random source replaying fixed indices and probability draws."""

    def __init__(self, indices: list[int], values: list[float]):
        self._indices = iter(indices)
        self._values = iter(values)

    def randrange(self, n: int) -> int:
        return next(self._indices)

    def random(self) -> float:
        return next(self._values)


class BrokenRandom:
    """Random source that runs out of entropy."""

    def randrange(self, n: int) -> int:
        return 0

    def random(self) -> float:
        raise RuntimeError("entropy exhausted")


def binomial_bound(n: int, p: float) -> float:
    """Three standard deviations of a binomial count."""
    return 3 * math.sqrt(n * p * (1 - p))


class TestConstruction:
    """Test configuration validation."""

    @pytest.mark.parametrize("probability", [0.5, 1.0, 0.3, 1.2, 0.0, -0.7, float("nan")])
    def test_out_of_range(self, probability):
        """Test rejection of probabilities outside (0.5, 1.0)."""
        with pytest.raises(InvalidConfigurationError):
            TournamentSelection(probability)

    def test_invalid_configuration_is_value_error(self):
        """Test configuration errors are ValueErrors."""
        with pytest.raises(ValueError):
            TournamentSelection(0.5)

    @pytest.mark.parametrize("probability", ["0.7", None, True, [0.7]])
    def test_non_numeric_probability(self, probability):
        """Test that non-numeric probabilities raise a configuration error."""
        with pytest.raises(InvalidConfigurationError):
            TournamentSelection(probability)

    @pytest.mark.parametrize("probability", [0.7, 0.500001, 0.999999])
    def test_in_range(self, probability):
        """Test construction with valid probabilities."""
        strategy = TournamentSelection(probability)

        assert strategy.selection_probability == probability
        assert isinstance(strategy, SelectionStrategy)
        assert repr(strategy) == f"TournamentSelection(selection_probability={probability})"

    def test_probability_is_read_only(self):
        """Test that the probability cannot be reassigned."""
        strategy = TournamentSelection(0.7)
        with pytest.raises(AttributeError):
            strategy.selection_probability = 0.9


class TestSelect:
    """Test the selection contract."""

    @pytest.mark.parametrize("size", [1, 5, 10, 25, 1000])
    def test_selection_size(self, ranked_population, rng, size):
        """Test output length equals selection size."""
        selected = TournamentSelection(0.7).select(ranked_population, size, rng)

        assert len(selected) == size
        assert all(c.startswith("c") for c in selected)

    def test_returns_candidate_values(self, two_candidate_population, rng):
        """Test that candidate values, not scores, are returned."""
        selected = TournamentSelection(0.8).select(two_candidate_population, 50, rng)
        assert set(selected) <= {"A", "B"}

    def test_reproducible(self, ranked_population):
        """Test identical seeds give identical selections."""
        strategy = TournamentSelection(0.75)

        first = strategy.select(ranked_population, 200, random.Random(123))
        second = strategy.select(ranked_population, 200, random.Random(123))
        other = strategy.select(ranked_population, 200, random.Random(124))

        assert first == second
        assert first != other

    def test_entropy_consumption_order(self, ranked_population):
        """Test the random source is called in a fixed order."""
        rng = RecordingRandom(seed=1)

        TournamentSelection(0.7).select(ranked_population, 4, rng)

        assert rng.calls == ["randrange", "randrange", "random"] * 4

    def test_draws_follow_seeded_sequence(self, ranked_population):
        """Test each draw against a replayed random sequence."""
        strategy = TournamentSelection(0.7)
        selected = strategy.select(ranked_population, 100, random.Random(5))

        replay = random.Random(5)
        for chosen in selected:
            c1 = ranked_population[replay.randrange(10)]
            c2 = ranked_population[replay.randrange(10)]
            fitter, weaker = (c2, c1) if c2.fitness > c1.fitness else (c1, c2)
            expected = fitter if replay.random() < 0.7 else weaker
            assert chosen == expected.candidate

    def test_population_not_mutated(self, ranked_population, rng):
        """Test that selection leaves the population unchanged."""
        snapshot = [(c.candidate, c.fitness) for c in ranked_population]
        ids = [id(c) for c in ranked_population]

        TournamentSelection(0.7).select(ranked_population, 100, rng)

        assert [(c.candidate, c.fitness) for c in ranked_population] == snapshot
        assert [id(c) for c in ranked_population] == ids

    def test_single_candidate(self, rng):
        """Test a population of one."""
        population = [EvaluatedCandidate(candidate="only", fitness=-3.0)]
        selected = TournamentSelection(0.9).select(population, 100, rng)
        assert selected == ["only"] * 100

    def test_empty_population(self, rng):
        """Test selecting from an empty population."""
        with pytest.raises(ValueError, match="empty population"):
            TournamentSelection(0.7).select([], 5, rng)

    @pytest.mark.parametrize("size", [0, -3, 2.5, True])
    def test_invalid_size(self, ranked_population, rng, size):
        """Test rejection of invalid selection sizes."""
        with pytest.raises(ValueError):
            TournamentSelection(0.7).select(ranked_population, size, rng)

    def test_broken_random_source(self, ranked_population):
        """Test a failing random source."""
        with pytest.raises(EvaluationError, match="entropy exhausted"):
            TournamentSelection(0.7).select(ranked_population, 3, BrokenRandom())

    def test_missing_random_source(self, ranked_population):
        """Test selecting without a random source."""
        with pytest.raises(EvaluationError):
            TournamentSelection(0.7).select(ranked_population, 3, None)


class TestTieBreak:
    """Equal scores: the first contestant is treated as the fitter one."""

    @pytest.fixture
    def tied(self):
        return [
            EvaluatedCandidate(candidate="first", fitness=5.0),
            EvaluatedCandidate(candidate="second", fitness=5.0),
        ]

    def test_fitter_branch_takes_first(self, tied):
        """Test tie resolution on the fitter branch."""
        rng = ScriptedRandom(indices=[0, 1, 1, 0], values=[0.1, 0.1])
        assert TournamentSelection(0.7).select(tied, 2, rng) == ["first", "second"]

    def test_weaker_branch_takes_second(self, tied):
        """Test tie resolution on the weaker branch."""
        rng = ScriptedRandom(indices=[0, 1, 1, 0], values=[0.95, 0.95])
        assert TournamentSelection(0.7).select(tied, 2, rng) == ["second", "first"]

    def test_strictly_greater_second_wins(self, two_candidate_population):
        """Test a fitter second contestant."""
        # A drawn first, B second; B is fitter
        rng = ScriptedRandom(indices=[0, 1, 0, 1], values=[0.1, 0.95])
        selected = TournamentSelection(0.7).select(two_candidate_population, 2, rng)
        assert selected == ["B", "A"]

    def test_probability_boundary(self, two_candidate_population):
        """Test a draw exactly equal to the probability."""
        # v == p is not below p, so the weaker candidate is taken
        rng = ScriptedRandom(indices=[0, 1], values=[0.7])
        assert TournamentSelection(0.7).select(two_candidate_population, 1, rng) == ["A"]


class TestSelectionPressure:
    """Statistical checks on how often the fitter candidate wins."""

    @pytest.mark.parametrize("probability", [0.6, 0.75, 0.9])
    def test_fitter_frequency_converges(self, two_candidate_population, probability):
        """Test the fitter candidate wins at the configured rate."""
        n = 20_000
        seed = 2024
        selected = TournamentSelection(probability).select(
            two_candidate_population, n, random.Random(seed)
        )

        # Replay the index draws to keep only genuine A-vs-B tournaments
        replay = random.Random(seed)
        contested = []
        for chosen in selected:
            i1, i2 = replay.randrange(2), replay.randrange(2)
            replay.random()
            if i1 != i2:
                contested.append(chosen)

        wins = contested.count("B")
        expected = probability * len(contested)
        assert abs(wins - expected) <= binomial_bound(len(contested), probability)

    def test_concrete_scenario(self, two_candidate_population):
        """A=10, B=20, p=0.9, 1000 draws."""
        n = 1000
        selected = TournamentSelection(0.9).select(
            two_candidate_population, n, random.Random(99)
        )

        # B wins every B-vs-B draw (1/4) and 90% of mixed draws (1/2)
        p_b = 0.25 + 0.5 * 0.9
        assert abs(selected.count("B") - p_b * n) <= binomial_bound(n, p_b)

        replay = random.Random(99)
        contested = []
        for chosen in selected:
            i1, i2 = replay.randrange(2), replay.randrange(2)
            replay.random()
            if i1 != i2:
                contested.append(chosen)
        assert abs(contested.count("B") - 0.9 * len(contested)) <= binomial_bound(
            len(contested), 0.9
        )

    def test_fitter_candidates_favoured(self, ranked_population):
        """Test fitter candidates are selected more often."""
        selected = TournamentSelection(0.9).select(ranked_population, 5000, random.Random(3))

        top = sum(1 for c in selected if int(c[1:]) >= 5)
        bottom = len(selected) - top
        assert top > bottom

"""
Command-line interface for evoforge.

Provides commands for:
- Evaluating a formula against parameters or a CSV of parameter rows
- Running tournament selection over a scored population
"""

import logging
import random
import sys

import click

from evoforge import __version__
from evoforge.errors import EvaluationError
from evoforge.expression.tree import DEFAULT_MAX_DEPTH

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("evoforge")


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """evoforge - Expression evaluation and selection for evolutionary runs."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command()
@click.argument("formula")
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    type=float,
    help="Parameter value; repeat for p0, p1, ...",
)
@click.option(
    "--data",
    "-d",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="CSV file with a header row; each following row is one parameter vector",
)
@click.option("--max-depth", default=DEFAULT_MAX_DEPTH, show_default=True, help="Maximum tree depth")
def evaluate(formula: str, params: tuple[float, ...], data: str, max_depth: int) -> None:
    """Evaluate FORMULA, e.g. 'is_greater(p0, 1.5)'.

    Parameters come either from repeated --param options or from the rows
    of a --data CSV, never both. The CSV's first line is read as column
    names; columns map to p0, p1, ... in order.
    """
    from evoforge.expression.tree import ExpressionTree

    if data is not None and params:
        raise click.UsageError("--param and --data cannot be combined")

    try:
        tree = ExpressionTree.from_formula(formula, MAX_DEPTH=max_depth)
        if data is None:
            click.echo(repr(tree.evaluate(list(params))))
            return

        import pandas as pd
        from evoforge.expression.compiler import evaluate_batch

        frame = pd.read_csv(data)
        logger.info("Evaluating %s over %d rows", tree.formula, len(frame))
        for value in evaluate_batch(tree, frame):
            click.echo(repr(float(value)))
    except (ValueError, EvaluationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("population_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--size",
    "-k",
    default=None,
    type=int,
    help="Number of tournaments. Default: population size",
)
@click.option(
    "--probability",
    "-p",
    default=0.7,
    show_default=True,
    help="Probability the fitter contestant wins (0.5 < p < 1.0)",
)
@click.option("--seed", "-s", default=None, type=int, help="Random seed")
@click.option("--summary", is_flag=True, help="Print selection counts instead of draws")
def select(
    population_file: str,
    size: int | None,
    probability: float,
    seed: int | None,
    summary: bool,
) -> None:
    """Select from a CSV population with 'candidate' and 'fitness' columns."""
    import pandas as pd
    from evoforge.selection.base import EvaluatedCandidate
    from evoforge.selection.tournament import TournamentSelection

    try:
        strategy = TournamentSelection(probability)
        frame = pd.read_csv(population_file)
        missing = {"candidate", "fitness"} - set(frame.columns)
        if missing:
            raise ValueError(f"Missing columns: {sorted(missing)}")

        population = [
            EvaluatedCandidate(candidate=str(candidate), fitness=fitness)
            for candidate, fitness in zip(frame["candidate"], frame["fitness"])
        ]
        selected = strategy.select(
            population,
            size if size is not None else len(population),
            random.Random(seed),
        )
    except (ValueError, EvaluationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if summary:
        counts = pd.Series(selected).value_counts()
        for candidate, count in counts.items():
            click.echo(f"{candidate}\t{count}")
    else:
        for candidate in selected:
            click.echo(candidate)


if __name__ == "__main__":
    main()

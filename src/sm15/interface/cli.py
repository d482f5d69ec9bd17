"""sm15 CLI — developer commands for simulating schedules and inspecting tunables."""

import json
import logging
import sys
from datetime import datetime
from typing import Annotated

import typer

from sm15.application.config import resolve_config
from sm15.domain.constants import MAX_BUCKET, MIN_BUCKET
from sm15.domain.errors import SchedulingError
from sm15.domain.matrix import default_optimal_factor

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="sm15: SuperMemo-15 scheduling engine developer tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Inspect sm15 configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Log each review at DEBUG level."),
    ] = 0,
):
    """Global settings for sm15."""
    if verbose:
        logging.getLogger("sm15").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def simulate(
    grades: Annotated[list[int], typer.Argument(help="Grades (1-5) to apply in order.")],
    start: Annotated[
        datetime | None,
        typer.Option(formats=["%Y-%m-%d"], help="Date of the first review. Defaults to today."),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of a table.")] = False,
):
    """[bold green]Simulate[/bold green] a grade sequence on a fresh item and matrix.

    Each review happens on the date the previous one scheduled.
    """
    from sm15.application.factory import build_review_processor

    processor = build_review_processor(resolve_config())
    item = processor.initialize_item()
    when = start or datetime.combine(datetime.now().date(), datetime.min.time())

    rows = []
    for grade in grades:
        try:
            result = processor.review(item, grade, when)
        except SchedulingError as e:
            typer.secho(f"Error: {e}", fg="red", err=True)
            raise typer.Exit(2)

        item = result.item
        rows.append(
            {
                "grade": grade,
                "outcome": result.outcome.value,
                "reviewed": when.date().isoformat(),
                "difficulty_factor": item.difficulty_factor,
                "interval_days": item.interval_days,
                "memory_stability": round(item.memory_stability, 3),
                "lapse_count": item.lapse_count,
                "next_review": item.next_review_timestamp.date().isoformat(),
            }
        )
        when = item.next_review_timestamp

    if as_json:
        typer.echo(json.dumps(rows, indent=2))
        return

    typer.echo(f"{'#':>3} {'grade':>5} {'outcome':<9} {'A-Factor':>8} {'interval':>8} {'next':>10}")
    for i, row in enumerate(rows, start=1):
        typer.echo(
            f"{i:>3} {row['grade']:>5} {row['outcome']:<9} {row['difficulty_factor']:>8.2f} "
            f"{row['interval_days']:>8} {row['next_review']:>10}"
        )


@app.command()
def matrix(
    rows: Annotated[int, typer.Option(min=1, help="Number of repetition rows to print.")] = 6,
):
    """Print the default optimal factor curve for every difficulty bucket."""
    buckets = range(MIN_BUCKET, MAX_BUCKET + 1)
    typer.echo("rep " + " ".join(f"{b:>5}" for b in buckets))
    for repetition in range(1, rows + 1):
        factors = " ".join(f"{default_optimal_factor(repetition, b):>5.2f}" for b in buckets)
        typer.echo(f"{repetition:>3} {factors}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(), indent=2))

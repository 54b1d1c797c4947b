"""cadence CLI: thin command surface over the scheduler and its helpers."""

import json
import logging
import sys
from dataclasses import asdict
from typing import Annotated

import typer

from cadence.application.config import resolve_config
from cadence.application.insights import calculate_retention, is_due, suggest_study_time
from cadence.application.scheduler import calculate_next_review, sanitize_card
from cadence.consts import VERSION
from cadence.domain.errors import CadenceError
from cadence.domain.models import (
    Card,
    CardState,
    DeckStats,
    Rating,
    ReviewResult,
    SessionStats,
    new_card,
)


# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: SM-2 spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _level_for(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def _result_to_dict(result: ReviewResult) -> dict:
    d = asdict(result)
    d["state"] = result.state.value
    return d


def _fail(err: Exception) -> None:
    typer.secho(f"Error: {err}", fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for cadence."""
    # Without -v the configured level (CADENCE_VERBOSE or config file) applies
    level = verbose if verbose else resolve_config().verbose
    logging.getLogger().setLevel(_level_for(level))


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def version():
    """Print the installed version."""
    typer.echo(VERSION)


@app.command()
def review(
    rating: Annotated[Rating, typer.Option("--rating", "-r", help="again, hard, good or easy.")],
    interval: Annotated[float, typer.Option(help="Current interval in days.")] = 0.0,
    ease: Annotated[float, typer.Option(help="Current ease factor.")] = 2.5,
    repetitions: Annotated[int, typer.Option(help="Consecutive successful reviews.")] = 0,
    now: Annotated[
        int | None, typer.Option(help="Review time in epoch ms. Defaults to the system clock.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """[bold green]Schedule[/bold green] the next review for one answered card."""
    config = resolve_config()
    card = Card(
        card_id="cli",
        deck_id="cli",
        interval=interval,
        ease_factor=ease,
        repetitions=repetitions,
    )

    if config.invalid_card_policy == "clamp":
        card, repaired = sanitize_card(card)
        if repaired:
            logger.warning("Clamped corrupted fields: %s", ", ".join(repaired))

    try:
        result = calculate_next_review(card, rating, now=now)
    except CadenceError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
        return

    typer.echo(
        f"interval={result.interval}  ease={result.ease_factor:.2f}  "
        f"repetitions={result.repetitions}  state={result.state.value}"
    )
    typer.echo(f"next_review_date={result.next_review_date}")


@app.command()
def due(
    next_review_date: Annotated[
        int, typer.Option(help="The card's next review time in epoch ms.")
    ],
    now: Annotated[
        int | None, typer.Option(help="Current time in epoch ms. Defaults to the system clock.")
    ] = None,
):
    """Check whether a card is due. Exits 0 when due, 1 when not."""
    card = Card(card_id="cli", deck_id="cli", next_review_date=next_review_date)
    if is_due(card, now):
        typer.secho("due", fg="green")
    else:
        typer.echo("not due")
        raise typer.Exit(1)


@app.command()
def retention(
    interval: Annotated[float, typer.Argument(help="Interval in days.", min=0)],
):
    """Estimate recall probability after an interval."""
    try:
        typer.echo(f"{calculate_retention(interval):.1f}%")
    except ValueError as e:
        _fail(e)


@app.command("study-time")
def study_time(
    due_count: Annotated[int, typer.Argument(help="Number of due cards.", min=0)],
):
    """Suggest how many minutes a session with this many due cards takes."""
    typer.echo(f"{suggest_study_time(due_count)} min")


@app.command()
def simulate(
    ratings: Annotated[
        list[Rating], typer.Argument(help="Rating sequence, e.g. good good easy.")
    ],
    now: Annotated[
        int | None, typer.Option(help="Creation time in epoch ms. Defaults to the system clock.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Replay a rating sequence on a fresh card, answering each review when due."""
    import asyncio

    from cadence.application.factory import get_clock
    from cadence.application.review_service import ReviewService
    from cadence.infrastructure.adapters import InMemoryCardRepository
    from cadence.infrastructure.clock import FixedClock

    config = resolve_config()
    start = now if now is not None else get_clock().now_ms()
    clock = FixedClock(start)
    repo = InMemoryCardRepository([new_card("sim-1", "sim", start)])
    service = ReviewService(repo, clock=clock, invalid_card_policy=config.invalid_card_policy)

    async def run() -> tuple[list[dict], SessionStats, DeckStats]:
        steps: list[dict] = []
        session = SessionStats()
        for rating in ratings:
            if steps:
                clock.set(steps[-1]["next_review_date"])
            before = await repo.get("sim-1")
            previous_state = before.state if before else CardState.NEW
            reviewed_at = clock.now_ms()
            result = await service.review("sim-1", rating)
            session = session.record(rating, previous_state)
            step = {"rating": rating.value, "reviewed_at": reviewed_at}
            step.update(_result_to_dict(result))
            steps.append(step)
        return steps, session, await service.deck_stats("sim")

    try:
        steps, session, stats = asyncio.run(run())
    except CadenceError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(steps, indent=2))
        return

    for i, step in enumerate(steps, start=1):
        typer.echo(
            f"{i:>3}. {step['rating']:<5} -> interval={step['interval']}  "
            f"ease={step['ease_factor']:.2f}  state={step['state']}"
        )

    typer.echo(f"Studied {session.cards_studied} (accuracy {session.accuracy:.0%})")
    typer.echo(
        f"Deck: new={stats.new} learning={stats.learning} "
        f"review={stats.review} mastered={stats.mastered} due={stats.due}"
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(), indent=2))
